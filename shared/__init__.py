# shared/__init__.py
"""
Shared package - central access to constants and utils.
Avoids importing services or models to prevent circular dependencies.
"""

# Constants
from .constants import (
    DEFAULT_CURRENCY,
    UserRoles,
    PaymentStatus,
    OrderStatus,
    EnrollmentStatus,
)

# Utilities
from .utils import format_money, normalize_phone

__all__ = [
    # Constants
    'DEFAULT_CURRENCY',
    'UserRoles',
    'PaymentStatus',
    'OrderStatus',
    'EnrollmentStatus',

    # Utilities
    'format_money',
    'normalize_phone',
]
