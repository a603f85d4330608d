"""
Shared services aggregator.
Safe to import without triggering circular imports.
"""

from .email import EmailService
from .receipts import ReceiptService
from .shipping.jnt import JntShippingService

__all__ = [
    'EmailService',
    'ReceiptService',
    'JntShippingService',
]
