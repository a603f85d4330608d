# shared/constants/__init__.py
from .model_fields import (
    DEFAULT_CURRENCY,
    CURRENCY_SYMBOL,
    DAYS_OF_WEEK,
    UserRoles,
    StudentStatus,
    Genders,
    EnrollmentStatus,
    PaymentStatus,
    PaymentTypes,
    InvoiceStatus,
    OrderStatus,
    BillingReasons,
    BillingCycles,
    SessionStatus,
    PayoutStatus,
    PayslipStatus,
    LiveSessionStatus,
    FunnelStatus,
    SettingTypes,
)

__all__ = [
    'DEFAULT_CURRENCY',
    'CURRENCY_SYMBOL',
    'DAYS_OF_WEEK',
    'UserRoles',
    'StudentStatus',
    'Genders',
    'EnrollmentStatus',
    'PaymentStatus',
    'PaymentTypes',
    'InvoiceStatus',
    'OrderStatus',
    'BillingReasons',
    'BillingCycles',
    'SessionStatus',
    'PayoutStatus',
    'PayslipStatus',
    'LiveSessionStatus',
    'FunnelStatus',
    'SettingTypes',
]
