# shared/constants/model_fields.py

"""
Status and type values shared by every app.
NO DEPENDENCIES - safe to import from models, forms and services.
"""

DEFAULT_CURRENCY = 'MYR'
CURRENCY_SYMBOL = 'RM'


class UserRoles:
    ADMIN = 'admin'
    TEACHER = 'teacher'
    STUDENT = 'student'
    LIVE_HOST = 'live_host'
    CLASS_ADMIN = 'class_admin'

    CHOICES = (
        (ADMIN, 'Administrator'),
        (TEACHER, 'Teacher'),
        (STUDENT, 'Student'),
        (LIVE_HOST, 'Live Host'),
        (CLASS_ADMIN, 'Class Admin'),
    )


class StudentStatus:
    ACTIVE = 'active'
    INACTIVE = 'inactive'
    GRADUATED = 'graduated'
    SUSPENDED = 'suspended'

    CHOICES = (
        (ACTIVE, 'Active'),
        (INACTIVE, 'Inactive'),
        (GRADUATED, 'Graduated'),
        (SUSPENDED, 'Suspended'),
    )


class Genders:
    MALE = 'male'
    FEMALE = 'female'
    OTHER = 'other'

    CHOICES = (
        (MALE, 'Male'),
        (FEMALE, 'Female'),
        (OTHER, 'Other'),
    )


class EnrollmentStatus:
    ENROLLED = 'enrolled'
    ACTIVE = 'active'
    PENDING = 'pending'
    COMPLETED = 'completed'
    WITHDRAWN = 'withdrawn'
    SUSPENDED = 'suspended'
    DROPPED = 'dropped'

    # A student may hold only one enrollment per course in these states
    OPEN = (ENROLLED, ACTIVE, PENDING)

    CHOICES = (
        (ENROLLED, 'Enrolled'),
        (ACTIVE, 'Active'),
        (PENDING, 'Pending'),
        (COMPLETED, 'Completed'),
        (WITHDRAWN, 'Withdrawn'),
        (SUSPENDED, 'Suspended'),
        (DROPPED, 'Dropped'),
    )


class PaymentStatus:
    PENDING = 'pending'
    PROCESSING = 'processing'
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'
    CANCELLED = 'cancelled'
    REQUIRES_ACTION = 'requires_action'
    REQUIRES_PAYMENT_METHOD = 'requires_payment_method'
    REFUNDED = 'refunded'
    PARTIALLY_REFUNDED = 'partially_refunded'

    CHOICES = (
        (PENDING, 'Pending'),
        (PROCESSING, 'Processing'),
        (SUCCEEDED, 'Succeeded'),
        (FAILED, 'Failed'),
        (CANCELLED, 'Cancelled'),
        (REQUIRES_ACTION, 'Requires Action'),
        (REQUIRES_PAYMENT_METHOD, 'Requires Payment Method'),
        (REFUNDED, 'Refunded'),
        (PARTIALLY_REFUNDED, 'Partially Refunded'),
    )


class PaymentTypes:
    BANK_TRANSFER = 'bank_transfer'
    CARD = 'card'
    FPX = 'fpx'
    CASH = 'cash'
    MANUAL = 'manual'

    CHOICES = (
        (BANK_TRANSFER, 'Bank Transfer'),
        (CARD, 'Card'),
        (FPX, 'FPX'),
        (CASH, 'Cash'),
        (MANUAL, 'Manual'),
    )


class InvoiceStatus:
    DRAFT = 'draft'
    SENT = 'sent'
    PAID = 'paid'
    OVERDUE = 'overdue'
    CANCELLED = 'cancelled'

    CHOICES = (
        (DRAFT, 'Draft'),
        (SENT, 'Sent'),
        (PAID, 'Paid'),
        (OVERDUE, 'Overdue'),
        (CANCELLED, 'Cancelled'),
    )


class OrderStatus:
    PENDING = 'pending'
    PAID = 'paid'
    FAILED = 'failed'
    REFUNDED = 'refunded'
    VOID = 'void'

    CHOICES = (
        (PENDING, 'Pending'),
        (PAID, 'Paid'),
        (FAILED, 'Failed'),
        (REFUNDED, 'Refunded'),
        (VOID, 'Void'),
    )


class BillingReasons:
    SUBSCRIPTION_CREATE = 'subscription_create'
    SUBSCRIPTION_CYCLE = 'subscription_cycle'
    SUBSCRIPTION_UPDATE = 'subscription_update'
    SUBSCRIPTION_THRESHOLD = 'subscription_threshold'
    MANUAL = 'manual'

    CHOICES = (
        (SUBSCRIPTION_CREATE, 'Subscription Created'),
        (SUBSCRIPTION_CYCLE, 'Subscription Cycle'),
        (SUBSCRIPTION_UPDATE, 'Subscription Updated'),
        (SUBSCRIPTION_THRESHOLD, 'Threshold Reached'),
        (MANUAL, 'Manual'),
    )


class BillingCycles:
    MONTHLY = 'monthly'
    QUARTERLY = 'quarterly'
    YEARLY = 'yearly'

    CHOICES = (
        (MONTHLY, 'Monthly'),
        (QUARTERLY, 'Quarterly'),
        (YEARLY, 'Yearly'),
    )

    # Length of one billing period in months
    MONTHS = {
        MONTHLY: 1,
        QUARTERLY: 3,
        YEARLY: 12,
    }


class SessionStatus:
    SCHEDULED = 'scheduled'
    ONGOING = 'ongoing'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'
    NO_SHOW = 'no_show'

    CHOICES = (
        (SCHEDULED, 'Scheduled'),
        (ONGOING, 'Ongoing'),
        (COMPLETED, 'Completed'),
        (CANCELLED, 'Cancelled'),
        (NO_SHOW, 'No Show'),
    )


class PayoutStatus:
    UNPAID = 'unpaid'
    INCLUDED_IN_PAYSLIP = 'included_in_payslip'
    PAID = 'paid'

    CHOICES = (
        (UNPAID, 'Unpaid'),
        (INCLUDED_IN_PAYSLIP, 'Included in Payslip'),
        (PAID, 'Paid'),
    )


class PayslipStatus:
    DRAFT = 'draft'
    FINALIZED = 'finalized'
    PAID = 'paid'

    CHOICES = (
        (DRAFT, 'Draft'),
        (FINALIZED, 'Finalized'),
        (PAID, 'Paid'),
    )


class LiveSessionStatus:
    SCHEDULED = 'scheduled'
    LIVE = 'live'
    ENDED = 'ended'
    CANCELLED = 'cancelled'

    CHOICES = (
        (SCHEDULED, 'Scheduled'),
        (LIVE, 'Live'),
        (ENDED, 'Ended'),
        (CANCELLED, 'Cancelled'),
    )


class FunnelStatus:
    DRAFT = 'draft'
    PUBLISHED = 'published'
    ARCHIVED = 'archived'

    CHOICES = (
        (DRAFT, 'Draft'),
        (PUBLISHED, 'Published'),
        (ARCHIVED, 'Archived'),
    )


class SettingTypes:
    STRING = 'string'
    TEXT = 'text'
    NUMBER = 'number'
    BOOLEAN = 'boolean'
    ENCRYPTED = 'encrypted'
    FILE = 'file'
    JSON = 'json'

    CHOICES = (
        (STRING, 'String'),
        (TEXT, 'Text'),
        (NUMBER, 'Number'),
        (BOOLEAN, 'Boolean'),
        (ENCRYPTED, 'Encrypted'),
        (FILE, 'File'),
        (JSON, 'JSON'),
    )


# Day numbering used by live schedules (0 = Sunday)
DAYS_OF_WEEK = (
    (0, 'Sunday'),
    (1, 'Monday'),
    (2, 'Tuesday'),
    (3, 'Wednesday'),
    (4, 'Thursday'),
    (5, 'Friday'),
    (6, 'Saturday'),
)
