# billing/models.py
import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Sum
from django.utils import timezone

from shared.constants import (
    DEFAULT_CURRENCY,
    BillingReasons,
    InvoiceStatus,
    OrderStatus,
    PaymentStatus,
    PaymentTypes,
)
from shared.utils import format_money


class Invoice(models.Model):
    """Invoice raised against a student for a course."""

    invoice_number = models.CharField(max_length=50, unique=True, db_index=True, blank=True)
    student = models.ForeignKey('students.Student', on_delete=models.CASCADE, related_name='invoices')
    course = models.ForeignKey(
        'courses.Course', on_delete=models.SET_NULL, null=True, blank=True, related_name='invoices'
    )
    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    status = models.CharField(max_length=20, choices=InvoiceStatus.CHOICES, default=InvoiceStatus.DRAFT)
    due_date = models.DateField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'invoices'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['student', 'status']),
            models.Index(fields=['due_date', 'status']),
        ]

    def __str__(self):
        return f"Invoice {self.invoice_number} - {format_money(self.amount)}"

    def clean(self):
        if self.amount is not None and self.amount < 0:
            raise ValidationError({'amount': 'Amount cannot be negative.'})

    def save(self, *args, **kwargs):
        if not self.invoice_number:
            self.invoice_number = self.generate_invoice_number()
        self.full_clean()
        super().save(*args, **kwargs)

    @staticmethod
    def generate_invoice_number():
        return f"INV-{timezone.now():%Y%m}-{uuid.uuid4().hex[:8].upper()}"

    def mark_as_paid(self):
        self.status = InvoiceStatus.PAID
        self.paid_at = timezone.now()
        self.save(update_fields=['status', 'paid_at', 'updated_at'])

    @property
    def amount_paid(self):
        total = self.payments.filter(status=PaymentStatus.SUCCEEDED).aggregate(total=Sum('amount'))['total']
        return total or Decimal('0')

    @property
    def amount_due(self):
        return max(Decimal('0'), self.amount - self.amount_paid)

    @property
    def is_fully_paid(self):
        return self.amount_paid >= self.amount

    @property
    def formatted_amount(self):
        return format_money(self.amount)


class Payment(models.Model):
    """A single payment attempt; bank transfers wait here for review."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='payments')
    invoice = models.ForeignKey(
        Invoice, on_delete=models.SET_NULL, null=True, blank=True, related_name='payments'
    )
    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    currency = models.CharField(max_length=3, default=DEFAULT_CURRENCY)
    status = models.CharField(max_length=30, choices=PaymentStatus.CHOICES, default=PaymentStatus.PENDING)
    payment_type = models.CharField(max_length=20, choices=PaymentTypes.CHOICES, default=PaymentTypes.BANK_TRANSFER)
    reference = models.CharField(max_length=100, blank=True, db_index=True)
    notes = models.TextField(blank=True)
    transfer_proof = models.FileField(upload_to='payments/proofs/', null=True, blank=True)

    paid_at = models.DateTimeField(null=True, blank=True)
    failed_at = models.DateTimeField(null=True, blank=True)
    failure_reason = models.JSONField(null=True, blank=True)
    approved_at = models.DateTimeField(null=True, blank=True)
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='approved_payments'
    )
    refunded_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payments'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['payment_type', 'status']),
            models.Index(fields=['user', 'status']),
            models.Index(fields=['created_at']),
        ]

    def __str__(self):
        return f"Payment #{self.pk} - {self.formatted_amount} ({self.get_status_display()})"

    @property
    def is_bank_transfer(self):
        return self.payment_type == PaymentTypes.BANK_TRANSFER

    @property
    def is_pending(self):
        return self.status == PaymentStatus.PENDING

    @property
    def is_succeeded(self):
        return self.status == PaymentStatus.SUCCEEDED

    @property
    def status_badge_color(self):
        if self.status == PaymentStatus.SUCCEEDED:
            return 'emerald'
        if self.status in (PaymentStatus.FAILED, PaymentStatus.CANCELLED):
            return 'red'
        if self.status == PaymentStatus.PENDING:
            return 'amber'
        return 'gray'

    @property
    def formatted_amount(self):
        return format_money(self.amount)

    @property
    def failure_message(self):
        if isinstance(self.failure_reason, dict):
            return self.failure_reason.get('reason', '')
        return ''


class Order(models.Model):
    """Billing record for one enrollment period."""

    order_number = models.CharField(max_length=20, unique=True, db_index=True, blank=True)
    enrollment = models.ForeignKey(
        'enrollments.Enrollment', on_delete=models.SET_NULL, null=True, blank=True, related_name='orders'
    )
    student = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='orders')
    course = models.ForeignKey(
        'courses.Course', on_delete=models.SET_NULL, null=True, blank=True, related_name='orders'
    )
    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    currency = models.CharField(max_length=3, default=DEFAULT_CURRENCY)
    status = models.CharField(max_length=20, choices=OrderStatus.CHOICES, default=OrderStatus.PENDING)
    billing_reason = models.CharField(max_length=30, choices=BillingReasons.CHOICES, default=BillingReasons.MANUAL)
    payment_method = models.CharField(max_length=20, choices=PaymentTypes.CHOICES, default=PaymentTypes.MANUAL)
    period_start = models.DateField(null=True, blank=True)
    period_end = models.DateField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    failed_at = models.DateTimeField(null=True, blank=True)
    failure_reason = models.JSONField(null=True, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'paid_at']),
            models.Index(fields=['student', 'status']),
        ]

    def __str__(self):
        return f"{self.order_number} - {self.formatted_amount}"

    def clean(self):
        if self.period_start and self.period_end and self.period_end < self.period_start:
            raise ValidationError({'period_end': 'Period end must be after the period start.'})

    def save(self, *args, **kwargs):
        if not self.order_number:
            self.order_number = self.generate_order_number()
        self.full_clean()
        super().save(*args, **kwargs)

    @classmethod
    def generate_order_number(cls):
        """ORD + Ymd + 4 digit sequence that restarts every day."""
        prefix = f"ORD{timezone.localdate():%Y%m%d}"
        last = (
            cls.objects.filter(order_number__startswith=prefix)
            .order_by('-order_number')
            .values_list('order_number', flat=True)
            .first()
        )
        sequence = int(last[len(prefix):]) + 1 if last else 1
        return f"{prefix}{sequence:04d}"

    def mark_as_paid(self):
        self.status = OrderStatus.PAID
        self.paid_at = timezone.now()
        self.failed_at = None
        self.failure_reason = None
        self.save()

    def mark_as_failed(self, reason=None):
        self.status = OrderStatus.FAILED
        self.failed_at = timezone.now()
        self.failure_reason = {'reason': reason} if reason else None
        self.save()

    def mark_as_refunded(self):
        self.status = OrderStatus.REFUNDED
        self.save()

    @property
    def is_paid(self):
        return self.status == OrderStatus.PAID

    @property
    def is_pending(self):
        return self.status == OrderStatus.PENDING

    @property
    def formatted_amount(self):
        return format_money(self.amount)

    @property
    def failure_message(self):
        if isinstance(self.failure_reason, dict):
            return self.failure_reason.get('reason', '')
        return ''


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    description = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    total_price = models.DecimalField(max_digits=10, decimal_places=2, blank=True)

    class Meta:
        db_table = 'order_items'

    def __str__(self):
        return f"{self.description} x {self.quantity}"

    def save(self, *args, **kwargs):
        if self.total_price is None:
            self.total_price = self.unit_price * self.quantity
        super().save(*args, **kwargs)
