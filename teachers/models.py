# teachers/models.py
"""
Teacher profiles and monthly payslips built from verified class sessions.
"""
import logging
import re
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.db.models import Count, Sum
from django.utils import timezone

from core.exceptions import PayslipError
from shared.constants import PayoutStatus, PayslipStatus
from shared.utils import format_money, format_month, parse_month

logger = logging.getLogger(__name__)


class Teacher(models.Model):
    STATUS_CHOICES = (
        ('active', 'Active'),
        ('inactive', 'Inactive'),
    )

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='teacher',
    )
    teacher_id = models.CharField(max_length=20, unique=True, blank=True)
    ic_number = models.CharField(max_length=20, null=True, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active')
    joined_at = models.DateField(default=timezone.localdate)

    bank_account_holder = models.CharField(max_length=255, blank=True)
    bank_account_number = models.CharField(max_length=50, blank=True)
    bank_name = models.CharField(max_length=100, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'teachers'
        ordering = ['teacher_id']
        indexes = [
            models.Index(fields=['status']),
        ]

    def __str__(self):
        return f"{self.display_name} ({self.teacher_id})"

    @property
    def display_name(self):
        return self.user.display_name

    @property
    def is_active(self):
        return self.status == 'active'

    @staticmethod
    def generate_teacher_id():
        """TID followed by the next number, zero padded to three digits."""
        highest = 0
        for teacher_id in Teacher.objects.filter(teacher_id__startswith='TID').values_list('teacher_id', flat=True):
            match = re.match(r'^TID(\d+)$', teacher_id)
            if match:
                highest = max(highest, int(match.group(1)))
        return f"TID{highest + 1:03d}"

    def toggle_status(self):
        self.status = 'inactive' if self.status == 'active' else 'active'
        self.save(update_fields=['status', 'updated_at'])
        return self.status

    def save(self, *args, **kwargs):
        if not self.teacher_id:
            self.teacher_id = self.generate_teacher_id()
        super().save(*args, **kwargs)


class Payslip(models.Model):
    """Monthly payslip for one teacher."""

    teacher = models.ForeignKey(Teacher, on_delete=models.CASCADE, related_name='payslips')
    month = models.CharField(max_length=7, help_text="YYYY-MM")
    year = models.PositiveIntegerField()
    total_sessions = models.PositiveIntegerField(default=0)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    status = models.CharField(max_length=20, choices=PayslipStatus.CHOICES, default=PayslipStatus.DRAFT)
    generated_at = models.DateTimeField(default=timezone.now)
    generated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='generated_payslips',
    )
    finalized_at = models.DateTimeField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True, max_length=1000)

    sessions = models.ManyToManyField(
        'courses.ClassSession',
        through='PayslipSession',
        related_name='payslips',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payslips'
        ordering = ['-month', 'teacher__teacher_id']
        unique_together = ['teacher', 'month']
        indexes = [
            models.Index(fields=['month', 'status']),
        ]

    def __str__(self):
        return f"{self.teacher.display_name} - {self.formatted_month}"

    def clean(self):
        try:
            parse_month(self.month)
        except (TypeError, ValueError):
            raise ValidationError({'month': 'Month must be in YYYY-MM format.'})

    def save(self, *args, **kwargs):
        if self.month and not self.year:
            self.year = int(self.month[:4])
        super().save(*args, **kwargs)

    # ============ DISPLAY ============

    @property
    def formatted_month(self):
        return format_month(self.month)

    @property
    def formatted_total(self):
        return format_money(self.total_amount)

    @property
    def status_badge_class(self):
        return {
            PayslipStatus.DRAFT: 'badge-amber',
            PayslipStatus.FINALIZED: 'badge-blue',
            PayslipStatus.PAID: 'badge-emerald',
        }.get(self.status, 'badge-gray')

    # ============ STATE ============

    @property
    def is_draft(self):
        return self.status == PayslipStatus.DRAFT

    @property
    def is_finalized(self):
        return self.status == PayslipStatus.FINALIZED

    @property
    def is_paid(self):
        return self.status == PayslipStatus.PAID

    def can_be_edited(self):
        return self.is_draft

    def can_be_finalized(self):
        return self.is_draft and self.total_sessions > 0

    def can_be_paid(self):
        return self.is_finalized

    def finalize(self):
        if not self.can_be_finalized():
            raise PayslipError(
                'Payslip cannot be finalized. Must be in draft status with sessions.',
                user_friendly=True,
            )
        self.status = PayslipStatus.FINALIZED
        self.finalized_at = timezone.now()
        self.save(update_fields=['status', 'finalized_at', 'updated_at'])
        logger.info(f"Payslip {self.pk} finalized")

    @transaction.atomic
    def mark_as_paid(self):
        if not self.can_be_paid():
            raise PayslipError(
                'Payslip cannot be marked as paid. Must be finalized first.',
                user_friendly=True,
            )
        self.status = PayslipStatus.PAID
        self.paid_at = timezone.now()
        self.save(update_fields=['status', 'paid_at', 'updated_at'])
        self.sessions.update(payout_status=PayoutStatus.PAID)
        logger.info(f"Payslip {self.pk} marked as paid")

    def revert_to_draft(self):
        if not self.is_finalized:
            raise PayslipError('Can only revert finalized payslips to draft.', user_friendly=True)
        self.status = PayslipStatus.DRAFT
        self.finalized_at = None
        self.save(update_fields=['status', 'finalized_at', 'updated_at'])

    # ============ SESSIONS ============

    def _require_draft(self):
        if not self.can_be_edited():
            raise PayslipError('Only draft payslips can be edited.', user_friendly=True)

    @transaction.atomic
    def add_session(self, session, recalculate=True):
        self._require_draft()
        if session.payout_status != PayoutStatus.UNPAID:
            raise PayslipError('Session is already included in another payslip.', user_friendly=True)

        PayslipSession.objects.create(
            payslip=self,
            session=session,
            amount=session.teacher_allowance_amount,
        )
        session.payout_status = PayoutStatus.INCLUDED_IN_PAYSLIP
        session.save(update_fields=['payout_status', 'updated_at'])

        if recalculate:
            self.recalculate_totals()

    @transaction.atomic
    def remove_session(self, session, recalculate=True):
        self._require_draft()

        PayslipSession.objects.filter(payslip=self, session=session).delete()
        session.payout_status = PayoutStatus.UNPAID
        session.save(update_fields=['payout_status', 'updated_at'])

        if recalculate:
            self.recalculate_totals()

    @transaction.atomic
    def sync_sessions(self, session_ids):
        """Make the payslip hold exactly the given sessions."""
        from courses.models import ClassSession

        self._require_draft()

        wanted = {int(pk) for pk in session_ids}
        current = set(self.payslip_sessions.values_list('session_id', flat=True))

        for session in ClassSession.objects.filter(pk__in=wanted - current):
            self.add_session(session, recalculate=False)
        for session in ClassSession.objects.filter(pk__in=current - wanted):
            self.remove_session(session, recalculate=False)

        self.recalculate_totals()

    def recalculate_totals(self):
        totals = self.payslip_sessions.aggregate(count=Count('id'), amount=Sum('amount'))
        self.total_sessions = totals['count'] or 0
        self.total_amount = totals['amount'] or Decimal('0')
        self.save(update_fields=['total_sessions', 'total_amount', 'updated_at'])


class PayslipSession(models.Model):
    payslip = models.ForeignKey(Payslip, on_delete=models.CASCADE, related_name='payslip_sessions')
    session = models.ForeignKey(
        'courses.ClassSession',
        on_delete=models.CASCADE,
        related_name='payslip_sessions',
    )
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    included_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'payslip_sessions'
        unique_together = ['payslip', 'session']

    def __str__(self):
        return f"{self.payslip} - session {self.session_id}"
