# courses/models.py
"""
Courses with their fee and class settings, plus classes, sessions and attendance.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from core.exceptions import SessionStateError
from shared.constants import (
    DEFAULT_CURRENCY,
    BillingCycles,
    PayoutStatus,
    SessionStatus,
)
from shared.utils import format_money, month_bounds

logger = logging.getLogger(__name__)

CENTS = Decimal('0.01')


def _money(value):
    return Decimal(value or 0).quantize(CENTS, rounding=ROUND_HALF_UP)


class Course(models.Model):
    STATUS_DRAFT = 'draft'
    STATUS_ACTIVE = 'active'
    STATUS_INACTIVE = 'inactive'

    STATUS_CHOICES = (
        (STATUS_DRAFT, 'Draft'),
        (STATUS_ACTIVE, 'Active'),
        (STATUS_INACTIVE, 'Inactive'),
    )

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, max_length=1000)
    teacher = models.ForeignKey(
        'teachers.Teacher',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='courses',
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_DRAFT)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_courses',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'courses'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status']),
        ]

    def __str__(self):
        return self.name

    @property
    def fee_settings_or_none(self):
        try:
            return self.fee_settings
        except CourseFeeSettings.DoesNotExist:
            return None

    @property
    def class_settings_or_none(self):
        try:
            return self.class_settings
        except CourseClassSettings.DoesNotExist:
            return None

    @property
    def fee_amount(self):
        fee_settings = self.fee_settings_or_none
        return fee_settings.fee_amount if fee_settings else Decimal('0')

    @property
    def formatted_fee(self):
        return format_money(self.fee_amount)

    @property
    def is_active(self):
        return self.status == self.STATUS_ACTIVE


class CourseFeeSettings(models.Model):
    course = models.OneToOneField(Course, on_delete=models.CASCADE, related_name='fee_settings')
    fee_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0'))
    currency = models.CharField(max_length=3, default=DEFAULT_CURRENCY)
    billing_cycle = models.CharField(
        max_length=20,
        choices=BillingCycles.CHOICES,
        default=BillingCycles.MONTHLY,
    )
    is_recurring = models.BooleanField(default=True)

    class Meta:
        db_table = 'course_fee_settings'
        verbose_name = 'Course fee settings'
        verbose_name_plural = 'Course fee settings'

    def __str__(self):
        return f"{self.course.name}: {format_money(self.fee_amount)} {self.get_billing_cycle_display()}"

    def clean(self):
        if self.fee_amount is not None and self.fee_amount < 0:
            raise ValidationError({'fee_amount': 'Fee amount cannot be negative.'})


class CourseClassSettings(models.Model):
    TEACHING_MODE_CHOICES = (
        ('online', 'Online'),
        ('offline', 'Offline'),
        ('hybrid', 'Hybrid'),
    )

    BILLING_PER_MONTH = 'per_month'
    BILLING_PER_SESSION = 'per_session'
    BILLING_PER_MINUTE = 'per_minute'

    BILLING_TYPE_CHOICES = (
        (BILLING_PER_MONTH, 'Per Month'),
        (BILLING_PER_SESSION, 'Per Session'),
        (BILLING_PER_MINUTE, 'Per Minute'),
    )

    course = models.OneToOneField(Course, on_delete=models.CASCADE, related_name='class_settings')
    teaching_mode = models.CharField(max_length=10, choices=TEACHING_MODE_CHOICES, default='online')
    billing_type = models.CharField(max_length=20, choices=BILLING_TYPE_CHOICES, default=BILLING_PER_MONTH)
    sessions_per_month = models.PositiveIntegerField(null=True, blank=True)
    session_duration_minutes = models.PositiveIntegerField(default=60)
    price_per_session = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    price_per_month = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    price_per_minute = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    class_description = models.TextField(blank=True)
    class_instructions = models.TextField(blank=True)

    class Meta:
        db_table = 'course_class_settings'
        verbose_name = 'Course class settings'
        verbose_name_plural = 'Course class settings'

    def __str__(self):
        return f"{self.course.name}: {self.get_billing_type_display()}"

    def clean(self):
        errors = {}

        if not 5 <= (self.session_duration_minutes or 0) <= 480:
            errors['session_duration_minutes'] = 'Session duration must be between 5 and 480 minutes.'

        if self.billing_type == self.BILLING_PER_SESSION:
            if not self.sessions_per_month:
                errors['sessions_per_month'] = 'Sessions per month is required for per-session billing.'
            if self.price_per_session is None:
                errors['price_per_session'] = 'Price per session is required for per-session billing.'
        elif self.billing_type == self.BILLING_PER_MONTH and self.price_per_month is None:
            errors['price_per_month'] = 'Price per month is required for monthly billing.'
        elif self.billing_type == self.BILLING_PER_MINUTE and self.price_per_minute is None:
            errors['price_per_minute'] = 'Price per minute is required for per-minute billing.'

        for field in ('price_per_session', 'price_per_month', 'price_per_minute'):
            value = getattr(self, field)
            if value is not None and value < 0:
                errors[field] = 'Price cannot be negative.'

        if errors:
            raise ValidationError(errors)

    def session_fee(self, duration_minutes=None):
        """What one session is worth under this billing type."""
        if self.billing_type == self.BILLING_PER_SESSION:
            return _money(self.price_per_session)
        if self.billing_type == self.BILLING_PER_MONTH:
            return _money(Decimal(self.price_per_month or 0) / (self.sessions_per_month or 1))
        if self.billing_type == self.BILLING_PER_MINUTE:
            minutes = duration_minutes or self.session_duration_minutes
            return _money(Decimal(self.price_per_minute or 0) * minutes)
        return Decimal('0.00')


class CourseClass(models.Model):
    """A teaching group run under a course by one teacher."""

    CLASS_TYPE_CHOICES = (
        ('individual', 'Individual'),
        ('group', 'Group'),
    )

    RATE_PER_CLASS = 'per_class'
    RATE_PER_STUDENT = 'per_student'
    RATE_PER_SESSION = 'per_session'

    RATE_TYPE_CHOICES = (
        (RATE_PER_CLASS, 'Per Class'),
        (RATE_PER_STUDENT, 'Per Student'),
        (RATE_PER_SESSION, 'Per Session (commission)'),
    )

    COMMISSION_TYPE_CHOICES = (
        ('percentage', 'Percentage'),
        ('fixed', 'Fixed Amount'),
    )

    STATUS_CHOICES = (
        ('draft', 'Draft'),
        ('active', 'Active'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    )

    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name='classes')
    teacher = models.ForeignKey(
        'teachers.Teacher',
        on_delete=models.PROTECT,
        related_name='classes',
    )
    title = models.CharField(max_length=255)
    class_type = models.CharField(max_length=20, choices=CLASS_TYPE_CHOICES, default='group')
    rate_type = models.CharField(max_length=20, choices=RATE_TYPE_CHOICES, default=RATE_PER_CLASS)
    teacher_rate = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0'))
    commission_type = models.CharField(
        max_length=20,
        choices=COMMISSION_TYPE_CHOICES,
        default='percentage',
    )
    commission_value = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0'))
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'classes'
        verbose_name = 'Class'
        verbose_name_plural = 'Classes'
        ordering = ['title']

    def __str__(self):
        return f"{self.title} ({self.course.name})"


class ClassSessionQuerySet(models.QuerySet):
    def in_month(self, month):
        start, end = month_bounds(month)
        return self.filter(session_date__gte=start, session_date__lte=end)

    def eligible_for_payslip(self):
        return self.filter(
            status=SessionStatus.COMPLETED,
            verified_at__isnull=False,
            allowance_amount__isnull=False,
            payout_status=PayoutStatus.UNPAID,
        )

    def for_teacher(self, teacher):
        return self.filter(course_class__teacher=teacher)


class ClassSession(models.Model):
    course_class = models.ForeignKey(CourseClass, on_delete=models.CASCADE, related_name='sessions')
    session_date = models.DateField()
    session_time = models.TimeField()
    duration_minutes = models.PositiveIntegerField(default=60)
    status = models.CharField(max_length=20, choices=SessionStatus.CHOICES, default=SessionStatus.SCHEDULED)
    completed_at = models.DateTimeField(null=True, blank=True)
    verified_at = models.DateTimeField(null=True, blank=True)
    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='verified_sessions',
    )
    allowance_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    payout_status = models.CharField(
        max_length=30,
        choices=PayoutStatus.CHOICES,
        default=PayoutStatus.UNPAID,
    )
    teacher_notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ClassSessionQuerySet.as_manager()

    class Meta:
        db_table = 'class_sessions'
        ordering = ['session_date', 'session_time']
        indexes = [
            models.Index(fields=['session_date']),
            models.Index(fields=['status', 'payout_status']),
        ]

    def __str__(self):
        return f"{self.course_class.title} on {self.session_date:%d %b %Y} {self.session_time:%H:%M}"

    @property
    def teacher(self):
        return self.course_class.teacher

    @property
    def is_completed(self):
        return self.status == SessionStatus.COMPLETED

    @property
    def is_verified(self):
        return self.verified_at is not None

    @property
    def can_be_verified(self):
        return self.is_completed and not self.is_verified

    @property
    def present_count(self):
        return self.attendances.filter(status=ClassAttendance.STATUS_PRESENT).count()

    def calculate_teacher_allowance(self):
        """Allowance owed to the teacher for this session."""
        course_class = self.course_class

        if course_class.rate_type == CourseClass.RATE_PER_CLASS:
            return _money(course_class.teacher_rate)

        if course_class.rate_type == CourseClass.RATE_PER_STUDENT:
            return _money(course_class.teacher_rate * self.present_count)

        if course_class.rate_type == CourseClass.RATE_PER_SESSION:
            class_settings = course_class.course.class_settings_or_none
            if class_settings is None:
                return Decimal('0.00')

            session_fee = class_settings.session_fee(self.duration_minutes)
            if course_class.commission_type == 'percentage':
                return _money(session_fee * course_class.commission_value / 100)
            return _money(course_class.commission_value)

        return Decimal('0.00')

    @property
    def teacher_allowance_amount(self):
        if self.is_completed and self.allowance_amount is not None:
            return self.allowance_amount
        return self.calculate_teacher_allowance()

    def mark_completed(self, notes=None):
        if self.status in (SessionStatus.CANCELLED, SessionStatus.COMPLETED):
            raise SessionStateError(
                f"A {self.get_status_display().lower()} session cannot be completed.",
                user_friendly=True,
            )

        self.status = SessionStatus.COMPLETED
        self.completed_at = timezone.now()
        self.teacher_notes = notes or self.teacher_notes
        self.allowance_amount = self.calculate_teacher_allowance()
        self.save()
        logger.info(f"Session {self.pk} completed with allowance {self.allowance_amount}")

    def verify(self, user):
        if not self.can_be_verified:
            raise SessionStateError(
                'Session cannot be verified. Must be completed and not already verified.',
                user_friendly=True,
            )

        self.verified_at = timezone.now()
        self.verified_by = user
        self.save(update_fields=['verified_at', 'verified_by', 'updated_at'])
        logger.info(f"Session {self.pk} verified by {user.email}")

    def unverify(self):
        if not self.is_verified:
            raise SessionStateError('Session is not verified.', user_friendly=True)
        if self.payout_status != PayoutStatus.UNPAID:
            raise SessionStateError(
                'Session is already on a payslip and cannot be unverified.',
                user_friendly=True,
            )

        self.verified_at = None
        self.verified_by = None
        self.save(update_fields=['verified_at', 'verified_by', 'updated_at'])

    def cancel(self):
        if self.status == SessionStatus.COMPLETED:
            raise SessionStateError('Completed sessions cannot be cancelled.', user_friendly=True)
        self.status = SessionStatus.CANCELLED
        self.save(update_fields=['status', 'updated_at'])

    def mark_no_show(self, notes=None):
        self.status = SessionStatus.NO_SHOW
        self.teacher_notes = notes or self.teacher_notes
        self.save(update_fields=['status', 'teacher_notes', 'updated_at'])


class ClassAttendance(models.Model):
    STATUS_PRESENT = 'present'
    STATUS_ABSENT = 'absent'
    STATUS_LATE = 'late'
    STATUS_EXCUSED = 'excused'

    STATUS_CHOICES = (
        (STATUS_PRESENT, 'Present'),
        (STATUS_ABSENT, 'Absent'),
        (STATUS_LATE, 'Late'),
        (STATUS_EXCUSED, 'Excused'),
    )

    session = models.ForeignKey(ClassSession, on_delete=models.CASCADE, related_name='attendances')
    student = models.ForeignKey(
        'students.Student',
        on_delete=models.CASCADE,
        related_name='class_attendances',
    )
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PRESENT)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'class_attendance'
        unique_together = ['session', 'student']

    def __str__(self):
        return f"{self.student} - {self.session}: {self.get_status_display()}"
