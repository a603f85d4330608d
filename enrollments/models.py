# enrollments/models.py
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from shared.constants import EnrollmentStatus
from shared.utils import format_money


class Enrollment(models.Model):
    PAYMENT_AUTOMATIC = 'automatic'
    PAYMENT_MANUAL = 'manual'

    PAYMENT_METHOD_CHOICES = (
        (PAYMENT_AUTOMATIC, 'Automatic'),
        (PAYMENT_MANUAL, 'Manual'),
    )

    student = models.ForeignKey('students.Student', on_delete=models.CASCADE, related_name='enrollments')
    course = models.ForeignKey('courses.Course', on_delete=models.CASCADE, related_name='enrollments')
    enrolled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='enrollments_made'
    )
    status = models.CharField(max_length=20, choices=EnrollmentStatus.CHOICES, default=EnrollmentStatus.ENROLLED)
    enrollment_date = models.DateField(default=timezone.localdate)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    enrollment_fee = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal('0'), validators=[MinValueValidator(0)]
    )
    notes = models.TextField(blank=True)
    payment_method_type = models.CharField(
        max_length=20, choices=PAYMENT_METHOD_CHOICES, default=PAYMENT_AUTOMATIC
    )
    manual_payment_required = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'enrollments'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['student', 'course', 'status']),
            models.Index(fields=['status']),
        ]

    def __str__(self):
        return f"{self.student.display_name} - {self.course.name}"

    def clean(self):
        errors = {}
        if self.start_date and self.enrollment_date and self.start_date < self.enrollment_date:
            errors['start_date'] = 'Start date cannot be before the enrollment date.'
        if self.end_date and self.start_date and self.end_date < self.start_date:
            errors['end_date'] = 'End date cannot be before the start date.'
        if errors:
            raise ValidationError(errors)

    def save(self, *args, **kwargs):
        self.manual_payment_required = (
            self.manual_payment_required and self.payment_method_type == self.PAYMENT_MANUAL
        )
        self.full_clean()
        super().save(*args, **kwargs)

    @property
    def is_open(self):
        return self.status in EnrollmentStatus.OPEN

    @property
    def formatted_fee(self):
        return format_money(self.enrollment_fee)

    @property
    def status_badge_color(self):
        if self.status in (EnrollmentStatus.ACTIVE, EnrollmentStatus.ENROLLED):
            return 'emerald'
        if self.status == EnrollmentStatus.PENDING:
            return 'amber'
        if self.status == EnrollmentStatus.COMPLETED:
            return 'blue'
        return 'gray'
