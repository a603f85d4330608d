# students/models.py
"""
Student profiles. Every student is backed by a users.User account.
"""
import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from shared.constants import Genders, StudentStatus

logger = logging.getLogger(__name__)


class Student(models.Model):
    """Student profile attached one-to-one to a user account."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='student',
    )
    student_id = models.CharField(max_length=20, unique=True, blank=True)
    ic_number = models.CharField(max_length=20, unique=True, null=True, blank=True)
    phone = models.CharField(max_length=20, blank=True, null=True)
    address = models.TextField(blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=10, choices=Genders.CHOICES, blank=True)
    nationality = models.CharField(max_length=100, default='Malaysian', blank=True)
    status = models.CharField(
        max_length=20,
        choices=StudentStatus.CHOICES,
        default=StudentStatus.ACTIVE,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'students'
        verbose_name = 'Student'
        verbose_name_plural = 'Students'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['student_id']),
            models.Index(fields=['phone']),
            models.Index(fields=['status']),
        ]

    def __str__(self):
        return f"{self.display_name} ({self.student_id})"

    @property
    def display_name(self):
        return self.user.display_name

    @property
    def email(self):
        return self.user.email

    @property
    def age(self):
        """Calculate student's current age."""
        if not self.date_of_birth:
            return None
        today = timezone.localdate()
        return today.year - self.date_of_birth.year - (
            (today.month, today.day) < (self.date_of_birth.month, self.date_of_birth.day)
        )

    @property
    def is_active(self):
        return self.status == StudentStatus.ACTIVE

    @staticmethod
    def generate_student_id(year=None):
        """Next free id in the form STU<year><4-digit sequence>."""
        year = year or timezone.localdate().year
        prefix = f"STU{year}"
        sequence = Student.objects.filter(student_id__startswith=prefix).count() + 1

        candidate = f"{prefix}{sequence:04d}"
        while Student.objects.filter(student_id=candidate).exists():
            sequence += 1
            candidate = f"{prefix}{sequence:04d}"
        return candidate

    def clean(self):
        """Validate student data."""
        if self.ic_number == '':
            self.ic_number = None

        if self.date_of_birth and self.date_of_birth >= timezone.localdate():
            raise ValidationError({
                'date_of_birth': 'Date of birth must be before today.'
            })

    def save(self, *args, **kwargs):
        """Save student with validation and a generated student id."""
        if not self.student_id:
            self.student_id = self.generate_student_id()

        self.full_clean()
        super().save(*args, **kwargs)
