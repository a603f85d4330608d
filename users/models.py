# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils.translation import gettext_lazy as _
import logging

from shared.constants import UserRoles

from .managers import UserManager

logger = logging.getLogger(__name__)


class User(AbstractUser):
    """Back office user; one account per person, role decides the screens they see."""

    STATUS_CHOICES = (
        ('active', 'Active'),
        ('inactive', 'Inactive'),
    )

    username = models.CharField(
        _("username"),
        max_length=150,
        blank=True,
        null=True,
        help_text=_("Optional. 150 characters or fewer."),
    )

    email = models.EmailField(_("email address"), unique=True)
    name = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=20, blank=True, null=True)
    role = models.CharField(max_length=20, choices=UserRoles.CHOICES, default=UserRoles.STUDENT)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active')

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta:
        db_table = 'users'
        ordering = ['name', 'email']
        indexes = [
            models.Index(fields=['email']),
            models.Index(fields=['phone']),
            models.Index(fields=['role']),
        ]

    def __str__(self):
        return self.display_name

    def clean(self):
        super().clean()
        if self.email:
            self.email = self.email.strip().lower()

    @property
    def display_name(self):
        return self.name or self.get_full_name() or self.email

    @property
    def is_admin(self):
        return self.role == UserRoles.ADMIN or self.is_superuser

    @property
    def is_teacher(self):
        return self.role == UserRoles.TEACHER

    @property
    def is_student(self):
        return self.role == UserRoles.STUDENT

    @property
    def is_live_host(self):
        return self.role == UserRoles.LIVE_HOST
