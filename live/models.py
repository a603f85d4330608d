# live/models.py
import logging
from datetime import datetime, timedelta

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone
from django.utils.text import slugify

from core.exceptions import SessionStateError
from shared.constants import DAYS_OF_WEEK, LiveSessionStatus

logger = logging.getLogger(__name__)


class Platform(models.Model):
    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=100, unique=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'live_platforms'
        ordering = ['name']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)


class PlatformAccount(models.Model):
    platform = models.ForeignKey(Platform, on_delete=models.CASCADE, related_name='accounts')
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='platform_accounts', help_text="Live host who owns this account"
    )
    name = models.CharField(max_length=255)
    account_id = models.CharField(max_length=100, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'live_platform_accounts'
        ordering = ['platform__name', 'name']

    def __str__(self):
        return f"{self.name} ({self.platform.name})"


class LiveSchedule(models.Model):
    """Weekly recurring slot for a live host on one platform account."""

    platform_account = models.ForeignKey(PlatformAccount, on_delete=models.CASCADE, related_name='schedules')
    live_host = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='live_schedules'
    )
    day_of_week = models.PositiveSmallIntegerField(choices=DAYS_OF_WEEK)
    start_time = models.TimeField()
    end_time = models.TimeField()
    is_recurring = models.BooleanField(default=True)
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='created_live_schedules'
    )
    remarks = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'live_schedules'
        ordering = ['day_of_week', 'start_time']
        indexes = [
            models.Index(fields=['day_of_week', 'start_time']),
            models.Index(fields=['is_active']),
        ]

    def __str__(self):
        return f"{self.platform_account.name} - {self.day_name} {self.time_range}"

    def clean(self):
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValidationError({'end_time': 'End time must be after start time.'})

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    @property
    def day_name(self):
        return dict(DAYS_OF_WEEK).get(self.day_of_week, '')

    @property
    def time_range(self):
        return f"{self.start_time:%I:%M %p} - {self.end_time:%I:%M %p}"

    @property
    def is_self_scheduled(self):
        return bool(self.created_by_id and self.created_by_id == self.live_host_id)


class LiveSession(models.Model):
    SOURCE_ADMIN = 'admin'
    SOURCE_SELF = 'self'

    SOURCE_CHOICES = (
        (SOURCE_ADMIN, 'Admin Assigned'),
        (SOURCE_SELF, 'Self Scheduled'),
    )

    platform_account = models.ForeignKey(PlatformAccount, on_delete=models.CASCADE, related_name='live_sessions')
    live_schedule = models.ForeignKey(
        LiveSchedule, on_delete=models.SET_NULL, null=True, blank=True, related_name='live_sessions'
    )
    live_host = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='live_sessions'
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=LiveSessionStatus.CHOICES, default=LiveSessionStatus.SCHEDULED)
    scheduled_start_at = models.DateTimeField()
    actual_start_at = models.DateTimeField(null=True, blank=True)
    actual_end_at = models.DateTimeField(null=True, blank=True)
    duration_minutes = models.PositiveIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'live_sessions'
        ordering = ['-scheduled_start_at']
        indexes = [
            models.Index(fields=['status', 'scheduled_start_at']),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['live_schedule', 'scheduled_start_at'],
                name='unique_session_per_schedule_slot',
            ),
        ]

    def __str__(self):
        return f"{self.title} ({self.scheduled_start_at:%Y-%m-%d %H:%M})"

    @property
    def source(self):
        schedule = self.live_schedule
        if schedule and schedule.created_by_id and schedule.created_by_id == self.live_host_id:
            return self.SOURCE_SELF
        return self.SOURCE_ADMIN

    @property
    def is_scheduled(self):
        return self.status == LiveSessionStatus.SCHEDULED

    @property
    def is_live(self):
        return self.status == LiveSessionStatus.LIVE

    def start(self):
        if not self.is_scheduled:
            raise SessionStateError("Only scheduled sessions can be started.", user_friendly=True)
        self.status = LiveSessionStatus.LIVE
        self.actual_start_at = timezone.now()
        self.save(update_fields=['status', 'actual_start_at', 'updated_at'])
        logger.info(f"Live session {self.pk} started")

    def end(self):
        if not self.is_live:
            raise SessionStateError("Only live sessions can be ended.", user_friendly=True)
        self.status = LiveSessionStatus.ENDED
        self.actual_end_at = timezone.now()
        started = self.actual_start_at or self.scheduled_start_at
        self.duration_minutes = max(0, int((self.actual_end_at - started).total_seconds() // 60))
        self.save(update_fields=['status', 'actual_end_at', 'duration_minutes', 'updated_at'])
        logger.info(f"Live session {self.pk} ended after {self.duration_minutes} minutes")

    def cancel(self):
        if self.status not in (LiveSessionStatus.SCHEDULED, LiveSessionStatus.LIVE):
            raise SessionStateError("Only scheduled or live sessions can be cancelled.", user_friendly=True)
        self.status = LiveSessionStatus.CANCELLED
        self.save(update_fields=['status', 'updated_at'])
        logger.info(f"Live session {self.pk} cancelled")


def next_occurrence(day_of_week, start_time, after):
    """
    First datetime on or after the date `after` falling on day_of_week
    (0 = Sunday) at start_time, in the current timezone.
    """
    python_weekday = (day_of_week - 1) % 7
    days_ahead = (python_weekday - after.weekday()) % 7
    day = after + timedelta(days=days_ahead)
    return timezone.make_aware(datetime.combine(day, start_time))
