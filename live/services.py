# live/services.py
import logging
from datetime import timedelta

from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone

from shared.constants import DAYS_OF_WEEK

from .models import LiveSchedule, LiveSession, next_occurrence

logger = logging.getLogger(__name__)


def source_filter(source):
    """Q object selecting sessions by who scheduled them."""
    self_scheduled = Q(live_schedule__created_by__isnull=False) & Q(live_schedule__created_by=F('live_host'))
    if source == LiveSession.SOURCE_SELF:
        return self_scheduled
    if source == LiveSession.SOURCE_ADMIN:
        return ~self_scheduled | Q(live_host__isnull=True)
    return Q()


class LiveScheduleService:

    @staticmethod
    def calendar(schedules):
        """Group schedules by day name, keeping Sunday..Saturday order."""
        grouped = {name: [] for _, name in DAYS_OF_WEEK}
        for schedule in schedules:
            grouped[schedule.day_name].append(schedule)
        return grouped

    @staticmethod
    def toggle_active(schedule):
        schedule.is_active = not schedule.is_active
        schedule.save()
        logger.info(f"Live schedule {schedule.pk} {'activated' if schedule.is_active else 'deactivated'}")
        return schedule

    @staticmethod
    @transaction.atomic
    def generate_sessions(start_date=None, days=7):
        """
        Create scheduled sessions for active recurring schedules.

        Covers [start_date, start_date + days). Running it again for the
        same window creates nothing new.
        """
        start_date = start_date or timezone.localdate()
        end_date = start_date + timedelta(days=days)
        created = 0

        schedules = LiveSchedule.objects.filter(
            is_active=True, is_recurring=True
        ).select_related('platform_account')

        for schedule in schedules:
            scheduled_at = next_occurrence(schedule.day_of_week, schedule.start_time, start_date)
            while scheduled_at.date() < end_date:
                _, was_created = LiveSession.objects.get_or_create(
                    live_schedule=schedule,
                    scheduled_start_at=scheduled_at,
                    defaults={
                        'platform_account': schedule.platform_account,
                        'live_host': schedule.live_host,
                        'title': f"{schedule.platform_account.name} - {schedule.day_name} Live",
                    },
                )
                created += int(was_created)
                scheduled_at += timedelta(days=7)

        logger.info(f"Generated {created} live sessions from {start_date} to {end_date}")
        return created
