# live/tests/test_models.py
from datetime import date, time, timedelta

from django.core.exceptions import ValidationError
from django.test import TestCase
from django.utils import timezone

from core.exceptions import SessionStateError
from live.models import LiveSession, next_occurrence
from shared.constants import LiveSessionStatus

from .helpers import make_account, make_host, make_schedule


class NextOccurrenceTest(TestCase):
    # 2024-05-06 is a Monday

    def test_same_day(self):
        result = next_occurrence(1, time(20, 0), date(2024, 5, 6))
        self.assertEqual(timezone.localtime(result).date(), date(2024, 5, 6))
        self.assertEqual(timezone.localtime(result).time(), time(20, 0))

    def test_sunday_is_day_zero(self):
        result = next_occurrence(0, time(9, 30), date(2024, 5, 6))
        self.assertEqual(result.date(), date(2024, 5, 12))

    def test_later_in_week(self):
        self.assertEqual(next_occurrence(5, time(9, 0), date(2024, 5, 6)).date(), date(2024, 5, 10))


class LiveScheduleModelTest(TestCase):
    def setUp(self):
        self.account = make_account()
        self.host = make_host()

    def test_end_before_start_rejected(self):
        with self.assertRaises(ValidationError):
            make_schedule(self.account, start_time=time(22, 0), end_time=time(21, 0))

    def test_display_helpers(self):
        schedule = make_schedule(self.account, self.host, day_of_week=3)
        self.assertEqual(schedule.day_name, 'Wednesday')
        self.assertEqual(schedule.time_range, '08:00 PM - 10:00 PM')

    def test_self_scheduled(self):
        self.assertTrue(make_schedule(self.account, self.host, created_by=self.host).is_self_scheduled)
        self.assertFalse(make_schedule(self.account, self.host, day_of_week=2).is_self_scheduled)


class LiveSessionModelTest(TestCase):
    def setUp(self):
        self.account = make_account()
        self.host = make_host()
        self.session = LiveSession.objects.create(
            platform_account=self.account,
            live_host=self.host,
            title='Evening live',
            scheduled_start_at=timezone.now(),
        )

    def test_start_then_end_records_duration(self):
        self.session.start()
        self.assertTrue(self.session.is_live)

        self.session.actual_start_at = timezone.now() - timedelta(minutes=45)
        self.session.end()

        self.session.refresh_from_db()
        self.assertEqual(self.session.status, LiveSessionStatus.ENDED)
        self.assertEqual(self.session.duration_minutes, 45)

    def test_end_requires_live(self):
        with self.assertRaises(SessionStateError):
            self.session.end()

    def test_cancel_rules(self):
        self.session.cancel()
        self.assertEqual(self.session.status, LiveSessionStatus.CANCELLED)

        with self.assertRaises(SessionStateError):
            self.session.start()
        with self.assertRaises(SessionStateError):
            self.session.cancel()

    def test_source(self):
        self.assertEqual(self.session.source, LiveSession.SOURCE_ADMIN)

        self.session.live_schedule = make_schedule(self.account, self.host, created_by=self.host)
        self.assertEqual(self.session.source, LiveSession.SOURCE_SELF)
