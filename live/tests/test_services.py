# live/tests/test_services.py
from datetime import date
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from django.utils import timezone

from live.models import LiveSession
from live.services import LiveScheduleService, source_filter

from .helpers import make_account, make_host, make_schedule


class GenerateSessionsTest(TestCase):
    def setUp(self):
        self.account = make_account()
        self.host = make_host()
        self.monday = make_schedule(self.account, self.host, day_of_week=1)
        self.friday = make_schedule(self.account, self.host, day_of_week=5)

    def test_one_week(self):
        created = LiveScheduleService.generate_sessions(start_date=date(2024, 5, 6), days=7)

        self.assertEqual(created, 2)
        session = LiveSession.objects.get(live_schedule=self.monday)
        self.assertEqual(timezone.localtime(session.scheduled_start_at).date(), date(2024, 5, 6))
        self.assertEqual(session.live_host, self.host)
        self.assertEqual(session.title, 'Mudeer TikTok - Monday Live')

    def test_rerun_creates_nothing(self):
        LiveScheduleService.generate_sessions(start_date=date(2024, 5, 6), days=14)
        created = LiveScheduleService.generate_sessions(start_date=date(2024, 5, 6), days=14)

        self.assertEqual(created, 0)
        self.assertEqual(LiveSession.objects.count(), 4)

    def test_inactive_and_one_off_schedules_skipped(self):
        self.friday.is_active = False
        self.friday.save()
        make_schedule(self.account, self.host, day_of_week=3, is_recurring=False)

        created = LiveScheduleService.generate_sessions(start_date=date(2024, 5, 6), days=7)

        self.assertEqual(created, 1)

    def test_command(self):
        out = StringIO()
        call_command('generate_live_sessions', '--start', '2024-05-06', '--days', '7', stdout=out)
        self.assertIn('Created 2 live sessions', out.getvalue())

    def test_command_rejects_bad_date(self):
        with self.assertRaises(CommandError):
            call_command('generate_live_sessions', '--start', '06/05/2024')


class ScheduleHelpersTest(TestCase):
    def setUp(self):
        self.account = make_account()
        self.host = make_host()

    def test_calendar_groups_by_day(self):
        sunday = make_schedule(self.account, self.host, day_of_week=0)
        monday = make_schedule(self.account, self.host, day_of_week=1)

        calendar = LiveScheduleService.calendar([monday, sunday])

        self.assertEqual(list(calendar)[0], 'Sunday')
        self.assertEqual(calendar['Sunday'], [sunday])
        self.assertEqual(calendar['Monday'], [monday])
        self.assertEqual(calendar['Saturday'], [])

    def test_toggle_active(self):
        schedule = make_schedule(self.account, self.host)
        LiveScheduleService.toggle_active(schedule)
        schedule.refresh_from_db()
        self.assertFalse(schedule.is_active)

    def test_source_filter(self):
        own = make_schedule(self.account, self.host, day_of_week=1, created_by=self.host)
        assigned = make_schedule(self.account, self.host, day_of_week=2)
        LiveScheduleService.generate_sessions(start_date=date(2024, 5, 6), days=7)

        self_sessions = LiveSession.objects.filter(source_filter(LiveSession.SOURCE_SELF))
        admin_sessions = LiveSession.objects.filter(source_filter(LiveSession.SOURCE_ADMIN))

        self.assertEqual([s.live_schedule for s in self_sessions], [own])
        self.assertEqual([s.live_schedule for s in admin_sessions], [assigned])
