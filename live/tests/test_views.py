# live/tests/test_views.py
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from live.models import LiveSchedule, LiveSession
from shared.constants import LiveSessionStatus
from users.models import User

from .helpers import make_account, make_host, make_schedule


class LiveViewTest(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(email='admin@example.com', password='testpass123', role='admin')
        self.client.force_login(self.admin)
        self.account = make_account()
        self.host = make_host()

    def test_schedule_create_sets_creator(self):
        response = self.client.post(reverse('live:schedule_create'), {
            'platform_account': self.account.pk,
            'live_host': self.host.pk,
            'day_of_week': 2,
            'start_time': '20:00',
            'end_time': '21:30',
            'is_recurring': 'on',
            'is_active': 'on',
        })

        self.assertRedirects(response, reverse('live:schedule_list'), fetch_redirect_response=False)
        schedule = LiveSchedule.objects.get()
        self.assertEqual(schedule.created_by, self.admin)
        self.assertFalse(schedule.is_self_scheduled)

    def test_schedule_end_before_start_rejected(self):
        response = self.client.post(reverse('live:schedule_create'), {
            'platform_account': self.account.pk,
            'day_of_week': 2,
            'start_time': '20:00',
            'end_time': '19:00',
        })

        self.assertEqual(response.status_code, 200)
        self.assertIn('end_time', response.context['form'].errors)

    def test_schedule_list_day_filter(self):
        monday = make_schedule(self.account, self.host, day_of_week=1)
        make_schedule(self.account, self.host, day_of_week=4)

        response = self.client.get(reverse('live:schedule_list'), {'day': '1'})

        self.assertEqual(list(response.context['schedules']), [monday])
        self.assertEqual(response.context['calendar']['Monday'], [monday])

    def test_schedule_toggle(self):
        schedule = make_schedule(self.account, self.host)
        self.client.post(reverse('live:schedule_toggle', args=[schedule.pk]))
        schedule.refresh_from_db()
        self.assertFalse(schedule.is_active)

    def test_session_actions(self):
        session = LiveSession.objects.create(
            platform_account=self.account, live_host=self.host,
            title='Evening live', scheduled_start_at=timezone.now(),
        )

        self.client.post(reverse('live:session_action', args=[session.pk, 'start']))
        session.refresh_from_db()
        self.assertEqual(session.status, LiveSessionStatus.LIVE)

        response = self.client.post(reverse('live:session_action', args=[session.pk, 'start']), follow=True)
        self.assertContains(response, 'Only scheduled sessions can be started.')

        self.client.post(reverse('live:session_action', args=[session.pk, 'end']))
        session.refresh_from_db()
        self.assertEqual(session.status, LiveSessionStatus.ENDED)

    def test_session_list_source_filter(self):
        own = make_schedule(self.account, self.host, created_by=self.host)
        own_session = LiveSession.objects.create(
            platform_account=self.account, live_host=self.host, live_schedule=own,
            title='Own', scheduled_start_at=timezone.now(),
        )
        LiveSession.objects.create(
            platform_account=self.account, live_host=self.host,
            title='Assigned', scheduled_start_at=timezone.now(),
        )

        response = self.client.get(reverse('live:session_list'), {'source': 'self'})

        self.assertEqual(list(response.context['sessions']), [own_session])
        self.assertContains(response, 'Self-scheduled')
