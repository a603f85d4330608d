# funnels/tests/test_views.py
from datetime import timedelta

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from funnels.models import Funnel, FunnelAnalytics
from shared.constants import FunnelStatus
from users.models import User


class FunnelViewTest(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(email='admin@example.com', password='testpass123', role='admin')
        self.client.force_login(self.admin)
        self.funnel = Funnel.objects.create(name='Ramadan Promo')

    def test_list_status_filter(self):
        published = Funnel.objects.create(name='Live Funnel', status=FunnelStatus.PUBLISHED)

        response = self.client.get(reverse('funnels:funnel_list'), {'status': 'published'})

        self.assertEqual(list(response.context['funnels']), [published])

    def test_detail_uses_requested_period(self):
        response = self.client.get(reverse('funnels:funnel_detail', args=[self.funnel.pk]), {'period': '30d'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['period'], '30d')
        self.assertEqual(response.context['summary']['period'], '30d')

    def test_publish_action(self):
        response = self.client.post(reverse('funnels:funnel_action', args=[self.funnel.pk, 'publish']))

        self.assertRedirects(
            response, reverse('funnels:funnel_detail', args=[self.funnel.pk]), fetch_redirect_response=False
        )
        self.funnel.refresh_from_db()
        self.assertTrue(self.funnel.is_published)

    def test_unknown_action_changes_nothing(self):
        self.client.post(reverse('funnels:funnel_action', args=[self.funnel.pk, 'delete']))
        self.assertTrue(Funnel.objects.filter(pk=self.funnel.pk, status=FunnelStatus.DRAFT).exists())

    def test_duplicate_redirects_to_copy(self):
        response = self.client.post(reverse('funnels:funnel_duplicate', args=[self.funnel.pk]), {'name': 'Raya Promo'})

        copy = Funnel.objects.get(name='Raya Promo')
        self.assertRedirects(response, reverse('funnels:funnel_detail', args=[copy.pk]), fetch_redirect_response=False)


class FunnelChartApiTest(TestCase):
    def setUp(self):
        self.api = APIClient()
        self.funnel = Funnel.objects.create(name='Ramadan Promo')
        today = timezone.localdate()
        FunnelAnalytics.objects.create(funnel=self.funnel, date=today - timedelta(days=1), unique_visitors=30, conversions=3)
        FunnelAnalytics.objects.create(funnel=self.funnel, date=today - timedelta(days=60), unique_visitors=5)

    def test_admin_gets_points(self):
        admin = User.objects.create_user(email='admin@example.com', password='x', role='admin')
        self.api.force_authenticate(admin)

        response = self.api.get(reverse('funnels:funnel_chart_api', args=[self.funnel.pk]), {'period': '30d'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['period'], '30d')
        self.assertEqual(len(response.data['data']), 1)
        self.assertEqual(response.data['data'][0]['visitors'], 30)

    def test_non_admin_forbidden(self):
        student = User.objects.create_user(email='s@example.com', password='x', role='student')
        self.api.force_authenticate(student)

        response = self.api.get(reverse('funnels:funnel_chart_api', args=[self.funnel.pk]))

        self.assertEqual(response.status_code, 403)
