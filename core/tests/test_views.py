# core/tests/test_views.py
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse

from billing.models import Order, Payment
from users.models import User


class DashboardTest(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(email='admin@example.com', password='testpass123', role='admin')

    def test_login_required(self):
        response = self.client.get(reverse('home'))
        self.assertEqual(response.status_code, 302)
        self.assertIn('/accounts/login/', response.url)

    def test_admin_stats(self):
        student = User.objects.create_user(email='s@example.com', name='Student')
        Payment.objects.create(user=student, amount=Decimal('80'))
        order = Order.objects.create(student=student, amount=Decimal('120'))
        order.mark_as_paid()
        self.client.force_login(self.admin)

        response = self.client.get(reverse('home'))

        self.assertTemplateUsed(response, 'core/dashboard.html')
        self.assertEqual(response.context['stats']['pending_transfers'], 1)
        self.assertEqual(response.context['stats']['revenue_this_month'], Decimal('120'))

    def test_other_roles_get_welcome_page(self):
        self.client.force_login(User.objects.create_user(email='h@example.com', role='live_host'))

        response = self.client.get(reverse('home'))

        self.assertTemplateUsed(response, 'core/welcome.html')


class HealthCheckTest(TestCase):
    def test_healthy(self):
        response = self.client.get(reverse('health_check'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['database'], 'connected')
