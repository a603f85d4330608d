# site_settings/tests/test_views.py
from unittest import mock

from django.core import mail
from django.test import TestCase
from django.urls import reverse

from shared.constants import SettingTypes
from shared.exceptions.shipping import ShippingConfigurationError
from site_settings.services import SettingsService
from users.models import User

from .helpers import SettingsCacheMixin


class SettingsViewTest(SettingsCacheMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.admin = User.objects.create_user(email='admin@example.com', password='testpass123', role='admin')
        self.client.force_login(self.admin)

    def test_general_saves(self):
        response = self.client.post(reverse('settings:general'), {
            'site_name': 'Mudeer Academy',
            'site_description': 'Quran classes',
            'admin_email': 'office@example.com',
            'timezone': 'Asia/Kuala_Lumpur',
            'date_format': 'd/m/Y',
        })

        self.assertRedirects(response, reverse('settings:general'), fetch_redirect_response=False)
        self.assertEqual(SettingsService.get('site_name'), 'Mudeer Academy')

    def test_general_initial_from_store(self):
        SettingsService.set('site_name', 'Stored Name')
        response = self.client.get(reverse('settings:general'))
        self.assertEqual(response.context['form'].initial['site_name'], 'Stored Name')

    def test_appearance_rejects_bad_colour(self):
        response = self.client.post(reverse('settings:appearance'), {
            'primary_color': 'blue',
            'secondary_color': '#10B981',
        })

        self.assertEqual(response.status_code, 200)
        self.assertIn('primary_color', response.context['form'].errors)

    def email_data(self, **overrides):
        data = {
            'from_address': 'noreply@mudeer.my',
            'from_name': 'Mudeer',
            'smtp_host': '',
            'smtp_port': '587',
            'smtp_username': 'mailer',
            'smtp_password': '',
            'smtp_encryption': 'tls',
        }
        data.update(overrides)
        return data

    def test_blank_password_keeps_stored_one(self):
        SettingsService.set('smtp_password', 'keep-me', SettingTypes.ENCRYPTED, 'email')

        self.client.post(reverse('settings:email'), self.email_data())

        self.assertEqual(SettingsService.get('smtp_password'), 'keep-me')
        self.assertEqual(SettingsService.get('smtp_username'), 'mailer')
        self.assertEqual(SettingsService.get('smtp_port'), 587)

    def test_new_password_replaces_stored_one(self):
        SettingsService.set('smtp_password', 'old', SettingTypes.ENCRYPTED, 'email')
        self.client.post(reverse('settings:email'), self.email_data(smtp_password='new'))
        self.assertEqual(SettingsService.get('smtp_password'), 'new')

    def test_send_test_email(self):
        response = self.client.post(reverse('settings:send_test_email'), {'test_email': 'me@example.com'}, follow=True)

        self.assertContains(response, 'Test email sent to me@example.com.')
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['me@example.com'])

    def test_send_test_email_failure_is_reported(self):
        with mock.patch('site_settings.views.EmailService.send_test_email', side_effect=OSError('refused')):
            response = self.client.post(
                reverse('settings:send_test_email'), {'test_email': 'me@example.com'}, follow=True
            )

        self.assertContains(response, 'Failed to send test email: refused')

    def test_bank_details_required_when_enabled(self):
        response = self.client.post(reverse('settings:bank'), {'enable_bank_transfers': 'on'})

        self.assertEqual(response.status_code, 200)
        form = response.context['form']
        self.assertEqual(set(form.errors), {'bank_name', 'account_name', 'account_number'})
        self.assertFalse(SettingsService.is_bank_transfer_enabled())

    def test_bank_saves(self):
        self.client.post(reverse('settings:bank'), {
            'bank_name': 'Maybank',
            'account_name': 'Mudeer Bedaie Sdn Bhd',
            'account_number': '5123 4567 8901',
            'enable_bank_transfers': 'on',
        })

        self.assertTrue(SettingsService.is_bank_transfer_enabled())
        self.assertEqual(SettingsService.get_bank_details()['account_number'], '5123 4567 8901')

    def test_pricing_tiers(self):
        self.client.post(reverse('settings:pricing'), {
            'tier_discount_standard': '5',
            'tier_discount_premium': '12.5',
            'tier_discount_vip': '25',
        })

        self.assertEqual(SettingsService.get_pricing_tiers(), {'standard': 5, 'premium': 12.5, 'vip': 25})

    def shipping_data(self, **overrides):
        data = {
            'jnt_customer_code': 'ITTEST0001',
            'jnt_private_key': 'private',
            'jnt_password': '',
            'jnt_sandbox': 'on',
            'jnt_default_service_type': 'EZ',
        }
        data.update(overrides)
        return data

    def test_shipping_connection_success(self):
        with mock.patch('site_settings.views.JntShippingService') as service:
            service.return_value.test_connection.return_value = True
            response = self.client.post(reverse('settings:test_shipping_connection'), self.shipping_data(), follow=True)

        self.assertContains(response, 'Successfully connected to J&amp;T Express.')
        self.assertTrue(SettingsService.is_jnt_configured())

    def test_shipping_connection_needs_credentials(self):
        response = self.client.post(
            reverse('settings:test_shipping_connection'), self.shipping_data(jnt_private_key=''), follow=True
        )

        self.assertContains(response, 'Customer code and private key are required to test the connection.')

    def test_shipping_connection_configuration_error(self):
        with mock.patch(
            'site_settings.views.JntShippingService',
            side_effect=ShippingConfigurationError('not configured'),
        ):
            response = self.client.post(reverse('settings:test_shipping_connection'), self.shipping_data(), follow=True)

        self.assertContains(response, 'Could not connect to J&amp;T Express.')

    def test_teacher_cannot_open_settings(self):
        teacher = User.objects.create_user(email='t@example.com', password='x', role='teacher')
        self.client.force_login(teacher)

        response = self.client.get(reverse('settings:general'))

        self.assertRedirects(response, reverse('home'), fetch_redirect_response=False)
