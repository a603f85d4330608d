# billing/tests/test_views.py
from decimal import Decimal
from unittest import mock

from django.test import TestCase
from django.urls import reverse

from billing.models import Order
from shared.constants import PaymentStatus
from users.models import User

from .helpers import make_bank_transfer


class BankTransferViewTest(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(email='admin@example.com', password='testpass123', role='admin')
        self.client.force_login(self.admin)

    def test_list_defaults_to_current_month(self):
        payment = make_bank_transfer()

        response = self.client.get(reverse('billing:bank_transfer_list'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(list(response.context['payments']), [payment])
        self.assertEqual(response.context['sort_field'], 'created_at')
        self.assertEqual(response.context['direction'], 'desc')
        self.assertEqual(response.context['next_directions']['amount'], 'asc')

    def test_list_sorts_by_amount(self):
        large = make_bank_transfer(amount=Decimal('300.00'))
        small = make_bank_transfer(amount=Decimal('20.00'), email='b@example.com')

        response = self.client.get(reverse('billing:bank_transfer_list'), {'sort': 'amount'})

        self.assertEqual(list(response.context['payments']), [small, large])
        self.assertEqual(response.context['next_directions']['amount'], 'desc')

    def test_unknown_sort_field_falls_back(self):
        response = self.client.get(reverse('billing:bank_transfer_list'), {'sort': 'user__password'})
        self.assertEqual(response.context['sort_field'], 'created_at')

    def test_approve(self):
        payment = make_bank_transfer()

        response = self.client.post(reverse('billing:bank_transfer_approve', args=[payment.pk]), follow=True)

        self.assertRedirects(response, reverse('billing:bank_transfer_list'))
        self.assertContains(response, 'Bank transfer approved successfully and student has been notified.')
        payment.refresh_from_db()
        self.assertEqual(payment.status, PaymentStatus.SUCCEEDED)

    def test_reject_returns_to_detail(self):
        payment = make_bank_transfer()

        response = self.client.post(
            reverse('billing:bank_transfer_reject', args=[payment.pk]),
            {'reason': 'Blurry receipt', 'return_to': 'detail'},
        )

        self.assertRedirects(
            response,
            reverse('billing:payment_detail', args=[payment.pk]),
            fetch_redirect_response=False,
        )
        payment.refresh_from_db()
        self.assertEqual(payment.failure_message, 'Blurry receipt')

    def test_reject_reason_too_long(self):
        payment = make_bank_transfer()

        self.client.post(reverse('billing:bank_transfer_reject', args=[payment.pk]), {'reason': 'x' * 501})

        payment.refresh_from_db()
        self.assertEqual(payment.status, PaymentStatus.PENDING)

    def test_approve_already_reviewed_shows_error(self):
        payment = make_bank_transfer(status=PaymentStatus.FAILED)

        response = self.client.post(reverse('billing:bank_transfer_approve', args=[payment.pk]), follow=True)

        self.assertContains(response, 'Only pending payments can be approved.')

    def test_receipt_only_for_succeeded_payments(self):
        payment = make_bank_transfer()

        response = self.client.get(reverse('billing:payment_receipt', args=[payment.pk]))
        self.assertRedirects(
            response,
            reverse('billing:payment_detail', args=[payment.pk]),
            fetch_redirect_response=False,
        )

        payment.status = PaymentStatus.SUCCEEDED
        payment.save()
        with mock.patch('billing.views.ReceiptService.build_payment_receipt', return_value=b'%PDF-1.4'):
            response = self.client.get(reverse('billing:payment_receipt', args=[payment.pk]))

        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertEqual(response.content, b'%PDF-1.4')

    def test_non_admin_redirected(self):
        student = User.objects.create_user(email='s@example.com', password='x', role='student')
        self.client.force_login(student)

        response = self.client.get(reverse('billing:bank_transfer_list'))

        self.assertRedirects(response, reverse('home'), fetch_redirect_response=False)


class OrderViewTest(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(email='admin@example.com', password='testpass123', role='admin')
        self.client.force_login(self.admin)
        self.student = User.objects.create_user(email='aisyah@example.com', name='Nur Aisyah')

    def test_list_search_and_stats(self):
        order = Order.objects.create(student=self.student, amount=Decimal('100'), status='paid')
        Order.objects.create(student=User.objects.create_user(email='other@example.com', name='Other'), amount=Decimal('5'))

        response = self.client.get(reverse('billing:order_list'), {'search': 'aisyah'})

        self.assertEqual(list(response.context['orders']), [order])
        self.assertEqual(response.context['stats']['total_orders'], 2)
        self.assertEqual(response.context['stats']['total_revenue'], Decimal('100'))

    def test_mark_paid_and_failed(self):
        order = Order.objects.create(student=self.student, amount=Decimal('100'))

        self.client.post(reverse('billing:order_mark_failed', args=[order.pk]), {'reason': 'No transfer'})
        order.refresh_from_db()
        self.assertEqual(order.failure_message, 'No transfer')

        self.client.post(reverse('billing:order_mark_paid', args=[order.pk]))
        order.refresh_from_db()
        self.assertTrue(order.is_paid)

    def test_detail_renders_items(self):
        order = Order.objects.create(student=self.student, amount=Decimal('100'))

        response = self.client.get(reverse('billing:order_detail', args=[order.pk]))

        self.assertContains(response, order.order_number)

    def test_order_receipt_is_pdf(self):
        order = Order.objects.create(student=self.student, amount=Decimal('100'), status='paid')

        response = self.client.get(reverse('billing:order_receipt', args=[order.pk]))

        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertTrue(response.content.startswith(b'%PDF'))
