# billing/tests/test_services.py
from decimal import Decimal
from unittest import mock

from django.core import mail
from django.test import TestCase

from billing.models import Order
from billing.services import DEFAULT_REJECTION_REASON, BankTransferService, OrderService
from core.exceptions import PaymentReviewError
from shared.constants import InvoiceStatus, OrderStatus, PaymentStatus
from users.models import User

from .helpers import make_bank_transfer


class BankTransferServiceTest(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(email='admin@example.com', name='Admin Siti', role='admin')

    def test_approve_marks_payment_and_invoice_paid(self):
        payment = make_bank_transfer()

        with self.captureOnCommitCallbacks(execute=True):
            BankTransferService.approve(payment, self.admin)

        payment.refresh_from_db()
        self.assertEqual(payment.status, PaymentStatus.SUCCEEDED)
        self.assertEqual(payment.approved_by, self.admin)
        self.assertIsNotNone(payment.paid_at)
        self.assertIn('Approved by: Admin Siti on', payment.notes)
        self.assertEqual(payment.invoice.status, InvoiceStatus.PAID)

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['aisyah@example.com'])
        self.assertIn('Payment Confirmed', mail.outbox[0].subject)

    def test_partial_payment_leaves_invoice_open(self):
        payment = make_bank_transfer(amount=Decimal('50.00'), invoice_amount=Decimal('150.00'))

        BankTransferService.approve(payment, self.admin)

        payment.invoice.refresh_from_db()
        self.assertNotEqual(payment.invoice.status, InvoiceStatus.PAID)

    def test_approve_non_pending_refused(self):
        payment = make_bank_transfer(status=PaymentStatus.FAILED)

        with self.assertRaises(PaymentReviewError) as ctx:
            BankTransferService.approve(payment, self.admin)
        self.assertEqual(ctx.exception.message, 'Only pending payments can be approved.')

    def test_reject_records_reason_and_notifies(self):
        payment = make_bank_transfer(notes='Uploaded receipt')

        with self.captureOnCommitCallbacks(execute=True):
            BankTransferService.reject(payment, self.admin, 'Amount does not match')

        payment.refresh_from_db()
        self.assertEqual(payment.status, PaymentStatus.FAILED)
        self.assertEqual(payment.failure_message, 'Amount does not match')
        self.assertTrue(payment.notes.startswith('Uploaded receipt\n\nRejected by: Admin Siti on'))
        self.assertIn('Reason: Amount does not match', payment.notes)
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn('Amount does not match', mail.outbox[0].body)

    def test_reject_without_reason_uses_default(self):
        payment = make_bank_transfer()

        BankTransferService.reject(payment, self.admin, '   ')

        self.assertEqual(payment.failure_message, DEFAULT_REJECTION_REASON)

    def test_email_failure_does_not_undo_approval(self):
        payment = make_bank_transfer()

        with mock.patch(
            'billing.services.EmailService.send_payment_confirmation',
            side_effect=ConnectionError('SMTP down'),
        ):
            with self.captureOnCommitCallbacks(execute=True):
                BankTransferService.approve(payment, self.admin)

        payment.refresh_from_db()
        self.assertEqual(payment.status, PaymentStatus.SUCCEEDED)

    def test_refund_only_after_approval(self):
        payment = make_bank_transfer()

        with self.assertRaises(PaymentReviewError):
            BankTransferService.refund(payment, self.admin)

        BankTransferService.approve(payment, self.admin)
        BankTransferService.refund(payment, self.admin, 'Student withdrew')

        payment.refresh_from_db()
        self.assertEqual(payment.status, PaymentStatus.REFUNDED)
        self.assertIsNotNone(payment.refunded_at)
        self.assertIn('Note: Student withdrew', payment.notes)

    def test_statistics(self):
        make_bank_transfer(amount=Decimal('100.00'), status=PaymentStatus.SUCCEEDED)
        make_bank_transfer(email='b@example.com')
        make_bank_transfer(email='c@example.com', status=PaymentStatus.FAILED)

        stats = BankTransferService.statistics()

        self.assertEqual(stats['total'], 3)
        self.assertEqual(stats['pending'], 1)
        self.assertEqual(stats['approved'], 1)
        self.assertEqual(stats['rejected'], 1)
        self.assertEqual(stats['total_amount'], Decimal('100.00'))


class OrderServiceTest(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email='aisyah@example.com')

    def test_billing_period(self):
        from datetime import date

        self.assertEqual(OrderService.billing_period(date(2024, 1, 31), 'monthly'), (date(2024, 1, 31), date(2024, 2, 29)))
        self.assertEqual(OrderService.billing_period(date(2024, 1, 15), 'quarterly')[1], date(2024, 4, 15))
        self.assertEqual(OrderService.billing_period(date(2024, 1, 15), None)[1], date(2025, 1, 15))

    def test_mark_paid_twice_refused(self):
        order = Order.objects.create(student=self.user, amount=Decimal('100'))
        OrderService.mark_paid(order)

        with self.assertRaises(PaymentReviewError):
            OrderService.mark_paid(order)
        with self.assertRaises(PaymentReviewError):
            OrderService.mark_failed(order, 'late')

    def test_statistics(self):
        Order.objects.create(student=self.user, amount=Decimal('100'), status=OrderStatus.PAID)
        Order.objects.create(student=self.user, amount=Decimal('40'), status=OrderStatus.FAILED)
        Order.objects.create(student=self.user, amount=Decimal('60'))

        stats = OrderService.statistics()

        self.assertEqual(stats['total_revenue'], Decimal('100'))
        self.assertEqual(stats['total_orders'], 3)
        self.assertEqual(stats['failed_orders'], 1)
