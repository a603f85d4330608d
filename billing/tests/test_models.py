# billing/tests/test_models.py
from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase
from django.utils import timezone

from billing.models import Order, OrderItem
from users.models import User

from .helpers import make_bank_transfer


class OrderModelTest(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email='aisyah@example.com')

    def test_order_numbers_follow_daily_sequence(self):
        first = Order.objects.create(student=self.user, amount=Decimal('100'))
        second = Order.objects.create(student=self.user, amount=Decimal('100'))

        prefix = f"ORD{timezone.localdate():%Y%m%d}"
        self.assertEqual(first.order_number, f"{prefix}0001")
        self.assertEqual(second.order_number, f"{prefix}0002")

    def test_period_end_before_start_rejected(self):
        with self.assertRaises(ValidationError):
            Order.objects.create(
                student=self.user,
                amount=Decimal('100'),
                period_start=date(2024, 2, 1),
                period_end=date(2024, 1, 1),
            )

    def test_failed_then_paid_clears_failure(self):
        order = Order.objects.create(student=self.user, amount=Decimal('100'))
        order.mark_as_failed('Card declined')
        self.assertEqual(order.failure_message, 'Card declined')

        order.mark_as_paid()
        self.assertTrue(order.is_paid)
        self.assertIsNone(order.failure_reason)
        self.assertIsNone(order.failed_at)

    def test_item_total_computed(self):
        order = Order.objects.create(student=self.user, amount=Decimal('90'))
        item = OrderItem.objects.create(order=order, description='Books', quantity=3, unit_price=Decimal('30'))
        self.assertEqual(item.total_price, Decimal('90'))


class PaymentModelTest(TestCase):
    def test_invoice_amounts(self):
        payment = make_bank_transfer(amount=Decimal('100.00'), invoice_amount=Decimal('150.00'))
        invoice = payment.invoice

        self.assertTrue(invoice.invoice_number.startswith('INV-'))
        self.assertEqual(invoice.amount_paid, Decimal('0'))

        payment.status = 'succeeded'
        payment.save()

        self.assertEqual(invoice.amount_paid, Decimal('100.00'))
        self.assertEqual(invoice.amount_due, Decimal('50.00'))
        self.assertFalse(invoice.is_fully_paid)

    def test_badge_colors(self):
        payment = make_bank_transfer()
        self.assertEqual(payment.status_badge_color, 'amber')
        payment.status = 'failed'
        self.assertEqual(payment.status_badge_color, 'red')
        payment.status = 'refunded'
        self.assertEqual(payment.status_badge_color, 'gray')
