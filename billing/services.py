# billing/services.py
"""
Billing services: bank transfer review and manual enrollment orders.
"""
import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone

from core.exceptions import PaymentReviewError
from shared.constants import (
    DEFAULT_CURRENCY,
    BillingCycles,
    BillingReasons,
    OrderStatus,
    PaymentStatus,
    PaymentTypes,
)
from shared.services.email import EmailService
from shared.utils import add_months

from .models import Order, OrderItem, Payment

logger = logging.getLogger(__name__)

DEFAULT_REJECTION_REASON = "Bank transfer verification failed"


def _stamp():
    return timezone.localtime().strftime('%Y-%m-%d %H:%M:%S')


def _append_note(notes, text):
    return f"{notes}\n\n{text}" if notes else text


class BankTransferService:
    """Approve, reject and refund bank transfer payments."""

    @staticmethod
    @transaction.atomic
    def approve(payment, user):
        if not payment.is_pending:
            raise PaymentReviewError("Only pending payments can be approved.", user_friendly=True)

        now = timezone.now()
        payment.status = PaymentStatus.SUCCEEDED
        payment.paid_at = now
        payment.approved_at = now
        payment.approved_by = user
        payment.notes = (payment.notes or '') + f"\n\nApproved by: {user.display_name} on {_stamp()}"
        payment.save()

        invoice = payment.invoice
        if invoice and invoice.is_fully_paid:
            invoice.mark_as_paid()
            logger.info(f"Invoice {invoice.invoice_number} marked as paid after bank transfer approval")

        logger.info(f"Bank transfer {payment.pk} approved by user {user.pk}")

        transaction.on_commit(lambda: BankTransferService._notify_approved(payment))
        return payment

    @staticmethod
    @transaction.atomic
    def reject(payment, user, reason=None):
        if not payment.is_pending:
            raise PaymentReviewError("Only pending payments can be rejected.", user_friendly=True)

        reason = (reason or '').strip() or DEFAULT_REJECTION_REASON
        payment.status = PaymentStatus.FAILED
        payment.failed_at = timezone.now()
        payment.failure_reason = {'reason': reason}
        payment.notes = _append_note(
            payment.notes, f"Rejected by: {user.display_name} on {_stamp()}\nReason: {reason}"
        )
        payment.save()

        logger.info(f"Bank transfer {payment.pk} rejected by user {user.pk}: {reason}")

        transaction.on_commit(lambda: BankTransferService._notify_rejected(payment, reason))
        return payment

    @staticmethod
    @transaction.atomic
    def refund(payment, user, note=None):
        if not (payment.is_bank_transfer and payment.is_succeeded):
            raise PaymentReviewError("Only approved bank transfers can be refunded.", user_friendly=True)

        payment.status = PaymentStatus.REFUNDED
        payment.refunded_at = timezone.now()
        text = f"Refunded by: {user.display_name} on {_stamp()}"
        if note:
            text += f"\nNote: {note.strip()}"
        payment.notes = _append_note(payment.notes, text)
        payment.save()

        logger.info(f"Bank transfer {payment.pk} refunded by user {user.pk}")
        return payment

    @staticmethod
    def _notify_approved(payment):
        try:
            EmailService.send_payment_confirmation(payment)
        except Exception as e:
            logger.warning(f"Payment confirmation email failed for payment {payment.pk}: {e}")

    @staticmethod
    def _notify_rejected(payment, reason):
        try:
            EmailService.send_payment_failed(payment, reason)
        except Exception as e:
            logger.warning(f"Payment failed email failed for payment {payment.pk}: {e}")

    @staticmethod
    def statistics(queryset=None):
        queryset = Payment.objects.filter(payment_type=PaymentTypes.BANK_TRANSFER) if queryset is None else queryset
        stats = queryset.aggregate(
            total=Count('id'),
            pending=Count('id', filter=Q(status=PaymentStatus.PENDING)),
            approved=Count('id', filter=Q(status=PaymentStatus.SUCCEEDED)),
            rejected=Count('id', filter=Q(status=PaymentStatus.FAILED)),
            total_amount=Sum('amount', filter=Q(status=PaymentStatus.SUCCEEDED)),
        )
        stats['total_amount'] = stats['total_amount'] or Decimal('0')
        return stats


class OrderService:
    """Orders created by the back office."""

    @staticmethod
    def billing_period(start, billing_cycle):
        """(start, end) for one billing cycle; unknown cycles last a year."""
        return start, add_months(start, BillingCycles.MONTHS.get(billing_cycle, 12))

    @staticmethod
    @transaction.atomic
    def create_manual_order(enrollment):
        """First pending order for an enrollment that is paid outside the gateway."""
        course = enrollment.course
        fee_settings = course.fee_settings_or_none
        amount = enrollment.enrollment_fee if enrollment.enrollment_fee is not None else course.fee_amount

        period_start, period_end = OrderService.billing_period(
            enrollment.start_date or enrollment.enrollment_date,
            fee_settings.billing_cycle if fee_settings else None,
        )

        order = Order.objects.create(
            enrollment=enrollment,
            student=enrollment.student.user,
            course=course,
            amount=amount,
            currency=DEFAULT_CURRENCY,
            status=OrderStatus.PENDING,
            billing_reason=BillingReasons.MANUAL,
            payment_method=PaymentTypes.MANUAL,
            period_start=period_start,
            period_end=period_end,
        )
        OrderItem.objects.create(
            order=order,
            description=f"Course Fee - {course.name}",
            quantity=1,
            unit_price=amount,
            total_price=amount,
        )

        logger.info(f"Manual order {order.order_number} created for enrollment {enrollment.pk}")
        return order

    @staticmethod
    def mark_paid(order):
        if order.is_paid:
            raise PaymentReviewError("Order is already paid.", user_friendly=True)
        order.mark_as_paid()
        logger.info(f"Order {order.order_number} marked as paid")
        return order

    @staticmethod
    def mark_failed(order, reason=None):
        if order.is_paid:
            raise PaymentReviewError("Paid orders cannot be marked as failed.", user_friendly=True)
        order.mark_as_failed(reason or None)
        logger.info(f"Order {order.order_number} marked as failed")
        return order

    @staticmethod
    def statistics():
        stats = Order.objects.aggregate(
            total_revenue=Sum('amount', filter=Q(status=OrderStatus.PAID)),
            total_orders=Count('id'),
            failed_orders=Count('id', filter=Q(status=OrderStatus.FAILED)),
        )
        stats['total_revenue'] = stats['total_revenue'] or Decimal('0')
        return stats
