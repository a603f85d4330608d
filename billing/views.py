# billing/views.py
"""
Order and payment review views, including bank transfer approval.
"""
import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.paginator import Paginator
from django.db.models import Count, Q, Sum
from django.http import HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from core.decorators import admin_required
from core.exceptions import PaymentReviewError
from courses.models import Course
from shared.constants import OrderStatus, PaymentStatus, PaymentTypes
from shared.exceptions.payment import ReceiptGenerationError
from shared.services.receipts import ReceiptService
from shared.utils import current_month, date_range_filter

from .forms import OrderFailForm, PaymentRefundForm, PaymentRejectForm
from .models import Order, Payment
from .services import BankTransferService, OrderService

logger = logging.getLogger(__name__)

BANK_TRANSFER_SORT_FIELDS = ('created_at', 'amount', 'status', 'paid_at')
ORDER_SORT_FIELDS = ('created_at', 'order_number', 'amount', 'status', 'paid_at')


def get_sorting(request, allowed, default='created_at'):
    """
    Read sort/direction from the query string.

    Returns (sort_field, direction, order_by, next_directions) where
    next_directions maps each sortable field to the direction its header
    link should request: the current field toggles, any other field
    starts ascending.
    """
    sort_field = request.GET.get('sort', default)
    if sort_field not in allowed:
        sort_field = default

    direction = request.GET.get('direction', 'desc' if sort_field == default else 'asc')
    if direction not in ('asc', 'desc'):
        direction = 'asc'

    order_by = sort_field if direction == 'asc' else f"-{sort_field}"
    next_directions = {
        field: ('desc' if direction == 'asc' else 'asc') if field == sort_field else 'asc'
        for field in allowed
    }
    return sort_field, direction, order_by, next_directions


def pdf_response(content, filename):
    response = HttpResponse(content, content_type='application/pdf')
    response['Content-Disposition'] = f'inline; filename="{filename}"'
    return response


# ============ PAYMENTS DASHBOARD ============

@login_required
@admin_required
def payments_dashboard_view(request):
    status_totals = {
        row['status']: row
        for row in Payment.objects.values('status').annotate(count=Count('id'), total=Sum('amount'))
    }
    status_summary = [
        {
            'status': status,
            'label': label,
            'count': status_totals.get(status, {}).get('count', 0),
            'total': status_totals.get(status, {}).get('total') or 0,
        }
        for status, label in PaymentStatus.CHOICES
    ]

    context = {
        'status_summary': status_summary,
        'bank_transfer_stats': BankTransferService.statistics(),
        'order_stats': OrderService.statistics(),
        'recent_payments': Payment.objects.select_related('user', 'invoice')[:10],
        'page_title': 'Payments',
    }
    return render(request, 'billing/payments_dashboard.html', context)


# ============ BANK TRANSFERS ============

@login_required
@admin_required
def bank_transfer_list_view(request):
    payments = Payment.objects.filter(
        payment_type=PaymentTypes.BANK_TRANSFER
    ).select_related('user', 'invoice', 'approved_by')

    search_query = request.GET.get('search', '').strip()
    status_filter = request.GET.get('status', '')
    date_range = request.GET.get('date_range', current_month())

    if search_query:
        payments = payments.filter(
            Q(user__name__icontains=search_query) |
            Q(user__email__icontains=search_query) |
            Q(invoice__invoice_number__icontains=search_query)
        )
    if status_filter:
        payments = payments.filter(status=status_filter)

    bounds = date_range_filter(date_range)
    if bounds:
        payments = payments.filter(created_at__date__range=bounds)

    sort_field, direction, order_by, next_directions = get_sorting(request, BANK_TRANSFER_SORT_FIELDS)
    payments = payments.order_by(order_by)

    page_obj = Paginator(payments, 20).get_page(request.GET.get('page'))

    context = {
        'payments': page_obj,
        'page_obj': page_obj,
        'stats': BankTransferService.statistics(),
        'search_query': search_query,
        'status_filter': status_filter,
        'date_range': date_range,
        'sort_field': sort_field,
        'direction': direction,
        'next_directions': next_directions,
        'status_choices': PaymentStatus.CHOICES,
        'reject_form': PaymentRejectForm(),
        'page_title': 'Bank Transfers',
    }
    return render(request, 'billing/bank_transfer_list.html', context)


def _review_redirect(request, payment):
    if request.POST.get('return_to') == 'detail':
        return redirect('billing:payment_detail', payment_id=payment.pk)
    return redirect('billing:bank_transfer_list')


@login_required
@admin_required
@require_POST
def bank_transfer_approve_view(request, payment_id):
    payment = get_object_or_404(Payment, pk=payment_id, payment_type=PaymentTypes.BANK_TRANSFER)

    try:
        BankTransferService.approve(payment, request.user)
        messages.success(request, "Bank transfer approved successfully and student has been notified.")
    except PaymentReviewError as e:
        messages.error(request, e.message)

    return _review_redirect(request, payment)


@login_required
@admin_required
@require_POST
def bank_transfer_reject_view(request, payment_id):
    payment = get_object_or_404(Payment, pk=payment_id, payment_type=PaymentTypes.BANK_TRANSFER)
    form = PaymentRejectForm(request.POST)

    if not form.is_valid():
        messages.error(request, "Rejection reason must be 500 characters or fewer.")
        return _review_redirect(request, payment)

    try:
        BankTransferService.reject(payment, request.user, form.cleaned_data.get('reason'))
        messages.success(request, "Bank transfer rejected and student has been notified.")
    except PaymentReviewError as e:
        messages.error(request, e.message)

    return _review_redirect(request, payment)


# ============ PAYMENT DETAIL ============

@login_required
@admin_required
def payment_detail_view(request, payment_id):
    payment = get_object_or_404(
        Payment.objects.select_related('user', 'invoice', 'approved_by'), pk=payment_id
    )

    context = {
        'payment': payment,
        'can_review': payment.is_bank_transfer and payment.is_pending,
        'can_refund': payment.is_bank_transfer and payment.is_succeeded,
        'reject_form': PaymentRejectForm(),
        'refund_form': PaymentRefundForm(),
        'page_title': f"Payment #{payment.pk}",
    }
    return render(request, 'billing/payment_detail.html', context)


@login_required
@admin_required
@require_POST
def payment_refund_view(request, payment_id):
    payment = get_object_or_404(Payment, pk=payment_id)
    form = PaymentRefundForm(request.POST)

    if form.is_valid():
        try:
            BankTransferService.refund(payment, request.user, form.cleaned_data.get('note'))
            messages.success(request, "Payment marked as refunded.")
        except PaymentReviewError as e:
            messages.error(request, e.message)
    else:
        messages.error(request, "Refund note must be 500 characters or fewer.")

    return redirect('billing:payment_detail', payment_id=payment.pk)


@login_required
@admin_required
def payment_receipt_view(request, payment_id):
    payment = get_object_or_404(Payment.objects.select_related('user', 'invoice'), pk=payment_id)

    if not payment.is_succeeded:
        messages.error(request, "Receipts are only available for successful payments.")
        return redirect('billing:payment_detail', payment_id=payment.pk)

    try:
        content = ReceiptService.build_payment_receipt(payment)
    except ReceiptGenerationError as e:
        messages.error(request, e.message)
        return redirect('billing:payment_detail', payment_id=payment.pk)

    return pdf_response(content, f"receipt-payment-{payment.pk}.pdf")


# ============ ORDERS ============

@login_required
@admin_required
def order_list_view(request):
    orders = Order.objects.select_related('student', 'course', 'enrollment')

    search_query = request.GET.get('search', '').strip()
    status_filter = request.GET.get('status', '')
    course_filter = request.GET.get('course', '')
    student_filter = request.GET.get('student', '')

    if search_query:
        orders = orders.filter(
            Q(order_number__icontains=search_query) |
            Q(student__name__icontains=search_query) |
            Q(student__email__icontains=search_query) |
            Q(course__name__icontains=search_query)
        )
    if status_filter:
        orders = orders.filter(status=status_filter)
    if course_filter.isdigit():
        orders = orders.filter(course_id=course_filter)
    if student_filter.isdigit():
        orders = orders.filter(student_id=student_filter)

    sort_field, direction, order_by, next_directions = get_sorting(request, ORDER_SORT_FIELDS)
    orders = orders.order_by(order_by)

    page_obj = Paginator(orders, 15).get_page(request.GET.get('page'))

    context = {
        'orders': page_obj,
        'page_obj': page_obj,
        'stats': OrderService.statistics(),
        'courses': Course.objects.order_by('name'),
        'search_query': search_query,
        'status_filter': status_filter,
        'course_filter': course_filter,
        'student_filter': student_filter,
        'sort_field': sort_field,
        'direction': direction,
        'next_directions': next_directions,
        'status_choices': OrderStatus.CHOICES,
        'page_title': 'Orders',
    }
    return render(request, 'billing/order_list.html', context)


@login_required
@admin_required
def order_detail_view(request, order_id):
    order = get_object_or_404(
        Order.objects.select_related('student', 'course', 'enrollment').prefetch_related('items'),
        pk=order_id,
    )

    context = {
        'order': order,
        'items': order.items.all(),
        'fail_form': OrderFailForm(),
        'page_title': f"Order {order.order_number}",
    }
    return render(request, 'billing/order_detail.html', context)


@login_required
@admin_required
@require_POST
def order_mark_paid_view(request, order_id):
    order = get_object_or_404(Order, pk=order_id)

    try:
        OrderService.mark_paid(order)
        messages.success(request, f"Order {order.order_number} marked as paid.")
    except PaymentReviewError as e:
        messages.error(request, e.message)

    return redirect('billing:order_detail', order_id=order.pk)


@login_required
@admin_required
@require_POST
def order_mark_failed_view(request, order_id):
    order = get_object_or_404(Order, pk=order_id)
    form = OrderFailForm(request.POST)

    if form.is_valid():
        try:
            OrderService.mark_failed(order, form.cleaned_data.get('reason'))
            messages.success(request, f"Order {order.order_number} marked as failed.")
        except PaymentReviewError as e:
            messages.error(request, e.message)
    else:
        messages.error(request, "Failure reason must be 500 characters or fewer.")

    return redirect('billing:order_detail', order_id=order.pk)


@login_required
@admin_required
def order_receipt_view(request, order_id):
    order = get_object_or_404(Order.objects.select_related('student', 'course'), pk=order_id)

    try:
        content = ReceiptService.build_order_receipt(order)
    except ReceiptGenerationError as e:
        messages.error(request, e.message)
        return redirect('billing:order_detail', order_id=order.pk)

    return pdf_response(content, f"receipt-{order.order_number}.pdf")
