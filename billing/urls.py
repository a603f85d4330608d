# billing/urls.py
from django.urls import path

from . import views

app_name = 'billing'

urlpatterns = [
    path('', views.payments_dashboard_view, name='dashboard'),

    # Bank transfers
    path('bank-transfers/', views.bank_transfer_list_view, name='bank_transfer_list'),
    path('bank-transfers/<int:payment_id>/approve/', views.bank_transfer_approve_view, name='bank_transfer_approve'),
    path('bank-transfers/<int:payment_id>/reject/', views.bank_transfer_reject_view, name='bank_transfer_reject'),

    # Payments
    path('payments/<int:payment_id>/', views.payment_detail_view, name='payment_detail'),
    path('payments/<int:payment_id>/refund/', views.payment_refund_view, name='payment_refund'),
    path('payments/<int:payment_id>/receipt/', views.payment_receipt_view, name='payment_receipt'),

    # Orders
    path('orders/', views.order_list_view, name='order_list'),
    path('orders/<int:order_id>/', views.order_detail_view, name='order_detail'),
    path('orders/<int:order_id>/mark-paid/', views.order_mark_paid_view, name='order_mark_paid'),
    path('orders/<int:order_id>/mark-failed/', views.order_mark_failed_view, name='order_mark_failed'),
    path('orders/<int:order_id>/receipt/', views.order_receipt_view, name='order_receipt'),
]
