# billing/admin.py
from django.contrib import admin
from django.utils.html import format_html

from .models import Invoice, Order, OrderItem, Payment

BADGE_COLORS = {
    'emerald': '#10B981',
    'red': '#EF4444',
    'amber': '#F59E0B',
    'gray': '#6B7280',
}


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ['invoice_number', 'student', 'course', 'amount', 'status', 'due_date', 'paid_at']
    list_filter = ['status', 'due_date']
    search_fields = ['invoice_number', 'student__user__name', 'student__user__email']
    raw_id_fields = ['student', 'course']
    readonly_fields = ['invoice_number', 'created_at', 'updated_at']


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'amount', 'payment_type', 'status_badge', 'created_at']
    list_filter = ['payment_type', 'status', 'created_at']
    search_fields = ['reference', 'user__name', 'user__email', 'invoice__invoice_number']
    raw_id_fields = ['user', 'invoice', 'approved_by']
    readonly_fields = ['created_at', 'updated_at', 'approved_at', 'refunded_at', 'failed_at', 'paid_at']

    fieldsets = (
        ('Payment', {
            'fields': ('user', 'invoice', 'amount', 'currency', 'payment_type', 'status', 'reference')
        }),
        ('Bank Transfer', {
            'fields': ('transfer_proof', 'notes', 'failure_reason')
        }),
        ('Review', {
            'fields': ('approved_by', 'approved_at', 'paid_at', 'failed_at', 'refunded_at'),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def status_badge(self, obj):
        return format_html(
            '<span style="color: white; background-color: {}; padding: 2px 8px; border-radius: 3px;">{}</span>',
            BADGE_COLORS.get(obj.status_badge_color, BADGE_COLORS['gray']),
            obj.get_status_display(),
        )
    status_badge.short_description = 'Status'


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['order_number', 'student', 'course', 'amount', 'status', 'billing_reason', 'created_at']
    list_filter = ['status', 'billing_reason', 'payment_method']
    search_fields = ['order_number', 'student__name', 'student__email', 'course__name']
    raw_id_fields = ['student', 'course', 'enrollment']
    readonly_fields = ['order_number', 'created_at', 'updated_at']
    inlines = [OrderItemInline]
