# funnels/admin.py
from django.contrib import admin

from .models import Funnel, FunnelAnalytics, FunnelOrder, FunnelSession, FunnelStep


class FunnelStepInline(admin.TabularInline):
    model = FunnelStep
    extra = 0
    fields = ['name', 'slug', 'type', 'sort_order', 'is_active']


@admin.register(Funnel)
class FunnelAdmin(admin.ModelAdmin):
    list_display = ['name', 'type', 'status', 'published_at', 'created_at']
    list_filter = ['type', 'status']
    search_fields = ['name', 'slug', 'description']
    readonly_fields = ['uuid', 'slug', 'published_at', 'created_at', 'updated_at']
    inlines = [FunnelStepInline]


@admin.register(FunnelSession)
class FunnelSessionAdmin(admin.ModelAdmin):
    list_display = ['visitor_id', 'funnel', 'current_step', 'status', 'started_at', 'converted_at']
    list_filter = ['status', 'funnel']
    search_fields = ['visitor_id', 'utm_source', 'utm_campaign']


@admin.register(FunnelOrder)
class FunnelOrderAdmin(admin.ModelAdmin):
    list_display = ['session', 'step', 'order_type', 'funnel_revenue', 'customer_email', 'created_at']
    list_filter = ['order_type']


@admin.register(FunnelAnalytics)
class FunnelAnalyticsAdmin(admin.ModelAdmin):
    list_display = ['funnel', 'step', 'date', 'unique_visitors', 'pageviews', 'conversions', 'revenue']
    list_filter = ['funnel']
    date_hierarchy = 'date'
