# live/admin.py
from django.contrib import admin

from .models import LiveSchedule, LiveSession, Platform, PlatformAccount


@admin.register(Platform)
class PlatformAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'is_active']
    list_editable = ['is_active']
    prepopulated_fields = {'slug': ('name',)}


@admin.register(PlatformAccount)
class PlatformAccountAdmin(admin.ModelAdmin):
    list_display = ['name', 'platform', 'user', 'account_id', 'is_active']
    list_filter = ['platform', 'is_active']
    search_fields = ['name', 'account_id', 'user__name']
    raw_id_fields = ['user']


@admin.register(LiveSchedule)
class LiveScheduleAdmin(admin.ModelAdmin):
    list_display = ['platform_account', 'live_host', 'day_of_week', 'start_time', 'end_time', 'is_active']
    list_filter = ['day_of_week', 'is_active', 'is_recurring']
    raw_id_fields = ['live_host', 'created_by']


@admin.register(LiveSession)
class LiveSessionAdmin(admin.ModelAdmin):
    list_display = ['title', 'platform_account', 'live_host', 'status', 'scheduled_start_at', 'duration_minutes']
    list_filter = ['status', 'platform_account__platform']
    search_fields = ['title', 'description']
    raw_id_fields = ['live_host', 'live_schedule']
    date_hierarchy = 'scheduled_start_at'
