# site_settings/admin.py
from django.contrib import admin

from shared.constants import SettingTypes

from .models import Setting


@admin.register(Setting)
class SettingAdmin(admin.ModelAdmin):
    list_display = ['key', 'group', 'type', 'display_value', 'is_public', 'updated_at']
    list_filter = ['group', 'type', 'is_public']
    search_fields = ['key', 'description']
    readonly_fields = ['created_at', 'updated_at']

    fieldsets = (
        ('Setting', {
            'fields': ('key', 'value', 'type', 'group')
        }),
        ('Details', {
            'fields': ('description', 'is_public', 'created_at', 'updated_at')
        }),
    )

    def display_value(self, obj):
        if obj.type == SettingTypes.ENCRYPTED:
            return '[ENCRYPTED]'
        value = obj.value or ''
        return value if len(value) <= 60 else f"{value[:57]}..."
    display_value.short_description = 'Value'
