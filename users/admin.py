# users/admin.py
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['email', 'name', 'role', 'status', 'is_active', 'date_joined']
    list_filter = ['role', 'status', 'is_active', 'is_staff']
    search_fields = ['email', 'name', 'phone']
    ordering = ['email']

    fieldsets = (
        ('Account', {
            'fields': ('email', 'password')
        }),
        ('Profile', {
            'fields': ('name', 'first_name', 'last_name', 'phone', 'role', 'status')
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')
        }),
        ('Dates', {
            'fields': ('last_login', 'date_joined')
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'role', 'password1', 'password2'),
        }),
    )
