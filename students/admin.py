# students/admin.py
from django.contrib import admin

from .models import Student


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ['student_id', 'get_name', 'phone', 'ic_number', 'status', 'created_at']
    list_filter = ['status', 'gender', 'nationality']
    search_fields = ['student_id', 'user__name', 'user__email', 'phone', 'ic_number']
    readonly_fields = ['student_id', 'created_at', 'updated_at']
    raw_id_fields = ['user']

    fieldsets = (
        ('Account', {
            'fields': ('user', 'student_id', 'status')
        }),
        ('Personal Information', {
            'fields': ('ic_number', 'phone', 'date_of_birth', 'gender', 'nationality', 'address')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def get_name(self, obj):
        return obj.display_name
    get_name.short_description = 'Name'
