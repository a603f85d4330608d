# teachers/admin.py
from django.contrib import admin

from .models import Payslip, PayslipSession, Teacher


@admin.register(Teacher)
class TeacherAdmin(admin.ModelAdmin):
    list_display = ['teacher_id', 'get_name', 'phone', 'status', 'joined_at']
    list_filter = ['status']
    search_fields = ['teacher_id', 'user__name', 'user__email', 'phone']
    readonly_fields = ['teacher_id', 'created_at', 'updated_at']
    raw_id_fields = ['user']

    fieldsets = (
        ('Account', {
            'fields': ('user', 'teacher_id', 'status', 'joined_at')
        }),
        ('Contact', {
            'fields': ('ic_number', 'phone')
        }),
        ('Bank Details', {
            'fields': ('bank_account_holder', 'bank_account_number', 'bank_name')
        }),
    )

    def get_name(self, obj):
        return obj.display_name
    get_name.short_description = 'Name'


class PayslipSessionInline(admin.TabularInline):
    model = PayslipSession
    extra = 0
    raw_id_fields = ['session']
    readonly_fields = ['included_at']


@admin.register(Payslip)
class PayslipAdmin(admin.ModelAdmin):
    list_display = ['teacher', 'month', 'total_sessions', 'total_amount', 'status', 'generated_at']
    list_filter = ['status', 'year']
    search_fields = ['teacher__teacher_id', 'teacher__user__name', 'month']
    readonly_fields = ['generated_at', 'finalized_at', 'paid_at', 'total_sessions', 'total_amount']
    inlines = [PayslipSessionInline]
