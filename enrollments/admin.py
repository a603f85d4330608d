# enrollments/admin.py
from django.contrib import admin

from .models import Enrollment


@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display = ['student', 'course', 'status', 'enrollment_date', 'payment_method_type',
                    'manual_payment_required']
    list_filter = ['status', 'payment_method_type', 'manual_payment_required']
    search_fields = ['student__user__name', 'student__student_id', 'course__name']
    raw_id_fields = ['student', 'course', 'enrolled_by']
    date_hierarchy = 'enrollment_date'
