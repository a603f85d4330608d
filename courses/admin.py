# courses/admin.py
from django.contrib import admin

from .models import (
    ClassAttendance,
    ClassSession,
    Course,
    CourseClass,
    CourseClassSettings,
    CourseFeeSettings,
)


class CourseFeeSettingsInline(admin.StackedInline):
    model = CourseFeeSettings
    can_delete = False


class CourseClassSettingsInline(admin.StackedInline):
    model = CourseClassSettings
    can_delete = False


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ['name', 'teacher', 'status', 'get_fee', 'created_at']
    list_filter = ['status']
    search_fields = ['name', 'description']
    inlines = [CourseFeeSettingsInline, CourseClassSettingsInline]

    def get_fee(self, obj):
        return obj.formatted_fee
    get_fee.short_description = 'Fee'


@admin.register(CourseClass)
class CourseClassAdmin(admin.ModelAdmin):
    list_display = ['title', 'course', 'teacher', 'rate_type', 'teacher_rate', 'status']
    list_filter = ['status', 'rate_type', 'class_type']
    search_fields = ['title', 'course__name']


class ClassAttendanceInline(admin.TabularInline):
    model = ClassAttendance
    extra = 0
    raw_id_fields = ['student']


@admin.register(ClassSession)
class ClassSessionAdmin(admin.ModelAdmin):
    list_display = [
        'course_class', 'session_date', 'session_time', 'status',
        'allowance_amount', 'verified_at', 'payout_status',
    ]
    list_filter = ['status', 'payout_status']
    search_fields = ['course_class__title', 'course_class__course__name']
    date_hierarchy = 'session_date'
    readonly_fields = ['completed_at', 'verified_at', 'verified_by']
    inlines = [ClassAttendanceInline]
