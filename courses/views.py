# courses/views.py
"""
Course views: list, wizard, detail/edit, classes and session verification.
"""
import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.core.paginator import Paginator
from django.db.models import Count, Q
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from core.decorators import admin_required
from core.exceptions import SessionStateError
from enrollments.models import Enrollment
from shared.constants import EnrollmentStatus, SessionStatus
from shared.utils import current_month

from .forms import (
    AttendanceForm,
    ClassSessionForm,
    CourseClassForm,
    CourseClassSettingsForm,
    CourseFeeForm,
    CourseForm,
    SessionCompleteForm,
)
from .models import ClassSession, Course, CourseClass
from .services import CourseService, CourseWizard, SessionService

logger = logging.getLogger(__name__)


# ============ COURSES ============

@login_required
@admin_required
def course_list_view(request):
    courses = Course.objects.select_related('teacher__user', 'fee_settings').annotate(
        enrollment_count=Count('enrollments', distinct=True),
    ).order_by('-created_at')

    search_query = request.GET.get('search', '').strip()
    status_filter = request.GET.get('status', '')

    if search_query:
        courses = courses.filter(
            Q(name__icontains=search_query) |
            Q(description__icontains=search_query) |
            Q(teacher__user__name__icontains=search_query)
        )
    if status_filter:
        courses = courses.filter(status=status_filter)

    page_obj = Paginator(courses, 20).get_page(request.GET.get('page'))

    return render(request, 'courses/course_list.html', {
        'courses': page_obj,
        'page_obj': page_obj,
        'search_query': search_query,
        'status_filter': status_filter,
        'status_choices': Course.STATUS_CHOICES,
        'page_title': 'Courses',
    })


@login_required
@admin_required
def course_create_view(request):
    """Three step course creation wizard."""
    wizard = CourseWizard(request.session)

    if request.GET.get('restart'):
        wizard.reset()
        return redirect('courses:course_create')

    if request.method == 'POST':
        action = request.POST.get('action', 'next')

        if action == 'previous':
            wizard.store(request.POST)
            wizard.previous()
            return redirect('courses:course_create')

        form = wizard.get_form(request.POST)
        if form.is_valid():
            wizard.store(request.POST)

            if wizard.step < wizard.LAST_STEP:
                wizard.next()
                return redirect('courses:course_create')

            steps = wizard.validated_steps()
            if steps is None:
                messages.error(request, "Some earlier steps are incomplete. Please review them.")
                return redirect('courses:course_create')

            try:
                course = CourseService.create_course(*steps, created_by=request.user)
            except ValidationError as e:
                for field, errors in e.message_dict.items():
                    for error in errors:
                        form.add_error(field if field in form.fields else None, error)
            else:
                wizard.reset()
                messages.success(request, "Course created successfully!")
                return redirect('courses:course_detail', course_id=course.pk)
    else:
        form = wizard.get_form()

    return render(request, 'courses/course_wizard.html', {
        'form': form,
        'wizard': wizard,
        'page_title': 'Create Course',
    })


@login_required
@admin_required
def course_detail_view(request, course_id):
    course = get_object_or_404(
        Course.objects.select_related('teacher__user', 'created_by'),
        pk=course_id,
    )

    enrollments = course.enrollments.select_related('student__user').order_by('-created_at')

    return render(request, 'courses/course_detail.html', {
        'course': course,
        'fee_settings': course.fee_settings_or_none,
        'class_settings': course.class_settings_or_none,
        'classes': course.classes.select_related('teacher__user').annotate(session_count=Count('sessions')),
        'enrollments': enrollments[:20],
        'active_enrollment_count': enrollments.filter(status__in=EnrollmentStatus.OPEN).count(),
        'page_title': course.name,
    })


@login_required
@admin_required
def course_edit_view(request, course_id):
    course = get_object_or_404(Course, pk=course_id)
    fee_settings = course.fee_settings_or_none
    class_settings = course.class_settings_or_none

    fee_initial = {
        'fee_amount': fee_settings.fee_amount,
        'billing_cycle': fee_settings.billing_cycle,
        'is_recurring': fee_settings.is_recurring,
    } if fee_settings else None

    class_initial = {
        field: getattr(class_settings, field)
        for field in CourseClassSettingsForm.base_fields
    } if class_settings else None

    if request.method == 'POST':
        course_form = CourseForm(request.POST, instance=course, prefix='course')
        fee_form = CourseFeeForm(request.POST, prefix='fee')
        class_form = CourseClassSettingsForm(request.POST, prefix='class')

        if course_form.is_valid() and fee_form.is_valid() and class_form.is_valid():
            try:
                CourseService.update_course(course, course_form, fee_form.cleaned_data, class_form.cleaned_data)
                messages.success(request, "Course updated successfully!")
                return redirect('courses:course_detail', course_id=course.pk)
            except ValidationError as e:
                for field, errors in e.message_dict.items():
                    for error in errors:
                        class_form.add_error(field if field in class_form.fields else None, error)
    else:
        course_form = CourseForm(instance=course, prefix='course')
        fee_form = CourseFeeForm(initial=fee_initial, prefix='fee')
        class_form = CourseClassSettingsForm(initial=class_initial, prefix='class')

    return render(request, 'courses/course_edit.html', {
        'course': course,
        'course_form': course_form,
        'fee_form': fee_form,
        'class_form': class_form,
        'page_title': f'Edit {course.name}',
    })


# ============ CLASSES ============

@login_required
@admin_required
def class_create_view(request, course_id):
    course = get_object_or_404(Course, pk=course_id)

    if request.method == 'POST':
        form = CourseClassForm(request.POST)
        if form.is_valid():
            course_class = form.save(commit=False)
            course_class.course = course
            course_class.save()
            messages.success(request, "Class created successfully!")
            return redirect('courses:class_detail', class_id=course_class.pk)
    else:
        form = CourseClassForm(initial={'teacher': course.teacher})

    return render(request, 'courses/class_form.html', {
        'form': form,
        'course': course,
        'page_title': f'New class for {course.name}',
    })


@login_required
@admin_required
def class_detail_view(request, class_id):
    course_class = get_object_or_404(
        CourseClass.objects.select_related('course', 'teacher__user'),
        pk=class_id,
    )

    if request.method == 'POST':
        session_form = ClassSessionForm(request.POST)
        if session_form.is_valid():
            session = session_form.save(commit=False)
            session.course_class = course_class
            session.save()
            messages.success(request, "Session scheduled.")
            return redirect('courses:class_detail', class_id=course_class.pk)
    else:
        session_form = ClassSessionForm(initial={
            'duration_minutes': getattr(course_class.course.class_settings_or_none, 'session_duration_minutes', 60),
        })

    return render(request, 'courses/class_detail.html', {
        'course_class': course_class,
        'sessions': course_class.sessions.order_by('-session_date', '-session_time'),
        'session_form': session_form,
        'page_title': course_class.title,
    })


# ============ SESSIONS ============

def _session_students(session):
    enrollments = Enrollment.objects.filter(
        course=session.course_class.course,
        status__in=EnrollmentStatus.OPEN,
    ).select_related('student__user')
    return [enrollment.student for enrollment in enrollments]


@login_required
@admin_required
def session_detail_view(request, session_id):
    session = get_object_or_404(
        ClassSession.objects.select_related('course_class__course', 'course_class__teacher__user', 'verified_by'),
        pk=session_id,
    )
    students = _session_students(session)

    if request.method == 'POST':
        attendance_form = AttendanceForm(request.POST, students=students, session=session)
        if attendance_form.is_valid():
            SessionService.record_attendance(session, attendance_form.statuses())
            messages.success(request, "Attendance saved.")
            return redirect('courses:session_detail', session_id=session.pk)
    else:
        attendance_form = AttendanceForm(students=students, session=session)

    return render(request, 'courses/session_detail.html', {
        'session': session,
        'attendance_form': attendance_form,
        'complete_form': SessionCompleteForm(initial={'teacher_notes': session.teacher_notes}),
        'page_title': str(session),
    })


@login_required
@admin_required
@require_POST
def session_complete_view(request, session_id):
    session = get_object_or_404(ClassSession, pk=session_id)
    form = SessionCompleteForm(request.POST)
    notes = form.cleaned_data['teacher_notes'] if form.is_valid() else None

    try:
        session.mark_completed(notes)
        messages.success(request, "Session marked as completed.")
    except SessionStateError as e:
        messages.error(request, e.message)
    return redirect('courses:session_detail', session_id=session.pk)


@login_required
@admin_required
@require_POST
def session_cancel_view(request, session_id):
    session = get_object_or_404(ClassSession, pk=session_id)
    try:
        session.cancel()
        messages.success(request, "Session cancelled.")
    except SessionStateError as e:
        messages.error(request, e.message)
    return redirect('courses:session_detail', session_id=session.pk)


@login_required
@admin_required
def session_verification_view(request):
    """Completed sessions waiting for (or holding) admin verification."""
    sessions = ClassSession.objects.filter(status=SessionStatus.COMPLETED).select_related(
        'course_class__course', 'course_class__teacher__user', 'verified_by'
    ).order_by('-session_date', '-session_time')

    month_filter = request.GET.get('month', current_month())
    verified_filter = request.GET.get('verified', 'unverified')
    teacher_filter = request.GET.get('teacher', '')

    if month_filter:
        try:
            sessions = sessions.in_month(month_filter)
        except ValueError:
            messages.warning(request, "Invalid month filter ignored.")
    if verified_filter == 'unverified':
        sessions = sessions.filter(verified_at__isnull=True)
    elif verified_filter == 'verified':
        sessions = sessions.filter(verified_at__isnull=False)
    if teacher_filter:
        sessions = sessions.filter(course_class__teacher_id=teacher_filter)

    page_obj = Paginator(sessions, 20).get_page(request.GET.get('page'))

    return render(request, 'courses/session_verification.html', {
        'sessions': page_obj,
        'page_obj': page_obj,
        'month_filter': month_filter,
        'verified_filter': verified_filter,
        'teacher_filter': teacher_filter,
        'page_title': 'Session Verification',
    })


@login_required
@admin_required
@require_POST
def session_verify_view(request, session_id):
    session = get_object_or_404(ClassSession, pk=session_id)
    try:
        session.verify(request.user)
        messages.success(request, "Session verified.")
    except SessionStateError as e:
        messages.error(request, e.message)
    return redirect('courses:session_verification')


@login_required
@admin_required
@require_POST
def session_unverify_view(request, session_id):
    session = get_object_or_404(ClassSession, pk=session_id)
    try:
        session.unverify()
        messages.success(request, "Session verification removed.")
    except SessionStateError as e:
        messages.error(request, e.message)
    return redirect('courses:session_verification')
