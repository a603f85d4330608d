# enrollments/views.py
"""
Enrollment management views and the student search endpoint.
"""
import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.paginator import Paginator
from django.db.models import Q
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.decorators import admin_required
from core.permissions import IsBackOfficeAdmin
from courses.models import Course
from shared.constants import EnrollmentStatus, StudentStatus
from students.models import Student

from .forms import EnrollmentEditForm, EnrollmentForm
from .models import Enrollment
from .serializers import StudentSearchSerializer
from .services import EnrollmentService

logger = logging.getLogger(__name__)

STUDENT_SEARCH_LIMIT = 20


@login_required
@admin_required
def enrollment_list_view(request):
    enrollments = Enrollment.objects.select_related('student__user', 'course', 'enrolled_by')

    search_query = request.GET.get('search', '').strip()
    status_filter = request.GET.get('status', '')
    course_filter = request.GET.get('course', '')

    if search_query:
        enrollments = enrollments.filter(
            Q(student__user__name__icontains=search_query) |
            Q(student__user__email__icontains=search_query) |
            Q(student__student_id__icontains=search_query) |
            Q(course__name__icontains=search_query)
        )
    if status_filter:
        enrollments = enrollments.filter(status=status_filter)
    if course_filter.isdigit():
        enrollments = enrollments.filter(course_id=course_filter)

    page_obj = Paginator(enrollments, 20).get_page(request.GET.get('page'))

    context = {
        'enrollments': page_obj,
        'page_obj': page_obj,
        'courses': Course.objects.order_by('name'),
        'status_choices': EnrollmentStatus.CHOICES,
        'search_query': search_query,
        'status_filter': status_filter,
        'course_filter': course_filter,
        'page_title': 'Enrollments',
    }
    return render(request, 'enrollments/enrollment_list.html', context)


@login_required
@admin_required
def enrollment_create_view(request):
    if request.method == 'POST':
        form = EnrollmentForm(request.POST)
        if form.is_valid():
            enrollment = EnrollmentService.enroll(form.cleaned_data, enrolled_by=request.user)
            if enrollment.manual_payment_required:
                messages.success(
                    request,
                    "Student enrolled successfully! Manual payment is required to activate the enrollment."
                )
            else:
                messages.success(request, "Student enrolled successfully!")
            return redirect('enrollments:enrollment_detail', enrollment_id=enrollment.pk)
    else:
        initial = {}
        student_id = request.GET.get('student', '')
        if student_id.isdigit():
            initial['student'] = student_id
        form = EnrollmentForm(initial=initial)

    return render(request, 'enrollments/enrollment_form.html', {
        'form': form,
        'page_title': 'Enroll Student',
    })


@login_required
@admin_required
def enrollment_detail_view(request, enrollment_id):
    enrollment = get_object_or_404(
        Enrollment.objects.select_related('student__user', 'course', 'enrolled_by'),
        pk=enrollment_id,
    )

    context = {
        'enrollment': enrollment,
        'orders': enrollment.orders.order_by('-created_at'),
        'page_title': f"Enrollment: {enrollment.student.display_name}",
    }
    return render(request, 'enrollments/enrollment_detail.html', context)


@login_required
@admin_required
def enrollment_edit_view(request, enrollment_id):
    enrollment = get_object_or_404(Enrollment, pk=enrollment_id)

    if request.method == 'POST':
        form = EnrollmentEditForm(request.POST, instance=enrollment)
        if form.is_valid():
            EnrollmentService.update(enrollment, form.cleaned_data)
            messages.success(request, "Enrollment updated successfully!")
            return redirect('enrollments:enrollment_detail', enrollment_id=enrollment.pk)
    else:
        form = EnrollmentEditForm(instance=enrollment)

    return render(request, 'enrollments/enrollment_edit.html', {
        'form': form,
        'enrollment': enrollment,
        'page_title': 'Edit Enrollment',
    })


@login_required
@admin_required
@require_POST
def enrollment_delete_view(request, enrollment_id):
    enrollment = get_object_or_404(Enrollment, pk=enrollment_id)
    EnrollmentService.delete(enrollment)
    messages.success(request, "Enrollment deleted successfully!")
    return redirect('enrollments:enrollment_list')


# ============ API ============

@api_view(['GET'])
@permission_classes([IsAuthenticated, IsBackOfficeAdmin])
def student_search_api(request):
    """Active students matching phone, student ID or name."""
    query = request.query_params.get('q', '').strip()
    students = Student.objects.select_related('user').filter(status=StudentStatus.ACTIVE)

    if query:
        students = students.filter(
            Q(phone__icontains=query) |
            Q(student_id__icontains=query) |
            Q(user__name__icontains=query)
        )

    students = students.order_by('user__name')[:STUDENT_SEARCH_LIMIT]
    return Response({'results': StudentSearchSerializer(students, many=True).data})
