# teachers/views.py
"""
Teacher management and payslip views.
"""
import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.paginator import Paginator
from django.db.models import Q
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.views.decorators.http import require_POST

from core.decorators import admin_required
from core.exceptions import PayslipError
from shared.constants import PayoutStatus, PayslipStatus
from shared.utils import current_month

from .forms import PayslipGenerateForm, PayslipSessionsForm, TeacherEditForm, TeacherForm
from .models import Payslip, Teacher
from .services import PayslipGenerationService, TeacherService

logger = logging.getLogger(__name__)


# ============ TEACHER VIEWS ============

@login_required
@admin_required
def teacher_list_view(request):
    teachers = Teacher.objects.select_related('user').order_by('teacher_id')

    search_query = request.GET.get('search', '').strip()
    status_filter = request.GET.get('status', '')

    if search_query:
        teachers = teachers.filter(
            Q(user__name__icontains=search_query) |
            Q(user__email__icontains=search_query) |
            Q(teacher_id__icontains=search_query) |
            Q(phone__icontains=search_query)
        )
    if status_filter:
        teachers = teachers.filter(status=status_filter)

    page_obj = Paginator(teachers, 20).get_page(request.GET.get('page'))

    context = {
        'teachers': page_obj,
        'page_obj': page_obj,
        'search_query': search_query,
        'status_filter': status_filter,
        'page_title': 'Teachers',
    }
    return render(request, 'teachers/teacher_list.html', context)


@login_required
@admin_required
def teacher_create_view(request):
    if request.method == 'POST':
        form = TeacherForm(request.POST)
        if form.is_valid():
            data = form.cleaned_data
            user = data['existing_user'] if data['mode'] == TeacherForm.MODE_EXISTING else None
            teacher = TeacherService.create_teacher(data, user=user)
            messages.success(request, "Teacher created successfully!")
            return redirect('teachers:teacher_detail', teacher_id=teacher.pk)
    else:
        form = TeacherForm()

    return render(request, 'teachers/teacher_form.html', {
        'form': form,
        'page_title': 'Add Teacher',
    })


@login_required
@admin_required
def teacher_detail_view(request, teacher_id):
    teacher = get_object_or_404(Teacher.objects.select_related('user'), pk=teacher_id)

    context = {
        'teacher': teacher,
        'classes': teacher.classes.select_related('course'),
        'payslips': teacher.payslips.order_by('-month')[:12],
        'unpaid_sessions': PayslipGenerationService.eligible_sessions(teacher, current_month()).count(),
        'page_title': teacher.display_name,
    }
    return render(request, 'teachers/teacher_detail.html', context)


@login_required
@admin_required
def teacher_edit_view(request, teacher_id):
    teacher = get_object_or_404(Teacher.objects.select_related('user'), pk=teacher_id)

    if request.method == 'POST':
        form = TeacherEditForm(request.POST, teacher=teacher)
        if form.is_valid():
            TeacherService.update_teacher(teacher, form.cleaned_data)
            messages.success(request, "Teacher updated successfully!")
            return redirect('teachers:teacher_detail', teacher_id=teacher.pk)
    else:
        form = TeacherEditForm(teacher=teacher)

    return render(request, 'teachers/teacher_form.html', {
        'form': form,
        'teacher': teacher,
        'page_title': f'Edit {teacher.display_name}',
    })


@login_required
@admin_required
@require_POST
def teacher_toggle_status_view(request, teacher_id):
    teacher = get_object_or_404(Teacher, pk=teacher_id)
    status = teacher.toggle_status()
    messages.success(request, f"Teacher is now {status}.")
    return redirect('teachers:teacher_list')


# ============ PAYSLIP VIEWS ============

@login_required
@admin_required
def payslip_list_view(request):
    payslips = Payslip.objects.select_related('teacher__user').order_by('-month', 'teacher__teacher_id')

    month_filter = request.GET.get('month', '')
    status_filter = request.GET.get('status', '')
    teacher_filter = request.GET.get('teacher', '')

    if month_filter:
        payslips = payslips.filter(month=month_filter)
    if status_filter:
        payslips = payslips.filter(status=status_filter)
    if teacher_filter:
        payslips = payslips.filter(teacher_id=teacher_filter)

    page_obj = Paginator(payslips, 20).get_page(request.GET.get('page'))

    context = {
        'payslips': page_obj,
        'page_obj': page_obj,
        'month_filter': month_filter,
        'status_filter': status_filter,
        'teacher_filter': teacher_filter,
        'status_choices': PayslipStatus.CHOICES,
        'teachers': Teacher.objects.select_related('user'),
        'statistics': PayslipGenerationService.month_statistics(month_filter or current_month()),
        'page_title': 'Payslips',
    }
    return render(request, 'teachers/payslip_list.html', context)


@login_required
@admin_required
def payslip_generate_view(request):
    """Preview on GET with a valid form, generate on POST."""
    form = PayslipGenerateForm(request.POST or request.GET or None, initial={'month': current_month()})
    preview = None

    if form.is_bound and form.is_valid():
        teacher = form.cleaned_data['teacher']
        month = form.cleaned_data['month']

        if request.method == 'POST':
            try:
                if teacher:
                    payslip = PayslipGenerationService.generate_for_teacher(teacher, month, request.user)
                    messages.success(request, f"Payslip generated for {teacher.display_name}.")
                    return redirect('teachers:payslip_detail', payslip_id=payslip.pk)

                result = PayslipGenerationService.generate_for_all(month, request.user)
                messages.success(
                    request,
                    f"Generated {result['successful']} of {result['total_teachers']} payslips."
                )
                for error in result['errors']:
                    messages.warning(request, f"{error['teacher']}: {error['error']}")
                return redirect(f"{reverse('teachers:payslip_list')}?month={month}")
            except PayslipError as e:
                messages.error(request, e.message)
        elif teacher:
            preview = PayslipGenerationService.preview(teacher, month)

    return render(request, 'teachers/payslip_generate.html', {
        'form': form,
        'preview': preview,
        'page_title': 'Generate Payslips',
    })


@login_required
@admin_required
def payslip_detail_view(request, payslip_id):
    payslip = get_object_or_404(
        Payslip.objects.select_related('teacher__user', 'generated_by'),
        pk=payslip_id,
    )
    context = {
        'payslip': payslip,
        'payslip_sessions': payslip.payslip_sessions.select_related(
            'session__course_class__course'
        ).order_by('session__session_date', 'session__session_time'),
        'page_title': f'Payslip {payslip.formatted_month}',
    }
    return render(request, 'teachers/payslip_detail.html', context)


@login_required
@admin_required
def payslip_edit_view(request, payslip_id):
    """Pick which verified sessions go on a draft payslip."""
    payslip = get_object_or_404(Payslip.objects.select_related('teacher__user'), pk=payslip_id)

    if not payslip.can_be_edited():
        messages.error(request, "Only draft payslips can be edited.")
        return redirect('teachers:payslip_detail', payslip_id=payslip.pk)

    available_sessions = PayslipGenerationService.available_sessions(payslip)

    if request.method == 'POST':
        form = PayslipSessionsForm(request.POST, available_sessions=available_sessions)
        if form.is_valid():
            try:
                payslip.notes = form.cleaned_data['notes']
                payslip.save(update_fields=['notes', 'updated_at'])
                payslip.sync_sessions([session.pk for session in form.cleaned_data['session_ids']])
                messages.success(request, "Payslip updated successfully.")
                return redirect('teachers:payslip_detail', payslip_id=payslip.pk)
            except PayslipError as e:
                messages.error(request, f"Failed to update payslip: {e.message}")
    else:
        form = PayslipSessionsForm(
            available_sessions=available_sessions,
            initial={
                'notes': payslip.notes,
                'session_ids': list(payslip.sessions.values_list('pk', flat=True)),
            },
        )

    return render(request, 'teachers/payslip_edit.html', {
        'payslip': payslip,
        'form': form,
        'available_sessions': available_sessions,
        'page_title': f'Edit Payslip {payslip.formatted_month}',
    })


def _payslip_action(request, payslip_id, action, success_message):
    payslip = get_object_or_404(Payslip, pk=payslip_id)
    try:
        getattr(payslip, action)()
        messages.success(request, success_message)
    except PayslipError as e:
        messages.error(request, e.message)
    return redirect('teachers:payslip_detail', payslip_id=payslip.pk)


@login_required
@admin_required
@require_POST
def payslip_finalize_view(request, payslip_id):
    return _payslip_action(request, payslip_id, 'finalize', "Payslip finalized.")


@login_required
@admin_required
@require_POST
def payslip_mark_paid_view(request, payslip_id):
    return _payslip_action(request, payslip_id, 'mark_as_paid', "Payslip marked as paid.")


@login_required
@admin_required
@require_POST
def payslip_revert_view(request, payslip_id):
    return _payslip_action(request, payslip_id, 'revert_to_draft', "Payslip reverted to draft.")


@login_required
@admin_required
@require_POST
def payslip_delete_view(request, payslip_id):
    payslip = get_object_or_404(Payslip, pk=payslip_id)
    if not payslip.can_be_edited():
        messages.error(request, "Only draft payslips can be deleted.")
        return redirect('teachers:payslip_detail', payslip_id=payslip.pk)

    payslip.sessions.update(payout_status=PayoutStatus.UNPAID)
    payslip.delete()
    messages.success(request, "Draft payslip deleted.")
    return redirect('teachers:payslip_list')
