# students/views.py
"""
Student management views: CRUD plus the CSV import flow.
"""
import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.core.paginator import Paginator
from django.db.models import Q
from django.http import HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from core.decorators import admin_required
from core.exceptions import StudentImportError
from shared.constants import StudentStatus

from .forms import StudentForm, StudentImportForm
from .models import Student
from .services import StudentImportService, StudentService

logger = logging.getLogger(__name__)

IMPORT_SESSION_KEY = 'student_import_rows'


# ============ STUDENT MANAGEMENT VIEWS ============

@login_required
@admin_required
def student_list_view(request):
    """List students with search and status filter."""
    students = Student.objects.select_related('user').order_by('-created_at')

    search_query = request.GET.get('search', '').strip()
    status_filter = request.GET.get('status', '')

    if search_query:
        students = students.filter(
            Q(user__name__icontains=search_query) |
            Q(user__email__icontains=search_query) |
            Q(student_id__icontains=search_query) |
            Q(phone__icontains=search_query) |
            Q(ic_number__icontains=search_query)
        )

    if status_filter:
        students = students.filter(status=status_filter)

    paginator = Paginator(students, 20)
    page_obj = paginator.get_page(request.GET.get('page'))

    context = {
        'students': page_obj,
        'page_obj': page_obj,
        'search_query': search_query,
        'status_filter': status_filter,
        'status_choices': StudentStatus.CHOICES,
        'page_title': 'Students',
    }
    return render(request, 'students/student_list.html', context)


@login_required
@admin_required
def student_create_view(request):
    """Create new student."""
    if request.method == 'POST':
        form = StudentForm(request.POST)
        if form.is_valid():
            try:
                student = StudentService.create_student(form.cleaned_data, created_by=request.user)
                messages.success(request, "Student created successfully!")
                return redirect('students:student_detail', student_id=student.pk)
            except ValidationError as e:
                for field, errors in e.message_dict.items():
                    for error in errors:
                        messages.error(request, f"{field}: {error}")
            except Exception as e:
                logger.error(f"Error creating student: {e}", exc_info=True)
                messages.error(request, "Error creating student. Please try again.")
    else:
        form = StudentForm()

    context = {
        'form': form,
        'page_title': 'Add New Student',
    }
    return render(request, 'students/student_form.html', context)


@login_required
@admin_required
def student_detail_view(request, student_id):
    """View student details with enrollments and payments."""
    student = get_object_or_404(Student.objects.select_related('user'), pk=student_id)

    context = {
        'student': student,
        'enrollments': student.enrollments.select_related('course').order_by('-created_at'),
        'recent_payments': student.user.payments.order_by('-created_at')[:10],
        'page_title': student.display_name,
    }
    return render(request, 'students/student_detail.html', context)


@login_required
@admin_required
def student_edit_view(request, student_id):
    """Edit student information."""
    student = get_object_or_404(Student.objects.select_related('user'), pk=student_id)

    if request.method == 'POST':
        form = StudentForm(request.POST, student=student)
        if form.is_valid():
            try:
                StudentService.update_student(student, form.cleaned_data)
                messages.success(request, "Student updated successfully!")
                return redirect('students:student_detail', student_id=student.pk)
            except ValidationError as e:
                for field, errors in e.message_dict.items():
                    for error in errors:
                        messages.error(request, f"{field}: {error}")
    else:
        form = StudentForm(student=student)

    context = {
        'form': form,
        'student': student,
        'page_title': f'Edit {student.display_name}',
    }
    return render(request, 'students/student_form.html', context)


@login_required
@admin_required
@require_POST
def student_delete_view(request, student_id):
    student = get_object_or_404(Student, pk=student_id)
    StudentService.delete_student(student)
    messages.success(request, "Student deleted successfully!")
    return redirect('students:student_list')


# ============ CSV IMPORT / EXPORT ============

@login_required
@admin_required
def student_import_view(request):
    """Upload a CSV and validate it for preview."""
    if request.method == 'POST':
        form = StudentImportForm(request.POST, request.FILES)
        if form.is_valid():
            service = StudentImportService()
            try:
                content = service.read_upload(form.cleaned_data['csv_file'])
                service.parse_csv(content)
                rows = service.validate_data()
            except StudentImportError as e:
                form.add_error('csv_file', e.message)
            else:
                request.session[IMPORT_SESSION_KEY] = rows
                return redirect('students:student_import_preview')
    else:
        form = StudentImportForm()

    context = {
        'form': form,
        'expected_headers': StudentImportService.EXPECTED_HEADERS,
        'required_headers': StudentImportService.REQUIRED_HEADERS,
        'page_title': 'Import Students',
    }
    return render(request, 'students/student_import.html', context)


@login_required
@admin_required
def student_import_preview_view(request):
    """Show validation results; POST confirms or cancels the import."""
    rows = request.session.get(IMPORT_SESSION_KEY)
    if not rows:
        messages.warning(request, "Please upload a CSV file first.")
        return redirect('students:student_import')

    service = StudentImportService(validated_data=rows)

    if request.method == 'POST':
        if request.POST.get('action') == 'cancel':
            request.session.pop(IMPORT_SESSION_KEY, None)
            messages.info(request, "Import cancelled.")
            return redirect('students:student_import')

        result = service.import_valid_data()
        request.session.pop(IMPORT_SESSION_KEY, None)

        messages.success(
            request,
            f"Import completed: {result['imported']} imported, "
            f"{result['updated']} updated, {result['skipped']} skipped."
        )
        for error in result['errors']:
            messages.error(request, f"Row {error['row']}: {error['error']}")
        return redirect('students:student_list')

    context = {
        'rows': rows,
        'stats': service.stats(),
        'page_title': 'Import Preview',
    }
    return render(request, 'students/student_import_preview.html', context)


@login_required
@admin_required
def student_export_view(request):
    service = StudentImportService()
    response = HttpResponse(service.export_to_csv(), content_type='text/csv')
    response['Content-Disposition'] = f'attachment; filename="{service.export_filename()}"'
    return response


@login_required
@admin_required
def student_sample_csv_view(request):
    service = StudentImportService()
    response = HttpResponse(service.generate_sample_csv(), content_type='text/csv')
    response['Content-Disposition'] = 'attachment; filename="students_import_sample.csv"'
    return response
