# courses/forms.py
"""
Course wizard step forms plus class and session forms.
"""
from django import forms

from shared.constants import BillingCycles
from teachers.models import Teacher

from .models import ClassAttendance, ClassSession, Course, CourseClass, CourseClassSettings


class CourseBasicForm(forms.Form):
    """Wizard step 1."""
    name = forms.CharField(min_length=3, max_length=255)
    description = forms.CharField(
        max_length=1000,
        required=False,
        widget=forms.Textarea(attrs={'rows': 4}),
    )
    teacher = forms.ModelChoiceField(
        queryset=Teacher.objects.select_related('user').order_by('teacher_id'),
        required=False,
        empty_label='No teacher yet',
    )


class CourseFeeForm(forms.Form):
    """Wizard step 2."""
    fee_amount = forms.DecimalField(min_value=0, max_digits=10, decimal_places=2)
    billing_cycle = forms.ChoiceField(choices=BillingCycles.CHOICES, initial=BillingCycles.MONTHLY)
    is_recurring = forms.BooleanField(required=False, initial=True)


class CourseClassSettingsForm(forms.Form):
    """Wizard step 3."""
    teaching_mode = forms.ChoiceField(choices=CourseClassSettings.TEACHING_MODE_CHOICES, initial='online')
    billing_type = forms.ChoiceField(
        choices=CourseClassSettings.BILLING_TYPE_CHOICES,
        initial=CourseClassSettings.BILLING_PER_MONTH,
    )
    session_duration_minutes = forms.IntegerField(min_value=5, max_value=480, initial=60)
    sessions_per_month = forms.IntegerField(min_value=1, required=False)
    price_per_session = forms.DecimalField(min_value=0, max_digits=10, decimal_places=2, required=False)
    price_per_month = forms.DecimalField(min_value=0, max_digits=10, decimal_places=2, required=False)
    price_per_minute = forms.DecimalField(min_value=0, max_digits=10, decimal_places=2, required=False)
    class_description = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 3}))
    class_instructions = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 3}))

    REQUIRED_BY_BILLING_TYPE = {
        CourseClassSettings.BILLING_PER_SESSION: ('sessions_per_month', 'price_per_session'),
        CourseClassSettings.BILLING_PER_MONTH: ('price_per_month',),
        CourseClassSettings.BILLING_PER_MINUTE: ('price_per_minute',),
    }

    def clean(self):
        cleaned_data = super().clean()
        required = self.REQUIRED_BY_BILLING_TYPE.get(cleaned_data.get('billing_type'), ())

        for field in required:
            if cleaned_data.get(field) is None and field not in self.errors:
                self.add_error(field, 'This field is required for the selected billing type.')

        return cleaned_data


WIZARD_STEPS = (
    (1, 'Basic Information', CourseBasicForm),
    (2, 'Fee Settings', CourseFeeForm),
    (3, 'Class Settings', CourseClassSettingsForm),
)


class CourseForm(forms.ModelForm):
    """Edit form for the course itself."""

    class Meta:
        model = Course
        fields = ['name', 'description', 'teacher', 'status']
        widgets = {
            'description': forms.Textarea(attrs={'rows': 4}),
        }

    def clean_name(self):
        name = self.cleaned_data['name'].strip()
        if len(name) < 3:
            raise forms.ValidationError('Course name must be at least 3 characters.')
        return name


class CourseClassForm(forms.ModelForm):
    class Meta:
        model = CourseClass
        fields = [
            'teacher', 'title', 'class_type', 'rate_type', 'teacher_rate',
            'commission_type', 'commission_value', 'status',
        ]

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('commission_type') == 'percentage' and \
                (cleaned_data.get('commission_value') or 0) > 100:
            self.add_error('commission_value', 'Percentage commission cannot exceed 100.')
        return cleaned_data


class ClassSessionForm(forms.ModelForm):
    class Meta:
        model = ClassSession
        fields = ['session_date', 'session_time', 'duration_minutes']
        widgets = {
            'session_date': forms.DateInput(attrs={'type': 'date'}),
            'session_time': forms.TimeInput(attrs={'type': 'time'}),
        }

    def clean_duration_minutes(self):
        duration = self.cleaned_data['duration_minutes']
        if not 5 <= duration <= 480:
            raise forms.ValidationError('Duration must be between 5 and 480 minutes.')
        return duration


class SessionCompleteForm(forms.Form):
    teacher_notes = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 3}))


class AttendanceForm(forms.Form):
    """One status field per student, named ``student_<pk>``."""

    def __init__(self, *args, students, session, **kwargs):
        super().__init__(*args, **kwargs)
        current = dict(session.attendances.values_list('student_id', 'status'))
        for student in students:
            self.fields[f'student_{student.pk}'] = forms.ChoiceField(
                label=student.display_name,
                choices=ClassAttendance.STATUS_CHOICES,
                initial=current.get(student.pk, ClassAttendance.STATUS_PRESENT),
            )

    def statuses(self):
        return {
            int(name.split('_', 1)[1]): value
            for name, value in self.cleaned_data.items()
        }
