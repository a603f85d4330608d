# enrollments/forms.py
from django import forms
from django.utils import timezone

from courses.models import Course
from shared.constants import EnrollmentStatus
from students.models import Student

from .models import Enrollment

CREATE_STATUS_CHOICES = tuple(
    choice for choice in EnrollmentStatus.CHOICES if choice[0] in EnrollmentStatus.OPEN
)


class EnrollmentForm(forms.Form):
    student = forms.ModelChoiceField(
        queryset=Student.objects.select_related('user').order_by('student_id'),
    )
    course = forms.ModelChoiceField(queryset=Course.objects.order_by('name'))
    status = forms.ChoiceField(choices=CREATE_STATUS_CHOICES, initial=EnrollmentStatus.ENROLLED)
    enrollment_date = forms.DateField(
        initial=timezone.localdate,
        widget=forms.DateInput(attrs={'type': 'date'}),
    )
    start_date = forms.DateField(required=False, widget=forms.DateInput(attrs={'type': 'date'}))
    end_date = forms.DateField(required=False, widget=forms.DateInput(attrs={'type': 'date'}))
    enrollment_fee = forms.DecimalField(required=False, min_value=0, max_digits=10, decimal_places=2)
    notes = forms.CharField(required=False, max_length=1000, widget=forms.Textarea(attrs={'rows': 3}))
    payment_method_type = forms.ChoiceField(
        choices=Enrollment.PAYMENT_METHOD_CHOICES,
        initial=Enrollment.PAYMENT_AUTOMATIC,
    )

    def clean(self):
        cleaned_data = super().clean()
        student = cleaned_data.get('student')
        course = cleaned_data.get('course')
        enrollment_date = cleaned_data.get('enrollment_date')
        start_date = cleaned_data.get('start_date')
        end_date = cleaned_data.get('end_date')

        if start_date and enrollment_date and start_date < enrollment_date:
            self.add_error('start_date', 'Start date cannot be before the enrollment date.')

        if end_date and start_date and end_date < start_date:
            self.add_error('end_date', 'End date cannot be before the start date.')

        if student and course and Enrollment.objects.filter(
            student=student, course=course, status__in=EnrollmentStatus.OPEN
        ).exists():
            self.add_error('course', 'Student is already enrolled in this course.')

        return cleaned_data


class EnrollmentEditForm(forms.ModelForm):

    class Meta:
        model = Enrollment
        fields = ['status', 'start_date', 'end_date', 'notes']
        widgets = {
            'start_date': forms.DateInput(attrs={'type': 'date'}),
            'end_date': forms.DateInput(attrs={'type': 'date'}),
            'notes': forms.Textarea(attrs={'rows': 3}),
        }

    def clean_notes(self):
        notes = self.cleaned_data.get('notes', '')
        if len(notes) > 1000:
            raise forms.ValidationError('Notes cannot exceed 1000 characters.')
        return notes
