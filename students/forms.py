# students/forms.py
"""
Student forms: the create/edit form and the CSV upload form.
"""
from django import forms
from django.contrib.auth import get_user_model
from django.core.validators import RegexValidator
from django.utils import timezone

from shared.constants import Genders, StudentStatus

from .models import Student

User = get_user_model()

ic_number_validator = RegexValidator(r'^[0-9]{12}$', 'IC number must be exactly 12 digits.')
phone_validator = RegexValidator(r'^[0-9]+$', 'Phone number may only contain digits.')


class StudentForm(forms.Form):
    """
    Creates or edits a student together with the backing user account.

    Pass ``student`` to edit; the password becomes optional.
    """
    name = forms.CharField(min_length=3, max_length=255)
    email = forms.EmailField(required=False, max_length=255)
    password = forms.CharField(
        min_length=8,
        required=False,
        widget=forms.PasswordInput(render_value=False),
    )
    password_confirmation = forms.CharField(
        required=False,
        widget=forms.PasswordInput(render_value=False),
    )
    ic_number = forms.CharField(required=False, validators=[ic_number_validator])
    country_code = forms.CharField(required=False, max_length=5, initial='+60')
    phone = forms.CharField(required=False, max_length=15, validators=[phone_validator])
    address = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 3}))
    date_of_birth = forms.DateField(
        required=False,
        widget=forms.DateInput(attrs={'type': 'date'}),
    )
    gender = forms.ChoiceField(choices=(('', 'Select gender'),) + Genders.CHOICES, required=False)
    nationality = forms.CharField(required=False, max_length=100)
    status = forms.ChoiceField(choices=StudentStatus.CHOICES, initial=StudentStatus.ACTIVE)

    def __init__(self, *args, student=None, **kwargs):
        self.student = student
        if student is not None and 'initial' not in kwargs:
            kwargs['initial'] = {
                'name': student.user.name,
                'email': student.user.email,
                'ic_number': student.ic_number or '',
                'country_code': '',
                'phone': student.phone or '',
                'address': student.address,
                'date_of_birth': student.date_of_birth,
                'gender': student.gender,
                'nationality': student.nationality,
                'status': student.status,
            }
        super().__init__(*args, **kwargs)

    def clean_email(self):
        email = (self.cleaned_data.get('email') or '').strip().lower()
        if not email:
            return ''

        users = User.objects.filter(email__iexact=email)
        if self.student is not None:
            users = users.exclude(pk=self.student.user_id)
        if users.exists():
            raise forms.ValidationError('This email is already taken.')
        return email

    def clean_ic_number(self):
        ic_number = self.cleaned_data.get('ic_number') or ''
        if not ic_number:
            return ''

        students = Student.objects.filter(ic_number=ic_number)
        if self.student is not None:
            students = students.exclude(pk=self.student.pk)
        if students.exists():
            raise forms.ValidationError('This IC number is already registered.')
        return ic_number

    def clean_date_of_birth(self):
        date_of_birth = self.cleaned_data.get('date_of_birth')
        if date_of_birth and date_of_birth >= timezone.localdate():
            raise forms.ValidationError('Date of birth must be before today.')
        return date_of_birth

    def clean(self):
        cleaned_data = super().clean()
        password = cleaned_data.get('password')
        confirmation = cleaned_data.get('password_confirmation')

        if self.student is None and not password and 'password' not in self.errors:
            self.add_error('password', 'This field is required.')
        if password and password != confirmation:
            self.add_error('password_confirmation', 'The password confirmation does not match.')

        if not cleaned_data.get('email') and not cleaned_data.get('phone') \
                and 'email' not in self.errors and 'phone' not in self.errors:
            raise forms.ValidationError('Provide an email address or a phone number.')

        return cleaned_data


class StudentImportForm(forms.Form):
    csv_file = forms.FileField(help_text="CSV with at least the name and phone columns, max 10 MB.")

    MAX_SIZE = 10 * 1024 * 1024

    def clean_csv_file(self):
        csv_file = self.cleaned_data['csv_file']
        if not csv_file.name.lower().endswith(('.csv', '.txt')):
            raise forms.ValidationError('Please upload a CSV file.')
        if csv_file.size > self.MAX_SIZE:
            raise forms.ValidationError('The CSV file may not be larger than 10 MB.')
        return csv_file


class StudentImportRowForm(forms.Form):
    """Validation rules applied to a single CSV row."""
    name = forms.CharField(max_length=255)
    phone = forms.CharField(max_length=20)
    email = forms.EmailField(required=False, max_length=255)
    ic_number = forms.CharField(required=False, max_length=20)
    address = forms.CharField(required=False, max_length=500)
    date_of_birth = forms.DateField(
        required=False,
        input_formats=['%Y-%m-%d', '%d/%m/%Y', '%d-%m-%Y', '%Y/%m/%d'],
    )
    gender = forms.ChoiceField(choices=Genders.CHOICES, required=False)
    nationality = forms.CharField(required=False, max_length=100)
    status = forms.ChoiceField(choices=StudentStatus.CHOICES, required=False)

    def error_messages_list(self):
        return [
            f"{field}: {message}"
            for field, messages in self.errors.items()
            for message in messages
        ]
