# teachers/forms.py
from django import forms
from django.contrib.auth import get_user_model

from shared.constants import UserRoles
from shared.utils import parse_month

from .models import Teacher

User = get_user_model()


class TeacherForm(forms.Form):
    """
    Create a teacher from a new account or attach a profile to an existing user.
    """
    MODE_NEW = 'new'
    MODE_EXISTING = 'existing'

    mode = forms.ChoiceField(
        choices=((MODE_NEW, 'Create new user'), (MODE_EXISTING, 'Use existing user')),
        initial=MODE_NEW,
        widget=forms.RadioSelect,
    )
    existing_user = forms.ModelChoiceField(queryset=User.objects.none(), required=False)

    name = forms.CharField(max_length=255, required=False)
    email = forms.EmailField(max_length=255, required=False)
    password = forms.CharField(min_length=8, required=False, widget=forms.PasswordInput)
    password_confirmation = forms.CharField(required=False, widget=forms.PasswordInput)

    ic_number = forms.CharField(max_length=20, required=False)
    phone = forms.CharField(max_length=20, required=False)
    status = forms.ChoiceField(choices=Teacher.STATUS_CHOICES, initial='active')
    joined_at = forms.DateField(required=False, widget=forms.DateInput(attrs={'type': 'date'}))
    bank_account_holder = forms.CharField(max_length=255, required=False)
    bank_account_number = forms.CharField(max_length=50, required=False)
    bank_name = forms.CharField(max_length=100, required=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['existing_user'].queryset = User.objects.filter(
            teacher__isnull=True, is_active=True
        ).exclude(role=UserRoles.STUDENT).order_by('name')

    def clean(self):
        cleaned_data = super().clean()

        if cleaned_data.get('mode') == self.MODE_EXISTING:
            if not cleaned_data.get('existing_user'):
                self.add_error('existing_user', 'Please select a user.')
            return cleaned_data

        for field in ('name', 'email', 'password'):
            if not cleaned_data.get(field) and field not in self.errors:
                self.add_error(field, 'This field is required.')

        email = cleaned_data.get('email')
        if email and User.objects.filter(email__iexact=email).exists():
            self.add_error('email', 'This email is already taken.')

        password = cleaned_data.get('password')
        if password and password != cleaned_data.get('password_confirmation'):
            self.add_error('password_confirmation', 'The password confirmation does not match.')

        return cleaned_data


class TeacherEditForm(forms.Form):
    name = forms.CharField(max_length=255)
    email = forms.EmailField(max_length=255)
    ic_number = forms.CharField(max_length=20, required=False)
    phone = forms.CharField(max_length=20, required=False)
    status = forms.ChoiceField(choices=Teacher.STATUS_CHOICES)
    joined_at = forms.DateField(widget=forms.DateInput(attrs={'type': 'date'}))
    bank_account_holder = forms.CharField(max_length=255, required=False)
    bank_account_number = forms.CharField(max_length=50, required=False)
    bank_name = forms.CharField(max_length=100, required=False)

    def __init__(self, *args, teacher, **kwargs):
        self.teacher = teacher
        kwargs.setdefault('initial', {
            'name': teacher.user.name,
            'email': teacher.user.email,
            'ic_number': teacher.ic_number or '',
            'phone': teacher.phone,
            'status': teacher.status,
            'joined_at': teacher.joined_at,
            'bank_account_holder': teacher.bank_account_holder,
            'bank_account_number': teacher.bank_account_number,
            'bank_name': teacher.bank_name,
        })
        super().__init__(*args, **kwargs)

    def clean_email(self):
        email = self.cleaned_data['email'].lower()
        if User.objects.filter(email__iexact=email).exclude(pk=self.teacher.user_id).exists():
            raise forms.ValidationError('This email is already taken.')
        return email


class PayslipGenerateForm(forms.Form):
    teacher = forms.ModelChoiceField(
        queryset=Teacher.objects.filter(status='active').select_related('user'),
        required=False,
        empty_label='All teachers with eligible sessions',
    )
    month = forms.CharField(max_length=7, widget=forms.TextInput(attrs={'type': 'month'}))

    def clean_month(self):
        month = self.cleaned_data['month']
        try:
            parse_month(month)
        except ValueError:
            raise forms.ValidationError('Enter a month as YYYY-MM.')
        return month


class PayslipSessionsForm(forms.Form):
    """Session selection on a draft payslip."""
    notes = forms.CharField(
        max_length=1000,
        required=False,
        widget=forms.Textarea(attrs={'rows': 4, 'placeholder': 'Add any notes or comments about this payslip...'}),
    )
    session_ids = forms.ModelMultipleChoiceField(
        queryset=None,
        required=False,
        widget=forms.CheckboxSelectMultiple,
    )

    def __init__(self, *args, available_sessions, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['session_ids'].queryset = available_sessions
