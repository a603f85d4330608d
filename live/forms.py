# live/forms.py
from django import forms
from django.contrib.auth import get_user_model

from shared.constants import UserRoles

from .models import LiveSchedule, LiveSession, PlatformAccount

User = get_user_model()


def live_host_queryset():
    return User.objects.with_role(UserRoles.LIVE_HOST).order_by('name')


class LiveScheduleForm(forms.ModelForm):

    class Meta:
        model = LiveSchedule
        fields = ['platform_account', 'live_host', 'day_of_week', 'start_time', 'end_time',
                  'is_recurring', 'is_active', 'remarks']
        widgets = {
            'start_time': forms.TimeInput(attrs={'type': 'time'}),
            'end_time': forms.TimeInput(attrs={'type': 'time'}),
            'remarks': forms.Textarea(attrs={'rows': 3}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['platform_account'].queryset = PlatformAccount.objects.filter(
            is_active=True
        ).select_related('platform')
        self.fields['live_host'].queryset = live_host_queryset()

    def clean(self):
        cleaned_data = super().clean()
        start_time = cleaned_data.get('start_time')
        end_time = cleaned_data.get('end_time')
        if start_time and end_time and end_time <= start_time:
            self.add_error('end_time', 'End time must be after start time.')
        return cleaned_data


class LiveSessionForm(forms.ModelForm):

    class Meta:
        model = LiveSession
        fields = ['platform_account', 'live_schedule', 'live_host', 'title', 'description',
                  'scheduled_start_at']
        widgets = {
            'scheduled_start_at': forms.DateTimeInput(attrs={'type': 'datetime-local'},
                                                      format='%Y-%m-%dT%H:%M'),
            'description': forms.Textarea(attrs={'rows': 3}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['scheduled_start_at'].input_formats = ['%Y-%m-%dT%H:%M', '%Y-%m-%d %H:%M']
        self.fields['platform_account'].queryset = PlatformAccount.objects.select_related('platform')
        self.fields['live_host'].queryset = live_host_queryset()
