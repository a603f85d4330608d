# billing/forms.py
from django import forms


class PaymentRejectForm(forms.Form):
    reason = forms.CharField(
        required=False,
        max_length=500,
        widget=forms.Textarea(attrs={'rows': 3, 'placeholder': 'Reason for rejection'}),
    )


class PaymentRefundForm(forms.Form):
    note = forms.CharField(
        required=False,
        max_length=500,
        widget=forms.Textarea(attrs={'rows': 3}),
    )


class OrderFailForm(forms.Form):
    reason = forms.CharField(required=False, max_length=500)
