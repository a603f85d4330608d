# site_settings/forms.py
"""
Forms for the settings screens. Each form maps its fields onto setting keys.
"""
from django import forms
from django.conf import settings
from django.core.validators import RegexValidator

from shared.constants import SettingTypes

COLOR_VALIDATOR = RegexValidator(
    regex=r'^#[a-fA-F0-9]{6}$',
    message='Enter a hex colour such as #3B82F6.',
)

LOGO_MAX_SIZE = settings.LOGO_MAX_UPLOAD_SIZE
FAVICON_MAX_SIZE = settings.FAVICON_MAX_UPLOAD_SIZE

TIMEZONE_CHOICES = (
    ('Asia/Kuala_Lumpur', 'Asia/Kuala Lumpur'),
    ('Asia/Singapore', 'Asia/Singapore'),
    ('Asia/Jakarta', 'Asia/Jakarta'),
    ('UTC', 'UTC'),
)

DATE_FORMAT_CHOICES = (
    ('d/m/Y', 'DD/MM/YYYY'),
    ('m/d/Y', 'MM/DD/YYYY'),
    ('Y-m-d', 'YYYY-MM-DD'),
)

ENCRYPTION_CHOICES = (
    ('tls', 'TLS'),
    ('ssl', 'SSL'),
    ('none', 'None'),
)

JNT_SERVICE_CHOICES = (
    ('EZ', 'EZ (Standard)'),
    ('EX', 'EX (Express)'),
    ('FD', 'FD (Fresh Delivery)'),
)


class SettingsForm(forms.Form):
    """
    Base form for a settings group.

    SETTING_FIELDS maps form field -> (setting key, setting type).
    Secret fields left blank keep their stored value.
    """
    GROUP = 'general'
    SETTING_FIELDS = {}
    SECRET_FIELDS = ()

    @classmethod
    def initial_from(cls, service):
        initial = {}
        for field, (key, _) in cls.SETTING_FIELDS.items():
            if field in cls.SECRET_FIELDS:
                continue
            value = service.get(key)
            if value is not None:
                initial[field] = value
        return initial

    def setting_values(self):
        values = {}
        for field, (key, setting_type) in self.SETTING_FIELDS.items():
            value = self.cleaned_data.get(field)
            if field in self.SECRET_FIELDS and not value:
                continue
            values[key] = {'value': value, 'type': setting_type, 'group': self.GROUP}
        return values


class GeneralSettingsForm(SettingsForm):
    GROUP = 'general'
    SETTING_FIELDS = {
        'site_name': ('site_name', SettingTypes.STRING),
        'site_description': ('site_description', SettingTypes.TEXT),
        'admin_email': ('admin_email', SettingTypes.STRING),
        'timezone': ('timezone', SettingTypes.STRING),
        'date_format': ('date_format', SettingTypes.STRING),
    }

    site_name = forms.CharField(max_length=255)
    site_description = forms.CharField(max_length=1000, required=False, widget=forms.Textarea(attrs={'rows': 3}))
    admin_email = forms.EmailField()
    timezone = forms.ChoiceField(choices=TIMEZONE_CHOICES)
    date_format = forms.ChoiceField(choices=DATE_FORMAT_CHOICES)

    @classmethod
    def initial_from(cls, service):
        config = service.get_site_config()
        return {
            'site_name': config['name'],
            'site_description': config['description'],
            'admin_email': config['admin_email'],
            'timezone': config['timezone'],
            'date_format': config['date_format'],
        }


class AppearanceSettingsForm(SettingsForm):
    GROUP = 'appearance'
    SETTING_FIELDS = {
        'primary_color': ('primary_color', SettingTypes.STRING),
        'secondary_color': ('secondary_color', SettingTypes.STRING),
        'footer_text': ('footer_text', SettingTypes.STRING),
    }

    primary_color = forms.CharField(max_length=7, validators=[COLOR_VALIDATOR])
    secondary_color = forms.CharField(max_length=7, validators=[COLOR_VALIDATOR])
    footer_text = forms.CharField(max_length=255, required=False)
    logo = forms.ImageField(required=False)
    favicon = forms.ImageField(required=False)

    def clean_logo(self):
        logo = self.cleaned_data.get('logo')
        if logo and logo.size > LOGO_MAX_SIZE:
            raise forms.ValidationError('Logo must be 2MB or smaller.')
        return logo

    def clean_favicon(self):
        favicon = self.cleaned_data.get('favicon')
        if favicon and favicon.size > FAVICON_MAX_SIZE:
            raise forms.ValidationError('Favicon must be 512KB or smaller.')
        return favicon


class EmailSettingsForm(SettingsForm):
    GROUP = 'email'
    SETTING_FIELDS = {
        'from_address': ('mail_from_address', SettingTypes.STRING),
        'from_name': ('mail_from_name', SettingTypes.STRING),
        'smtp_host': ('smtp_host', SettingTypes.STRING),
        'smtp_port': ('smtp_port', SettingTypes.NUMBER),
        'smtp_username': ('smtp_username', SettingTypes.ENCRYPTED),
        'smtp_password': ('smtp_password', SettingTypes.ENCRYPTED),
        'smtp_encryption': ('smtp_encryption', SettingTypes.STRING),
    }
    SECRET_FIELDS = ('smtp_password',)

    from_address = forms.EmailField()
    from_name = forms.CharField(max_length=255, required=False)
    smtp_host = forms.CharField(max_length=255, required=False)
    smtp_port = forms.IntegerField(min_value=1, max_value=65535, required=False)
    smtp_username = forms.CharField(max_length=255, required=False)
    smtp_password = forms.CharField(
        max_length=255, required=False,
        widget=forms.PasswordInput(render_value=False, attrs={'placeholder': 'Leave blank to keep current'}),
    )
    smtp_encryption = forms.ChoiceField(choices=ENCRYPTION_CHOICES, initial='tls')


class TestEmailForm(forms.Form):
    test_email = forms.EmailField()


class ShippingSettingsForm(SettingsForm):
    GROUP = 'shipping'
    SETTING_FIELDS = {
        'jnt_customer_code': ('jnt_customer_code', SettingTypes.STRING),
        'jnt_private_key': ('jnt_private_key', SettingTypes.ENCRYPTED),
        'jnt_password': ('jnt_password', SettingTypes.ENCRYPTED),
        'jnt_sandbox': ('jnt_sandbox', SettingTypes.BOOLEAN),
        'enable_jnt_shipping': ('enable_jnt_shipping', SettingTypes.BOOLEAN),
        'jnt_default_service_type': ('jnt_default_service_type', SettingTypes.STRING),
        'sender_name': ('shipping_sender_name', SettingTypes.STRING),
        'sender_phone': ('shipping_sender_phone', SettingTypes.STRING),
        'sender_address': ('shipping_sender_address', SettingTypes.TEXT),
        'sender_city': ('shipping_sender_city', SettingTypes.STRING),
        'sender_state': ('shipping_sender_state', SettingTypes.STRING),
        'sender_postal_code': ('shipping_sender_postal_code', SettingTypes.STRING),
    }
    SECRET_FIELDS = ('jnt_private_key', 'jnt_password')

    jnt_customer_code = forms.CharField(max_length=100, required=False)
    jnt_private_key = forms.CharField(
        max_length=500, required=False,
        widget=forms.PasswordInput(render_value=False, attrs={'placeholder': 'Leave blank to keep current'}),
    )
    jnt_password = forms.CharField(
        max_length=255, required=False,
        widget=forms.PasswordInput(render_value=False, attrs={'placeholder': 'Leave blank to keep current'}),
    )
    jnt_sandbox = forms.BooleanField(required=False, initial=True)
    enable_jnt_shipping = forms.BooleanField(required=False)
    jnt_default_service_type = forms.ChoiceField(choices=JNT_SERVICE_CHOICES, initial='EZ')
    sender_name = forms.CharField(max_length=255, required=False)
    sender_phone = forms.CharField(max_length=20, required=False)
    sender_address = forms.CharField(max_length=500, required=False, widget=forms.Textarea(attrs={'rows': 2}))
    sender_city = forms.CharField(max_length=100, required=False)
    sender_state = forms.CharField(max_length=100, required=False)
    sender_postal_code = forms.CharField(max_length=10, required=False)


class PricingSettingsForm(SettingsForm):
    GROUP = 'pricing'
    SETTING_FIELDS = {
        'tier_discount_standard': ('pricing.tier_discount_standard', SettingTypes.NUMBER),
        'tier_discount_premium': ('pricing.tier_discount_premium', SettingTypes.NUMBER),
        'tier_discount_vip': ('pricing.tier_discount_vip', SettingTypes.NUMBER),
    }

    tier_discount_standard = forms.DecimalField(min_value=0, max_value=100, decimal_places=2)
    tier_discount_premium = forms.DecimalField(min_value=0, max_value=100, decimal_places=2)
    tier_discount_vip = forms.DecimalField(min_value=0, max_value=100, decimal_places=2)

    @classmethod
    def initial_from(cls, service):
        return {f"tier_discount_{tier}": value for tier, value in service.get_pricing_tiers().items()}


class BankSettingsForm(SettingsForm):
    GROUP = 'payment'
    SETTING_FIELDS = {
        'bank_name': ('bank_name', SettingTypes.STRING),
        'account_name': ('bank_account_name', SettingTypes.STRING),
        'account_number': ('bank_account_number', SettingTypes.STRING),
        'swift_code': ('bank_swift_code', SettingTypes.STRING),
        'enable_bank_transfers': ('enable_bank_transfers', SettingTypes.BOOLEAN),
    }

    bank_name = forms.CharField(max_length=255, required=False)
    account_name = forms.CharField(max_length=255, required=False)
    account_number = forms.CharField(max_length=50, required=False)
    swift_code = forms.CharField(max_length=20, required=False)
    enable_bank_transfers = forms.BooleanField(required=False)

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('enable_bank_transfers'):
            for field in ('bank_name', 'account_name', 'account_number'):
                if not cleaned_data.get(field):
                    self.add_error(field, 'Required when bank transfers are enabled.')
        return cleaned_data
