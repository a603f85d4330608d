# site_settings/services.py
"""
Settings store: typed key/value rows cached per key, per group and in bulk.
"""
import json
import logging
import time

from django.conf import settings
from django.core.cache import cache
from django.core.files.storage import default_storage
from django.db import transaction

from core.exceptions import SettingsError
from shared.constants import SettingTypes

from .models import Setting

logger = logging.getLogger(__name__)

_MISSING = '__setting_missing__'

DEFAULT_APPEARANCE = {
    'primary_color': '#3B82F6',
    'secondary_color': '#10B981',
    'footer_text': '© 2025 Mudeer Bedaie. All rights reserved.',
}

DEFAULT_PRICING_TIERS = {
    'standard': 10,
    'premium': 15,
    'vip': 20,
}


class SettingsService:
    """Read and write application settings with cache invalidation."""

    LOGO_KEY = 'logo_path'
    FAVICON_KEY = 'favicon_path'

    # ============ CACHE HELPERS ============

    @staticmethod
    def _prefix():
        return getattr(settings, 'SETTINGS_CACHE_PREFIX', 'settings_')

    @staticmethod
    def _ttl():
        return getattr(settings, 'SETTINGS_CACHE_TTL', 3600)

    @classmethod
    def _cache_key(cls, name):
        return f"{cls._prefix()}{name}"

    @staticmethod
    def _typed(entry):
        """Rebuild a typed value from a cached {type, value} entry."""
        return Setting(type=entry['type'], value=entry['value']).get_typed_value()

    @staticmethod
    def _entries(queryset):
        return {
            setting.key: {'type': setting.type, 'value': setting.value}
            for setting in queryset
        }

    # ============ READ ============

    @classmethod
    def get(cls, key, default=None):
        """Return the typed value for key, or default when unset."""
        cache_key = cls._cache_key(key)
        entry = cache.get(cache_key)

        if entry is None:
            setting = Setting.objects.filter(key=key).first()
            entry = {'type': setting.type, 'value': setting.value} if setting else _MISSING
            cache.set(cache_key, entry, cls._ttl())

        if entry == _MISSING:
            return default

        value = cls._typed(entry)
        return default if value is None else value

    @classmethod
    def get_group(cls, group):
        cache_key = cls._cache_key(f"group_{group}")
        entries = cache.get(cache_key)
        if entries is None:
            entries = cls._entries(Setting.objects.filter(group=group))
            cache.set(cache_key, entries, cls._ttl())
        return {key: cls._typed(entry) for key, entry in entries.items()}

    @classmethod
    def all(cls):
        cache_key = cls._cache_key('all')
        entries = cache.get(cache_key)
        if entries is None:
            entries = cls._entries(Setting.objects.all())
            cache.set(cache_key, entries, cls._ttl())
        return {key: cls._typed(entry) for key, entry in entries.items()}

    @classmethod
    def public(cls):
        cache_key = cls._cache_key('public')
        entries = cache.get(cache_key)
        if entries is None:
            entries = cls._entries(Setting.objects.filter(is_public=True))
            cache.set(cache_key, entries, cls._ttl())
        return {key: cls._typed(entry) for key, entry in entries.items()}

    @staticmethod
    def exists(key):
        return Setting.objects.filter(key=key).exists()

    # ============ WRITE ============

    @classmethod
    def set(cls, key, value, type=SettingTypes.STRING, group='general', description=None):
        """Create or update a setting and drop every cache entry that may hold it."""
        if type not in dict(SettingTypes.CHOICES):
            raise SettingsError(f"Unknown setting type '{type}' for {key}")

        previous_group = Setting.objects.filter(key=key).values_list('group', flat=True).first()

        defaults = {
            'value': Setting.serialize_value(value, type),
            'type': type,
            'group': group,
        }
        if description is not None:
            defaults['description'] = description

        setting, created = Setting.objects.update_or_create(key=key, defaults=defaults)

        cls.forget(key, groups={group, previous_group})
        logger.debug(f"Setting {'created' if created else 'updated'}: {key} ({type}, group={group})")
        return setting

    @classmethod
    @transaction.atomic
    def update_multiple(cls, values, group=None):
        """
        Save several settings at once.

        Each value is either a plain value (stored as a string) or a dict
        with value/type/group/description keys.
        """
        for key, data in values.items():
            if isinstance(data, dict):
                cls.set(
                    key,
                    data.get('value'),
                    data.get('type', SettingTypes.STRING),
                    data.get('group') or group or 'general',
                    data.get('description'),
                )
            else:
                cls.set(key, data, SettingTypes.STRING, group or 'general')

    @classmethod
    def forget(cls, key, groups=None):
        """Drop the cached value for key plus the aggregate caches."""
        cache.delete(cls._cache_key(key))

        if groups is None:
            groups = set(Setting.objects.filter(key=key).values_list('group', flat=True))
        for group in groups:
            if group:
                cache.delete(cls._cache_key(f"group_{group}"))

        cache.delete(cls._cache_key('all'))
        cache.delete(cls._cache_key('public'))

    @classmethod
    def flush(cls):
        """Drop every cached setting."""
        groups = Setting.objects.values_list('group', flat=True).distinct()
        cache.delete_many([cls._cache_key(f"group_{group}") for group in groups])
        cache.delete_many([cls._cache_key(key) for key in Setting.objects.values_list('key', flat=True)])
        cache.delete(cls._cache_key('all'))
        cache.delete(cls._cache_key('public'))
        logger.info("Settings cache flushed")

    @staticmethod
    def export():
        """JSON dump of all settings with encrypted values masked."""
        rows = [
            {
                'key': setting.key,
                'value': '[ENCRYPTED]' if setting.type == SettingTypes.ENCRYPTED else setting.get_raw_value(),
                'type': setting.type,
                'group': setting.group,
                'description': setting.description,
                'is_public': setting.is_public,
            }
            for setting in Setting.objects.all()
        ]
        return json.dumps(rows, indent=2)

    # ============ FILES ============

    @staticmethod
    def upload_file(uploaded_file, directory='settings'):
        """Store an uploaded file and return its storage path."""
        filename = f"{directory}/{int(time.time())}_{uploaded_file.name}"
        return default_storage.save(filename, uploaded_file)

    @classmethod
    def set_file(cls, key, uploaded_file, group='appearance', description=None):
        """Replace the file stored under key, deleting the previous one."""
        cls._delete_stored_file(key)
        path = cls.upload_file(uploaded_file)
        return cls.set(key, path, SettingTypes.FILE, group, description)

    @classmethod
    def remove_file(cls, key):
        """Delete the stored file and clear the setting."""
        cls._delete_stored_file(key)
        setting = Setting.objects.filter(key=key).first()
        if setting:
            cls.set(key, None, SettingTypes.FILE, setting.group, setting.description)

    @staticmethod
    def _delete_stored_file(key):
        old_setting = Setting.objects.filter(key=key, type=SettingTypes.FILE).first()
        if old_setting and old_setting.value and default_storage.exists(old_setting.value):
            default_storage.delete(old_setting.value)
            logger.info(f"Deleted previous file for setting {key}: {old_setting.value}")

    @classmethod
    def _file_url(cls, key):
        setting = Setting.objects.filter(key=key, type=SettingTypes.FILE).first()
        if setting and setting.value:
            return default_storage.url(setting.value)
        return None

    @classmethod
    def get_logo(cls):
        return cls._file_url(cls.LOGO_KEY)

    @classmethod
    def get_favicon(cls):
        return cls._file_url(cls.FAVICON_KEY)

    # ============ CONFIG HELPERS ============

    @classmethod
    def get_site_config(cls):
        return {
            'name': cls.get('site_name', 'Mudeer Bedaie'),
            'description': cls.get('site_description', 'Educational Management System'),
            'admin_email': cls.get('admin_email', 'admin@example.com'),
            'timezone': cls.get('timezone', 'Asia/Kuala_Lumpur'),
            'language': cls.get('language', 'en'),
            'date_format': cls.get('date_format', 'd/m/Y'),
            'time_format': cls.get('time_format', 'h:i A'),
        }

    @classmethod
    def get_appearance_config(cls):
        return {
            'logo': cls.get_logo(),
            'favicon': cls.get_favicon(),
            'primary_color': cls.get('primary_color', DEFAULT_APPEARANCE['primary_color']),
            'secondary_color': cls.get('secondary_color', DEFAULT_APPEARANCE['secondary_color']),
            'footer_text': cls.get('footer_text', DEFAULT_APPEARANCE['footer_text']),
        }

    @classmethod
    def get_email_config(cls):
        return {
            'from_address': cls.get('mail_from_address', 'noreply@example.com'),
            'from_name': cls.get('mail_from_name', 'Mudeer Bedaie'),
            'smtp_host': cls.get('smtp_host'),
            'smtp_port': cls.get('smtp_port'),
            'smtp_username': cls.get('smtp_username'),
            'smtp_password': cls.get('smtp_password'),
            'smtp_encryption': cls.get('smtp_encryption', 'tls'),
        }

    @classmethod
    def get_bank_details(cls):
        return {
            'bank_name': cls.get('bank_name'),
            'account_name': cls.get('bank_account_name'),
            'account_number': cls.get('bank_account_number'),
            'swift_code': cls.get('bank_swift_code'),
        }

    @classmethod
    def is_bank_transfer_enabled(cls):
        return bool(cls.get('enable_bank_transfers', False))

    @classmethod
    def get_jnt_config(cls):
        return {
            'customer_code': cls.get('jnt_customer_code'),
            'private_key': cls.get('jnt_private_key'),
            'password': cls.get('jnt_password'),
            'sandbox': bool(cls.get('jnt_sandbox', True)),
            'enabled': bool(cls.get('enable_jnt_shipping', False)),
            'default_service_type': cls.get('jnt_default_service_type', 'EZ'),
        }

    @classmethod
    def is_jnt_configured(cls):
        return bool(cls.get('jnt_customer_code')) and bool(cls.get('jnt_private_key'))

    @classmethod
    def is_jnt_enabled(cls):
        return cls.is_jnt_configured() and bool(cls.get('enable_jnt_shipping', False))

    @classmethod
    def get_shipping_sender_defaults(cls):
        return {
            'name': cls.get('shipping_sender_name', ''),
            'phone': cls.get('shipping_sender_phone', ''),
            'address': cls.get('shipping_sender_address', ''),
            'city': cls.get('shipping_sender_city', ''),
            'state': cls.get('shipping_sender_state', ''),
            'postal_code': cls.get('shipping_sender_postal_code', ''),
        }

    @classmethod
    def get_pricing_tiers(cls):
        return {
            tier: cls.get(f"pricing.tier_discount_{tier}", default)
            for tier, default in DEFAULT_PRICING_TIERS.items()
        }
