# site_settings/models.py
import json
import logging
from decimal import Decimal, InvalidOperation

from django.db import models

from shared.constants import SettingTypes

logger = logging.getLogger(__name__)


class Setting(models.Model):
    """Typed key/value configuration row."""

    key = models.CharField(max_length=150, unique=True)
    value = models.TextField(blank=True, null=True)
    type = models.CharField(max_length=20, choices=SettingTypes.CHOICES, default=SettingTypes.STRING)
    group = models.CharField(max_length=50, default='general', db_index=True)
    description = models.CharField(max_length=255, blank=True, null=True)
    is_public = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'settings'
        ordering = ['group', 'key']
        verbose_name = 'Setting'
        verbose_name_plural = 'Settings'
        indexes = [
            models.Index(fields=['group']),
            models.Index(fields=['is_public']),
        ]

    def __str__(self):
        return f"{self.group}.{self.key}"

    def get_raw_value(self):
        return self.value

    def get_typed_value(self):
        """Convert the stored text into the Python value for its type."""
        raw = self.value
        if raw is None:
            return None

        if self.type == SettingTypes.BOOLEAN:
            return str(raw).strip().lower() in ('1', 'true', 'yes', 'on')

        if self.type == SettingTypes.NUMBER:
            try:
                number = Decimal(str(raw))
            except (InvalidOperation, ValueError):
                logger.warning(f"Setting {self.key} holds a non-numeric value")
                return None
            return int(number) if number == number.to_integral_value() else float(number)

        if self.type == SettingTypes.JSON:
            try:
                return json.loads(raw)
            except ValueError:
                logger.warning(f"Setting {self.key} holds invalid JSON")
                return None

        if self.type == SettingTypes.ENCRYPTED:
            from shared.security import get_settings_cipher
            return get_settings_cipher().safe_decrypt(raw)

        return raw

    @staticmethod
    def serialize_value(value, setting_type):
        """Convert a Python value into the text stored in the database."""
        if value is None:
            return None

        if setting_type == SettingTypes.BOOLEAN:
            return '1' if value in (True, 1, '1', 'true', 'True', 'on', 'yes') else '0'

        if setting_type == SettingTypes.JSON:
            return json.dumps(value)

        if setting_type == SettingTypes.ENCRYPTED:
            if value == '':
                return ''
            from shared.security import get_settings_cipher
            return get_settings_cipher().encrypt(str(value))

        return str(value)
