# site_settings/tests/test_services.py
import json

from django.core.cache import cache
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase

from core.exceptions import SettingsError
from shared.constants import SettingTypes
from shared.security import SettingsEncryption, get_settings_cipher
from site_settings.models import Setting
from site_settings.services import SettingsService

from .helpers import SettingsCacheMixin


class SettingValueTest(SettingsCacheMixin, TestCase):

    def test_typed_round_trip(self):
        SettingsService.set('enable_bank_transfers', True, SettingTypes.BOOLEAN, 'payment')
        SettingsService.set('smtp_port', 587, SettingTypes.NUMBER, 'email')
        SettingsService.set('pricing.tier_discount_vip', '12.5', SettingTypes.NUMBER, 'pricing')
        SettingsService.set('feature_flags', {'wizard': True}, SettingTypes.JSON)

        self.assertIs(SettingsService.get('enable_bank_transfers'), True)
        self.assertEqual(SettingsService.get('smtp_port'), 587)
        self.assertEqual(SettingsService.get('pricing.tier_discount_vip'), 12.5)
        self.assertEqual(SettingsService.get('feature_flags'), {'wizard': True})

    def test_boolean_stored_as_digit(self):
        SettingsService.set('jnt_sandbox', 'off', SettingTypes.BOOLEAN, 'shipping')
        self.assertEqual(Setting.objects.get(key='jnt_sandbox').value, '0')
        self.assertIs(SettingsService.get('jnt_sandbox'), False)

    def test_encrypted_value_not_stored_in_clear(self):
        SettingsService.set('smtp_password', 's3cret', SettingTypes.ENCRYPTED, 'email')

        stored = Setting.objects.get(key='smtp_password').value
        self.assertNotIn('s3cret', stored)
        self.assertEqual(SettingsService.get('smtp_password'), 's3cret')

    def test_missing_key_returns_default(self):
        self.assertIsNone(SettingsService.get('site_name'))
        self.assertEqual(SettingsService.get('site_name', 'Mudeer Bedaie'), 'Mudeer Bedaie')

    def test_unknown_type_rejected(self):
        with self.assertRaises(SettingsError):
            SettingsService.set('site_name', 'x', 'colour')


class SettingsCacheTest(SettingsCacheMixin, TestCase):

    def test_set_invalidates_cached_value(self):
        SettingsService.set('site_name', 'Old')
        self.assertEqual(SettingsService.get('site_name'), 'Old')

        SettingsService.set('site_name', 'New')
        self.assertEqual(SettingsService.get('site_name'), 'New')

    def test_missing_value_is_cached_until_set(self):
        self.assertIsNone(SettingsService.get('footer_text'))
        self.assertIsNotNone(cache.get(SettingsService._cache_key('footer_text')))

        SettingsService.set('footer_text', 'Hello', group='appearance')
        self.assertEqual(SettingsService.get('footer_text'), 'Hello')

    def test_group_cache_dropped_when_key_changes_group(self):
        SettingsService.set('bank_name', 'Maybank', group='general')
        self.assertIn('bank_name', SettingsService.get_group('general'))

        SettingsService.set('bank_name', 'Maybank', group='payment')

        self.assertNotIn('bank_name', SettingsService.get_group('general'))
        self.assertEqual(SettingsService.get_group('payment'), {'bank_name': 'Maybank'})

    def test_direct_model_edit_invalidates_cache(self):
        SettingsService.set('site_name', 'Old')
        SettingsService.get('site_name')

        setting = Setting.objects.get(key='site_name')
        setting.value = 'Edited in admin'
        setting.save()

        self.assertEqual(SettingsService.get('site_name'), 'Edited in admin')

    def test_update_multiple_and_public(self):
        SettingsService.update_multiple({
            'site_name': 'Mudeer',
            'primary_color': {'value': '#000000', 'group': 'appearance'},
        })
        Setting.objects.filter(key='site_name').update(is_public=True)
        SettingsService.flush()

        self.assertEqual(SettingsService.public(), {'site_name': 'Mudeer'})
        self.assertEqual(SettingsService.all()['primary_color'], '#000000')

    def test_export_masks_encrypted(self):
        SettingsService.set('jnt_private_key', 'abc', SettingTypes.ENCRYPTED, 'shipping')

        rows = json.loads(SettingsService.export())

        self.assertEqual(rows[0]['value'], '[ENCRYPTED]')


class SettingsConfigTest(SettingsCacheMixin, TestCase):

    def test_defaults(self):
        self.assertEqual(SettingsService.get_site_config()['name'], 'Mudeer Bedaie')
        self.assertEqual(SettingsService.get_appearance_config()['primary_color'], '#3B82F6')
        self.assertEqual(SettingsService.get_pricing_tiers(), {'standard': 10, 'premium': 15, 'vip': 20})
        self.assertFalse(SettingsService.is_bank_transfer_enabled())

    def test_jnt_enabled_requires_credentials(self):
        SettingsService.set('enable_jnt_shipping', True, SettingTypes.BOOLEAN, 'shipping')
        self.assertFalse(SettingsService.is_jnt_enabled())

        SettingsService.set('jnt_customer_code', 'ITTEST0001', group='shipping')
        SettingsService.set('jnt_private_key', 'key', SettingTypes.ENCRYPTED, 'shipping')

        self.assertTrue(SettingsService.is_jnt_configured())
        self.assertTrue(SettingsService.is_jnt_enabled())

    def test_logo_upload_replaces_previous_file(self):
        first = SettingsService.set_file(SettingsService.LOGO_KEY, SimpleUploadedFile('logo.png', b'one'))
        first_path = first.value

        SettingsService.set_file(SettingsService.LOGO_KEY, SimpleUploadedFile('logo2.png', b'two'))

        self.assertFalse(default_storage.exists(first_path))
        self.assertIn('logo2', SettingsService.get_logo())

        SettingsService.remove_file(SettingsService.LOGO_KEY)
        self.assertIsNone(SettingsService.get_logo())


class SettingsEncryptionTest(TestCase):

    def test_decrypt_with_other_key_returns_default(self):
        token = SettingsEncryption(b'first-key').encrypt('secret')
        other = SettingsEncryption(b'second-key')

        self.assertEqual(other.safe_decrypt(token, default='fallback'), 'fallback')
        self.assertEqual(SettingsEncryption(b'first-key').decrypt(token), 'secret')

    def test_cipher_is_reused(self):
        self.assertIs(get_settings_cipher(), get_settings_cipher())

    def test_empty_value(self):
        self.assertIsNone(get_settings_cipher().safe_decrypt(''))
