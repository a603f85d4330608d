from .encryption import SettingsEncryption, get_settings_cipher

__all__ = ['SettingsEncryption', 'get_settings_cipher']
