# shared/security/encryption.py
"""
Symmetric encryption for secrets kept in the settings store
(SMTP credentials, carrier API keys).
"""
import base64
import logging
from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from django.conf import settings

logger = logging.getLogger(__name__)


class SettingsEncryption:
    """Fernet cipher with a key derived from SETTINGS_ENCRYPTION_KEY."""

    SALT = b'mudeer-settings'
    ITERATIONS = 100000

    def __init__(self, password: bytes):
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=self.SALT,
            iterations=self.ITERATIONS,
        )
        key = base64.urlsafe_b64encode(kdf.derive(password))
        self.cipher = Fernet(key)

    def encrypt(self, data: str) -> str:
        return self.cipher.encrypt(data.encode()).decode()

    def decrypt(self, encrypted_data: str) -> str:
        """
        Decrypt a stored value.

        Raises:
            InvalidToken: If the value was encrypted with another key or is corrupt
        """
        return self.cipher.decrypt(encrypted_data.encode()).decode()

    def safe_decrypt(self, encrypted_data: str, default=None):
        """Decrypt or return default, logging values that cannot be read."""
        if not encrypted_data:
            return default
        try:
            return self.decrypt(encrypted_data)
        except InvalidToken:
            logger.error("Stored encrypted setting could not be decrypted (key changed?)")
            return default


@lru_cache(maxsize=4)
def _cipher_for(password: str) -> SettingsEncryption:
    return SettingsEncryption(password.encode())


def get_settings_cipher() -> SettingsEncryption:
    """Return the cipher for the configured key, derived once per process."""
    password = getattr(settings, 'SETTINGS_ENCRYPTION_KEY', None) or settings.SECRET_KEY
    return _cipher_for(password)
