# settings/test.py
"""
Test settings: in-memory database, no migrations, quiet logging.
"""
import tempfile

from .base import *


class DisableMigrations:
    """Build test tables straight from the models."""

    def __contains__(self, item):
        return True

    def __getitem__(self, item):
        return None


DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

MIGRATION_MODULES = DisableMigrations()

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'mudeer-backoffice-test',
    }
}

MEDIA_ROOT = tempfile.mkdtemp(prefix='mudeer-media-')

SETTINGS_ENCRYPTION_KEY = 'test-encryption-key'

ACCOUNT_EMAIL_VERIFICATION = 'none'

LOGGING['root']['level'] = 'WARNING'
for logger_config in LOGGING['loggers'].values():
    logger_config['level'] = 'WARNING'
