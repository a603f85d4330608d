# settings/development.py
"""
Development settings for the Mudeer back office.
"""
from .base import *

# Debug settings
DEBUG = True
ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0']

INTERNAL_IPS = [
    '127.0.0.1',
    'localhost',
]

# Database configuration for development
DATABASES['default'].update({
    'ATOMIC_REQUESTS': True,
})

# Email configuration for development
EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

# Logging configuration for development
(BASE_DIR / 'logs').mkdir(exist_ok=True)

LOGGING['handlers']['file'] = {
    'level': 'DEBUG',
    'class': 'logging.FileHandler',
    'filename': BASE_DIR / 'logs' / 'development.log',
    'formatter': 'verbose',
}

LOGGING['handlers']['billing_file'] = {
    'level': 'DEBUG',
    'class': 'logging.FileHandler',
    'filename': BASE_DIR / 'logs' / 'billing_development.log',
    'formatter': 'verbose',
}

LOGGING['loggers']['django']['handlers'] = ['console', 'file']

# Domain app loggers
for app_logger in ('students', 'teachers', 'courses', 'enrollments', 'live', 'funnels'):
    LOGGING['loggers'].setdefault(app_logger, {
        'handlers': ['console', 'file'],
        'level': 'DEBUG',
        'propagate': False,
    })

LOGGING['loggers'].setdefault('billing', {
    'handlers': ['console', 'billing_file'],
    'level': 'DEBUG',
    'propagate': False,
})

# Disable security settings for development
SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False
SECURE_SSL_REDIRECT = False

# Allow all origins in development
CORS_ALLOW_ALL_ORIGINS = True

# Cache configuration for development
CACHES['default'] = {
    'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    'LOCATION': 'mudeer-backoffice-dev',
}

# Allauth development settings
ACCOUNT_EMAIL_VERIFICATION = 'none'
