"""
Django test settings for archive_notifications project.

Used by pytest-django (see pyproject.toml).
"""

from .base import *

DEBUG = False

ALLOWED_HOSTS = ['testserver', 'www.example.com']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

# Fast hashing; the Argon2 hasher is exercised in production settings only
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

DEFAULT_FROM_EMAIL = 'do-not-reply@example.org'
ADMIN_ADDRESS = 'admin@example.org'
SPAM_ALERT_ADDRESS = 'spam-alerts@example.org'
APP_SHORT_NAME = 'AO3'
SITE_URL = 'http://www.example.com'

PARENTS_WITH_IMAGE_SAFETY_MODE = []
SPAM_THRESHOLD = 10
NOTIFICATIONS_ASYNC = False

Q_CLUSTER = dict(Q_CLUSTER, sync=True)

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'null': {
            'class': 'logging.NullHandler',
        },
    },
    'root': {
        'handlers': ['null'],
        'level': 'WARNING',
    },
}
