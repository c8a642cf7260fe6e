"""
Django base settings for archive_notifications project.
Shared settings between development, test and production.
"""

from pathlib import Path
from decouple import config, Csv

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = config('SECRET_KEY', default='django-insecure-change-me-in-production')

# Application definition
DJANGO_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
]

THIRD_PARTY_APPS = [
    'django_q',
]

LOCAL_APPS = [
    'apps.accounts',
    'apps.archive',
    'apps.reports',
    'apps.notifications',
]

INSTALLED_APPS = DJANGO_APPS + THIRD_PARTY_APPS + LOCAL_APPS

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.locale.LocaleMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'config.wsgi.application'


# =============================================================================
# AUTHENTICATION - Custom User Model
# =============================================================================
# Must be set BEFORE first migration
AUTH_USER_MODEL = 'accounts.User'

LOGIN_URL = 'accounts:admin_login'
LOGIN_REDIRECT_URL = '/'


# =============================================================================
# PASSWORD VALIDATION
# =============================================================================
AUTH_PASSWORD_VALIDATORS = [
    {
        'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator',
        'OPTIONS': {
            'min_length': 12,
        }
    },
    {
        'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator',
    },
    {
        'NAME': 'apps.accounts.validators.ComplexityValidator',
    },
]

# Password hashing - use Argon2 as primary
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.Argon2PasswordHasher',
    'django.contrib.auth.hashers.PBKDF2PasswordHasher',
    'django.contrib.auth.hashers.PBKDF2SHA1PasswordHasher',
]

# Set-password links for new admin accounts expire after this many seconds
PASSWORD_RESET_TIMEOUT = config('PASSWORD_RESET_TIMEOUT_HOURS', default=72, cast=int) * 3600


# =============================================================================
# INTERNATIONALIZATION & TIMEZONE
# =============================================================================
LANGUAGE_CODE = 'en-us'

LANGUAGES = [
    ('en', 'English'),
    ('de', 'German'),
    ('es', 'Spanish'),
    ('fr', 'French'),
]

LOCALE_PATHS = [BASE_DIR / 'locale']

TIME_ZONE = 'UTC'

USE_I18N = True

USE_TZ = True


# =============================================================================
# STATIC FILES
# =============================================================================
STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'


# =============================================================================
# EMAIL SETTINGS
# =============================================================================
EMAIL_BACKEND = config(
    'EMAIL_BACKEND',
    default='django.core.mail.backends.console.EmailBackend'
)
EMAIL_HOST = config('EMAIL_HOST', default='localhost')
EMAIL_PORT = config('EMAIL_PORT', default=587, cast=int)
EMAIL_USE_TLS = config('EMAIL_USE_TLS', default=True, cast=bool)
EMAIL_HOST_USER = config('EMAIL_HOST_USER', default='')
EMAIL_HOST_PASSWORD = config('EMAIL_HOST_PASSWORD', default='')

# Sender and fixed recipients for admin notifications
DEFAULT_FROM_EMAIL = config('DEFAULT_FROM_EMAIL', default='do-not-reply@example.org')
ADMIN_ADDRESS = config('ADMIN_ADDRESS', default='admin@example.org')
SPAM_ALERT_ADDRESS = config('SPAM_ALERT_ADDRESS', default='spam-alerts@example.org')

# Short name used in subject lines, e.g. "[AO3] Potential spam alert"
APP_SHORT_NAME = config('APP_SHORT_NAME', default='AO3')

# Language of emails sent to the shared admin/spam addresses, and of
# set-password emails for admins without a preferred language
ADMIN_EMAIL_LANGUAGE = config('ADMIN_EMAIL_LANGUAGE', default=LANGUAGE_CODE)

# Site URL for email links
SITE_URL = config('SITE_URL', default='http://localhost:8000')


# =============================================================================
# NOTIFICATION POLICY
# =============================================================================
# Comment parent types whose notification emails show image URLs instead of
# embedding the images, e.g. PARENTS_WITH_IMAGE_SAFETY_MODE=AdminPost,Chapter
PARENTS_WITH_IMAGE_SAFETY_MODE = config(
    'PARENTS_WITH_IMAGE_SAFETY_MODE', default='', cast=Csv()
)

# Users whose summed spam score reaches this value are listed in spam alerts
SPAM_THRESHOLD = config('SPAM_THRESHOLD', default=10, cast=int)

# Hours of flagged works covered by each scheduled spam report
SPAM_REPORT_WINDOW_HOURS = config('SPAM_REPORT_WINDOW_HOURS', default=24, cast=int)

# Hand notification emails to the Django-Q2 cluster instead of sending inline
NOTIFICATIONS_ASYNC = config('NOTIFICATIONS_ASYNC', default=True, cast=bool)

# Login of the placeholder account that receives orphaned works
ORPHAN_ACCOUNT_LOGIN = config('ORPHAN_ACCOUNT_LOGIN', default='orphan_account')


# =============================================================================
# DJANGO-Q2 SETTINGS (Background Tasks)
# =============================================================================
Q_CLUSTER = {
    'name': 'archive_notifications',
    'workers': 2,
    'recycle': 500,
    'timeout': 60,
    'compress': True,
    'save_limit': 250,
    'queue_limit': 500,
    'cpu_affinity': 1,
    'label': 'Django Q2',
    'orm': 'default',
}


# =============================================================================
# DEFAULT PRIMARY KEY FIELD TYPE
# =============================================================================
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'
