"""
Service layer for accounts app.

Centralized business logic for:
- Admin account creation
- Set-password tokens and links for new admins
"""

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.tokens import default_token_generator
from django.db import transaction
from django.urls import reverse
from django.utils.encoding import force_bytes
from django.utils.http import urlsafe_base64_encode

logger = logging.getLogger(__name__)


def site_url(path):
    """Absolute URL for a site path, based on SITE_URL."""
    return f"{settings.SITE_URL.rstrip('/')}{path}"


def admin_login_url():
    return site_url(reverse('accounts:admin_login'))


def set_password_url(admin, token):
    """
    Link to the page where a new admin chooses their password.

    Args:
        admin: User instance with the admin role
        token: Token from default_token_generator for this admin

    Returns:
        str: Absolute URL
    """
    uidb64 = urlsafe_base64_encode(force_bytes(admin.pk))
    return site_url(
        reverse('accounts:admin_set_password', kwargs={'uidb64': uidb64, 'token': token})
    )


def make_set_password_token(admin):
    """One-time token, invalidated as soon as the admin sets a password."""
    return default_token_generator.make_token(admin)


def create_admin_account(login, email, first_name='', last_name='', preferred_language=''):
    """
    Create an admin account without a usable password and email the
    admin a link to set one.

    Args:
        login: Admin's login
        email: Admin's email address
        first_name: Optional first name
        last_name: Optional last name
        preferred_language: Language code for emails to this admin; blank
            means ADMIN_EMAIL_LANGUAGE

    Returns:
        tuple: (admin, token, email_sent)
    """
    from apps.notifications.services import set_password_notification

    User = get_user_model()

    with transaction.atomic():
        admin = User.objects.create_user(
            login=login,
            email=email,
            password=None,
            first_name=first_name,
            last_name=last_name,
            preferred_language=preferred_language,
            role=User.Role.ADMIN,
        )

    token = make_set_password_token(admin)
    email_sent = set_password_notification(admin, token)

    if not email_sent:
        logger.warning(f'Admin account {admin.login} created but set-password email failed')

    return admin, token, email_sent


def resend_set_password_notification(admin):
    """
    Send a fresh set-password email to an existing admin.

    Returns:
        tuple: (token, email_sent)
    """
    from apps.notifications.services import set_password_notification

    token = make_set_password_token(admin)
    return token, set_password_notification(admin, token)
