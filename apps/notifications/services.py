"""
Service layer for notifications app.

Admin mailer: emails sent to archive admins about moderation events.
- Comments and edited comments on admin posts
- Potential spam digests
- Set-password emails for new admin accounts

Every email is multipart (plain text body + HTML alternative) rendered from
notifications/emails/<name>.txt and .html, in the recipient's language.
"""

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils import translation
from django.utils.translation import gettext as _

from apps.archive.models import Comment, Work

from .policy import (
    ImageSafetyMode,
    aggregate_spam_report,
    filter_images,
    sanitize_html,
    text_variant,
)

logger = logging.getLogger(__name__)


def _subject(text, **kwargs):
    """Prefix a subject line with the site's short name, e.g. "[AO3] ..."."""
    return f"[{settings.APP_SHORT_NAME}] {text % kwargs if kwargs else text}"


def email_language(user=None):
    """
    Language for an email: the user's preferred language when set,
    otherwise ADMIN_EMAIL_LANGUAGE.
    """
    language = getattr(user, 'preferred_language', '') if user is not None else ''
    return language or settings.ADMIN_EMAIL_LANGUAGE


def image_safety_mode():
    """Current image safety configuration, read from settings per call."""
    return ImageSafetyMode.from_setting(
        getattr(settings, 'PARENTS_WITH_IMAGE_SAFETY_MODE', None)
    )


def send_notification_email(to_email, subject, template_name, context, from_email=None):
    """
    Generic email sending function with HTML/text templates.

    Renders in the active language; callers pick it with
    translation.override().

    Args:
        to_email: Recipient email address
        subject: Email subject
        template_name: Base template name (without extension)
        context: Template context dict
        from_email: Sender email (defaults to DEFAULT_FROM_EMAIL)

    Returns:
        bool: True if email sent successfully
    """
    context = dict(context, app_name=settings.APP_SHORT_NAME, site_url=settings.SITE_URL)

    html_content = render_to_string(f'{template_name}.html', context)
    text_content = render_to_string(f'{template_name}.txt', context)

    try:
        email = EmailMultiAlternatives(
            subject=subject,
            body=text_content,
            from_email=from_email or settings.DEFAULT_FROM_EMAIL,
            to=[to_email],
            headers={'Content-Language': translation.get_language()},
        )
        email.attach_alternative(html_content, 'text/html')
        email.send()
    except Exception as e:
        # Log the error but don't raise - the triggering action already happened
        logger.error(f'Failed to send "{subject}" to {to_email}: {e}')
        return False

    logger.info(f'Sent "{subject}" to {to_email}')
    return True


def _load_comment(comment_id, kind):
    """Fetch a comment for a notification, or None if it can't be shown."""
    comment = Comment.objects.filter(pk=comment_id).first()
    if comment is None:
        logger.warning(f'Comment {comment_id} no longer exists, skipping {kind}')
        return None

    if comment.parent is None:
        logger.warning(f'Comment {comment_id} has no parent any more, skipping {kind}')
        return None

    return comment


def _comment_context(comment):
    category = comment.parent_type
    config = image_safety_mode()
    content = sanitize_html(comment.comment_content)
    return {
        'comment': comment,
        'commenter_name': comment.commenter_name,
        'parent': comment.parent,
        'parent_name': comment.parent.commentable_name,
        'html_content': filter_images(content, category, config),
        'text_content': text_variant(content, category, config),
    }


def comment_notification(comment_id):
    """
    Tell admins about a new comment on an admin post.

    Args:
        comment_id: Primary key of the comment

    Returns:
        bool: True if email sent successfully
    """
    comment = _load_comment(comment_id, 'comment notification')
    if comment is None:
        return False

    with translation.override(email_language()):
        context = _comment_context(comment)
        subject = _subject(_('Comment on %(name)s'), name=context['parent_name'])

        return send_notification_email(
            to_email=settings.ADMIN_ADDRESS,
            subject=subject,
            template_name='notifications/emails/comment_notification',
            context=context,
        )


def edited_comment_notification(comment_id):
    """
    Tell admins that a comment on an admin post was edited.

    Returns:
        bool: True if email sent successfully
    """
    comment = _load_comment(comment_id, 'edited comment notification')
    if comment is None:
        return False

    with translation.override(email_language()):
        context = _comment_context(comment)
        subject = _subject(_('Edited comment on %(name)s'), name=context['parent_name'])

        return send_notification_email(
            to_email=settings.ADMIN_ADDRESS,
            subject=subject,
            template_name='notifications/emails/edited_comment_notification',
            context=context,
        )


def _resolve_user(user_id):
    user = get_user_model().objects.filter(pk=user_id).only('login').first()
    return user.login if user else None


def _resolve_work_title(work_id):
    work = Work.objects.filter(pk=work_id).only('title').first()
    return work.title if work else None


def send_spam_alert(report):
    """
    Send the potential spam digest to the spam alert address.

    Args:
        report: Ordered {user_id: {"score": int, "work_ids": [...]}} mapping,
                highest priority first

    Returns:
        bool: True if an email was sent. False when every reported user has
        since been deleted (nothing to send) or sending failed.
    """
    sections = aggregate_spam_report(report, _resolve_user, _resolve_work_title)
    if not sections:
        logger.info('Spam report has no remaining users, not sending spam alert')
        return False

    with translation.override(email_language()):
        return send_notification_email(
            to_email=settings.SPAM_ALERT_ADDRESS,
            subject=_subject(_('Potential spam alert')),
            template_name='notifications/emails/send_spam_alert',
            context={'sections': sections},
        )


def set_password_notification(admin, token):
    """
    Email a new admin their login details and a link to set a password.

    Sent in the admin's preferred language.

    Args:
        admin: User instance with the admin role
        token: Set-password token for this admin

    Returns:
        bool: True if email sent successfully
    """
    from apps.accounts.services import admin_login_url, set_password_url

    context = {
        'admin': admin,
        'token': token,
        'login_url': admin_login_url(),
        'set_password_url': set_password_url(admin, token),
    }

    with translation.override(email_language(admin)):
        subject = _subject(
            _('Your %(app_name)s admin account'), app_name=settings.APP_SHORT_NAME
        )

        return send_notification_email(
            to_email=admin.email,
            subject=subject,
            template_name='notifications/emails/set_password_notification',
            context=context,
        )
