"""
Service layer for archive app.

Services:
- add_comment: Post a comment, alerting admins about comments on admin posts
- edit_comment: Update a comment, alerting admins when it is on an admin post
- orphan_works: Hand a user's works to the orphan account
- delete_user: Orphan a user's works and remove the account
"""

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from apps.notifications.policy import sanitize_html
from apps.notifications.tasks import dispatch

from .models import AdminPost, Comment

logger = logging.getLogger(__name__)


def _notifies_admins(comment):
    return isinstance(comment.parent, AdminPost)


def add_comment(commentable, comment_content, user=None, name='', email=''):
    """
    Post a comment on an admin post, chapter, tag or another comment.

    Args:
        commentable: Object being commented on
        comment_content: HTML body, sanitized before saving
        user: Logged-in commenter (optional)
        name: Guest commenter name, required without a user
        email: Guest commenter email, required without a user

    Returns:
        Created Comment instance

    Raises:
        ValidationError: If the content is empty or a guest gives no name/email
    """
    comment_content = sanitize_html(comment_content)
    if not comment_content.strip():
        raise ValidationError("Comment content is required.")

    if user is None and not (name and email):
        raise ValidationError("Guest comments need a name and an email address.")

    with transaction.atomic():
        comment = Comment.objects.create(
            commentable=commentable,
            user=user,
            name=name,
            email=email,
            comment_content=comment_content,
        )

        if _notifies_admins(comment):
            transaction.on_commit(
                lambda: dispatch('apps.notifications.services.comment_notification', comment.id)
            )

    return comment


def edit_comment(comment, comment_content):
    """
    Replace a comment's content and stamp it as edited.

    The new content is sanitized first; an edit that sanitizes to the
    current content changes nothing and notifies nobody.

    Returns:
        Updated Comment instance
    """
    comment_content = sanitize_html(comment_content)
    if not comment_content.strip():
        raise ValidationError("Comment content is required.")

    if comment_content == comment.comment_content:
        return comment

    with transaction.atomic():
        comment.comment_content = comment_content
        comment.edited_at = timezone.now()
        comment.save(update_fields=['comment_content', 'edited_at'])

        if _notifies_admins(comment):
            transaction.on_commit(
                lambda: dispatch('apps.notifications.services.edited_comment_notification', comment.id)
            )

    return comment


def get_orphan_account():
    """Return the placeholder account for orphaned works, creating it if needed."""
    User = get_user_model()
    orphan, created = User.objects.get_or_create(
        login=settings.ORPHAN_ACCOUNT_LOGIN,
        defaults={'email': f'{settings.ORPHAN_ACCOUNT_LOGIN}@example.org'},
    )
    if created:
        orphan.set_unusable_password()
        orphan.save(update_fields=['password'])
    return orphan


def orphan_works(user, works=None):
    """
    Move authorship of a user's works to the orphan account.

    Args:
        user: User giving up the works
        works: Iterable of works (defaults to all of the user's works)

    Returns:
        int: Number of works orphaned
    """
    orphan = get_orphan_account()
    if works is None:
        works = list(user.works.all())

    count = 0
    with transaction.atomic():
        for work in works:
            work.authors.remove(user)
            work.authors.add(orphan)
            count += 1

    logger.info(f'Orphaned {count} work(s) from {user.login}')
    return count


def delete_user(user):
    """
    Delete an account after orphaning its works.

    Spam alerts that still reference the account skip it silently.
    """
    login = user.login
    with transaction.atomic():
        orphan_works(user)
        user.delete()
    logger.info(f'Deleted user {login}')
