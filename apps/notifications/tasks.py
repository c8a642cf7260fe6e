"""
Background jobs for notifications app.

- dispatch: Send a notification inline or through the Django-Q2 cluster
- check_spam_reports: Scheduled spam digest (daily, see setup_schedules)
"""

import logging

from django.conf import settings
from django.utils import timezone
from django.utils.module_loading import import_string
from datetime import timedelta

logger = logging.getLogger(__name__)


def dispatch(func_path, *args):
    """
    Run a notification function now, or queue it when NOTIFICATIONS_ASYNC.

    Args:
        func_path: Dotted path to the function, e.g.
                   'apps.notifications.services.comment_notification'
        *args: Positional arguments; must be picklable when queued

    Returns:
        The function's return value when run inline, the Django-Q2 task id
        when queued.
    """
    if getattr(settings, 'NOTIFICATIONS_ASYNC', False):
        from django_q.tasks import async_task

        task_id = async_task(func_path, *args, group='notifications')
        logger.debug(f'Queued {func_path} as task {task_id}')
        return task_id

    return import_string(func_path)(*args)


def check_spam_reports():
    """
    Scheduled job, runs daily.

    Collects works flagged as spam during the last SPAM_REPORT_WINDOW_HOURS
    and emails the digest to SPAM_ALERT_ADDRESS. Nothing is sent when no
    user reaches SPAM_THRESHOLD.

    Returns:
        bool: True if a spam alert was sent
    """
    from apps.reports.services import build_spam_report
    from .services import send_spam_alert

    since = timezone.now() - timedelta(hours=settings.SPAM_REPORT_WINDOW_HOURS)
    report = build_spam_report(since=since)

    if not report:
        logger.info('No users above the spam threshold, skipping spam alert')
        return False

    logger.info(f'Spam report lists {len(report)} user(s)')
    return send_spam_alert(report)
