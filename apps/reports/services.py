"""
Service layer for reports app.

Builds the potential spam report consumed by
apps.notifications.services.send_spam_alert.
"""

from django.conf import settings

from apps.archive.models import Work


def build_spam_report(since=None, threshold=None):
    """
    Group works flagged as spam by author.

    Args:
        since: Only include works checked at or after this datetime (optional)
        threshold: Minimum summed score for a user to be listed
                   (defaults to SPAM_THRESHOLD)

    Returns:
        dict: {user_id: {"score": int, "work_ids": [work ids, oldest first]}},
        ordered by score (highest first), then user id. Empty if no user
        reaches the threshold.
    """
    if threshold is None:
        threshold = settings.SPAM_THRESHOLD

    works = Work.objects.filter(spam=True).order_by('created_at', 'id')
    if since is not None:
        works = works.filter(spam_checked_at__gte=since)

    totals = {}
    for work in works.prefetch_related('authors'):
        for author in work.authors.all():
            # The orphan account is never reported
            if author.login == settings.ORPHAN_ACCOUNT_LOGIN:
                continue
            entry = totals.setdefault(author.pk, {'score': 0, 'work_ids': []})
            entry['score'] += work.spam_score
            entry['work_ids'].append(work.pk)

    flagged = [
        (user_id, entry) for user_id, entry in totals.items()
        if entry['score'] >= threshold
    ]
    flagged.sort(key=lambda item: (-item[1]['score'], item[0]))
    return dict(flagged)
