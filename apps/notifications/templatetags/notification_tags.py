"""
Template filters for notification emails.

Filters:
- spam_score: Format a spam score as a whole number with thousands separators

Usage:
    {% load notification_tags %}

    {{ section.score|spam_score }}
"""

from django import template

register = template.Library()


@register.filter
def spam_score(value):
    """
    Format a spam score for display.

    Examples:
        13 -> "13"
        1250 -> "1,250"
        None -> "N/A"
    """
    if value is None:
        return "N/A"

    try:
        value = int(value)
    except (ValueError, TypeError):
        return "N/A"

    return f"{value:,}"
