"""
Custom password validators for archive admin accounts.

Requirements:
- Minimum 12 characters (handled by Django's MinimumLengthValidator)
- At least 1 uppercase letter
- At least 1 lowercase letter
- At least 1 number
- At least 1 special character
"""

import re
from django.core.exceptions import ValidationError
from django.utils.translation import gettext as _


class ComplexityValidator:
    """
    Validate that the password meets complexity requirements:
    - At least one uppercase letter
    - At least one lowercase letter
    - At least one digit
    - At least one special character
    """

    def __init__(self):
        self.requirements = [
            (r'[A-Z]', _('Password must contain at least one uppercase letter.')),
            (r'[a-z]', _('Password must contain at least one lowercase letter.')),
            (r'\d', _('Password must contain at least one digit.')),
            (r'[!@#$%^&*(),.?":{}|<>_+=~;\'"-]',
             _('Password must contain at least one special character.')),
        ]

    def validate(self, password, user=None):
        # Only archive admins are held to the complexity rules
        if user is not None and hasattr(user, 'is_admin') and not user.is_admin():
            return

        errors = []
        for pattern, message in self.requirements:
            if not re.search(pattern, password):
                errors.append(ValidationError(message, code='password_complexity'))

        if errors:
            raise ValidationError(errors)

    def get_help_text(self):
        return _(
            "Your password must contain at least one uppercase letter, "
            "one lowercase letter, one digit, and one special character."
        )
