"""
Custom User model for archive_notifications.

CRITICAL: This file must be created and AUTH_USER_MODEL set before running
any migrations. Changing the User model after migrations is very complex.
"""

from django.conf import settings
from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models


class UserManager(BaseUserManager):
    """
    Custom user manager where the login is the unique identifier
    for authentication instead of username.
    """

    def create_user(self, login, email, password=None, **extra_fields):
        """Create and save a regular user with the given login, email and password."""
        if not login:
            raise ValueError('The Login field must be set')
        if not email:
            raise ValueError('The Email field must be set')

        email = self.normalize_email(email)
        user = self.model(login=login, email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, login, email, password=None, **extra_fields):
        """Create and save a SuperUser with the given login, email and password."""
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('role', User.Role.ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(login, email, password, **extra_fields)

    def admins(self):
        return self.filter(role=User.Role.ADMIN)


class User(AbstractUser):
    """
    Archive account.

    Roles:
    - Admin: moderates the archive, receives admin notifications
    - User: regular archive member who posts works and comments
    """

    class Role(models.TextChoices):
        ADMIN = 'admin', 'Admin'
        USER = 'user', 'User'

    # Archive accounts are identified by login, not username
    username = None
    login = models.CharField(
        'login',
        max_length=40,
        unique=True,
        error_messages={
            'unique': 'A user with that login already exists.',
        },
    )
    email = models.EmailField('email address')

    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.USER,
        db_index=True,
    )

    # Language for emails sent to this account; blank means ADMIN_EMAIL_LANGUAGE
    preferred_language = models.CharField(
        max_length=10,
        choices=settings.LANGUAGES,
        blank=True,
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'login'
    REQUIRED_FIELDS = ['email']

    class Meta:
        verbose_name = 'user'
        verbose_name_plural = 'users'
        ordering = ['login']
        indexes = [
            models.Index(fields=['role'], name='accounts_us_role_0f9a1e_idx'),
            models.Index(fields=['is_active'], name='accounts_us_is_acti_5c1b2d_idx'),
        ]

    def __str__(self):
        return self.login

    def get_full_name(self):
        full_name = f"{self.first_name} {self.last_name}".strip()
        return full_name or self.login

    def get_short_name(self):
        return self.first_name or self.login

    def is_admin(self):
        """Check if user is an archive Admin."""
        return self.role == self.Role.ADMIN
