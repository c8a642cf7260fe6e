"""
Admin configuration for accounts app.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.forms import UserChangeForm as BaseUserChangeForm
from django.contrib.auth.forms import UserCreationForm as BaseUserCreationForm
from django.utils.translation import gettext_lazy as _
from django.utils.html import format_html

from .models import User


class UserCreationForm(BaseUserCreationForm):
    class Meta:
        model = User
        fields = ('login', 'email', 'role')


class UserChangeForm(BaseUserChangeForm):
    class Meta:
        model = User
        fields = '__all__'


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Custom User admin with login authentication and archive roles.
    """

    form = UserChangeForm
    add_form = UserCreationForm

    list_display = ('login', 'email', 'role_display', 'is_active', 'created_at')
    list_filter = ('role', 'is_active', 'is_staff')
    search_fields = ('login', 'email', 'first_name', 'last_name')
    ordering = ('login',)
    list_per_page = 25

    fieldsets = (
        (None, {'fields': ('login', 'email', 'password')}),
        (_('Personal Info'), {'fields': ('first_name', 'last_name', 'preferred_language')}),
        (_('Role'), {'fields': ('role',)}),
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',),
        }),
        (_('Important dates'), {
            'fields': ('last_login', 'created_at', 'updated_at'),
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('login', 'email', 'password1', 'password2', 'role'),
        }),
    )

    readonly_fields = ('created_at', 'updated_at', 'last_login')

    actions = ['send_set_password_emails']

    def role_display(self, obj):
        """Display role with color coding."""
        colors = {
            'admin': '#7C3AED',  # Purple
            'user': '#059669',   # Green
        }
        color = colors.get(obj.role, '#6B7280')
        return format_html(
            '<span style="background-color: {}; color: white; padding: 2px 8px; '
            'border-radius: 4px; font-size: 11px; font-weight: 500;">{}</span>',
            color, obj.get_role_display()
        )
    role_display.short_description = 'Role'
    role_display.admin_order_field = 'role'

    def send_set_password_emails(self, request, queryset):
        """Email selected admins a fresh set-password link."""
        from .services import resend_set_password_notification
        sent = 0
        for user in queryset.filter(role=User.Role.ADMIN):
            _token, email_sent = resend_set_password_notification(user)
            if email_sent:
                sent += 1
        self.message_user(request, f'Set-password email sent to {sent} admin(s).')
    send_set_password_emails.short_description = 'Send set-password email to selected admins'
