"""
URL configuration for accounts app.

Includes:
- Admin login (linked from the set-password email)
- Set-password confirmation for newly created admin accounts
"""

from django.contrib.auth import views as auth_views
from django.urls import path, reverse_lazy

app_name = 'accounts'

urlpatterns = [
    path(
        'admin/login',
        auth_views.LoginView.as_view(template_name='accounts/admin_login.html'),
        name='admin_login',
    ),
    path(
        'admin/password/set/<uidb64>/<token>/',
        auth_views.PasswordResetConfirmView.as_view(
            template_name='accounts/set_password.html',
            success_url=reverse_lazy('accounts:admin_set_password_done'),
        ),
        name='admin_set_password',
    ),
    path(
        'admin/password/set/done/',
        auth_views.PasswordResetCompleteView.as_view(
            template_name='accounts/set_password_done.html',
        ),
        name='admin_set_password_done',
    ),
]
