"""
URL configuration for archive_notifications project.
"""

from django.contrib import admin
from django.urls import path, include
from django.conf import settings

urlpatterns = [
    # Django's model admin lives here so /admin/ stays free for archive admins
    path('django-admin/', admin.site.urls),

    # App URLs
    path('', include('apps.accounts.urls', namespace='accounts')),
]

if settings.DEBUG and 'debug_toolbar' in settings.INSTALLED_APPS:
    import debug_toolbar
    urlpatterns = [
        path('__debug__/', include(debug_toolbar.urls)),
    ] + urlpatterns

# Admin site customization
admin.site.site_header = 'Archive Notifications Administration'
admin.site.site_title = 'Archive Notifications Admin'
admin.site.index_title = 'Welcome to Archive Notifications Admin'
