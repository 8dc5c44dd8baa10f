"""Main URL mapping configuration file.

API routes live under ``/api/``; the Django admin under ``/admin/``.
"""

from django.contrib import admin
from django.urls import include, path

from server.apps.files import views as files_views

urlpatterns = [
    path('api/health', files_views.health, name='health'),
    path('api/auth/', include('server.apps.accounts.urls')),
    path('api/files/', include('server.apps.files.urls')),
    path('admin/', admin.site.urls),
]
