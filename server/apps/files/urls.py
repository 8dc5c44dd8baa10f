"""URL routes for files app."""

from django.urls import path

from server.apps.files import views

app_name = 'files'

urlpatterns = [
    path('', views.listing, name='listing'),
    path('recent', views.recent, name='recent'),
    path('search', views.search_drive, name='search'),
    path('upload', views.upload, name='upload'),
    path('folders', views.folders, name='folders'),
    path(
        'folders/<int:folder_id>',
        views.folder_detail,
        name='folder_detail',
    ),
    path(
        'folders/<int:folder_id>/breadcrumbs',
        views.folder_breadcrumbs,
        name='folder_breadcrumbs',
    ),
    path(
        'folders/<int:folder_id>/size',
        views.folder_size,
        name='folder_size',
    ),
    path('export/<int:file_id>', views.export, name='export'),
    path('<int:file_id>', views.file_detail, name='file_detail'),
]
