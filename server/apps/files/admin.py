"""Django admin configuration for files app."""

from typing import override

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest

from server.apps.files.logic.content_types import classify
from server.apps.files.models import File, Folder


@admin.register(Folder)
class FolderAdmin(admin.ModelAdmin[Folder]):
    """Admin interface for Folder model."""

    list_display = [
        'name',
        'user',
        'parent',
        'created_at',
    ]

    list_filter = [
        'created_at',
        'user',
    ]

    search_fields = ['name']

    readonly_fields = ['created_at']

    raw_id_fields = ['parent']

    @override
    def get_queryset(self, request: HttpRequest) -> QuerySet[Folder]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('user', 'parent')


@admin.register(File)
class FileAdmin(admin.ModelAdmin[File]):
    """Admin interface for File model."""

    list_display = [
        'filename',
        'user',
        'folder',
        'size_display',
        'content_type',
        'category_display',
        'uploaded_at',
    ]

    list_filter = [
        'content_type',
        'uploaded_at',
        'user',
    ]

    search_fields = [
        'filename',
        'file',  # Searches the storage key
    ]

    readonly_fields = [
        'file',
        'size_bytes',
        'content_type',
        'uploaded_at',
    ]

    raw_id_fields = ['folder']

    fieldsets = (
        ('File Information', {
            'fields': ('filename', 'file', 'user', 'folder'),
        }),
        ('Metadata', {
            'fields': (
                'size_bytes',
                'content_type',
            ),
        }),
        ('Timestamps', {
            'fields': ('uploaded_at',),
        }),
    )

    def category_display(self, obj: File) -> str:
        """Display the filter category of the file.

        Args:
            obj: File instance.

        Returns:
            Category name (e.g., 'image').
        """
        return classify(obj.content_type).value
    category_display.short_description = 'Category'  # type: ignore[attr-defined]

    def size_display(self, obj: File) -> str:
        """Display file size in human-readable format.

        Args:
            obj: File instance.

        Returns:
            Formatted size string (e.g., '1.5 MB', '234 KB').
        """
        size_bytes = obj.size_bytes

        # Convert to appropriate unit
        if size_bytes < 1024:
            return f'{size_bytes} B'
        if size_bytes < 1024 * 1024:  # noqa: WPS531
            return f'{size_bytes / 1024:.1f} KB'
        if size_bytes < 1024 * 1024 * 1024:  # noqa: WPS531
            return f'{size_bytes / (1024 * 1024):.1f} MB'
        return f'{size_bytes / (1024 * 1024 * 1024):.1f} GB'
    size_display.short_description = 'Size'  # type: ignore[attr-defined]

    @override
    def get_queryset(self, request: HttpRequest) -> QuerySet[File]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('user', 'folder')
