"""Business logic for file operations and directory listings."""

import dataclasses
import itertools
import logging
from typing import TYPE_CHECKING, Any, BinaryIO

from django.conf import settings
from django.core.files.base import File as DjangoFile
from django.core.files.storage import default_storage
from django.db import transaction

from server.apps.files.exceptions import InvalidArgumentError, NotFoundError
from server.apps.files.infrastructure.metadata import (
    build_storage_key,
    detect_content_type,
    extract_filename,
    get_file_size,
)
from server.apps.files.logic.content_types import Category, category_filter
from server.apps.files.logic.folder_operations import FolderMatcher, get_folder
from server.apps.files.logic.store import find_folders, upstream_errors
from server.apps.files.models import File, Folder

if TYPE_CHECKING:
    from server.apps.files.infrastructure.storage import FileStorage

# User type for Django's dynamic user model
_User = Any

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class DirectoryListing:
    """Direct children of a folder shown on one page."""

    files: list[File]
    folders: list[Folder]


@dataclasses.dataclass(frozen=True, slots=True)
class DownloadLink:
    """Short-lived download URL for a file."""

    url: str
    filename: str


def _get_storage() -> 'FileStorage':
    """Get the configured default storage backend.

    Returns:
        FileStorage instance with proper S3 configuration.
    """
    return default_storage  # type: ignore[return-value]


def _validate_window(page: int, limit: int) -> None:
    """Reject pagination arguments that are not positive.

    Args:
        page: 1-based page number.
        limit: Page size.

    Raises:
        InvalidArgumentError: If page or limit is below 1.
    """
    if page < 1:
        raise InvalidArgumentError(f'Page must be positive, got {page}')
    if limit < 1:
        raise InvalidArgumentError(f'Limit must be positive, got {limit}')


def upload_file(
    user: _User,
    file_obj: BinaryIO | DjangoFile,
    folder_id: int | None = None,
) -> File:
    """Upload file to storage and create database record.

    Transaction safety: Upload to storage first, then create DB record.
    If DB transaction fails, the uploaded file is deleted from storage
    (rollback).

    Args:
        user: Owner of the file.
        file_obj: Uploaded file (Django UploadedFile or file-like object
            with a ``name``).
        folder_id: Target folder ID, None for the root.

    Returns:
        Created File instance.

    Raises:
        NotFoundError: If the folder doesn't exist or isn't owned by user.
        InvalidArgumentError: If the upload has no filename.
        Exception: If upload or DB operation fails.
    """
    folder = get_folder(user, folder_id) if folder_id is not None else None

    filename = extract_filename(getattr(file_obj, 'name', None))
    content_type = detect_content_type(
        getattr(file_obj, 'content_type', None),
        filename,
    )
    file_size = get_file_size(file_obj)
    storage_key = build_storage_key(user.id, filename)

    # Initialize storage
    storage = _get_storage()

    # Step 1: Upload to storage first
    try:
        logger.info('Uploading file to storage: %s', storage_key)
        saved_name = storage.save(storage_key, file_obj)
    except Exception:
        logger.exception('Failed to upload file to storage: %s', storage_key)
        raise

    # Step 2: Create database record (in transaction)
    try:
        with transaction.atomic():
            file_instance = File.objects.create(
                user=user,
                folder=folder,
                filename=filename,
                file=saved_name,  # Use actual saved name from storage
                size_bytes=file_size,
                content_type=content_type,
            )
    except Exception:
        # Rollback: Delete file from storage since DB transaction failed
        logger.exception(
            'Database transaction failed, rolling back storage upload: %s',
            saved_name,
        )
        storage.rollback_upload(saved_name)
        raise

    logger.info(
        'File record created in database: %s (ID: %d, folder: %s)',
        saved_name,
        file_instance.id,
        folder_id,
    )
    return file_instance


def get_file(user: _User, file_id: int) -> File:
    """Get a file owned by the user.

    Args:
        user: Owner of the file.
        file_id: ID of the file.

    Returns:
        File instance.

    Raises:
        NotFoundError: If the file doesn't exist or isn't owned by user.
    """
    try:
        return File.objects.get(id=file_id, user=user)
    except File.DoesNotExist as error:
        raise NotFoundError('file', file_id) from error


def delete_file(user: _User, file_id: int) -> None:
    """Delete file from database and storage.

    Transaction safety: Delete DB record first. Storage deletion is handled
    automatically by the post_delete signal handler in signals.py.

    Args:
        user: Owner of the file.
        file_id: ID of file to delete.

    Raises:
        NotFoundError: If the file doesn't exist or isn't owned by user.
        Exception: If DB deletion fails.
    """
    file_instance = get_file(user, file_id)
    logger.info(
        'Deleting file: ID=%d, key=%s',
        file_id,
        file_instance.file.name,
    )

    # Delete from database - storage cleanup handled by post_delete signal
    try:
        with transaction.atomic():
            file_instance.delete()
    except Exception:
        logger.exception('Failed to delete file from database: ID=%d', file_id)
        raise

    logger.info('File record deleted from database: ID=%d', file_id)


def get_download_url(user: _User, file_id: int) -> DownloadLink:
    """Create a presigned download link for a file.

    Args:
        user: Owner of the file.
        file_id: ID of the file.

    Returns:
        DownloadLink valid for DRIVE_DOWNLOAD_URL_EXPIRY seconds.

    Raises:
        NotFoundError: If the file doesn't exist or isn't owned by user.
    """
    file_instance = get_file(user, file_id)
    url = _get_storage().download_url(
        file_instance.file.name,
        file_instance.filename,
        expire=settings.DRIVE_DOWNLOAD_URL_EXPIRY,
    )
    return DownloadLink(url=url, filename=file_instance.filename)


def list_directory(
    user: _User,
    folder_id: int | None = None,
    page: int = 1,
    limit: int = 20,
    category: Category = Category.ALL,
) -> DirectoryListing:
    """List one page of a folder's direct children.

    Files are filtered by category, newest upload first. Folders are
    newest first; under a category filter only folders whose subtree
    holds a matching file are kept, and the page window is taken over
    those matching folders.

    Args:
        user: Owner of the folder.
        folder_id: Folder ID, None for the root.
        page: 1-based page number.
        limit: Page size.
        category: Content type filter.

    Returns:
        DirectoryListing with files and folders of the page.

    Raises:
        InvalidArgumentError: If page or limit is not positive.
        NotFoundError: If the folder doesn't exist or isn't owned by user.
        UpstreamFailureError: If a database query fails.
    """
    _validate_window(page, limit)
    if folder_id is not None:
        get_folder(user, folder_id)

    start = (page - 1) * limit
    end = page * limit
    logger.debug(
        'Listing folder %s: page=%d limit=%d filter=%s',
        folder_id,
        page,
        limit,
        category,
    )

    with upstream_errors('list files'):
        files = list(
            File.objects.filter(
                category_filter(category),
                user=user,
                folder_id=folder_id,
            ).order_by('-uploaded_at', '-id')[start:end],
        )

    folders = _matching_folders(user, folder_id, category, start, end)
    return DirectoryListing(files=files, folders=folders)


def list_recent(
    user: _User,
    limit: int = 10,
    category: Category = Category.ALL,
) -> DirectoryListing:
    """List the newest files anywhere and the newest top-level folders.

    Args:
        user: Owner of the drive.
        limit: Maximum number of files and of folders.
        category: Content type filter.

    Returns:
        DirectoryListing with recent files and root folders.

    Raises:
        InvalidArgumentError: If limit is not positive.
        UpstreamFailureError: If a database query fails.
    """
    _validate_window(1, limit)

    with upstream_errors('list recent files'):
        files = list(
            File.objects.filter(
                category_filter(category),
                user=user,
            ).order_by('-uploaded_at', '-id')[:limit],
        )

    folders = _matching_folders(user, None, category, 0, limit)
    return DirectoryListing(files=files, folders=folders)


def _matching_folders(
    user: _User,
    parent_id: int | None,
    category: Category,
    start: int,
    end: int,
) -> list[Folder]:
    if category == Category.ALL:
        with upstream_errors('list folders'):
            return list(
                Folder.objects.filter(
                    user=user,
                    parent_id=parent_id,
                ).order_by('-created_at', '-id')[start:end],
            )

    matcher = FolderMatcher(user, category)
    candidates = find_folders(user, parent_id)
    matching = (folder for folder in candidates if matcher.matches(folder.id))
    return list(itertools.islice(matching, start, end))
