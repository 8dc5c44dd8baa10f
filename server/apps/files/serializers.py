"""JSON representations of drive entities."""

from typing import Any

from server.apps.files.logic.content_types import classify
from server.apps.files.logic.file_operations import DirectoryListing
from server.apps.files.logic.search_operations import SearchMatch
from server.apps.files.models import File, Folder


def serialize_folder(folder: Folder) -> dict[str, Any]:
    """Represent a folder for the API.

    Args:
        folder: Folder instance.

    Returns:
        JSON-ready dictionary.
    """
    return {
        'id': folder.id,
        'name': folder.name,
        'parentId': folder.parent_id,
        'createdAt': folder.created_at.isoformat(),
    }


def serialize_file(file_instance: File) -> dict[str, Any]:
    """Represent a file for the API.

    Args:
        file_instance: File instance.

    Returns:
        JSON-ready dictionary.
    """
    return {
        'id': file_instance.id,
        'filename': file_instance.filename,
        'size': file_instance.size_bytes,
        'contentType': file_instance.content_type,
        'category': classify(file_instance.content_type).value,
        'folderId': file_instance.folder_id,
        'uploadTime': file_instance.uploaded_at.isoformat(),
    }


def serialize_listing(listing: DirectoryListing) -> dict[str, Any]:
    """Represent a directory page for the API."""
    return {
        'files': [serialize_file(item) for item in listing.files],
        'folders': [serialize_folder(item) for item in listing.folders],
    }


def serialize_match(match: SearchMatch) -> dict[str, Any]:
    """Represent a search hit, tagged with its kind and folder path."""
    if isinstance(match.item, Folder):
        payload = serialize_folder(match.item)
        payload['kind'] = 'folder'
    else:
        payload = serialize_file(match.item)
        payload['kind'] = 'file'
    payload['folderPath'] = match.folder_path
    return payload
