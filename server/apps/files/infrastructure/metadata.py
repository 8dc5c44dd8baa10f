"""Metadata extraction utilities for uploads."""

import mimetypes
import time
from pathlib import Path
from typing import Any, BinaryIO, Final

from server.apps.files.exceptions import InvalidArgumentError

_DEFAULT_CONTENT_TYPE: Final = 'application/octet-stream'


def detect_content_type(declared_type: str | None, filename: str) -> str:
    """Pick the content type recorded for an upload.

    The type declared by the client wins; otherwise it is guessed
    from the filename extension.

    Args:
        declared_type: Content type sent with the upload, may be empty.
        filename: Filename with extension.

    Returns:
        MIME type string (e.g., 'image/jpeg', 'application/pdf').
        Returns 'application/octet-stream' if type cannot be determined.
    """
    if declared_type:
        return declared_type
    mime_type, _ = mimetypes.guess_type(filename)
    if mime_type is None:
        return _DEFAULT_CONTENT_TYPE
    return mime_type


def extract_filename(raw_name: str | None) -> str:
    """Reduce an uploaded name to its final path component.

    Args:
        raw_name: Name sent by the client (browsers may send a path).

    Returns:
        Filename (e.g., 'file.pdf').

    Raises:
        InvalidArgumentError: If no usable name remains.
    """
    filename = Path((raw_name or '').replace('\\', '/')).name.strip()
    if not filename or filename in {'.', '..'}:
        raise InvalidArgumentError('Uploaded file has no name')
    return filename


def build_storage_key(user_id: int, filename: str) -> str:
    """Build the object key for a new upload.

    Args:
        user_id: Owner's user ID.
        filename: Uploaded filename.

    Returns:
        Key like '123/1700000000000_report.pdf'.
    """
    timestamp_ms = time.time_ns() // 1_000_000
    return f'{user_id}/{timestamp_ms}_{filename}'


def get_file_size(file_obj: BinaryIO | Any) -> int:
    """Get file size from file object.

    Args:
        file_obj: File-like object, Django uploads carry ``size``.

    Returns:
        File size in bytes.
    """
    if getattr(file_obj, 'size', None) is not None:
        return file_obj.size
    file_size = len(file_obj.read())
    file_obj.seek(0)
    return file_size
