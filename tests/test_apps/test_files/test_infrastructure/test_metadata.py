"""Tests for upload metadata utilities."""

from io import BytesIO

import pytest
from django.core.files.base import ContentFile

from server.apps.files.exceptions import InvalidArgumentError
from server.apps.files.infrastructure.metadata import (
    build_storage_key,
    detect_content_type,
    extract_filename,
    get_file_size,
)


def test_detect_content_type_prefers_declared_type():
    """Test the type sent with the upload wins over the extension."""
    assert detect_content_type('image/webp', 'photo.png') == 'image/webp'


def test_detect_content_type_guesses_from_filename():
    """Test content type guessing from filename."""
    assert detect_content_type(None, 'test.pdf') == 'application/pdf'
    assert detect_content_type('', 'test.txt') == 'text/plain'
    assert detect_content_type(None, 'test.png') == 'image/png'


def test_detect_content_type_unknown():
    """Test content type detection for unknown extension."""
    result = detect_content_type(None, 'test.unknown')
    assert result == 'application/octet-stream'


def test_extract_filename():
    """Test filename extraction strips client-side paths."""
    assert extract_filename('report.pdf') == 'report.pdf'
    assert extract_filename('docs/report.pdf') == 'report.pdf'
    assert extract_filename('C:\\Users\\me\\report.pdf') == 'report.pdf'


@pytest.mark.parametrize('raw_name', [None, '', '   ', '..'])
def test_extract_filename_rejects_empty(raw_name):
    """Test uploads without a usable name are rejected."""
    with pytest.raises(InvalidArgumentError):
        extract_filename(raw_name)


def test_build_storage_key():
    """Test storage key is scoped by user and prefixed by a timestamp."""
    key = build_storage_key(42, 'report.pdf')

    user_part, name_part = key.split('/')
    timestamp, filename = name_part.split('_', 1)
    assert user_part == '42'
    assert timestamp.isdigit()
    assert filename == 'report.pdf'


def test_get_file_size():
    """Test size from Django files and plain file objects."""
    assert get_file_size(ContentFile(b'12345')) == 5

    buffer = BytesIO(b'1234567')
    assert get_file_size(buffer) == 7
    # Pointer reset for the upload that follows
    assert buffer.read() == b'1234567'
