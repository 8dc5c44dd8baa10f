"""Integration tests for the drive storage against a live MinIO.

These tests verify that MinIO is properly configured and accessible
when running in Docker Compose. Run them with ``pytest -m integration``.
"""
import os
import uuid
from typing import Final
from urllib.parse import parse_qs, urlparse

import pytest
from botocore.exceptions import ClientError
from django.core.files.base import ContentFile

from server.apps.files.infrastructure.storage import FileStorage

_TEST_BUCKET: Final = 'cloud-drive-integration'
_TEST_FILE_CONTENT: Final = b'Hello from MinIO integration test!'


@pytest.fixture
def storage() -> FileStorage:
    """Create drive storage pointed at MinIO with the test bucket.

    Returns:
        FileStorage bound to the integration bucket.
    """
    file_storage = FileStorage(
        bucket_name=_TEST_BUCKET,
        endpoint_url=os.getenv('MINIO_ENDPOINT', 'http://minio:9000'),
        access_key=os.getenv('MINIO_ROOT_USER', 'minioadmin'),
        secret_key=os.getenv('MINIO_ROOT_PASSWORD', 'minioadmin'),
        region_name='us-east-1',
        signature_version='s3v4',
        file_overwrite=False,
    )
    client = file_storage.connection.meta.client
    try:
        client.head_bucket(Bucket=_TEST_BUCKET)
    except ClientError:
        client.create_bucket(Bucket=_TEST_BUCKET)
    return file_storage


@pytest.fixture
def stored_name(storage: FileStorage) -> str:
    """Upload a throwaway object and remove it afterwards.

    Yields:
        Storage key of the uploaded object.
    """
    name = storage.save(
        f'integration/{uuid.uuid4().hex}_hello.txt',
        ContentFile(_TEST_FILE_CONTENT),
    )
    yield name
    if storage.exists(name):
        storage.delete(name)


@pytest.mark.integration
def test_save_and_read(storage: FileStorage, stored_name: str) -> None:
    """Test uploaded content can be read back."""
    with storage.open(stored_name) as stored:
        assert stored.read() == _TEST_FILE_CONTENT
    assert storage.size(stored_name) == len(_TEST_FILE_CONTENT)


@pytest.mark.integration
def test_download_url(storage: FileStorage, stored_name: str) -> None:
    """Test presigned link carries the attachment filename."""
    url = storage.download_url(stored_name, 'hello.txt', expire=60)

    query = parse_qs(urlparse(url).query)
    assert query['response-content-disposition'] == [
        'attachment; filename="hello.txt"',
    ]


@pytest.mark.integration
def test_rollback_upload(storage: FileStorage, stored_name: str) -> None:
    """Test rollback removes the uploaded object."""
    storage.rollback_upload(stored_name)

    assert not storage.exists(stored_name)
