"""Shared fixtures for files app tests."""

import boto3
import pytest
from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.files.base import ContentFile
from moto import mock_aws

from server.apps.files.models import File, Folder

User = get_user_model()


@pytest.fixture
def user(db):
    """Create test user.

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        username='testuser',
        password='testpass123',
        email='test@example.com',
    )


@pytest.fixture
def other_user(db):
    """Create second test user for isolation tests.

    Returns:
        Second user instance.
    """
    return User.objects.create_user(
        username='otheruser',
        password='testpass123',
        email='other@example.com',
    )


@pytest.fixture
def bucket_name():
    """Name of the bucket configured for the default storage."""
    return settings.STORAGES['default']['OPTIONS']['bucket_name']


@pytest.fixture
def mock_s3(bucket_name):
    """Mock S3 service with the drive bucket.

    Yields:
        boto3 S3 resource with the drive bucket created.
    """
    with mock_aws():
        # Create S3 resource
        conn = boto3.resource('s3', region_name='us-east-1')

        # Create bucket
        conn.create_bucket(Bucket=bucket_name)

        yield conn


@pytest.fixture
def make_folder(db):
    """Factory for folders.

    Returns:
        Callable creating a Folder for a user under an optional parent.
    """
    def factory(user, name, parent=None):
        return Folder.objects.create(user=user, name=name, parent=parent)

    return factory


@pytest.fixture
def make_file(db, mock_s3):
    """Factory for file records (storage is mocked for delete signals).

    Returns:
        Callable creating a File for a user in an optional folder.
    """
    def factory(
        user,
        filename='notes.txt',
        folder=None,
        content_type='text/plain',
        size_bytes=100,
    ):
        return File.objects.create(
            user=user,
            folder=folder,
            filename=filename,
            file=f'{user.id}/{filename}',
            size_bytes=size_bytes,
            content_type=content_type,
        )

    return factory


@pytest.fixture
def sample_upload():
    """Sample upload for testing.

    Returns:
        ContentFile with PDF-named test data.
    """
    return ContentFile(b'%PDF-1.4 test content', name='report.pdf')


@pytest.fixture
def make_chain(db):
    """Factory for a single line of nested folders.

    Returns:
        Callable creating ``depth`` folders, each inside the previous one,
        and returning them top first.
    """
    def factory(user, depth, prefix='level'):
        chain = []
        parent = None
        for index in range(depth):
            parent = Folder.objects.create(
                user=user,
                name=f'{prefix}{index}',
                parent=parent,
            )
            chain.append(parent)
        return chain

    return factory
