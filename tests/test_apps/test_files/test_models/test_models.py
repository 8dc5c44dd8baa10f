"""Tests for Folder and File models."""

import pytest
from django.db.models import RestrictedError

from server.apps.files.models import File, Folder


@pytest.mark.django_db
def test_folder_model_str(user, make_folder):
    """Test Folder __str__ method."""
    folder = make_folder(user, 'Docs')

    assert str(folder) == 'testuser:Docs'


@pytest.mark.django_db
def test_file_model_str(user, make_file):
    """Test File __str__ method."""
    file_instance = make_file(user, 'report.pdf')

    assert str(file_instance) == 'testuser:report.pdf'


@pytest.mark.django_db
def test_folder_with_children_cannot_be_deleted_directly(user, make_folder):
    """Test the parent relation blocks deleting a non-empty folder."""
    parent = make_folder(user, 'Docs')
    make_folder(user, 'Old', parent=parent)

    with pytest.raises(RestrictedError):
        parent.delete()

    assert Folder.objects.count() == 2


@pytest.mark.django_db
def test_user_delete_cascades_to_tree(user, make_folder, make_file):
    """Test folders and files are deleted when user is deleted."""
    docs = make_folder(user, 'Docs')
    nested = make_folder(user, 'Nested', parent=docs)
    make_file(user, 'a.txt', folder=nested)
    make_file(user, 'b.txt')

    user.delete()

    # Tree should be cascade deleted
    assert Folder.objects.count() == 0
    assert File.objects.count() == 0
