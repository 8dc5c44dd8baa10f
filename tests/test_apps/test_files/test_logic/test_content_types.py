"""Tests for content type classification."""

import pytest

from server.apps.files.exceptions import InvalidArgumentError
from server.apps.files.logic.content_types import (
    Category,
    category_filter,
    classify,
    file_matches,
    parse_category,
)
from server.apps.files.models import File


@pytest.mark.parametrize(('content_type', 'expected'), [
    ('image/png', Category.IMAGE),
    ('IMAGE/JPEG', Category.IMAGE),
    ('application/pdf', Category.PDF),
    ('application/msword', Category.DOCUMENT),
    (
        'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
        Category.DOCUMENT,
    ),
    (
        'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        Category.DOCUMENT,
    ),
    ('application/vnd.ms-excel', Category.DOCUMENT),
    ('text/plain', Category.DOCUMENT),
    ('video/mp4', Category.OTHER),
    ('text/csv', Category.OTHER),
    ('', Category.OTHER),
])
def test_classify(content_type, expected):
    """Test each content type lands in its category."""
    assert classify(content_type) == expected


def test_classify_never_returns_all():
    """Test the wildcard is only an input filter."""
    samples = ['image/gif', 'application/pdf', 'text/plain', 'audio/mpeg']

    assert Category.ALL not in {classify(sample) for sample in samples}


def test_file_matches():
    """Test the ALL filter matches anything and others match exactly."""
    assert file_matches('video/mp4', Category.ALL)
    assert file_matches('image/png', Category.IMAGE)
    assert not file_matches('image/png', Category.PDF)
    assert file_matches('video/mp4', Category.OTHER)
    assert not file_matches('text/plain', Category.OTHER)


@pytest.mark.parametrize(('raw_value', 'expected'), [
    (None, Category.ALL),
    ('', Category.ALL),
    ('   ', Category.ALL),
    ('all', Category.ALL),
    ('PDF', Category.PDF),
    (' image ', Category.IMAGE),
    ('other', Category.OTHER),
])
def test_parse_category(raw_value, expected):
    """Test filter values from requests."""
    assert parse_category(raw_value) == expected


def test_parse_category_unknown():
    """Test unknown filter values are rejected."""
    with pytest.raises(InvalidArgumentError):
        parse_category('videos')


@pytest.mark.django_db
@pytest.mark.parametrize('category', list(Category))
def test_category_filter_agrees_with_classify(user, make_file, category):
    """Test the database predicate selects what file_matches accepts."""
    content_types = [
        'image/png',
        'Image/Jpeg',
        'application/pdf',
        'application/msword',
        'text/plain',
        'video/mp4',
        'application/zip',
    ]
    for index, content_type in enumerate(content_types):
        make_file(user, f'file{index}', content_type=content_type)

    selected = set(
        File.objects.filter(category_filter(category)).values_list(
            'content_type',
            flat=True,
        ),
    )

    expected = {
        content_type
        for content_type in content_types
        if file_matches(content_type, category)
    }
    assert selected == expected
