"""Classification of stored MIME types into listing filter categories."""

import enum
from typing import Final

from django.db.models import Q

from server.apps.files.exceptions import InvalidArgumentError

_IMAGE_PREFIX: Final = 'image/'
_PDF_TYPE: Final = 'application/pdf'

# Office and text formats shown under the "document" filter
DOCUMENT_TYPES: Final = frozenset((
    'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    'text/plain',
    'application/vnd.ms-excel',
    'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
))


class Category(enum.StrEnum):
    """Filter categories for listings and searches.

    ``ALL`` is the wildcard filter; ``classify`` never returns it.
    """

    ALL = 'all'
    IMAGE = 'image'
    PDF = 'pdf'
    DOCUMENT = 'document'
    OTHER = 'other'


def classify(content_type: str) -> Category:
    """Map a stored content type to its filter category.

    Rules are checked in order, first match wins.

    Args:
        content_type: MIME type string (e.g., 'image/png').

    Returns:
        One of IMAGE, PDF, DOCUMENT or OTHER.
    """
    if content_type.lower().startswith(_IMAGE_PREFIX):
        return Category.IMAGE
    if content_type == _PDF_TYPE:
        return Category.PDF
    if content_type in DOCUMENT_TYPES:
        return Category.DOCUMENT
    return Category.OTHER


def file_matches(content_type: str, category: Category) -> bool:
    """Check if a file with this content type passes the filter.

    Args:
        content_type: MIME type of the file.
        category: Requested filter.

    Returns:
        True for the ALL filter or when the file's category equals it.
    """
    return category == Category.ALL or classify(content_type) == category


def category_filter(category: Category) -> Q:
    """Build the database predicate equivalent to ``file_matches``.

    Args:
        category: Requested filter.

    Returns:
        Q object over ``content_type``; empty for the ALL filter.
    """
    is_image = Q(content_type__istartswith=_IMAGE_PREFIX)
    is_pdf = Q(content_type=_PDF_TYPE)
    is_document = Q(content_type__in=DOCUMENT_TYPES)

    if category == Category.IMAGE:
        return is_image
    if category == Category.PDF:
        return is_pdf
    if category == Category.DOCUMENT:
        return is_document
    if category == Category.OTHER:
        return ~is_image & ~is_pdf & ~is_document
    return Q()


def parse_category(raw_value: str | None) -> Category:
    """Parse a filter value received from a request.

    Args:
        raw_value: Filter string; None, empty or blank means ALL.

    Returns:
        Matching Category.

    Raises:
        InvalidArgumentError: If the value is not a known category.
    """
    if not raw_value or not raw_value.strip():
        return Category.ALL
    try:
        return Category(raw_value.strip().lower())
    except ValueError as error:
        raise InvalidArgumentError(
            f'Unknown file type filter: {raw_value}',
        ) from error
