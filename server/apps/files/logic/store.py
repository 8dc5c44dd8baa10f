"""Owner-scoped queries used by listing, matching and search.

Every traversal step goes through these helpers so that database
failures and expired deadlines surface as ``UpstreamFailureError``.
"""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, final

from django.db import DatabaseError

from server.apps.files.exceptions import UpstreamFailureError
from server.apps.files.logic.content_types import Category, category_filter
from server.apps.files.models import File, Folder

# User type for Django's dynamic user model
_User = Any

logger = logging.getLogger(__name__)


@final
class Deadline:
    """Time budget shared by every query of one top-level call."""

    def __init__(self, timeout: float | None) -> None:
        """Initialize deadline.

        Args:
            timeout: Budget in seconds; None disables the check.
        """
        self._timeout = timeout
        self._expires_at = (
            None if timeout is None else time.monotonic() + timeout
        )

    def check(self) -> None:
        """Abort the call if the budget is spent.

        Raises:
            UpstreamFailureError: If the deadline has passed.
        """
        if self._expires_at is not None and time.monotonic() > self._expires_at:
            raise UpstreamFailureError(
                f'Operation timed out after {self._timeout} seconds',
            )


@contextmanager
def upstream_errors(action: str) -> Iterator[None]:
    """Translate database failures into UpstreamFailureError.

    Args:
        action: What was being done, used in log and error messages.

    Raises:
        UpstreamFailureError: If the wrapped block raised DatabaseError.
    """
    try:
        yield
    except DatabaseError as error:
        logger.exception('Database query failed: %s', action)
        raise UpstreamFailureError(f'Failed to {action}') from error


def find_files(
    user: _User,
    folder_id: int | None,
    category: Category,
    deadline: Deadline | None = None,
) -> list[File]:
    """Fetch files directly inside a folder, newest upload first.

    Args:
        user: Owner of the files.
        folder_id: Folder ID, None for the root.
        category: Content type filter.
        deadline: Optional time budget of the enclosing call.

    Returns:
        Matching files.
    """
    if deadline is not None:
        deadline.check()
    with upstream_errors('list files'):
        return list(
            File.objects.filter(
                category_filter(category),
                user=user,
                folder_id=folder_id,
            ).order_by('-uploaded_at', '-id'),
        )


def has_files(
    user: _User,
    folder_id: int | None,
    category: Category,
    deadline: Deadline | None = None,
) -> bool:
    """Check if a folder directly contains a file passing the filter.

    Args:
        user: Owner of the files.
        folder_id: Folder ID, None for the root.
        category: Content type filter.
        deadline: Optional time budget of the enclosing call.

    Returns:
        True if at least one file matches.
    """
    if deadline is not None:
        deadline.check()
    with upstream_errors('check folder files'):
        return File.objects.filter(
            category_filter(category),
            user=user,
            folder_id=folder_id,
        ).exists()


def find_folders(
    user: _User,
    parent_id: int | None,
    deadline: Deadline | None = None,
) -> list[Folder]:
    """Fetch child folders, newest first.

    Args:
        user: Owner of the folders.
        parent_id: Parent folder ID, None for the root.
        deadline: Optional time budget of the enclosing call.

    Returns:
        Child folders.
    """
    if deadline is not None:
        deadline.check()
    with upstream_errors('list folders'):
        return list(
            Folder.objects.filter(
                user=user,
                parent_id=parent_id,
            ).order_by('-created_at', '-id'),
        )
