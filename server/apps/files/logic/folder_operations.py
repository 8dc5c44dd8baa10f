"""Business logic for the folder tree."""

import logging
from collections.abc import Iterator
from typing import Any, final

from django.db import transaction
from django.db.models import Sum

from server.apps.files.exceptions import (
    FolderNotEmptyError,
    InvalidArgumentError,
    NotFoundError,
)
from server.apps.files.logic.content_types import Category
from server.apps.files.logic.store import (
    Deadline,
    find_folders,
    has_files,
    upstream_errors,
)
from server.apps.files.models import File, Folder

# User type for Django's dynamic user model
_User = Any

logger = logging.getLogger(__name__)


def get_folder(user: _User, folder_id: int) -> Folder:
    """Get a folder owned by the user.

    Args:
        user: Owner of the folder.
        folder_id: ID of the folder.

    Returns:
        Folder instance.

    Raises:
        NotFoundError: If the folder doesn't exist or isn't owned by user.
        UpstreamFailureError: If the query fails.
    """
    try:
        with upstream_errors('fetch folder'):
            return Folder.objects.get(id=folder_id, user=user)
    except Folder.DoesNotExist as error:
        raise NotFoundError('folder', folder_id) from error


def create_folder(
    user: _User,
    name: str,
    parent_id: int | None = None,
) -> Folder:
    """Create a folder under an existing parent (or the root).

    Args:
        user: Owner of the new folder.
        name: Folder name.
        parent_id: Parent folder ID, None for the root.

    Returns:
        Created Folder instance.

    Raises:
        InvalidArgumentError: If the name is blank.
        NotFoundError: If the parent doesn't exist or isn't owned by user.
    """
    name = (name or '').strip()
    if not name:
        raise InvalidArgumentError('Folder name is required')

    parent = get_folder(user, parent_id) if parent_id is not None else None

    folder = Folder.objects.create(user=user, name=name, parent=parent)
    logger.info(
        'Folder created: %s (ID: %d, parent: %s)',
        name,
        folder.id,
        parent_id,
    )
    return folder


def delete_folder(user: _User, folder_id: int) -> None:
    """Delete an empty folder.

    Args:
        user: Owner of the folder.
        folder_id: ID of the folder to delete.

    Raises:
        NotFoundError: If the folder doesn't exist or isn't owned by user.
        FolderNotEmptyError: If it still holds folders or files.
    """
    with transaction.atomic():
        folder = get_folder(user, folder_id)
        folder_count = folder.children.count()
        file_count = folder.files.count()

        if folder_count or file_count:
            logger.warning(
                'Refusing to delete non-empty folder: ID=%d '
                '(%d folders, %d files)',
                folder_id,
                folder_count,
                file_count,
            )
            raise FolderNotEmptyError(folder_id, folder_count, file_count)

        folder.delete()

    logger.info('Folder deleted: ID=%d', folder_id)


def get_breadcrumbs(user: _User, folder_id: int | None) -> list[Folder]:
    """Build the navigation path from the root down to a folder.

    Args:
        user: Owner of the folders.
        folder_id: Current folder ID, None for the root.

    Returns:
        Ancestors from the top-level folder down to the folder itself.
        Empty list for the root.

    Raises:
        NotFoundError: If the folder doesn't exist or isn't owned by user.
    """
    if folder_id is None:
        return []

    trail = [get_folder(user, folder_id)]
    seen = {folder_id}
    while trail[-1].parent_id is not None:
        parent_id = trail[-1].parent_id
        if parent_id in seen:
            logger.error('Cycle in folder tree at folder ID=%d', parent_id)
            break
        seen.add(parent_id)
        trail.append(get_folder(user, parent_id))

    trail.reverse()
    return trail


def get_folder_size(user: _User, folder_id: int | None) -> int:
    """Sum the sizes of the files directly inside a folder.

    Args:
        user: Owner of the folder.
        folder_id: Folder ID, None for the root.

    Returns:
        Total size in bytes.

    Raises:
        NotFoundError: If the folder doesn't exist or isn't owned by user.
        UpstreamFailureError: If the database query fails.
    """
    if folder_id is not None:
        get_folder(user, folder_id)

    with upstream_errors('compute folder size'):
        total = File.objects.filter(
            user=user,
            folder_id=folder_id,
        ).aggregate(total=Sum('size_bytes'))['total']

    return total or 0


@final
class FolderMatcher:
    """Answers whether a folder subtree holds a file of some category.

    One matcher serves one request: subtree results are memoized by
    folder ID so sibling checks never walk the same folder twice.
    """

    def __init__(
        self,
        user: _User,
        category: Category,
        deadline: Deadline | None = None,
    ) -> None:
        """Initialize matcher.

        Args:
            user: Owner whose folders and files are inspected.
            category: Content type filter to look for.
            deadline: Optional time budget of the enclosing call.
        """
        self._user = user
        self._category = category
        self._deadline = deadline
        self._memo: dict[int, bool] = {}

    def matches(self, folder_id: int) -> bool:
        """Check the folder and all its descendants, depth first.

        Args:
            folder_id: Root of the subtree to inspect.

        Returns:
            True for the ALL filter, or if any folder in the subtree
            directly contains a matching file.

        Raises:
            UpstreamFailureError: If a query fails or the deadline passes.
        """
        if self._category == Category.ALL:
            return True

        if folder_id in self._memo:
            return self._memo[folder_id]

        pending: list[tuple[int, Iterator[Folder]]] = []
        found = self._visit(folder_id, pending)
        while pending and not found:
            _, children = pending[-1]
            child = next(children, None)
            if child is None:
                pending.pop()
            elif child.id in self._memo:
                found = self._memo[child.id]
            else:
                found = self._visit(child.id, pending)

        if found:
            # Every folder still pending is an ancestor of the match
            for ancestor_id, _ in pending:
                self._memo[ancestor_id] = True
        return found

    def _visit(
        self,
        folder_id: int,
        pending: list[tuple[int, Iterator[Folder]]],
    ) -> bool:
        # Marked before descending so a revisited folder ends the walk
        self._memo[folder_id] = False
        if has_files(self._user, folder_id, self._category, self._deadline):
            logger.debug(
                'Folder %d has %s files',
                folder_id,
                self._category,
            )
            self._memo[folder_id] = True
            return True

        children = find_folders(self._user, folder_id, self._deadline)
        pending.append((folder_id, iter(children)))
        return False


def folder_matches(
    user: _User,
    folder_id: int,
    category: Category,
) -> bool:
    """Check if a folder or any descendant holds a matching file.

    Args:
        user: Owner of the folder.
        folder_id: Folder to inspect.
        category: Content type filter.

    Returns:
        True if the filter is ALL or a matching file exists in the subtree.

    Raises:
        UpstreamFailureError: If a query fails.
    """
    return FolderMatcher(user, category).matches(folder_id)
