"""Business logic for searching the whole folder tree by name."""

import dataclasses
import logging
from collections.abc import Iterator
from typing import Any, Final, final

from django.conf import settings

from server.apps.files.logic.content_types import Category
from server.apps.files.logic.folder_operations import FolderMatcher
from server.apps.files.logic.store import Deadline, find_files, find_folders
from server.apps.files.models import File, Folder

# User type for Django's dynamic user model
_User = Any

# Path shown for items at the top of the drive
ROOT_PATH: Final = 'Root'

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class SearchMatch:
    """File or folder whose name matched, with its folder path."""

    item: File | Folder
    folder_path: str

    @property
    def is_folder(self) -> bool:
        """Check if the match is a folder."""
        return isinstance(self.item, Folder)

    @property
    def name(self) -> str:
        """Get the matched name."""
        if isinstance(self.item, Folder):
            return self.item.name
        return self.item.filename


def search(
    user: _User,
    query: str,
    category: Category = Category.ALL,
    timeout: float | None = None,
) -> list[SearchMatch]:
    """Search every folder of the drive for names containing the query.

    Walks the tree from the root in pre-order: at each level folders
    (newest first) come before files (newest first), and each folder
    is expanded right after it is evaluated. Under a category filter
    only matching files are considered and only folders whose subtree
    holds such a file are listed and entered.

    Args:
        user: Owner of the drive.
        query: Case-insensitive substring to look for.
        category: Content type filter.
        timeout: Budget in seconds for the whole walk; defaults to
            DRIVE_SEARCH_TIMEOUT.

    Returns:
        Matches annotated with the slash-joined names of their ancestor
        folders, or 'Root' for top-level items. Empty for a blank query.

    Raises:
        UpstreamFailureError: If any query fails or the timeout expires.
    """
    needle = query.strip().lower()
    if not needle:
        return []

    if timeout is None:
        timeout = settings.DRIVE_SEARCH_TIMEOUT
    deadline = Deadline(timeout)
    walker = _TreeSearch(user, needle, category, deadline)

    logger.debug('Searching drive for %r (filter=%s)', needle, category)
    matches = walker.walk()
    logger.info(
        'Search for %r found %d items (filter=%s)',
        needle,
        len(matches),
        category,
    )
    return matches


@final
class _TreeSearch:
    """Pre-order walk of one user's folder tree collecting name matches.

    Levels are kept on an explicit stack, so tree depth is bounded only
    by the deadline.
    """

    def __init__(
        self,
        user: _User,
        needle: str,
        category: Category,
        deadline: Deadline,
    ) -> None:
        """Initialize walker.

        Args:
            user: Owner of the drive.
            needle: Lowercased substring to look for.
            category: Content type filter.
            deadline: Time budget of the search.
        """
        self._user = user
        self._needle = needle
        self._category = category
        self._deadline = deadline
        self._matcher = FolderMatcher(user, category, deadline)
        self._visited: set[int] = set()

    def walk(self) -> list[SearchMatch]:
        """Collect matches from the root down.

        Returns:
            Matches in pre-order: each folder, then its subtree, with a
            level's files after all of its folders.
        """
        matches: list[SearchMatch] = []
        levels = [self._open_level(None, '')]

        while levels:
            folder_id, path, children = levels[-1]
            folder = next(children, None)
            if folder is None:
                levels.pop()
                matches.extend(self._matching_files(folder_id, path))
                continue

            if self._needle in folder.name.lower():
                matches.append(SearchMatch(folder, path or ROOT_PATH))
            if folder.id in self._visited:
                logger.error('Cycle in folder tree at folder ID=%d', folder.id)
                continue
            self._visited.add(folder.id)
            child_path = f'{path}/{folder.name}' if path else folder.name
            levels.append(self._open_level(folder.id, child_path))

        return matches

    def _open_level(
        self,
        folder_id: int | None,
        path: str,
    ) -> tuple[int | None, str, Iterator[Folder]]:
        folders = find_folders(self._user, folder_id, self._deadline)
        if self._category != Category.ALL:
            folders = [
                folder for folder in folders
                if self._matcher.matches(folder.id)
            ]
        return folder_id, path, iter(folders)

    def _matching_files(
        self,
        folder_id: int | None,
        path: str,
    ) -> list[SearchMatch]:
        folder_path = path or ROOT_PATH
        return [
            SearchMatch(file_instance, folder_path)
            for file_instance in find_files(
                self._user,
                folder_id,
                self._category,
                self._deadline,
            )
            if self._needle in file_instance.filename.lower()
        ]
