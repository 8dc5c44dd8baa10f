"""Exceptions for files app."""


class DriveError(Exception):
    """Base class for drive errors reported to the caller."""


class NotFoundError(DriveError):
    """Raised when a folder or file is missing or owned by another user."""

    def __init__(self, entity: str, entity_id: int | str | None) -> None:
        """Initialize NotFoundError.

        Args:
            entity: Kind of the missing entity ('folder' or 'file').
            entity_id: Requested identifier.
        """
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f'{entity.capitalize()} not found: {entity_id}')


class InvalidArgumentError(DriveError):
    """Raised for malformed requests (bad page/limit, missing name, ...)."""


class FolderNotEmptyError(InvalidArgumentError):
    """Raised when deleting a folder that still has children."""

    def __init__(
        self,
        folder_id: int,
        folder_count: int,
        file_count: int,
    ) -> None:
        """Initialize FolderNotEmptyError.

        Args:
            folder_id: Folder that was about to be deleted.
            folder_count: Number of direct child folders.
            file_count: Number of direct child files.
        """
        self.folder_id = folder_id
        self.folder_count = folder_count
        self.file_count = file_count
        super().__init__(
            f'Folder is not empty: {folder_count} folders, '
            f'{file_count} files (folder: {folder_id})',
        )


class UpstreamFailureError(DriveError):
    """Raised when the database fails or times out during an operation.

    Recursive operations never return partial results: the first failure
    aborts the whole call.
    """
