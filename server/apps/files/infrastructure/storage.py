"""Custom storage backend for S3-compatible storage."""

import logging
from typing import Any, final, override

from storages.backends.s3 import S3Storage

logger = logging.getLogger(__name__)


@final
class FileStorage(S3Storage):
    """Custom S3 storage backend for drive files.

    Extends django-storages S3Storage with:
    - Transaction rollback support for failed DB operations
    - Presigned download links that force an attachment download
    - Enhanced error logging
    """

    @override
    def save(  # noqa: WPS211
        self,
        name: str,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Save file to S3 with error handling and logging.

        Args:
            name: Storage key for the file.
            content: File content (file-like object).
            max_length: Optional maximum length for the key.

        Returns:
            Actual storage key used (may differ from name if conflicts).

        Raises:
            Exception: If S3 upload fails.
        """
        try:
            logger.info('Uploading file to storage: %s', name)
            saved_name = super().save(name, content, max_length)
            logger.info('Successfully uploaded file: %s', saved_name)
        except Exception:
            logger.exception('Failed to upload file to storage: %s', name)
            raise
        else:
            return saved_name

    @override
    def delete(self, name: str) -> None:
        """Delete file from S3 with error handling and logging.

        Args:
            name: Storage key of file to delete.

        Raises:
            Exception: If S3 delete fails.
        """
        try:
            logger.info('Deleting file from storage: %s', name)
            super().delete(name)
            logger.info('Successfully deleted file: %s', name)
        except Exception:
            logger.exception('Failed to delete file from storage: %s', name)
            raise

    def rollback_upload(self, name: str) -> None:
        """Delete uploaded file for DB transaction rollback.

        Best-effort: if deletion fails the error is logged, not raised,
        as the DB rollback has already occurred.

        Args:
            name: Storage key of file to delete.
        """
        try:
            logger.warning('Rolling back upload, deleting file: %s', name)
            self.delete(name)
            logger.info('Successfully rolled back file upload: %s', name)
        except Exception:
            # The object stays in storage without a database record
            logger.exception(
                'Failed to rollback upload, orphaned file: %s',
                name,
            )

    def download_url(self, name: str, filename: str, expire: int) -> str:
        """Create a presigned GET URL that downloads as an attachment.

        Args:
            name: Storage key of the file.
            filename: Name offered to the browser.
            expire: Lifetime of the link in seconds.

        Returns:
            Presigned URL.
        """
        logger.debug('Presigning download for %s (%ds)', name, expire)
        return self.url(
            name,
            parameters={
                'ResponseContentDisposition': (
                    f'attachment; filename="{filename}"'
                ),
            },
            expire=expire,
        )
