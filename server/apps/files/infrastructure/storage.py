"""Custom storage backend for file blobs on the local filesystem."""

import logging
import os
from typing import Any, final, override

from django.core.exceptions import SuspiciousFileOperation
from django.core.files.storage import FileSystemStorage

logger = logging.getLogger(__name__)


@final
class BlobStorage(FileSystemStorage):
    """Filesystem storage backend for file blobs.

    Extends Django's FileSystemStorage with:
    - No-overwrite writes: an occupied name raises FileExistsError
      instead of being renamed with a random suffix
    - Tolerant deletes that report whether a blob was removed
    - Idempotent creation of physical directories
    - Enhanced error logging
    """

    def ensure_root(self) -> None:
        """Create the storage root if it does not exist yet.

        Raises:
            OSError: If the root cannot be created.
        """
        os.makedirs(self.location, exist_ok=True)

    @override
    def get_available_name(
        self,
        name: str,
        max_length: int | None = None,
    ) -> str:
        """Return name unchanged if it is free.

        FileSystemStorage opens blobs with O_EXCL and calls this method
        again when the open hits an existing file, so concurrent writers
        of the same name also end up here.

        Args:
            name: Requested storage path.
            max_length: Optional maximum length for the name.

        Returns:
            The requested name.

        Raises:
            FileExistsError: If a blob already exists at name.
            SuspiciousFileOperation: If name is longer than max_length.
        """
        if self.exists(name):
            raise FileExistsError(name)
        if max_length is not None and len(name) > max_length:
            raise SuspiciousFileOperation(
                f'Storage path is longer than {max_length}: {name}',
            )
        return name

    @override
    def save(  # noqa: WPS211
        self,
        name: str | None,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Save blob with error handling and logging.

        A partially written blob is removed before the error propagates,
        so no truncated blob is left behind.

        Args:
            name: Storage path for the blob.
            content: File content (file-like object).
            max_length: Optional maximum length for the name.

        Returns:
            Actual storage path written.

        Raises:
            FileExistsError: If a blob already exists at name.
            Exception: If the write fails.
        """
        try:
            logger.info('Writing blob to storage: %s', name)
            saved_name = super().save(name, content, max_length)
        except FileExistsError:
            logger.warning('Blob already exists in storage: %s', name)
            raise
        except OSError:
            logger.exception('Failed to write blob to storage: %s', name)
            if name:
                self.rollback_upload(name)
            raise
        except Exception:
            logger.exception('Failed to write blob to storage: %s', name)
            raise
        logger.info('Successfully wrote blob: %s', saved_name)
        return saved_name

    def remove(self, name: str) -> bool:
        """Delete blob, tolerating one that is already gone.

        Args:
            name: Storage path of blob to delete.

        Returns:
            True if a blob was removed, False if none was there.

        Raises:
            OSError: If the blob exists but cannot be deleted.
        """
        if not self.exists(name):
            logger.warning('Blob not found in storage (already deleted?): %s', name)
            return False
        try:
            logger.info('Deleting blob from storage: %s', name)
            self.delete(name)
        except Exception:
            logger.exception('Failed to delete blob from storage: %s', name)
            raise
        logger.info('Successfully deleted blob: %s', name)
        return True

    def rollback_upload(self, name: str) -> None:
        """Delete written blob after a failed record operation.

        This is a best-effort operation - if deletion fails, the error
        is logged but not raised. The blob stays on disk under a path
        that maps back to its directory IDs, so an audit can find it.

        Args:
            name: Storage path of blob to delete.
        """
        try:
            logger.warning('Rolling back blob write, deleting: %s', name)
            self.delete(name)
        except OSError:
            logger.exception('Failed to roll back blob write, orphaned: %s', name)

    def ensure_directory(self, name: str) -> None:
        """Create a physical directory (and parents) if missing.

        Args:
            name: Relative directory path.

        Raises:
            OSError: If the directory cannot be created.
        """
        full_path = self.path(name)
        try:
            os.makedirs(full_path, exist_ok=True)
        except OSError:
            logger.exception('Failed to create directory in storage: %s', name)
            raise
        if self.directory_permissions_mode is not None:
            os.chmod(full_path, self.directory_permissions_mode)
        logger.debug('Directory present in storage: %s', name)

    def remove_directory(self, name: str) -> bool:
        """Remove an empty physical directory, tolerating absence.

        Args:
            name: Relative directory path.

        Returns:
            True if a directory was removed, False if none was there.

        Raises:
            OSError: If the directory exists but is not empty
                or cannot be removed.
        """
        full_path = self.path(name)
        if not os.path.isdir(full_path):
            logger.warning('Directory not found in storage: %s', name)
            return False
        try:
            os.rmdir(full_path)
        except OSError:
            logger.exception('Failed to remove directory from storage: %s', name)
            raise
        logger.info('Removed directory from storage: %s', name)
        return True
