"""Exceptions for files app."""

from uuid import UUID


class HierarchyError(Exception):
    """Base class for directory and file operation failures."""


class BadRequestError(HierarchyError):
    """Raised when an operation receives missing or invalid input."""


class NotFoundError(HierarchyError):
    """Raised when a referenced directory or file does not exist."""

    def __init__(self, kind: str, object_id: UUID | str) -> None:
        """Initialize NotFoundError.

        Args:
            kind: Kind of the missing record ('directory' or 'file').
            object_id: Identifier that was looked up.
        """
        self.kind = kind
        self.object_id = object_id
        super().__init__(f'{kind.capitalize()} not found: {object_id}')


class ConflictError(HierarchyError):
    """Raised when an operation would clash with existing state."""


class StoragePathConflictError(ConflictError):
    """Raised when a file placement resolves to an occupied storage path."""

    def __init__(self, storage_path: str) -> None:
        """Initialize StoragePathConflictError.

        Args:
            storage_path: Storage path that is already taken.
        """
        self.storage_path = storage_path
        super().__init__(f'Storage path already in use: {storage_path}')


class DirectoryNotEmptyError(ConflictError):
    """Raised when deleting a directory that still has children or files."""

    def __init__(
        self,
        directory_id: UUID,
        children_count: int,
        files_count: int,
    ) -> None:
        """Initialize DirectoryNotEmptyError.

        Args:
            directory_id: Directory that was about to be deleted.
            children_count: Number of child directories.
            files_count: Number of files placed directly in it.
        """
        self.directory_id = directory_id
        self.children_count = children_count
        self.files_count = files_count
        super().__init__(
            f'Directory {directory_id} is not empty '
            f'({children_count} directories, {files_count} files)',
        )


class GoneError(HierarchyError):
    """Raised when a file record exists but its blob is missing."""

    def __init__(self, file_id: UUID, storage_path: str) -> None:
        """Initialize GoneError.

        Args:
            file_id: ID of the file record.
            storage_path: Storage path where the blob was expected.
        """
        self.file_id = file_id
        self.storage_path = storage_path
        super().__init__(
            f'File {file_id} removed from storage: {storage_path}',
        )


class HierarchyIntegrityError(HierarchyError):
    """Raised when the directory parent chain is cyclic or too deep."""


class BlobMismatchError(GoneError):
    """Raised when a blob no longer matches the size or checksum on record."""

    def __init__(
        self,
        file_id: UUID,
        storage_path: str,
        detail: str,
    ) -> None:
        """Initialize BlobMismatchError.

        Args:
            file_id: ID of the file record.
            storage_path: Storage path of the blob.
            detail: What differs between record and blob.
        """
        super().__init__(file_id, storage_path)
        self.detail = detail
        self.args = (
            f'File {file_id} does not match its blob at {storage_path}: {detail}',
        )


class StorageError(HierarchyError):
    """Raised when the blob filesystem fails an operation."""

    def __init__(self, storage_path: str, reason: OSError) -> None:
        """Initialize StorageError.

        Args:
            storage_path: Path the operation was working on.
            reason: Underlying OS error.
        """
        self.storage_path = storage_path
        self.reason = reason
        super().__init__(f'Blob storage failed at {storage_path}: {reason}')
