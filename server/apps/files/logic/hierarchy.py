"""Business logic for the directory tree and its file blobs.

``HierarchyService`` is the only place that touches both the database
records and the blob storage within one operation. The ordering rules:

- place_file: write blob, then create record. A crash in between leaves
  a blob under a path that names its directory IDs.
- delete_file: delete blob, then record. A crash in between leaves a
  record whose download reports ``GoneError``.
"""

import logging
from typing import BinaryIO, Final, NamedTuple, final
from uuid import UUID

from django.conf import settings
from django.core.exceptions import SuspiciousFileOperation, ValidationError
from django.core.files.base import ContentFile
from django.core.files.base import File as DjangoFile
from django.core.files.storage import storages
from django.db import IntegrityError, transaction
from django.db.models import QuerySet

from server.apps.files.exceptions import (
    BadRequestError,
    BlobMismatchError,
    DirectoryNotEmptyError,
    GoneError,
    NotFoundError,
    StorageError,
    StoragePathConflictError,
)
from server.apps.files.infrastructure.metadata import (
    calculate_checksum,
    detect_mime_type,
    get_file_size,
    sanitize_filename,
)
from server.apps.files.infrastructure.storage import BlobStorage
from server.apps.files.logic.tree import (
    DirectoryNode,
    DisplayPath,
    build_nodes,
    flatten_arena,
)
from server.apps.files.models import SIBLING_ORDERING, Directory, File
from server.apps.files.path_resolver import PathResolver

logger = logging.getLogger(__name__)

_BLOB_STORAGE_ALIAS: Final = 'blobs'
_DIRECTORY: Final = 'directory'
_FILE: Final = 'file'
_STORAGE_PATH_MAX_LENGTH: Final = File._meta.get_field('storage_path').max_length  # noqa: SLF001
_ORIGINAL_NAME_MAX_LENGTH: Final = File._meta.get_field('original_name').max_length  # noqa: SLF001

BytesSource = bytes | BinaryIO | DjangoFile


class FileDownload(NamedTuple):
    """Open blob stream with the metadata needed to serve it."""

    stream: DjangoFile
    original_name: str
    mime_type: str
    size_bytes: int


@final
class HierarchyService:
    """Keeps directory/file records and blobs in step.

    All collaborators are passed in, so independent instances
    (e.g. in tests) never share a storage root.
    """

    def __init__(
        self,
        storage: BlobStorage,
        resolver: PathResolver | None = None,
        tree_depth: int = 1,
        max_depth: int = 64,
    ) -> None:
        """Initialize service.

        Args:
            storage: Blob storage backend.
            resolver: Path resolver, a default one if omitted.
            tree_depth: Levels of contents loaded by tree listings.
            max_depth: Maximum ancestor chain length.

        Raises:
            ValueError: If tree_depth is negative or max_depth not positive.
        """
        if tree_depth < 0:
            raise ValueError(f'tree_depth must be >= 0, got {tree_depth}')
        if max_depth < 1:
            raise ValueError(f'max_depth must be >= 1, got {max_depth}')
        self._storage = storage
        self._resolver = resolver or PathResolver()
        self._tree_depth = tree_depth
        self._max_depth = max_depth
        self._storage.ensure_root()

    @property
    def storage(self) -> BlobStorage:
        """Get the blob storage backend."""
        return self._storage

    @property
    def resolver(self) -> PathResolver:
        """Get the path resolver."""
        return self._resolver

    def create_directory(
        self,
        name: str,
        parent_id: UUID | None = None,
    ) -> Directory:
        """Create directory record, then its physical directory.

        If the physical directory cannot be created, the record is kept
        and the failure is only logged: the next file placed there
        creates the missing directories on write.

        Args:
            name: Display name of the directory.
            parent_id: Parent directory ID, None for top level.

        Returns:
            Created Directory instance.

        Raises:
            BadRequestError: If name is blank or contains a separator,
                or the directory would be nested deeper than max_depth.
            NotFoundError: If parent directory doesn't exist.
        """
        name = name.strip() if name else ''
        if not name:
            raise BadRequestError('Directory name required')
        if self._resolver.separator in name or '\x00' in name:
            raise BadRequestError(f'Invalid directory name: {name!r}')

        parent = None
        parent_chain: list[Directory] = []
        if parent_id is not None:
            parent = self._get_directory(parent_id)
            parent_chain = self._chain_for(parent)
        if len(parent_chain) >= self._max_depth:
            raise BadRequestError(
                f'Directory would be nested deeper than {self._max_depth}',
            )

        with transaction.atomic():
            directory = Directory.objects.create(name=name, parent=parent)
        logger.info(
            'Directory record created: %s (ID: %s, parent: %s)',
            name,
            directory.pk,
            parent_id,
        )

        chain = [*parent_chain, directory]
        directory_path = self._resolver.directory_path(chain)
        try:
            self._storage.ensure_directory(directory_path)
        except OSError:
            logger.exception(
                'Physical directory missing for record %s: %s',
                directory.pk,
                directory_path,
            )
        return directory

    def place_file(
        self,
        content: BytesSource,
        original_name: str,
        directory_id: UUID | None = None,
    ) -> File:
        """Write blob to storage, then create database record.

        The record's storage_path is the name returned by this call's
        own blob write, never a value read back from shared state.

        Args:
            content: File bytes or a binary file object.
            original_name: Name as supplied by the uploader.
            directory_id: Target directory ID, None for root level.

        Returns:
            Created File instance.

        Raises:
            BadRequestError: If original_name yields no usable filename.
            NotFoundError: If target directory doesn't exist.
            StoragePathConflictError: If the storage path is taken.
            StorageError: If the blob write fails.
        """
        if len(original_name) > _ORIGINAL_NAME_MAX_LENGTH:
            raise BadRequestError(
                f'Original name is longer than {_ORIGINAL_NAME_MAX_LENGTH}',
            )

        chain: list[Directory] = []
        if directory_id is not None:
            chain = self._chain_for(self._get_directory(directory_id))

        try:
            leaf = sanitize_filename(original_name)
        except SuspiciousFileOperation as error:
            raise BadRequestError(str(error)) from error
        storage_path = self._resolver.storage_path(chain, leaf)

        if File.objects.filter(storage_path=storage_path).exists():
            logger.warning('Record already uses storage path: %s', storage_path)
            raise StoragePathConflictError(storage_path)

        file_obj = _as_django_file(content, leaf)
        checksum = calculate_checksum(file_obj)
        file_size = get_file_size(file_obj)
        mime_type = detect_mime_type(original_name)

        # Step 1: Write blob first
        try:
            saved_name = self._storage.save(
                storage_path,
                file_obj,
                max_length=_STORAGE_PATH_MAX_LENGTH,
            )
        except FileExistsError as error:
            raise StoragePathConflictError(storage_path) from error
        except SuspiciousFileOperation as error:
            raise BadRequestError(str(error)) from error
        except OSError as error:
            raise StorageError(storage_path, error) from error

        # Step 2: Create database record for the path actually written
        try:
            with transaction.atomic():
                file_instance = File.objects.create(
                    original_name=original_name,
                    storage_path=saved_name,
                    size_bytes=file_size,
                    mime_type=mime_type,
                    checksum_sha256=checksum,
                    directory_id=directory_id,
                )
        except IntegrityError as error:
            logger.exception(
                'Record for storage path created concurrently: %s',
                saved_name,
            )
            self._storage.rollback_upload(saved_name)
            raise StoragePathConflictError(saved_name) from error
        except Exception:
            logger.exception(
                'Database transaction failed, rolling back blob write: %s',
                saved_name,
            )
            self._storage.rollback_upload(saved_name)
            raise

        logger.info(
            'File placed: %s -> %s (ID: %s, size: %d)',
            original_name,
            saved_name,
            file_instance.pk,
            file_size,
        )
        return file_instance

    def get_top_level(self) -> list[DirectoryNode]:
        """List top-level directories with contents to the configured depth.

        Returns:
            Top-level directory nodes in creation order.
        """
        return build_nodes(
            list(Directory.objects.top_level()),
            self._tree_depth,
        )

    def get_subtree(self, directory_id: UUID) -> DirectoryNode:
        """Get a directory with contents to the configured depth.

        Args:
            directory_id: Directory ID.

        Returns:
            Directory node.

        Raises:
            NotFoundError: If directory doesn't exist.
        """
        directory = self._get_directory(directory_id)
        return build_nodes([directory], self._tree_depth)[0]

    def flatten_to_paths(self) -> list[DisplayPath]:
        """List every directory with its display path, depth first.

        Sibling order is creation order, so an unchanged tree always
        yields the same sequence.

        Returns:
            (id, display path) pairs.
        """
        rows = Directory.objects.order_by(*SIBLING_ORDERING).values_list(
            'id',
            'name',
            'parent_id',
        )
        return flatten_arena(rows, self._resolver)

    def list_files(self, directory_id: UUID | None = None) -> QuerySet[File]:
        """List files, newest first.

        Args:
            directory_id: Restrict to files placed directly in this
                directory. None lists all files.

        Returns:
            QuerySet of File objects ordered by uploaded_at descending.

        Raises:
            NotFoundError: If directory doesn't exist.
        """
        files = File.objects.order_by('-uploaded_at', 'id')
        if directory_id is None:
            return files
        self._get_directory(directory_id)
        return files.filter(directory_id=directory_id)

    def download_file(
        self,
        file_id: UUID,
        verify_checksum: bool = False,
    ) -> FileDownload:
        """Open the blob of a file for reading.

        The blob size is always compared with the recorded size.
        The caller must close the returned stream.

        Args:
            file_id: File ID.
            verify_checksum: Also read the whole blob and compare its
                SHA256 with the recorded checksum.

        Returns:
            FileDownload with the open stream and file metadata.

        Raises:
            NotFoundError: If no record exists.
            GoneError: If the record exists but the blob is missing.
            BlobMismatchError: If the blob differs from the record.
            StorageError: If the blob cannot be opened.
        """
        file_instance = self._get_file(file_id)
        storage_path = file_instance.storage_path

        try:
            stream = self._storage.open(storage_path, 'rb')
        except FileNotFoundError as error:
            logger.warning(
                'File removed from storage: %s (ID: %s)',
                storage_path,
                file_id,
            )
            raise GoneError(file_instance.pk, storage_path) from error
        except OSError as error:
            logger.exception('Failed to open blob: %s', storage_path)
            raise StorageError(storage_path, error) from error

        mismatch = self._find_mismatch(file_instance, stream, verify_checksum)
        if mismatch:
            stream.close()
            logger.error(
                'Blob does not match record: %s (ID: %s): %s',
                storage_path,
                file_id,
                mismatch,
            )
            raise BlobMismatchError(file_instance.pk, storage_path, mismatch)

        return FileDownload(
            stream=stream,
            original_name=file_instance.original_name,
            mime_type=file_instance.mime_type,
            size_bytes=file_instance.size_bytes,
        )

    def delete_file(self, file_id: UUID) -> None:
        """Delete blob from storage, then the database record.

        A blob that is already gone is tolerated.

        Args:
            file_id: File ID.

        Raises:
            NotFoundError: If no record exists.
            StorageError: If the blob exists but cannot be deleted.
        """
        file_instance = self._get_file(file_id)
        storage_path = file_instance.storage_path
        logger.info('Deleting file: ID=%s, path=%s', file_id, storage_path)

        # Step 1: Delete blob first
        try:
            self._storage.remove(storage_path)
        except OSError as error:
            raise StorageError(storage_path, error) from error

        # Step 2: Delete record, the blob is already handled
        file_instance.blob_removed = True
        with transaction.atomic():
            file_instance.delete()
        logger.info('File record deleted from database: ID=%s', file_id)

    def delete_directory(self, directory_id: UUID) -> None:
        """Delete an empty directory: physical directory, then record.

        Args:
            directory_id: Directory ID.

        Raises:
            NotFoundError: If directory doesn't exist.
            DirectoryNotEmptyError: If it has child directories or files.
            StorageError: If the physical directory cannot be removed,
                for example because it still holds an unrecorded blob.
        """
        directory = self._get_directory(directory_id)
        children_count = directory.children.count()
        files_count = directory.files.count()
        if children_count or files_count:
            raise DirectoryNotEmptyError(
                directory.pk,
                children_count,
                files_count,
            )

        directory_path = self._resolver.directory_path(
            self._chain_for(directory),
        )
        try:
            self._storage.remove_directory(directory_path)
        except OSError as error:
            raise StorageError(directory_path, error) from error

        with transaction.atomic():
            directory.delete()
        logger.info(
            'Directory deleted: %s (ID: %s)',
            directory.name,
            directory_id,
        )

    def _get_directory(self, directory_id: UUID) -> Directory:
        try:
            return Directory.objects.get(pk=directory_id)
        except (Directory.DoesNotExist, ValidationError) as error:
            raise NotFoundError(_DIRECTORY, directory_id) from error

    def _get_file(self, file_id: UUID) -> File:
        try:
            return File.objects.get(pk=file_id)
        except (File.DoesNotExist, ValidationError) as error:
            raise NotFoundError(_FILE, file_id) from error

    def _chain_for(self, directory: Directory) -> list[Directory]:
        return directory.get_ancestor_chain(self._max_depth)

    def _find_mismatch(
        self,
        file_instance: File,
        stream: DjangoFile,
        verify_checksum: bool,
    ) -> str:
        blob_size = self._storage.size(file_instance.storage_path)
        if blob_size != file_instance.size_bytes:
            return f'size {blob_size} != recorded {file_instance.size_bytes}'
        if verify_checksum:
            checksum = calculate_checksum(stream)
            if checksum != file_instance.checksum_sha256:
                return 'checksum differs from recorded value'
        return ''


def get_hierarchy_service() -> HierarchyService:
    """Build a service from Django settings.

    Returns:
        HierarchyService using the 'blobs' storage backend.
    """
    return HierarchyService(
        storage=storages[_BLOB_STORAGE_ALIAS],  # type: ignore[arg-type]
        tree_depth=settings.HIERARCHY_TREE_DEPTH,
        max_depth=settings.HIERARCHY_MAX_DEPTH,
    )


def _as_django_file(content: BytesSource, name: str) -> DjangoFile:
    """Wrap raw bytes or a file object for the storage API."""
    if isinstance(content, DjangoFile):
        return content
    if isinstance(content, bytes):
        return ContentFile(content, name=name)
    return DjangoFile(content, name=name)
