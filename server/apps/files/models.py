"""Database models for files app."""

import uuid
from collections.abc import Iterable
from pathlib import Path
from typing import Final, final, override

from django.db import models

from server.apps.files.exceptions import HierarchyIntegrityError

# Constants for field max lengths
_NAME_MAX_LENGTH: Final = 255
_STORAGE_PATH_MAX_LENGTH: Final = 1024
_MIME_TYPE_MAX_LENGTH: Final = 255
_CHECKSUM_MAX_LENGTH: Final = 64  # SHA256 hex length

# Stable sibling order: creation time, then id for equal timestamps
SIBLING_ORDERING: Final = ('created_at', 'id')


class DirectoryQuerySet(models.QuerySet['Directory']):
    """Tree queries over directory records."""

    def top_level(self) -> 'DirectoryQuerySet':
        """Directories without a parent, in creation order."""
        return self.filter(parent__isnull=True).order_by(*SIBLING_ORDERING)

    def children_of(self, parent_ids: Iterable[uuid.UUID]) -> 'DirectoryQuerySet':
        """Direct children of the given directories, in creation order."""
        return self.filter(
            parent_id__in=list(parent_ids),
        ).order_by(*SIBLING_ORDERING)


@final
class Directory(models.Model):
    """Node of the directory tree.

    Only the tree shape lives here. The physical directory on disk
    is named after the chain of ancestor IDs, never after ``name``,
    so siblings may share a name.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
    )

    name = models.CharField(
        max_length=_NAME_MAX_LENGTH,
        help_text='Display name, unique only in spirit among siblings',
    )

    # PROTECT: a directory with children cannot be deleted
    parent = models.ForeignKey(
        'self',
        on_delete=models.PROTECT,
        related_name='children',
        null=True,
        blank=True,
    )

    created_at = models.DateTimeField(auto_now_add=True)

    objects = DirectoryQuerySet.as_manager()

    class Meta:
        """Model metadata."""

        verbose_name = 'Directory'  # type: ignore[mutable-override]
        verbose_name_plural = 'Directories'  # type: ignore[mutable-override]
        ordering = list(SIBLING_ORDERING)

        indexes = [
            # Optimize children listing queries
            models.Index(
                fields=['parent', 'created_at'],
                name='directories_parent_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return self.name

    @property
    def is_top_level(self) -> bool:
        """Check whether directory has no parent."""
        return self.parent_id is None

    def get_ancestor_chain(self, max_depth: int) -> list['Directory']:
        """Walk parent references up to the root.

        Args:
            max_depth: Maximum chain length allowed.

        Returns:
            Ancestors top-down, ending with this directory.

        Raises:
            HierarchyIntegrityError: If the chain loops back on itself
                or is longer than max_depth.
        """
        chain = [self]
        visited = {self.pk}
        parent_id = self.parent_id

        while parent_id is not None:
            if parent_id in visited:
                raise HierarchyIntegrityError(
                    f'Parent cycle detected at directory {parent_id}',
                )
            if len(chain) >= max_depth:
                raise HierarchyIntegrityError(
                    f'Directory {self.pk} is nested deeper than {max_depth}',
                )
            parent = Directory.objects.only('id', 'name', 'parent_id').get(
                pk=parent_id,
            )
            visited.add(parent.pk)
            chain.append(parent)
            parent_id = parent.parent_id

        chain.reverse()
        return chain


@final
class File(models.Model):
    """File whose bytes are stored on the blob filesystem.

    ``storage_path`` follows the pattern
    ``{root_dir_id}/.../{dir_id}/{sanitized_name}`` and is set once,
    from the path the blob was actually written to.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
    )

    original_name = models.CharField(
        max_length=_NAME_MAX_LENGTH,
        help_text='Name as supplied by the uploader',
    )

    storage_path = models.CharField(
        max_length=_STORAGE_PATH_MAX_LENGTH,
        unique=True,
        editable=False,
        help_text='Path under blob root: {dir_id}/.../file.ext',
    )

    # File metadata (captured at upload time)
    size_bytes = models.BigIntegerField(
        help_text='File size in bytes',
    )

    mime_type = models.CharField(
        max_length=_MIME_TYPE_MAX_LENGTH,
        help_text='MIME type guessed from the original name',
    )

    checksum_sha256 = models.CharField(
        max_length=_CHECKSUM_MAX_LENGTH,
        help_text='SHA256 hash for integrity verification',
        db_index=True,
    )

    directory = models.ForeignKey(
        Directory,
        on_delete=models.PROTECT,
        related_name='files',
        null=True,
        blank=True,
    )

    uploaded_at = models.DateTimeField(auto_now_add=True)

    # Set by code that deleted the blob itself before deleting the record
    blob_removed: bool = False

    class Meta:
        """Model metadata."""

        verbose_name = 'File'  # type: ignore[mutable-override]
        verbose_name_plural = 'Files'  # type: ignore[mutable-override]
        ordering = ['-uploaded_at', 'id']

        indexes = [
            # Optimize directory listing queries
            models.Index(
                fields=['directory', '-uploaded_at'],
                name='files_directory_recent_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.original_name} ({self.storage_path})'

    def get_filename(self) -> str:
        """Extract the stored filename from storage_path.

        Example: 'a1b2.../c3d4.../report.pdf' -> 'report.pdf'

        Returns:
            Filename without path.
        """
        return Path(self.storage_path).name

    def get_extension(self) -> str:
        """Extract file extension from the original name.

        Example: 'report.PDF' -> 'pdf'

        Returns:
            Extension without dot (lowercase).
        """
        extension = Path(self.original_name).suffix
        return extension.lstrip('.').lower()
