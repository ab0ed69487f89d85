"""Path derivation from directory tree positions.

Storage paths are built from directory identifiers so they never collide:
``{root_id}/{child_id}/report.pdf``.
Display paths are built from directory names and are only for people:
``documents/2024/report.pdf``.
"""

from collections.abc import Iterable, Sequence
from typing import Final, Protocol, final
from uuid import UUID

# Character used to split storage and display paths
_PATH_SEPARATOR: Final = '/'

_PARENT_REFERENCE: Final = '..'


class DirectoryLike(Protocol):
    """Anything with a primary key, e.g. a Directory record or tree node."""

    @property
    def pk(self) -> UUID:
        """Directory identifier."""


@final
class PathResolver:
    """Maps a directory chain plus a leaf name to relative paths.

    A chain is the top-down sequence of ancestors of a directory,
    ending with the directory itself. An empty chain is the storage root.

    This class does no I/O: callers load the chain from the database.
    """

    def __init__(self, separator: str = _PATH_SEPARATOR) -> None:
        """Initialize resolver.

        Args:
            separator: Separator used to join path components.
        """
        self._separator = separator

    @property
    def separator(self) -> str:
        """Get the path separator."""
        return self._separator

    def directory_path(self, chain: Sequence[DirectoryLike]) -> str:
        """Build the by-identifier path of the last directory in a chain.

        Args:
            chain: Ancestors top-down, ending with the directory itself.

        Returns:
            Relative path (e.g., 'a1b2.../c3d4...').
            Returns empty string for the storage root.
        """
        return self._separator.join(str(directory.pk) for directory in chain)

    def storage_path(self, chain: Sequence[DirectoryLike], leaf: str) -> str:
        """Build the by-identifier storage path for a file.

        Args:
            chain: Ancestors top-down of the target directory,
                empty for root-level files.
            leaf: Sanitized file name.

        Returns:
            Relative storage path (e.g., 'a1b2.../report.pdf').
        """
        directory = self.directory_path(chain)
        if not directory:
            return leaf
        return f'{directory}{self._separator}{leaf}'

    def display_path(self, names: Iterable[str]) -> str:
        """Join names into a human-readable path.

        Args:
            names: Directory (and optionally file) names, top-down.

        Returns:
            Display path (e.g., 'documents/2024').
        """
        return self._separator.join(names)

    def split_storage_path(self, storage_path: str) -> tuple[list[UUID], str]:
        """Split a storage path back into directory IDs and a leaf name.

        Lets an audit pass map blobs on disk back to directory records.

        Args:
            storage_path: Relative storage path.

        Returns:
            Tuple of directory IDs (top-down) and the leaf name.

        Raises:
            ValueError: If the path is empty, absolute, contains traversal
                or a NUL byte, or a directory component is not a UUID.
        """
        if not storage_path or '\x00' in storage_path:
            raise ValueError(f'Invalid storage path: {storage_path!r}')
        if storage_path.startswith(self._separator):
            raise ValueError(f'Storage path must be relative: {storage_path}')

        parts = storage_path.split(self._separator)
        if _PARENT_REFERENCE in parts or '' in parts:
            raise ValueError(f'Invalid storage path: {storage_path}')

        *directories, leaf = parts
        return [UUID(part) for part in directories], leaf
