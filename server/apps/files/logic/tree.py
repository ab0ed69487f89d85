"""Read-only snapshots of the directory tree."""

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple
from uuid import UUID

from server.apps.files.models import Directory, File
from server.apps.files.path_resolver import PathResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DirectoryNode:
    """Directory with its contents loaded to a bounded depth.

    ``expanded`` is False when the depth limit was reached before
    this node, in which case ``children`` and ``files`` are empty
    regardless of what the database holds.
    """

    id: UUID
    name: str
    parent_id: UUID | None
    created_at: datetime
    children: tuple['DirectoryNode', ...] = ()
    files: tuple[File, ...] = ()
    expanded: bool = False

    @property
    def pk(self) -> UUID:
        """Alias of id, so nodes can be passed to PathResolver."""
        return self.id


class DisplayPath(NamedTuple):
    """Directory ID with its human-readable path."""

    id: UUID
    path: str


def build_nodes(
    directories: Sequence[Directory],
    depth: int,
) -> list[DirectoryNode]:
    """Load children and files under directories, level by level.

    Runs two queries per level (children, files), so the number of
    queries is bounded by depth, not by tree size.

    Args:
        directories: Directories to start from.
        depth: Number of levels whose contents are loaded.
            0 returns bare nodes.

    Returns:
        One node per input directory, in input order.
    """
    children_by_parent: dict[UUID, list[Directory]] = defaultdict(list)
    files_by_directory: dict[UUID, list[File]] = defaultdict(list)
    expanded: set[UUID] = set()

    frontier = list(directories)
    for _ in range(depth):
        frontier_ids = [directory.pk for directory in frontier]
        if not frontier_ids:
            break
        expanded.update(frontier_ids)

        for file_instance in File.objects.filter(directory_id__in=frontier_ids):
            files_by_directory[file_instance.directory_id].append(file_instance)

        frontier = list(Directory.objects.children_of(frontier_ids))
        for child in frontier:
            children_by_parent[child.parent_id].append(child)

    def make_node(directory: Directory) -> DirectoryNode:  # noqa: WPS430
        if directory.pk not in expanded:
            return _bare_node(directory)
        return DirectoryNode(
            id=directory.pk,
            name=directory.name,
            parent_id=directory.parent_id,
            created_at=directory.created_at,
            children=tuple(
                make_node(child)
                for child in children_by_parent[directory.pk]
            ),
            files=tuple(files_by_directory[directory.pk]),
            expanded=True,
        )

    return [make_node(directory) for directory in directories]


def _bare_node(directory: Directory) -> DirectoryNode:
    return DirectoryNode(
        id=directory.pk,
        name=directory.name,
        parent_id=directory.parent_id,
        created_at=directory.created_at,
    )


def flatten_arena(
    rows: Iterable[tuple[UUID, str, UUID | None]],
    resolver: PathResolver,
) -> list[DisplayPath]:
    """Depth-first, pre-order listing of every directory with its path.

    The arena is built from (id, name, parent_id) rows already sorted
    in sibling order. Traversal uses an explicit stack and a visited
    set, so a corrupted parent chain cannot loop forever.

    Args:
        rows: Directory rows in sibling order.
        resolver: Resolver used to join names into display paths.

    Returns:
        Display paths of directories reachable from top-level ones.
    """
    names: dict[UUID, str] = {}
    children: dict[UUID, list[UUID]] = defaultdict(list)
    roots: list[UUID] = []

    for directory_id, name, parent_id in rows:
        names[directory_id] = name
        if parent_id is None:
            roots.append(directory_id)
        else:
            children[parent_id].append(directory_id)

    flattened: list[DisplayPath] = []
    visited: set[UUID] = set()
    stack = [(root, (names[root],)) for root in reversed(roots)]

    while stack:
        directory_id, path_names = stack.pop()
        if directory_id in visited:
            logger.warning('Directory visited twice, skipping: %s', directory_id)
            continue
        visited.add(directory_id)
        flattened.append(
            DisplayPath(directory_id, resolver.display_path(path_names)),
        )
        stack.extend(
            (child_id, (*path_names, names[child_id]))
            for child_id in reversed(children[directory_id])
        )

    unreachable = len(names) - len(visited)
    if unreachable:
        logger.warning(
            'Directories unreachable from top level (parent cycle?): %d',
            unreachable,
        )
    return flattened
