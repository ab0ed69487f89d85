"""Tests for tree snapshot helpers."""

import uuid

import pytest

from server.apps.files.logic.tree import DisplayPath, build_nodes, flatten_arena
from server.apps.files.models import Directory
from server.apps.files.path_resolver import PathResolver


@pytest.fixture
def resolver():
    """Create default PathResolver.

    Returns:
        PathResolver instance.
    """
    return PathResolver()


class TestFlattenArena:
    """Tests for flatten_arena function."""

    def test_pre_order_with_sibling_order(self, resolver):
        """Test parents come before children, siblings keep row order."""
        docs, year, misc, other = (uuid.uuid4() for _ in range(4))
        rows = [
            (docs, 'docs', None),
            (other, 'other', None),
            (year, '2024', docs),
            (misc, 'misc', docs),
        ]

        assert flatten_arena(rows, resolver) == [
            DisplayPath(docs, 'docs'),
            DisplayPath(year, 'docs/2024'),
            DisplayPath(misc, 'docs/misc'),
            DisplayPath(other, 'other'),
        ]

    def test_cycle_is_not_traversed(self, resolver, caplog):
        """Test directories in a parent cycle are skipped, not looped."""
        docs, first, second = (uuid.uuid4() for _ in range(3))
        rows = [
            (docs, 'docs', None),
            (first, 'first', second),
            (second, 'second', first),
        ]

        assert flatten_arena(rows, resolver) == [DisplayPath(docs, 'docs')]
        assert 'unreachable' in caplog.text

    def test_duplicate_reference_visited_once(self, resolver, caplog):
        """Test a node listed under two parents is emitted once."""
        docs, child = uuid.uuid4(), uuid.uuid4()
        rows = [
            (docs, 'docs', None),
            (child, 'child', docs),
            (child, 'child', docs),
        ]

        assert flatten_arena(rows, resolver) == [
            DisplayPath(docs, 'docs'),
            DisplayPath(child, 'docs/child'),
        ]
        assert 'visited twice' in caplog.text

    def test_deep_chain_without_recursion(self, resolver):
        """Test a very deep chain does not hit the recursion limit."""
        rows = []
        parent = None
        for level in range(5000):
            directory_id = uuid.uuid4()
            rows.append((directory_id, str(level), parent))
            parent = directory_id

        flattened = flatten_arena(rows, resolver)

        assert len(flattened) == 5000
        assert flattened[-1].path.count('/') == 4999


@pytest.mark.django_db
class TestBuildNodes:
    """Tests for build_nodes function."""

    def test_nodes_keep_input_order(self):
        """Test one node is returned per input directory, in order."""
        second = Directory.objects.create(name='b')
        first = Directory.objects.create(name='a')

        nodes = build_nodes([second, first], depth=1)

        assert [node.id for node in nodes] == [second.pk, first.pk]
        assert all(node.expanded for node in nodes)

    def test_node_pk_alias(self):
        """Test nodes expose pk for path resolution."""
        docs = Directory.objects.create(name='docs')

        node = build_nodes([docs], depth=0)[0]

        assert node.pk == docs.pk
        assert PathResolver().directory_path([node]) == str(docs.pk)

    def test_queries_bounded_by_depth(self, django_assert_num_queries):
        """Test two queries per level regardless of tree size."""
        docs = Directory.objects.create(name='docs')
        for index in range(5):
            child = Directory.objects.create(name=f'c{index}', parent=docs)
            Directory.objects.create(name='leaf', parent=child)

        with django_assert_num_queries(4):
            nodes = build_nodes([docs], depth=2)

        assert len(nodes[0].children) == 5
        assert all(len(child.children) == 1 for child in nodes[0].children)
