"""Shared fixtures for files app tests."""

import pytest
from django.core.files.base import ContentFile
from django.core.files.storage import storages

from server.apps.files.infrastructure.storage import BlobStorage
from server.apps.files.logic.hierarchy import HierarchyService


@pytest.fixture
def blob_storage(tmp_path):
    """Blob storage rooted in a temporary directory.

    Returns:
        BlobStorage instance, independent per test.
    """
    return BlobStorage(location=tmp_path / 'blobs')


@pytest.fixture
def hierarchy(db, blob_storage):
    """Create hierarchy service with one level of tree expansion.

    Returns:
        HierarchyService instance.
    """
    return HierarchyService(storage=blob_storage, tree_depth=1)


@pytest.fixture
def docs_tree(hierarchy):
    """Create 'docs' with a '2024' child directory.

    Returns:
        Tuple of (docs, year) Directory instances.
    """
    docs = hierarchy.create_directory('docs')
    year = hierarchy.create_directory('2024', parent_id=docs.pk)
    return docs, year


@pytest.fixture
def settings_blob_storage(settings, tmp_path):
    """Point the 'blobs' storage alias at a temporary directory.

    Used by code that resolves storage from settings: signals,
    system checks and management commands.

    Returns:
        BlobStorage configured from settings.
    """
    settings.STORAGES = {
        **settings.STORAGES,
        'blobs': {
            'BACKEND': 'server.apps.files.infrastructure.storage.BlobStorage',
            'OPTIONS': {'location': str(tmp_path / 'settings-blobs')},
        },
    }
    return storages['blobs']


@pytest.fixture
def sample_file_content():
    """Sample file content for testing.

    Returns:
        ContentFile with test data.
    """
    return ContentFile(b'test file content', name='test.txt')
