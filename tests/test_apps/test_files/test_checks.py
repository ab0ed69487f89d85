"""Tests for files app system checks."""

import pytest
from django.db import OperationalError, connections

from server.apps.files.checks import (
    check_blob_storage_root,
    check_database_connection,
)


def test_root_created(settings_blob_storage):
    """Test a missing root is created and passes the check."""
    assert check_blob_storage_root(None) == []


def test_root_cannot_be_created(settings, tmp_path):
    """Test a root below a regular file is reported."""
    blocker = tmp_path / 'blocker'
    blocker.write_text('not a directory')
    settings.STORAGES = {
        **settings.STORAGES,
        'blobs': {
            'BACKEND': 'server.apps.files.infrastructure.storage.BlobStorage',
            'OPTIONS': {'location': str(blocker / 'blobs')},
        },
    }

    errors = check_blob_storage_root(None)

    assert [error.id for error in errors] == ['files.E001']


@pytest.mark.django_db
def test_database_reachable():
    """Test a working database passes the check."""
    assert check_database_connection(None, databases=['default']) == []


def test_database_skipped_without_aliases():
    """Test nothing is queried unless databases are requested."""
    assert check_database_connection(None) == []


def test_database_unreachable(monkeypatch):
    """Test a failing connection is reported."""
    def failing_cursor():
        raise OperationalError('connection refused')

    monkeypatch.setattr(connections['default'], 'cursor', failing_cursor)

    errors = check_database_connection(None, databases=['default'])

    assert [error.id for error in errors] == ['files.E003']
    assert 'connection refused' in errors[0].hint
