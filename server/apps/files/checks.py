"""System checks for files app."""

import os
from typing import Any

from django.apps import AppConfig
from django.core.checks import CheckMessage, Error, Tags, register
from django.core.files.storage import storages
from django.db import DatabaseError, connections


@register()
def check_blob_storage_root(
    app_configs: list[AppConfig] | None,
    **kwargs: Any,
) -> list[CheckMessage]:
    """Check that the blob root exists or can be created.

    Args:
        app_configs: Apps to check, None means all.
        kwargs: Additional check arguments.

    Returns:
        List of check errors, empty if the root is usable.
    """
    location = storages['blobs'].location
    try:
        os.makedirs(location, exist_ok=True)
    except OSError as error:
        return [
            Error(
                f'Blob storage root cannot be created: {location}',
                hint=str(error),
                id='files.E001',
            ),
        ]

    if not os.access(location, os.W_OK):
        return [
            Error(
                f'Blob storage root is not writable: {location}',
                hint='Set BLOB_STORAGE_ROOT to a writable directory.',
                id='files.E002',
            ),
        ]
    return []


@register(Tags.database)
def check_database_connection(
    app_configs: list[AppConfig] | None,
    databases: list[str] | None = None,
    **kwargs: Any,
) -> list[CheckMessage]:
    """Check that the record store answers a trivial query.

    Runs only when databases are requested, e.g. ``check --database default``.

    Args:
        app_configs: Apps to check, None means all.
        databases: Database aliases to check.
        kwargs: Additional check arguments.

    Returns:
        One error per unreachable database.
    """
    errors: list[CheckMessage] = []
    for alias in databases or ():
        try:
            with connections[alias].cursor() as cursor:
                cursor.execute('SELECT 1')
        except DatabaseError as error:
            errors.append(
                Error(
                    f'Database is not reachable: {alias}',
                    hint=str(error),
                    id='files.E003',
                ),
            )
    return errors
