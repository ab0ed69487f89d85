"""Django storage configuration for file blobs.

File bytes live on the local filesystem under ``BLOB_STORAGE_ROOT``,
metadata lives in the database. The two are kept in sync by
``server.apps.files.logic.hierarchy.HierarchyService``.
"""

from typing import Any, Final

from server.settings.components import BASE_DIR, config

# Root directory for file blobs, must exist or be creatable at startup
BLOB_STORAGE_ROOT: Final = config(
    'BLOB_STORAGE_ROOT',
    default=str(BASE_DIR.joinpath('uploads')),
)

# Uses the filesystem blob backend for user files,
# local storage for static files
STORAGES: Final[dict[str, dict[str, Any]]] = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'blobs': {
        'BACKEND': 'server.apps.files.infrastructure.storage.BlobStorage',
        'OPTIONS': {
            'location': BLOB_STORAGE_ROOT,
            'file_permissions_mode': 0o640,
            'directory_permissions_mode': 0o750,
        },
    },
    'staticfiles': {
        # Keep static files separate from user files
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}
