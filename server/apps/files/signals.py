"""Signal handlers for files app."""

import logging

from django.core.files.storage import storages
from django.db.models.signals import pre_delete
from django.dispatch import receiver

from server.apps.files.models import File

logger = logging.getLogger(__name__)


@receiver(pre_delete, sender=File)
def delete_blob_before_record(
    sender: type[File],
    instance: File,
    **kwargs: object,
) -> None:
    """Delete blob from storage before a File record is deleted.

    Records deleted via admin, ORM or any other method get the same
    blob-then-record order. Instances marked ``blob_removed`` are
    skipped: their blob was already handled by the storage they were
    written to, which need not be the configured one.

    Args:
        sender: The File model class.
        instance: The File instance being deleted.
        **kwargs: Additional signal arguments.

    Raises:
        OSError: If the blob exists but cannot be deleted,
            which aborts the record deletion.
    """
    if instance.blob_removed:
        return

    storage = storages['blobs']
    storage_name = instance.storage_path

    if not storage.exists(storage_name):
        logger.debug('No blob left to delete for record: %s', storage_name)
        return

    logger.info(
        'Deleting blob from storage before DB delete: %s',
        storage_name,
    )
    storage.delete(storage_name)
