"""Tests for files app signal handlers."""

import pytest
from django.core.files.base import ContentFile

from server.apps.files.models import File


@pytest.mark.django_db
def test_orm_delete_removes_blob(settings_blob_storage):
    """Test deleting a record outside the service removes its blob."""
    settings_blob_storage.save('a.txt', ContentFile(b'abc'))
    file_instance = File.objects.create(
        original_name='a.txt',
        storage_path='a.txt',
        size_bytes=3,
        mime_type='text/plain',
        checksum_sha256='a' * 64,
    )

    file_instance.delete()

    assert not settings_blob_storage.exists('a.txt')


@pytest.mark.django_db
def test_orm_delete_without_blob(settings_blob_storage):
    """Test deleting a record whose blob is already gone succeeds."""
    settings_blob_storage.ensure_root()
    file_instance = File.objects.create(
        original_name='a.txt',
        storage_path='a.txt',
        size_bytes=3,
        mime_type='text/plain',
        checksum_sha256='a' * 64,
    )

    file_instance.delete()

    assert not File.objects.filter(pk=file_instance.pk).exists()


@pytest.mark.django_db(transaction=True)
def test_blob_delete_failure_keeps_record(settings_blob_storage, monkeypatch):
    """Test record is kept when its blob cannot be deleted."""
    settings_blob_storage.save('a.txt', ContentFile(b'abc'))
    file_instance = File.objects.create(
        original_name='a.txt',
        storage_path='a.txt',
        size_bytes=3,
        mime_type='text/plain',
        checksum_sha256='a' * 64,
    )

    def failing_delete(name):
        raise PermissionError(name)

    monkeypatch.setattr(settings_blob_storage, 'delete', failing_delete)

    with pytest.raises(PermissionError):
        file_instance.delete()

    assert File.objects.filter(pk=file_instance.pk).exists()


@pytest.mark.django_db
def test_marked_instance_skips_blob(settings_blob_storage):
    """Test records whose blob was handled elsewhere leave storage untouched."""
    settings_blob_storage.save('a.txt', ContentFile(b'abc'))
    file_instance = File.objects.create(
        original_name='a.txt',
        storage_path='a.txt',
        size_bytes=3,
        mime_type='text/plain',
        checksum_sha256='a' * 64,
    )
    file_instance.blob_removed = True

    file_instance.delete()

    assert not File.objects.filter(pk=file_instance.pk).exists()
    assert settings_blob_storage.exists('a.txt')
