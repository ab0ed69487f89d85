"""Tests for File model."""

import pytest
from django.db import IntegrityError
from django.db.models import ProtectedError

from server.apps.files.models import Directory, File


def _create_file(**kwargs):
    defaults = {
        'original_name': 'test.txt',
        'storage_path': 'test.txt',
        'size_bytes': 100,
        'mime_type': 'text/plain',
        'checksum_sha256': 'abcd' * 16,
    }
    defaults.update(kwargs)
    return File.objects.create(**defaults)


@pytest.mark.django_db
def test_file_model_str():
    """Test File __str__ method."""
    file_instance = _create_file(
        original_name='My Report.pdf',
        storage_path='My_Report.pdf',
    )

    assert str(file_instance) == 'My Report.pdf (My_Report.pdf)'


@pytest.mark.django_db
def test_file_get_filename():
    """Test get_filename method extracts stored filename correctly."""
    directory = Directory.objects.create(name='docs')
    file_instance = _create_file(storage_path=f'{directory.pk}/test.pdf')

    assert file_instance.get_filename() == 'test.pdf'


@pytest.mark.django_db
def test_file_get_extension():
    """Test get_extension method extracts extension correctly."""
    file_instance = _create_file(original_name='test.PDF')

    # Should return lowercase without dot
    assert file_instance.get_extension() == 'pdf'


@pytest.mark.django_db
def test_storage_path_unique():
    """Test two records cannot share a storage path."""
    _create_file(storage_path='same.txt')

    with pytest.raises(IntegrityError):
        _create_file(storage_path='same.txt')


@pytest.mark.django_db
def test_default_ordering_newest_first():
    """Test files are ordered by uploaded_at descending."""
    older = _create_file(storage_path='older.txt')
    newer = _create_file(storage_path='newer.txt')
    File.objects.filter(pk=older.pk).update(
        uploaded_at=newer.uploaded_at.replace(year=2000),
    )

    assert list(File.objects.all()) == [newer, older]


@pytest.mark.django_db
def test_directory_with_files_is_protected():
    """Test a directory holding files cannot be deleted."""
    directory = Directory.objects.create(name='docs')
    _create_file(directory=directory)

    with pytest.raises(ProtectedError):
        directory.delete()
