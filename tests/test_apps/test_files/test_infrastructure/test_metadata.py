"""Tests for metadata utilities."""

from io import BytesIO

import pytest
from django.core.exceptions import SuspiciousFileOperation
from django.core.files.base import ContentFile
from django.core.files.base import File as DjangoFile

from server.apps.files.infrastructure.metadata import (
    calculate_checksum,
    detect_mime_type,
    get_file_size,
    sanitize_filename,
)


def test_detect_mime_type():
    """Test MIME type detection from filename."""
    assert detect_mime_type('test.pdf') == 'application/pdf'
    assert detect_mime_type('test.txt') == 'text/plain'
    assert detect_mime_type('test.jpg') == 'image/jpeg'
    assert detect_mime_type('test.png') == 'image/png'


def test_detect_mime_type_unknown():
    """Test MIME type detection for unknown extension."""
    assert detect_mime_type('test.unknown') == 'application/octet-stream'


def test_calculate_checksum():
    """Test SHA256 checksum calculation."""
    file_obj = ContentFile(b'test content')

    checksum = calculate_checksum(file_obj)

    # Should be 64 character hex string
    assert len(checksum) == 64
    assert all(char in '0123456789abcdef' for char in checksum)

    # Same content should produce same checksum
    assert calculate_checksum(ContentFile(b'test content')) == checksum


def test_calculate_checksum_resets_position():
    """Test checksum leaves the file pointer at the start."""
    file_obj = BytesIO(b'abc')

    calculate_checksum(file_obj)

    assert file_obj.read() == b'abc'


def test_get_file_size_content_file():
    """Test size of a Django ContentFile."""
    assert get_file_size(ContentFile(b'abc')) == 3


def test_get_file_size_bytesio():
    """Test size of BytesIO object (no .size attribute)."""
    file_obj = BytesIO(b'bytesio content here')

    assert get_file_size(file_obj) == 20
    assert file_obj.tell() == 0


def test_get_file_size_wrapped_stream():
    """Test size of a Django File wrapping a stream."""
    assert get_file_size(DjangoFile(BytesIO(b'12345'), name='x.bin')) == 5


class TestSanitizeFilename:
    """Tests for sanitize_filename function."""

    def test_keeps_simple_name(self):
        """Test a safe name is unchanged."""
        assert sanitize_filename('a.txt') == 'a.txt'

    def test_replaces_whitespace(self):
        """Test whitespace runs become single underscores."""
        assert sanitize_filename('annual  report\t2024.pdf') == 'annual_report_2024.pdf'

    def test_drops_directory_part(self):
        """Test only the basename is kept."""
        assert sanitize_filename('../../etc/passwd') == 'passwd'
        assert sanitize_filename('C:\\Users\\me\\notes.txt') == 'notes.txt'

    def test_strips_unsafe_characters(self):
        """Test characters outside word, dash and dot are removed."""
        assert sanitize_filename('we?ird*name!.txt') == 'weirdname.txt'

    def test_truncates_long_name_keeping_extension(self):
        """Test names over 255 bytes are cut down, extension kept."""
        sanitized = sanitize_filename('{0}.pdf'.format('a' * 300))

        assert sanitized == '{0}.pdf'.format('a' * 251)

    def test_truncates_on_character_boundary(self):
        """Test multibyte characters are never split."""
        sanitized = sanitize_filename('{0}.txt'.format('ł' * 200))

        assert sanitized == '{0}.txt'.format('ł' * 125)
        assert len(sanitized.encode()) == 254

    def test_drops_overlong_extension(self):
        """Test an extension too long to keep is cut with the rest."""
        sanitized = sanitize_filename('a.{0}'.format('b' * 300))

        assert len(sanitized.encode()) == 255
        assert sanitized.startswith('a.b')

    @pytest.mark.parametrize('original_name', ['', '   ', '.', '..', 'docs/..'])
    def test_rejects_unusable_names(self, original_name):
        """Test names with nothing usable left raise."""
        with pytest.raises(SuspiciousFileOperation):
            sanitize_filename(original_name)
