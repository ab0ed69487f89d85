"""Metadata extraction utilities for files."""

import hashlib
import mimetypes
import re
from pathlib import PurePosixPath
from typing import BinaryIO, Final

from django.core.files.base import File as DjangoFile
from django.utils.text import get_valid_filename

_CHUNK_SIZE: Final = 8192  # 8KB chunks for checksum calculation

_WHITESPACE: Final = re.compile(r'\s+')

# Longest single path component most filesystems accept, in bytes
_MAX_LEAF_BYTES: Final = 255

_MAX_SUFFIX_BYTES: Final = 32


def detect_mime_type(filename: str) -> str:
    """Detect MIME type from filename.

    Uses Python's built-in mimetypes module to guess MIME type
    from filename extension.

    Args:
        filename: Filename with extension.

    Returns:
        MIME type string (e.g., 'image/jpeg', 'application/pdf').
        Returns 'application/octet-stream' if type cannot be determined.
    """
    mime_type, _ = mimetypes.guess_type(filename)
    if mime_type is None:
        return 'application/octet-stream'
    return mime_type


def calculate_checksum(file_obj: BinaryIO | DjangoFile) -> str:
    """Calculate SHA256 checksum of file.

    Reads file in chunks to handle large files efficiently.
    Resets file pointer to beginning after calculation.

    Args:
        file_obj: File-like object to checksum.

    Returns:
        Hex-encoded SHA256 hash string.
    """
    sha256_hash = hashlib.sha256()

    file_obj.seek(0)
    for chunk in iter(lambda: file_obj.read(_CHUNK_SIZE), b''):
        sha256_hash.update(chunk)

    # Reset file pointer to beginning for subsequent operations
    file_obj.seek(0)

    return sha256_hash.hexdigest()


def get_file_size(file_obj: BinaryIO | DjangoFile) -> int:
    """Get file size from file object.

    Args:
        file_obj: File-like object.

    Returns:
        File size in bytes.
    """
    if isinstance(file_obj, DjangoFile):
        return file_obj.size
    file_obj.seek(0, 2)
    file_size = file_obj.tell()
    file_obj.seek(0)
    return file_size


def sanitize_filename(original_name: str) -> str:
    """Turn an uploader-supplied name into a safe storage leaf name.

    Drops any directory part, collapses whitespace to underscores
    and strips characters Django considers unsafe in filenames.
    Names longer than a path component allows are cut down, keeping
    the extension.

    Example: 'C:\\My Docs\\annual report.pdf' -> 'annual_report.pdf'

    Args:
        original_name: Name as supplied by the uploader.

    Returns:
        Sanitized filename.

    Raises:
        SuspiciousFileOperation: If nothing usable is left of the name.
    """
    basename = PurePosixPath(original_name.replace('\\', '/')).name
    return _truncate_leaf(
        get_valid_filename(_WHITESPACE.sub('_', basename.strip())),
    )


def _truncate_leaf(name: str) -> str:
    encoded = name.encode()
    if len(encoded) <= _MAX_LEAF_BYTES:
        return name

    suffix = PurePosixPath(name).suffix
    if len(suffix.encode()) > _MAX_SUFFIX_BYTES:
        suffix = ''
    stem = name.removesuffix(suffix).encode()
    budget = _MAX_LEAF_BYTES - len(suffix.encode())
    # ignore drops a multibyte character split by the cut
    return stem[:budget].decode(errors='ignore') + suffix
