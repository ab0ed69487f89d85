"""Infrastructure layer for files app.

This package contains integrations with external systems:
- Filesystem storage backend for file blobs
- Metadata extraction (MIME type, checksum, size, safe names)

Keep infrastructure concerns separate from business logic.
"""
