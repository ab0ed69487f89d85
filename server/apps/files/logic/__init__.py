"""Business logic layer for files app.

This package contains all business logic for directories and files:
- Directory creation and deletion
- File placement, download and deletion
- Tree listings and flattened display paths

All business logic should be implemented here, separate from
models (data layer) and infrastructure (external systems).
"""
