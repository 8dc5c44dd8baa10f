"""Infrastructure layer for files app.

This package contains integrations with external systems:
- Custom storage backend (S3/MinIO)
- Upload metadata (content type, size, storage keys)

Keep infrastructure concerns separate from business logic.
"""
