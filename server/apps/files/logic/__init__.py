"""Business logic layer for files app.

This package contains all business logic for the drive:
- Content type categories used by filters
- Folder tree management and recursive content matching
- File upload, download, delete and paginated listings
- Recursive search by name

All business logic should be implemented here, separate from
models (data layer), infrastructure (external systems) and views.
"""
