"""Drive listing, search and download settings."""

from server.settings.components import config

# Pagination of folder listings
DRIVE_DEFAULT_PAGE_LIMIT = config(
    'DRIVE_DEFAULT_PAGE_LIMIT',
    cast=int,
    default=20,
)
DRIVE_MAX_PAGE_LIMIT = config('DRIVE_MAX_PAGE_LIMIT', cast=int, default=100)

# Number of items in the "recent" view
DRIVE_RECENT_LIMIT = config('DRIVE_RECENT_LIMIT', cast=int, default=10)

# Whole-tree search is aborted after this many seconds
DRIVE_SEARCH_TIMEOUT = config('DRIVE_SEARCH_TIMEOUT', cast=float, default=15)

# Lifetime of presigned download links in seconds
DRIVE_DOWNLOAD_URL_EXPIRY = config(
    'DRIVE_DOWNLOAD_URL_EXPIRY',
    cast=int,
    default=60,
)
