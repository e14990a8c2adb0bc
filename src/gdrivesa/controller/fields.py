"""Constants for the Drive v2 files API."""

from __future__ import annotations

ROOT_FOLDER_ID: str = "root"

FILE_KIND: str = "drive#file"

# Default page sizes (maxResults) per operation.
FILES_MAX_RESULTS: int = 3000
CHILDREN_MAX_RESULTS: int = 100
LOOKUP_MAX_RESULTS: int = 100
SEARCH_MAX_RESULTS: int = 100

ITEMS_KEY: str = "items"
NEXT_PAGE_TOKEN_KEY: str = "nextPageToken"
PAGE_TOKEN_PARAM: str = "pageToken"
