"""Project-wide constants (chunk size bounds, API limits, wire values)."""

MIB: int = 1024 * 1024

MIN_CHUNK_SIZE_MIB: int = 1
MAX_CHUNK_SIZE_MIB: int = 2000
DEFAULT_CHUNK_SIZE_MIB: int = 10

DEFAULT_UPLOAD_CONCURRENCY: int = 4

LIST_PAGE_LIMIT: int = 500

COOKIE_PREFIX: str = "access_token="
COOKIE_NAME: str = "access_token"

FOLDER_TYPE: str = "folder"
FILE_TYPE: str = "file"

OCTET_STREAM: str = "application/octet-stream"
