"""Project-wide constants (chunk size, visibility values, defaults)."""

CHUNK_SIZE_BYTES: int = 5 * 1024 * 1024  # 5 MiB upload chunk
STREAM_PIECE_SIZE_BYTES: int = 64 * 1024

VISIBILITY_PUBLIC = "public"
VISIBILITY_PRIVATE = "private"
VISIBILITIES = (VISIBILITY_PUBLIC, VISIBILITY_PRIVATE)

FILE_PERMISSIONS = {
    VISIBILITY_PUBLIC: 0o644,
    VISIBILITY_PRIVATE: 0o600,
}

DIRECTORY_PERMISSIONS = {
    VISIBILITY_PUBLIC: 0o755,
    VISIBILITY_PRIVATE: 0o700,
}

DEFAULT_CHECKSUM_ALGORITHM = "md5"
DEFAULT_MIME_TYPE = "application/octet-stream"
TEXT_MIME_TYPE = "text/plain"

TOKEN_ENCODINGS = ("hex", "base64")
DEFAULT_TOKEN_ENCODING = "hex"

DEFAULT_TIMEOUT_SECONDS: float = 30.0
