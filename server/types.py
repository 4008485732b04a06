"""Server-specific data type definitions."""

from dataclasses import dataclass
from typing import Iterator, Optional

from common.paths import PathPrefixer


@dataclass(frozen=True)
class RequestContext:
    """
    Immutable per-request state handed to the storage service.

    Attributes:
        path: Normalized request path in the server's own path space
        token: Bearer token presented by the caller (None when absent)
        secret: Shared secret the token must be signed with
        prefix: Server path prefix, stripped before token verification
    """
    path: str
    token: Optional[str]
    secret: str
    prefix: str = ""

    @property
    def canonical_path(self) -> str:
        """Prefix-free path used as the HMAC input."""
        return PathPrefixer(self.prefix).strip_prefix(self.path)

    @property
    def within_prefix(self) -> bool:
        return PathPrefixer(self.prefix).contains(self.path)


@dataclass(frozen=True)
class StreamedFile:
    """
    A file ready to be streamed back to the caller.
    """
    path: str
    mime_type: str
    size: int
    pieces: Iterator[bytes]
