"""Bearer credential extraction and request context construction."""

from typing import Optional

from fastapi import Depends, Header

from common.paths import normalize_path
from server.config import ServerSettings, load_settings
from server.local_storage import LocalStorage
from server.services.storage_service import StorageService
from server.types import RequestContext

BEARER_SCHEME = "bearer"


def get_settings() -> ServerSettings:
    """
    FastAPI dependency returning the process settings.

    Tests override this dependency to point the server at a temporary root.
    """
    return load_settings()


def get_bearer_token(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """
    FastAPI dependency extracting the token from "Authorization: Bearer <token>".

    Returns:
        The token, or None when the header is absent or uses another scheme.
        A missing token fails verification later, like a wrong one.
    """
    if not authorization:
        return None

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        return None

    return token.strip() or None


def get_request_context(
    path: str,
    token: Optional[str] = Depends(get_bearer_token),
    settings: ServerSettings = Depends(get_settings),
) -> RequestContext:
    """
    FastAPI dependency building the immutable per-request context.

    Raises:
        PathTraversalDetected: If the request path contains ".." segments
    """
    return RequestContext(
        path=normalize_path(path),
        token=token,
        secret=settings.secret,
        prefix=settings.path_prefix,
    )


def get_storage_service(settings: ServerSettings = Depends(get_settings)) -> StorageService:
    """
    FastAPI dependency returning a storage service over the configured root.
    """
    return StorageService(LocalStorage(settings.storage_root))
