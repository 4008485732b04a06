"""Configuration settings for the storage server."""

import os
from dataclasses import dataclass


SERVER_HOST = os.environ.get("NEREST_HOST", "0.0.0.0")

SERVER_PORT = int(os.environ.get("NEREST_PORT", "8000"))


@dataclass(frozen=True)
class ServerSettings:
    """
    Process-wide settings, fixed for the lifetime of the server.

    Attributes:
        secret: Shared HMAC secret used to verify capability tokens
        storage_root: Directory exposed by the server
        path_prefix: Prefix stripped from request paths before token
            verification; must equal the client's prefix
    """
    secret: str
    storage_root: str
    path_prefix: str = ""


def load_settings() -> ServerSettings:
    """
    Read server settings from the environment.

    Returns:
        ServerSettings built from NEREST_SECRET, NEREST_STORAGE_ROOT and
        NEREST_PATH_PREFIX

    Raises:
        RuntimeError: If NEREST_SECRET is not set
    """
    secret = os.environ.get("NEREST_SECRET")
    if not secret:
        raise RuntimeError("NEREST_SECRET must be set to start the storage server")

    return ServerSettings(
        secret=secret,
        storage_root=os.environ.get("NEREST_STORAGE_ROOT", "/app/data/storage"),
        path_prefix=os.environ.get("NEREST_PATH_PREFIX", ""),
    )
