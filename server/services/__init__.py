"""Service layer for storage operations."""

from server.services.storage_service import StorageService

__all__ = [
    "StorageService",
]
