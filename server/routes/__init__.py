"""API routes package."""

from server.routes.storage_routes import router as storage_router

__all__ = ["storage_router"]
