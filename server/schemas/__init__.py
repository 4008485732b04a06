"""Pydantic schemas for API responses."""

from server.schemas.common import ErrorResponse
from server.schemas.storage import AttributeRecord

__all__ = [
    "AttributeRecord",
    "ErrorResponse",
]
