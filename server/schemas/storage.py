"""Pydantic schemas for storage endpoint responses."""

from typing import Optional

from pydantic import BaseModel

from common.attributes import StorageAttributes


class AttributeRecord(BaseModel):
    """Flat wire representation of file or directory metadata."""
    type: str
    path: str
    file_size: Optional[int] = None
    visibility: Optional[str] = None
    last_modified: Optional[int] = None
    mime_type: Optional[str] = None

    @classmethod
    def from_attributes(cls, attributes: StorageAttributes) -> "AttributeRecord":
        """
        Build a record from typed attributes.

        Args:
            attributes: FileAttributes or DirectoryAttributes

        Returns:
            AttributeRecord (file_size and mime_type unset for directories)
        """
        return cls(
            type=attributes.type,
            path=attributes.path,
            file_size=getattr(attributes, "file_size", None),
            visibility=attributes.visibility,
            last_modified=attributes.last_modified,
            mime_type=getattr(attributes, "mime_type", None),
        )

    def to_wire(self) -> dict:
        """Serialize, omitting absent fields."""
        return self.model_dump(exclude_none=True)
