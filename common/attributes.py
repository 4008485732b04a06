"""Typed file/directory attributes and their flat wire records."""

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional, Union

from common.constants import VISIBILITY_PRIVATE
from common.exceptions import MalformedResponse

TYPE_FILE = "file"
TYPE_DIRECTORY = "dir"

ATTRIBUTE_FILE_SIZE = "file_size"
ATTRIBUTE_VISIBILITY = "visibility"
ATTRIBUTE_LAST_MODIFIED = "last_modified"
ATTRIBUTE_MIME_TYPE = "mime_type"


@dataclass(frozen=True)
class FileAttributes:
    """
    Metadata snapshot of a file.
    """
    path: str
    file_size: int
    visibility: Optional[str] = None
    last_modified: Optional[int] = None
    mime_type: Optional[str] = None
    type: ClassVar[str] = TYPE_FILE

    def is_file(self) -> bool:
        return True

    def is_dir(self) -> bool:
        return False


@dataclass(frozen=True)
class DirectoryAttributes:
    """
    Metadata snapshot of a directory.
    """
    path: str
    visibility: Optional[str] = None
    last_modified: Optional[int] = None
    type: ClassVar[str] = TYPE_DIRECTORY

    def is_file(self) -> bool:
        return False

    def is_dir(self) -> bool:
        return True


StorageAttributes = Union[FileAttributes, DirectoryAttributes]


def attributes_from_record(path: str, record: Dict[str, Any]) -> StorageAttributes:
    """
    Convert a flat attribute record into typed attributes.

    The path is passed separately so callers can strip their prefix from
    the wire path before conversion.

    Args:
        path: Caller-visible (prefix-free) path
        record: Flat attribute record as received from the wire

    Returns:
        DirectoryAttributes when record type is "dir", FileAttributes otherwise

    Raises:
        MalformedResponse: If a file record lacks file_size
    """
    if record.get("type") == TYPE_DIRECTORY:
        return DirectoryAttributes(
            path=path.lstrip("/"),
            visibility=record.get("visibility") or VISIBILITY_PRIVATE,
            last_modified=record.get("last_modified"),
        )

    if record.get("file_size") is None:
        raise MalformedResponse(f"Attribute record for {path!r} is missing 'file_size'")

    return FileAttributes(
        path=path,
        file_size=int(record["file_size"]),
        visibility=record.get("visibility") or VISIBILITY_PRIVATE,
        last_modified=record.get("last_modified"),
        mime_type=record.get("mime_type"),
    )
