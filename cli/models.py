"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal, Optional, Union


@dataclass(frozen=True)
class ListCommand:
    """List a directory."""

    path: str = ""
    recursive: bool = False
    command: Literal["ls"] = "ls"


@dataclass(frozen=True)
class CatCommand:
    """Print a remote file."""

    path: str
    command: Literal["cat"] = "cat"


@dataclass(frozen=True)
class PutCommand:
    """Upload a local file."""

    local_path: str
    remote_path: Optional[str] = None
    command: Literal["put"] = "put"


@dataclass(frozen=True)
class GetCommand:
    """Download a remote file."""

    remote_path: str
    local_path: Optional[str] = None
    command: Literal["get"] = "get"


@dataclass(frozen=True)
class RemoveCommand:
    """Delete a file or a directory."""

    path: str
    command: Literal["rm"] = "rm"


@dataclass(frozen=True)
class MakeDirectoryCommand:
    path: str
    command: Literal["mkdir"] = "mkdir"


@dataclass(frozen=True)
class MoveCommand:
    source: str
    destination: str
    command: Literal["mv"] = "mv"


@dataclass(frozen=True)
class CopyCommand:
    source: str
    destination: str
    command: Literal["cp"] = "cp"


@dataclass(frozen=True)
class StatCommand:
    """Show the attributes of a path."""

    path: str
    command: Literal["stat"] = "stat"


@dataclass(frozen=True)
class ChecksumCommand:
    """Compute a content digest on the server."""

    path: str
    algorithm: Optional[str] = None
    command: Literal["checksum"] = "checksum"


@dataclass(frozen=True)
class ChmodCommand:
    """Change the visibility of a file."""

    path: str
    visibility: str
    command: Literal["chmod"] = "chmod"


CommandRequest = Union[
    ListCommand,
    CatCommand,
    PutCommand,
    GetCommand,
    RemoveCommand,
    MakeDirectoryCommand,
    MoveCommand,
    CopyCommand,
    StatCommand,
    ChecksumCommand,
    ChmodCommand,
]
