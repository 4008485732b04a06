"""Wire protocol: storage operations, their HTTP encoding and request decoding.

Each operation travels as one HTTP call. Read-style calls are told apart by a
query discriminator, write-style calls by the presence of a named body field.
Exactly one discriminator of the method's set must be present; a bare GET with
no fields at all streams the file.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Mapping, Union

from common.exceptions import MalformedRequest

READ = "GET"
CREATE = "POST"
MUTATE = "PUT"
DELETE = "DELETE"

FILE_EXISTS = "fileExists"
DIRECTORY_EXISTS = "directoryExists"
METADATA = "metadata"
CHECKSUM = "checksum"
CONTENTS = "contents"
LIST = "list"
DIR = "dir"
VISIBILITY = "visibility"
COPY = "copy"
MOVE = "move"

DISCRIMINATORS = {
    READ: (FILE_EXISTS, DIRECTORY_EXISTS, METADATA, CHECKSUM, CONTENTS, LIST),
    CREATE: (CONTENTS, DIR),
    MUTATE: (VISIBILITY, COPY, MOVE, CONTENTS),
    DELETE: (),
}

TRUTHY_VALUES = ("1", "true", "on", "yes")


@dataclass(frozen=True)
class WireCall:
    """
    HTTP-level shape of one operation.

    Attributes:
        method: HTTP method
        params: Query parameters
        data: Form body fields
        files: Binary body parts (sent as multipart file parts)
    """
    method: str
    params: Dict[str, str] = field(default_factory=dict)
    data: Dict[str, str] = field(default_factory=dict)
    files: Dict[str, bytes] = field(default_factory=dict)


def _stringify(config: Mapping[str, Any]) -> Dict[str, str]:
    return {k: str(v) for k, v in config.items() if v is not None}


@dataclass(frozen=True)
class FileExists:
    method: ClassVar[str] = READ

    def to_wire(self) -> WireCall:
        return WireCall(self.method, params={FILE_EXISTS: ""})


@dataclass(frozen=True)
class DirectoryExists:
    method: ClassVar[str] = READ

    def to_wire(self) -> WireCall:
        return WireCall(self.method, params={DIRECTORY_EXISTS: ""})


@dataclass(frozen=True)
class Metadata:
    method: ClassVar[str] = READ

    def to_wire(self) -> WireCall:
        return WireCall(self.method, params={METADATA: ""})


@dataclass(frozen=True)
class Checksum:
    options: Dict[str, str] = field(default_factory=dict)
    method: ClassVar[str] = READ

    def to_wire(self) -> WireCall:
        return WireCall(self.method, params={CHECKSUM: "", **_stringify(self.options)})


@dataclass(frozen=True)
class ReadContents:
    method: ClassVar[str] = READ

    def to_wire(self) -> WireCall:
        return WireCall(self.method, params={CONTENTS: ""})


@dataclass(frozen=True)
class ListContents:
    deep: bool = False
    method: ClassVar[str] = READ

    def to_wire(self) -> WireCall:
        return WireCall(self.method, params={LIST: "true" if self.deep else "false"})


@dataclass(frozen=True)
class Stream:
    method: ClassVar[str] = READ

    def to_wire(self) -> WireCall:
        return WireCall(self.method)


@dataclass(frozen=True)
class Write:
    contents: bytes
    config: Dict[str, str] = field(default_factory=dict)
    method: ClassVar[str] = CREATE

    def to_wire(self) -> WireCall:
        return WireCall(self.method, data=_stringify(self.config), files={CONTENTS: self.contents})


@dataclass(frozen=True)
class CreateDirectory:
    config: Dict[str, str] = field(default_factory=dict)
    method: ClassVar[str] = CREATE

    def to_wire(self) -> WireCall:
        return WireCall(self.method, data={DIR: "", **_stringify(self.config)})


@dataclass(frozen=True)
class Append:
    contents: bytes
    method: ClassVar[str] = MUTATE

    def to_wire(self) -> WireCall:
        return WireCall(self.method, files={CONTENTS: self.contents})


@dataclass(frozen=True)
class SetVisibility:
    visibility: str
    method: ClassVar[str] = MUTATE

    def to_wire(self) -> WireCall:
        return WireCall(self.method, data={VISIBILITY: self.visibility})


@dataclass(frozen=True)
class Copy:
    destination: str
    method: ClassVar[str] = MUTATE

    def to_wire(self) -> WireCall:
        return WireCall(self.method, data={COPY: self.destination})


@dataclass(frozen=True)
class Move:
    destination: str
    method: ClassVar[str] = MUTATE

    def to_wire(self) -> WireCall:
        return WireCall(self.method, data={MOVE: self.destination})


@dataclass(frozen=True)
class Delete:
    method: ClassVar[str] = DELETE

    def to_wire(self) -> WireCall:
        return WireCall(self.method)


Operation = Union[
    FileExists,
    DirectoryExists,
    Metadata,
    Checksum,
    ReadContents,
    ListContents,
    Stream,
    Write,
    CreateDirectory,
    Append,
    SetVisibility,
    Copy,
    Move,
    Delete,
]


def parse_bool(value: Any) -> bool:
    """Interpret a wire value as a boolean ("1", "true", "on", "yes" are true)."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUTHY_VALUES


def _as_bytes(value: Any) -> bytes:
    if isinstance(value, bytes):
        return value
    if value is None:
        return b""
    return str(value).encode("utf-8")


def _required_text(fields: Mapping[str, Any], name: str) -> str:
    value = fields.get(name)
    if not isinstance(value, str) or not value.strip():
        raise MalformedRequest(f"Field '{name}' requires a non-empty value")
    return value


def _others(fields: Mapping[str, Any], name: str) -> Dict[str, str]:
    return {k: v for k, v in fields.items() if k != name and isinstance(v, str)}


_DECODERS = {
    (READ, FILE_EXISTS): lambda fields: FileExists(),
    (READ, DIRECTORY_EXISTS): lambda fields: DirectoryExists(),
    (READ, METADATA): lambda fields: Metadata(),
    (READ, CHECKSUM): lambda fields: Checksum(options=_others(fields, CHECKSUM)),
    (READ, CONTENTS): lambda fields: ReadContents(),
    (READ, LIST): lambda fields: ListContents(deep=parse_bool(fields[LIST])),
    (CREATE, CONTENTS): lambda fields: Write(
        contents=_as_bytes(fields[CONTENTS]), config=_others(fields, CONTENTS)
    ),
    (CREATE, DIR): lambda fields: CreateDirectory(config=_others(fields, DIR)),
    (MUTATE, CONTENTS): lambda fields: Append(contents=_as_bytes(fields[CONTENTS])),
    (MUTATE, VISIBILITY): lambda fields: SetVisibility(visibility=_required_text(fields, VISIBILITY)),
    (MUTATE, COPY): lambda fields: Copy(destination=_required_text(fields, COPY)),
    (MUTATE, MOVE): lambda fields: Move(destination=_required_text(fields, MOVE)),
}


def decode_request(method: str, fields: Mapping[str, Any]) -> Operation:
    """
    Decode an incoming request into exactly one operation.

    Args:
        method: HTTP method of the request
        fields: Query parameters merged with body fields; file parts must
            already be read into bytes

    Returns:
        The decoded operation

    Raises:
        MalformedRequest: On an unsupported method, or when zero or several
            discriminators are present
    """
    method = method.upper()
    if method not in DISCRIMINATORS:
        raise MalformedRequest(f"Unsupported method: {method}")

    if method == DELETE:
        return Delete()

    if method == READ and not fields:
        return Stream()

    present = [name for name in DISCRIMINATORS[method] if name in fields]

    if not present:
        raise MalformedRequest(
            f"{method} requires one of: {', '.join(DISCRIMINATORS[method])}"
        )
    if len(present) > 1:
        raise MalformedRequest(
            f"{method} received conflicting fields: {', '.join(present)}"
        )

    return _DECODERS[(method, present[0])](fields)
