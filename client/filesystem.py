"""Consumer-facing filesystem facade over a storage adapter."""

from typing import Any, BinaryIO, Dict, List, Optional, Union

from common.attributes import FileAttributes, StorageAttributes
from common.exceptions import UnableToRetrieveMetadata
from common.paths import normalize_path
from client.adapter import RemoteFilesystemAdapter
from client.listing import DirectoryListing
from client.streams import ResponseStream


class Filesystem:
    """
    Generic filesystem API: normalizes caller paths, delegates to the
    adapter and unwraps single metadata values.
    """

    def __init__(self, adapter: RemoteFilesystemAdapter):
        self.adapter = adapter

    def file_exists(self, path: str) -> bool:
        return self.adapter.file_exists(normalize_path(path))

    def directory_exists(self, path: str) -> bool:
        return self.adapter.directory_exists(normalize_path(path))

    def has(self, path: str) -> bool:
        """True when a file or a directory exists at the path."""
        path = normalize_path(path)
        return self.adapter.file_exists(path) or self.adapter.directory_exists(path)

    exists = has

    def write(self, path: str, contents: Union[bytes, str], config: Optional[Dict[str, Any]] = None) -> None:
        self.adapter.write(normalize_path(path), contents, config)

    def write_stream(self, path: str, contents: BinaryIO, config: Optional[Dict[str, Any]] = None) -> None:
        self.adapter.write_stream(normalize_path(path), contents, config)

    def put(self, path: str, contents: Union[bytes, str, BinaryIO], config: Optional[Dict[str, Any]] = None) -> None:
        """
        Write bytes/str in one call, or a binary file object in chunks.
        """
        if isinstance(contents, (bytes, str)):
            self.write(path, contents, config)
        else:
            self.write_stream(path, contents, config)

    def read(self, path: str) -> bytes:
        return self.adapter.read(normalize_path(path))

    get = read

    def read_stream(self, path: str) -> ResponseStream:
        return self.adapter.read_stream(normalize_path(path))

    def delete(self, path: str) -> None:
        self.adapter.delete(normalize_path(path))

    def delete_directory(self, path: str) -> None:
        self.adapter.delete_directory(normalize_path(path))

    def create_directory(self, path: str, config: Optional[Dict[str, Any]] = None) -> None:
        self.adapter.create_directory(normalize_path(path), config)

    make_directory = create_directory

    def move(self, source: str, destination: str, config: Optional[Dict[str, Any]] = None) -> None:
        self.adapter.move(normalize_path(source), normalize_path(destination), config)

    def copy(self, source: str, destination: str, config: Optional[Dict[str, Any]] = None) -> None:
        self.adapter.copy(normalize_path(source), normalize_path(destination), config)

    def set_visibility(self, path: str, visibility: str) -> None:
        self.adapter.set_visibility(normalize_path(path), visibility)

    def _attribute(self, attributes: FileAttributes, name: str) -> Any:
        value = getattr(attributes, name)
        if value is None:
            raise UnableToRetrieveMetadata.create(attributes.path, name)
        return value

    def metadata(self, path: str) -> StorageAttributes:
        return self.adapter.metadata(normalize_path(path))

    def visibility(self, path: str) -> str:
        return self._attribute(self.adapter.visibility(normalize_path(path)), "visibility")

    def mime_type(self, path: str) -> str:
        return self._attribute(self.adapter.mime_type(normalize_path(path)), "mime_type")

    def last_modified(self, path: str) -> int:
        return self._attribute(self.adapter.last_modified(normalize_path(path)), "last_modified")

    def file_size(self, path: str) -> int:
        return self._attribute(self.adapter.file_size(normalize_path(path)), "file_size")

    size = file_size

    def checksum(self, path: str, config: Optional[Dict[str, Any]] = None) -> str:
        return self.adapter.checksum(normalize_path(path), config)

    def list_contents(self, path: str = "", deep: bool = False) -> DirectoryListing:
        return self.adapter.list_contents(normalize_path(path), deep)

    def files(self, directory: str = "", recursive: bool = False) -> List[str]:
        """Paths of the files in a directory (the whole subtree when recursive)."""
        listing = self.list_contents(directory, deep=recursive)
        return [item.path for item in listing.filter(lambda item: item.is_file()).sort_by_path()]

    def all_files(self, directory: str = "") -> List[str]:
        return self.files(directory, recursive=True)

    def directories(self, directory: str = "", recursive: bool = False) -> List[str]:
        """Paths of the directories in a directory (the whole subtree when recursive)."""
        listing = self.list_contents(directory, deep=recursive)
        return [item.path for item in listing.filter(lambda item: item.is_dir()).sort_by_path()]

    def all_directories(self, directory: str = "") -> List[str]:
        return self.directories(directory, recursive=True)

    def close(self) -> None:
        self.adapter.close()
