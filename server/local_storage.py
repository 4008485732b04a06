"""Local filesystem collaborator: the directory tree exposed by the server."""

import hashlib
import logging
import mimetypes
import os
import shutil
from pathlib import Path
from typing import Iterator, Optional

from common.attributes import DirectoryAttributes, FileAttributes, StorageAttributes
from common.constants import (
    DEFAULT_CHECKSUM_ALGORITHM,
    DEFAULT_MIME_TYPE,
    DIRECTORY_PERMISSIONS,
    FILE_PERMISSIONS,
    STREAM_PIECE_SIZE_BYTES,
    TEXT_MIME_TYPE,
    VISIBILITIES,
    VISIBILITY_PRIVATE,
    VISIBILITY_PUBLIC,
)
from common.exceptions import InvalidVisibilityProvided, PathTraversalDetected
from common.paths import normalize_path

logger = logging.getLogger(__name__)

MIME_SNIFF_BYTES = 1024


def _validate_visibility(visibility: str) -> str:
    if visibility not in VISIBILITIES:
        raise InvalidVisibilityProvided(visibility)
    return visibility


class LocalStorage:
    """
    Reads and writes files below a fixed root directory.

    Paths are storage paths ("" is the root). Failures surface as the
    builtin OSError family; callers translate them.
    """

    def __init__(self, root: str, piece_size: int = STREAM_PIECE_SIZE_BYTES):
        """
        Initialize local storage.

        Args:
            root: Directory exposed as the storage root (created if missing)
            piece_size: Size of pieces yielded by read_stream
        """
        self.root = Path(root).resolve()
        self.piece_size = piece_size
        self.root.mkdir(parents=True, exist_ok=True)

    def full_path(self, path: str) -> Path:
        """
        Resolve a storage path to an absolute path below the root.

        Raises:
            PathTraversalDetected: If the path escapes the root
        """
        relative = normalize_path(path)
        full = self.root / relative if relative else self.root

        try:
            full.resolve().relative_to(self.root)
        except ValueError:
            raise PathTraversalDetected(path)

        return full

    def relative_path(self, full: Path) -> str:
        if full == self.root:
            return ""
        return full.relative_to(self.root).as_posix()

    def file_exists(self, path: str) -> bool:
        return self.full_path(path).is_file()

    def directory_exists(self, path: str) -> bool:
        return self.full_path(path).is_dir()

    def read(self, path: str) -> bytes:
        return self.full_path(path).read_bytes()

    def read_stream(self, path: str) -> Iterator[bytes]:
        """
        Stream file data in pieces.

        Yields:
            File data pieces of at most piece_size bytes
        """
        with open(self.full_path(path), 'rb') as f:
            while True:
                piece = f.read(self.piece_size)
                if not piece:
                    break
                yield piece

    def _ensure_parent(self, full: Path, directory_visibility: Optional[str] = None) -> None:
        parent = full.parent
        if parent.is_dir():
            return
        parent.mkdir(parents=True, exist_ok=True)
        if directory_visibility:
            os.chmod(parent, DIRECTORY_PERMISSIONS[directory_visibility])

    def write(
        self,
        path: str,
        contents: bytes,
        visibility: Optional[str] = None,
        directory_visibility: Optional[str] = None,
    ) -> None:
        """
        Create or overwrite a file, creating missing parent directories.

        Args:
            path: Storage path of the file
            contents: Raw file contents
            visibility: Optional file visibility to apply
            directory_visibility: Optional visibility for created parents
        """
        if visibility:
            _validate_visibility(visibility)
        if directory_visibility:
            _validate_visibility(directory_visibility)

        full = self.full_path(path)
        self._ensure_parent(full, directory_visibility)
        full.write_bytes(contents)

        if visibility:
            os.chmod(full, FILE_PERMISSIONS[visibility])

    def append(self, path: str, contents: bytes) -> None:
        with open(self.full_path(path), 'ab') as f:
            f.write(contents)

    def create_directory(self, path: str, visibility: Optional[str] = None) -> None:
        if visibility:
            _validate_visibility(visibility)

        full = self.full_path(path)
        full.mkdir(parents=True, exist_ok=True)

        if visibility:
            os.chmod(full, DIRECTORY_PERMISSIONS[visibility])

    def delete(self, path: str) -> None:
        self.full_path(path).unlink()

    def delete_directory(self, path: str) -> None:
        """
        Remove a directory recursively. Deleting the root empties it.
        """
        full = self.full_path(path)
        if full == self.root:
            for child in full.iterdir():
                if child.is_dir() and not child.is_symlink():
                    shutil.rmtree(child)
                else:
                    child.unlink()
            return
        shutil.rmtree(full)

    def copy(self, source: str, destination: str) -> None:
        target = self.full_path(destination)
        self._ensure_parent(target)
        shutil.copyfile(self.full_path(source), target)

    def move(self, source: str, destination: str) -> None:
        target = self.full_path(destination)
        self._ensure_parent(target)
        os.replace(self.full_path(source), target)

    def file_size(self, path: str) -> int:
        return self.full_path(path).stat().st_size

    def last_modified(self, path: str) -> int:
        return int(self.full_path(path).stat().st_mtime)

    def mime_type(self, path: str) -> str:
        """
        Detect the mime type by extension, falling back to content sniffing.
        """
        full = self.full_path(path)
        guessed, _ = mimetypes.guess_type(full.name)
        if guessed:
            return guessed

        with open(full, 'rb') as f:
            sample = f.read(MIME_SNIFF_BYTES)

        if not sample or b'\0' in sample:
            return DEFAULT_MIME_TYPE

        try:
            sample.decode('utf-8')
        except UnicodeDecodeError:
            return DEFAULT_MIME_TYPE
        return TEXT_MIME_TYPE

    def visibility(self, path: str) -> str:
        mode = self.full_path(path).stat().st_mode
        return VISIBILITY_PUBLIC if mode & 0o004 else VISIBILITY_PRIVATE

    def set_visibility(self, path: str, visibility: str) -> None:
        _validate_visibility(visibility)
        full = self.full_path(path)
        permissions = DIRECTORY_PERMISSIONS if full.is_dir() else FILE_PERMISSIONS
        os.chmod(full, permissions[visibility])

    def checksum(self, path: str, algorithm: str = DEFAULT_CHECKSUM_ALGORITHM) -> str:
        """
        Compute a hex digest of the file contents.

        Raises:
            ValueError: If hashlib does not know the algorithm
        """
        hasher = hashlib.new(algorithm)
        for piece in self.read_stream(path):
            hasher.update(piece)
        return hasher.hexdigest()

    def attributes(self, path: str) -> StorageAttributes:
        """
        Build the attribute snapshot for an existing file or directory.

        Raises:
            FileNotFoundError: If nothing exists at the path
        """
        full = self.full_path(path)
        relative = self.relative_path(full)

        if full.is_file():
            return FileAttributes(
                path=relative,
                file_size=self.file_size(relative),
                visibility=self.visibility(relative),
                last_modified=self.last_modified(relative),
                mime_type=self.mime_type(relative),
            )

        if full.is_dir():
            return DirectoryAttributes(
                path=relative,
                visibility=self.visibility(relative),
                last_modified=self.last_modified(relative),
            )

        raise FileNotFoundError(f"No such file or directory: {path}")

    def list_contents(self, path: str, deep: bool = False) -> Iterator[StorageAttributes]:
        """
        List a directory depth-first, children sorted by name.

        Args:
            path: Storage path of the directory
            deep: Descend into subdirectories when True

        Yields:
            Attributes of every entry
        """
        base = self.full_path(path)
        for entry in sorted(base.iterdir(), key=lambda p: p.name):
            relative = self.relative_path(entry)
            try:
                attributes = self.attributes(relative)
            except PathTraversalDetected:
                logger.warning(f"Skipping '{relative}': link resolves outside the storage root")
                continue
            yield attributes
            if deep and entry.is_dir() and not entry.is_symlink():
                yield from self.list_contents(relative, deep=True)
