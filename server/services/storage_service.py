"""Storage service: authenticates request contexts and runs operations on local storage."""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Type

from common.attributes import StorageAttributes
from common.capability import verify_path_token
from common.constants import DEFAULT_CHECKSUM_ALGORITHM
from common.exceptions import (
    AuthenticationFailure,
    MalformedRequest,
    PathNotFound,
    UnableToCheckExistence,
    UnableToCopyFile,
    UnableToCreateDirectory,
    UnableToDeleteDirectory,
    UnableToDeleteFile,
    UnableToListContents,
    UnableToMoveFile,
    UnableToPerformOperation,
    UnableToProvideChecksum,
    UnableToReadFile,
    UnableToRetrieveMetadata,
    UnableToSetVisibility,
    UnableToWriteFile,
)
from common.paths import PathPrefixer, normalize_path
from common.protocol import (
    Append,
    Checksum,
    Copy,
    CreateDirectory,
    Delete,
    DirectoryExists,
    FileExists,
    ListContents,
    Metadata,
    Move,
    Operation,
    ReadContents,
    SetVisibility,
    Stream,
    Write,
)
from server.local_storage import LocalStorage
from server.types import RequestContext, StreamedFile

logger = logging.getLogger(__name__)

CHECKSUM_ALGORITHM_OPTION = "checksum_algo"
VISIBILITY_OPTION = "visibility"
DIRECTORY_VISIBILITY_OPTION = "directory_visibility"


class StorageService:
    """
    Executes decoded operations against the local storage.

    The service holds no per-request state: every call receives its
    RequestContext explicitly.
    """

    def __init__(self, storage: LocalStorage):
        self.storage = storage
        self._handlers = {
            FileExists: self.file_exists,
            DirectoryExists: self.directory_exists,
            Metadata: self.metadata,
            Checksum: self.checksum,
            ReadContents: self.read_contents,
            ListContents: self.list_contents,
            Stream: self.stream,
            Write: self.write,
            CreateDirectory: self.create_directory,
            Append: self.append,
            SetVisibility: self.set_visibility,
            Copy: self.copy,
            Move: self.move,
            Delete: self.delete,
        }

    def authorize(self, context: RequestContext) -> None:
        """
        Verify the context's token against its canonical path.

        Raises:
            AuthenticationFailure: If the token does not authorize the path
        """
        if not context.within_prefix:
            logger.warning(f"Rejected path '{context.path}' outside prefix '{context.prefix}'")
            raise AuthenticationFailure(f"Path is outside the served prefix: {context.path}")
        if not verify_path_token(context.secret, context.canonical_path, context.token):
            logger.warning(f"Rejected token for path '{context.canonical_path}'")
            raise AuthenticationFailure(f"Invalid capability token for path: {context.canonical_path}")

    def execute(self, context: RequestContext, operation: Operation) -> Any:
        """
        Dispatch an operation to its handler.

        Returns:
            Handler result (bool, str, bytes, attributes, listing, StreamedFile or None)
        """
        handler = self._handlers.get(type(operation))
        if handler is None:
            raise MalformedRequest(f"Unsupported operation: {type(operation).__name__}")
        return handler(context, operation)

    @contextmanager
    def _translate_errors(self, error_cls: Type[UnableToPerformOperation], path: str) -> Iterator[None]:
        try:
            yield
        except FileNotFoundError as e:
            raise PathNotFound(path) from e
        except OSError as e:
            logger.error(f"{error_cls.__name__} at '{path}': {e}")
            raise error_cls(path, e.strerror or str(e)) from e

    def _destination(self, context: RequestContext, destination: str) -> str:
        destination = normalize_path(destination)
        if not PathPrefixer(context.prefix).contains(destination):
            raise MalformedRequest(f"Destination is outside the served prefix: {destination}")
        return destination

    def _file_should_exist(self, path: str) -> None:
        if not self.storage.file_exists(path):
            raise PathNotFound(path)

    def _directory_should_exist(self, path: str) -> None:
        if not self.storage.directory_exists(path):
            raise PathNotFound(path)

    def file_exists(self, context: RequestContext, operation: FileExists) -> bool:
        with self._translate_errors(UnableToCheckExistence, context.path):
            return self.storage.file_exists(context.path)

    def directory_exists(self, context: RequestContext, operation: DirectoryExists) -> bool:
        with self._translate_errors(UnableToCheckExistence, context.path):
            return self.storage.directory_exists(context.path)

    def metadata(self, context: RequestContext, operation: Metadata) -> StorageAttributes:
        with self._translate_errors(UnableToRetrieveMetadata, context.path):
            return self.storage.attributes(context.path)

    def checksum(self, context: RequestContext, operation: Checksum) -> str:
        self._file_should_exist(context.path)
        algorithm = operation.options.get(CHECKSUM_ALGORITHM_OPTION) or DEFAULT_CHECKSUM_ALGORITHM

        with self._translate_errors(UnableToProvideChecksum, context.path):
            try:
                return self.storage.checksum(context.path, algorithm)
            except ValueError as e:
                raise MalformedRequest(f"Unsupported checksum algorithm: {algorithm}") from e

    def read_contents(self, context: RequestContext, operation: ReadContents) -> bytes:
        self._file_should_exist(context.path)
        with self._translate_errors(UnableToReadFile, context.path):
            return self.storage.read(context.path)

    def stream(self, context: RequestContext, operation: Stream) -> StreamedFile:
        self._file_should_exist(context.path)
        with self._translate_errors(UnableToReadFile, context.path):
            return StreamedFile(
                path=context.path,
                mime_type=self.storage.mime_type(context.path),
                size=self.storage.file_size(context.path),
                pieces=self.storage.read_stream(context.path),
            )

    def list_contents(self, context: RequestContext, operation: ListContents) -> List[StorageAttributes]:
        self._directory_should_exist(context.path)
        with self._translate_errors(UnableToListContents, context.path):
            return list(self.storage.list_contents(context.path, deep=operation.deep))

    def write(self, context: RequestContext, operation: Write) -> None:
        config: Dict[str, str] = operation.config
        with self._translate_errors(UnableToWriteFile, context.path):
            self.storage.write(
                context.path,
                operation.contents,
                visibility=config.get(VISIBILITY_OPTION) or None,
                directory_visibility=config.get(DIRECTORY_VISIBILITY_OPTION) or None,
            )
        logger.info(f"Wrote {len(operation.contents)} bytes to '{context.path}'")

    def create_directory(self, context: RequestContext, operation: CreateDirectory) -> None:
        config = operation.config
        visibility = config.get(DIRECTORY_VISIBILITY_OPTION) or config.get(VISIBILITY_OPTION) or None
        with self._translate_errors(UnableToCreateDirectory, context.path):
            self.storage.create_directory(context.path, visibility=visibility)
        logger.info(f"Created directory '{context.path}'")

    def append(self, context: RequestContext, operation: Append) -> None:
        self._file_should_exist(context.path)
        with self._translate_errors(UnableToWriteFile, context.path):
            self.storage.append(context.path, operation.contents)
        logger.info(f"Appended {len(operation.contents)} bytes to '{context.path}'")

    def set_visibility(self, context: RequestContext, operation: SetVisibility) -> None:
        self._file_should_exist(context.path)
        with self._translate_errors(UnableToSetVisibility, context.path):
            self.storage.set_visibility(context.path, operation.visibility)

    def copy(self, context: RequestContext, operation: Copy) -> None:
        destination = self._destination(context, operation.destination)
        self._file_should_exist(context.path)
        with self._translate_errors(UnableToCopyFile, context.path):
            self.storage.copy(context.path, destination)
        logger.info(f"Copied '{context.path}' to '{destination}'")

    def move(self, context: RequestContext, operation: Move) -> None:
        destination = self._destination(context, operation.destination)
        self._file_should_exist(context.path)
        with self._translate_errors(UnableToMoveFile, context.path):
            self.storage.move(context.path, destination)
        logger.info(f"Moved '{context.path}' to '{destination}'")

    def delete(self, context: RequestContext, operation: Delete) -> None:
        """
        Delete a file or a directory, checking for a file first.
        """
        if self.storage.file_exists(context.path):
            with self._translate_errors(UnableToDeleteFile, context.path):
                self.storage.delete(context.path)
        elif self.storage.directory_exists(context.path):
            with self._translate_errors(UnableToDeleteDirectory, context.path):
                self.storage.delete_directory(context.path)
        else:
            raise PathNotFound(context.path)
        logger.info(f"Deleted '{context.path}'")
