"""HTTP adapter exposing a remote Nerest server as a filesystem."""

from typing import Any, BinaryIO, Dict, Optional, Type, Union
from urllib.parse import quote

import httpx

from common.attributes import FileAttributes, StorageAttributes, attributes_from_record
from common.attributes import (
    ATTRIBUTE_FILE_SIZE,
    ATTRIBUTE_LAST_MODIFIED,
    ATTRIBUTE_MIME_TYPE,
    ATTRIBUTE_VISIBILITY,
)
from common.capability import sign_path
from common.constants import (
    CHUNK_SIZE_BYTES,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_TOKEN_ENCODING,
    VISIBILITIES,
)
from common.exceptions import (
    AuthenticationFailure,
    InvalidVisibilityProvided,
    MalformedRequest,
    MalformedResponse,
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
from common.logging_config import get_logger
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
from client.listing import DirectoryListing
from client.streams import ResponseStream

logger = get_logger(__name__)

CHECKSUM_ALGORITHM_OPTION = "checksum_algo"


class RemoteFilesystemAdapter:
    """
    Filesystem adapter that turns every operation into one (or, for
    streamed writes, several) authenticated HTTP calls.

    Paths given to the adapter are caller paths: they are signed as-is
    (after normalization) and prefixed only on the wire. Failures are never
    retried.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        secret: str = "",
        prefix: str = "",
        chunk_size: int = CHUNK_SIZE_BYTES,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        token_encoding: str = DEFAULT_TOKEN_ENCODING,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the adapter.

        Args:
            base_url: Server base URL (ignored when http_client is given)
            secret: Shared secret used to sign path tokens
            prefix: Prefix applied to every wire path
            chunk_size: Upload chunk size for write_stream
            timeout: Request timeout in seconds
            token_encoding: "hex" or "base64"
            http_client: Pre-built httpx client (e.g. a FastAPI TestClient)

        Raises:
            ValueError: If neither base_url nor http_client is given, or the
                chunk size is not positive
        """
        if http_client is None:
            if not base_url:
                raise ValueError("base_url or http_client is required")
            http_client = httpx.Client(base_url=base_url, timeout=timeout)
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")

        self.session = http_client
        self.secret = secret
        self.prefixer = PathPrefixer(prefix)
        self.chunk_size = chunk_size
        self.token_encoding = token_encoding
        logger.info(f"Initialized RemoteFilesystemAdapter [base_url={self.session.base_url}]")

    def token(self, path: str) -> str:
        """Capability token for a caller path."""
        return sign_path(self.secret, normalize_path(path), self.token_encoding)

    def url(self, path: str) -> str:
        """Wire URL (prefix applied, percent-encoded) for a caller path."""
        return "/" + quote(self.prefixer.prefix_path(normalize_path(path)), safe="/")

    def _build_request(self, path: str, operation: Operation) -> httpx.Request:
        call = operation.to_wire()
        files = {
            name: (name, content, "application/octet-stream")
            for name, content in call.files.items()
        }
        return self.session.build_request(
            call.method,
            self.url(path),
            params=call.params or None,
            data=call.data or None,
            files=files or None,
            headers={"Authorization": f"Bearer {self.token(path)}"},
        )

    def _error_detail(self, response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(payload, dict) and payload.get("detail"):
            return str(payload["detail"])
        return response.reason_phrase

    def _raise_for_status(
        self,
        response: httpx.Response,
        path: str,
        error_cls: Type[UnableToPerformOperation],
    ) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = self._error_detail(response)
            logger.warning(
                f"Request failed: {response.request.method} {response.request.url.path} "
                f"status={response.status_code} detail={detail}"
            )
            if response.status_code == 401:
                raise AuthenticationFailure(detail) from e
            if response.status_code == 404:
                raise PathNotFound(path, detail) from e
            if response.status_code == 400:
                raise MalformedRequest(detail) from e
            raise error_cls(path, detail) from e

    def _send(
        self,
        path: str,
        operation: Operation,
        error_cls: Type[UnableToPerformOperation],
        stream: bool = False,
    ) -> httpx.Response:
        """
        Send one operation and translate failures into typed errors.

        Args:
            path: Caller path (drives the token and the wire URL)
            operation: Operation to encode
            error_cls: Error raised for transport failures and 5xx responses
            stream: Leave the response body unread

        Returns:
            The successful response
        """
        request = self._build_request(path, operation)
        logger.debug(f"Making request: {request.method} {request.url.path} [{type(operation).__name__}]")

        try:
            response = self.session.send(request, stream=stream)
        except httpx.HTTPError as e:
            logger.error(f"Transport error: {request.method} {request.url.path} error={e}")
            raise error_cls(path, f"Transport error: {e}") from e

        logger.debug(f"Response received: {request.method} {request.url.path} status={response.status_code}")

        if not response.is_success and stream:
            response.read()
            response.close()

        self._raise_for_status(response, path, error_cls)
        return response

    def _json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponse(f"Expected a JSON body from {response.request.url.path}") from e

    def file_exists(self, path: str) -> bool:
        response = self._send(path, FileExists(), UnableToCheckExistence)
        return bool(self._json(response))

    def directory_exists(self, path: str) -> bool:
        response = self._send(path, DirectoryExists(), UnableToCheckExistence)
        return bool(self._json(response))

    def write(self, path: str, contents: Union[bytes, str], config: Optional[Dict[str, Any]] = None) -> None:
        """
        Create or overwrite a file in a single call.
        """
        if isinstance(contents, str):
            contents = contents.encode("utf-8")
        self._send(path, Write(contents=contents, config=dict(config or {})), UnableToWriteFile)

    def write_stream(self, path: str, contents: BinaryIO, config: Optional[Dict[str, Any]] = None) -> None:
        """
        Upload a binary stream in fixed-size chunks.

        The first chunk is written (create/overwrite), every following chunk
        is appended. A failed append leaves a partial file behind; no
        cleanup is attempted.

        Args:
            path: Caller path of the file
            contents: Object with a read(size) method
            config: Write options sent with the first chunk
        """
        chunks = 0
        while True:
            chunk = contents.read(self.chunk_size) or b""
            if isinstance(chunk, str):
                chunk = chunk.encode("utf-8")
            if not chunk and chunks:
                break

            if chunks == 0:
                self.write(path, chunk, config)
            else:
                self._send(path, Append(contents=chunk), UnableToWriteFile)
            chunks += 1

            if not chunk:
                break

        logger.debug(f"Streamed '{path}' in {chunks} chunk(s)")

    def read(self, path: str) -> bytes:
        response = self._send(path, ReadContents(), UnableToReadFile)
        return response.content

    def read_stream(self, path: str) -> ResponseStream:
        """
        Open a streamed download of a file.

        Returns:
            ResponseStream; close it to cancel the download
        """
        response = self._send(path, Stream(), UnableToReadFile, stream=True)
        return ResponseStream(response)

    def delete(self, path: str) -> None:
        self._send(path, Delete(), UnableToDeleteFile)

    def delete_directory(self, path: str) -> None:
        self._send(path, Delete(), UnableToDeleteDirectory)

    def create_directory(self, path: str, config: Optional[Dict[str, Any]] = None) -> None:
        self._send(path, CreateDirectory(config=dict(config or {})), UnableToCreateDirectory)

    def set_visibility(self, path: str, visibility: str) -> None:
        if visibility not in VISIBILITIES:
            raise InvalidVisibilityProvided(visibility)
        self._send(path, SetVisibility(visibility=visibility), UnableToSetVisibility)

    def metadata(self, path: str) -> StorageAttributes:
        """
        Fetch the attribute record of a file or a directory.
        """
        response = self._send(path, Metadata(), UnableToRetrieveMetadata)
        record = self._json(response)

        if not isinstance(record, dict):
            raise MalformedResponse(f"Expected a metadata object for '{path}'")
        return attributes_from_record(normalize_path(path), record)

    def _fetch_file_metadata(self, path: str, attribute: str) -> FileAttributes:
        attributes = self.metadata(path)

        if not isinstance(attributes, FileAttributes):
            raise UnableToRetrieveMetadata.create(path, attribute, "path is not a file")

        return attributes

    def visibility(self, path: str) -> FileAttributes:
        return self._fetch_file_metadata(path, ATTRIBUTE_VISIBILITY)

    def mime_type(self, path: str) -> FileAttributes:
        return self._fetch_file_metadata(path, ATTRIBUTE_MIME_TYPE)

    def last_modified(self, path: str) -> FileAttributes:
        return self._fetch_file_metadata(path, ATTRIBUTE_LAST_MODIFIED)

    def file_size(self, path: str) -> FileAttributes:
        return self._fetch_file_metadata(path, ATTRIBUTE_FILE_SIZE)

    def list_contents(self, path: str, deep: bool = False) -> DirectoryListing:
        """
        List a directory; entry paths come back prefix-free.
        """
        response = self._send(path, ListContents(deep=deep), UnableToListContents)
        records = self._json(response) or []

        if not isinstance(records, list):
            raise MalformedResponse(f"Expected a listing array for '{path}'")

        listing = []
        for record in records:
            if not isinstance(record, dict) or "path" not in record:
                raise MalformedResponse(f"Listing entry without a path for '{path}'")
            listing.append(attributes_from_record(self.prefixer.strip_prefix(record["path"]), record))

        return DirectoryListing(listing)

    def move(self, source: str, destination: str, config: Optional[Dict[str, Any]] = None) -> None:
        """
        Move a file; the destination travels in the server's (prefixed) path space.
        """
        destination = self.prefixer.prefix_path(normalize_path(destination))
        self._send(source, Move(destination=destination), UnableToMoveFile)

    def copy(self, source: str, destination: str, config: Optional[Dict[str, Any]] = None) -> None:
        destination = self.prefixer.prefix_path(normalize_path(destination))
        self._send(source, Copy(destination=destination), UnableToCopyFile)

    def checksum(self, path: str, config: Optional[Dict[str, Any]] = None) -> str:
        """
        Ask the server for a content digest (md5 unless checksum_algo is set).
        """
        options = {}
        if config and config.get(CHECKSUM_ALGORITHM_OPTION):
            options[CHECKSUM_ALGORITHM_OPTION] = str(config[CHECKSUM_ALGORITHM_OPTION])

        response = self._send(path, Checksum(options=options), UnableToProvideChecksum)
        digest = self._json(response)

        if not isinstance(digest, str):
            raise MalformedResponse(f"Expected a checksum string for '{path}'")
        return digest

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()

    def __enter__(self) -> 'RemoteFilesystemAdapter':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
