"""Error taxonomy shared by the storage server and the client adapter."""

from typing import Optional


class NerestException(Exception):
    """
    Base exception class for all Nerest errors.
    """
    code = "INTERNAL_ERROR"


class AuthenticationFailure(NerestException):
    """
    Raised when a bearer token does not match the requested path.
    """
    code = "AUTHENTICATION_FAILED"


class MalformedRequest(NerestException):
    """
    Raised when a request carries zero or conflicting discriminators,
    or misses a required field.
    """
    code = "MALFORMED_REQUEST"


class PathTraversalDetected(MalformedRequest):
    """
    Raised when a path tries to escape the storage root.
    """

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Path traversal detected: {path!r}")


class InvalidVisibilityProvided(MalformedRequest, ValueError):
    """
    Raised when a visibility other than public/private is supplied.
    """

    def __init__(self, visibility: str):
        self.visibility = visibility
        super().__init__(f"Invalid visibility provided: {visibility!r}, expected public or private")


class PathNotFound(NerestException):
    """
    Raised when an operation presupposing existence targets a missing path.
    """
    code = "PATH_NOT_FOUND"

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        super().__init__(message or f"Path not found: {path}")


class MalformedResponse(NerestException):
    """
    Raised client-side when a wire payload misses an expected field.
    """
    code = "MALFORMED_RESPONSE"


class UnableToPerformOperation(NerestException):
    """
    Raised when the underlying filesystem (or the transport) fails an operation.

    Attributes:
        path: Path the operation targeted
        reason: Human readable failure reason
    """
    code = "UNABLE_TO_PERFORM_OPERATION"
    operation = "perform operation"

    def __init__(self, path: str = "", reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"Unable to {self.operation} at location: {path}."
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)


class UnableToCheckExistence(UnableToPerformOperation):
    code = "UNABLE_TO_CHECK_EXISTENCE"
    operation = "check existence"


class UnableToReadFile(UnableToPerformOperation):
    code = "UNABLE_TO_READ_FILE"
    operation = "read file"


class UnableToWriteFile(UnableToPerformOperation):
    code = "UNABLE_TO_WRITE_FILE"
    operation = "write file"


class UnableToDeleteFile(UnableToPerformOperation):
    code = "UNABLE_TO_DELETE_FILE"
    operation = "delete file"


class UnableToDeleteDirectory(UnableToPerformOperation):
    code = "UNABLE_TO_DELETE_DIRECTORY"
    operation = "delete directory"


class UnableToCreateDirectory(UnableToPerformOperation):
    code = "UNABLE_TO_CREATE_DIRECTORY"
    operation = "create directory"


class UnableToMoveFile(UnableToPerformOperation):
    code = "UNABLE_TO_MOVE_FILE"
    operation = "move file"


class UnableToCopyFile(UnableToPerformOperation):
    code = "UNABLE_TO_COPY_FILE"
    operation = "copy file"


class UnableToSetVisibility(UnableToPerformOperation):
    code = "UNABLE_TO_SET_VISIBILITY"
    operation = "set visibility"


class UnableToProvideChecksum(UnableToPerformOperation):
    code = "UNABLE_TO_PROVIDE_CHECKSUM"
    operation = "provide checksum"


class UnableToListContents(UnableToPerformOperation):
    code = "UNABLE_TO_LIST_CONTENTS"
    operation = "list contents"


class UnableToRetrieveMetadata(UnableToPerformOperation):
    """
    Raised when metadata cannot be fetched or does not describe a file.

    Attributes:
        attribute: Metadata field that was requested (e.g. "file_size")
    """
    code = "UNABLE_TO_RETRIEVE_METADATA"
    operation = "retrieve metadata"

    def __init__(self, path: str = "", reason: str = "", attribute: str = ""):
        self.attribute = attribute
        super().__init__(path, reason)

    @classmethod
    def create(cls, path: str, attribute: str, reason: str = "") -> "UnableToRetrieveMetadata":
        """
        Build the error for a specific metadata attribute.

        Args:
            path: Path the metadata was requested for
            attribute: Name of the attribute that could not be provided
            reason: Optional failure reason

        Returns:
            UnableToRetrieveMetadata instance
        """
        message = f"Unable to retrieve the {attribute} for file at location: {path}."
        if reason:
            message = f"{message} {reason}"
        error = cls(path, reason, attribute)
        error.args = (message,)
        return error
