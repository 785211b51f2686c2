"""Custom exception classes for the Teldrive driver."""

from typing import Optional


class TeldriveError(Exception):
    """
    Base exception class for all driver errors.
    """
    pass


class ConfigError(TeldriveError):
    """
    Raised when the driver configuration is invalid.
    """
    pass


class AuthError(TeldriveError):
    """
    Raised when the credential is malformed or the remote session is invalid.
    """
    pass


class NotFoundError(TeldriveError):
    """
    Raised when the root folder or a requested object cannot be resolved.
    """
    pass


class RemoteError(TeldriveError):
    """
    Raised when a metadata call returns a non-success status.
    """

    def __init__(self, operation: str, status: int, body: str):
        self.operation = operation
        self.status = status
        self.body = body
        super().__init__(f"{operation} failed with status {status}: {body}")


class ChunkUploadError(TeldriveError):
    """
    Raised when the server rejects one chunk of an upload.
    """

    def __init__(self, sequence_number: int, status: int, body: str):
        self.sequence_number = sequence_number
        self.status = status
        self.body = body
        super().__init__(f"failed to upload chunk {sequence_number} (status {status}): {body}")


class CommitError(TeldriveError):
    """
    Raised when the final create-file request fails or is refused locally.
    """

    def __init__(self, message: str, status: Optional[int] = None, body: str = ""):
        self.status = status
        self.body = body
        super().__init__(message)


class StreamError(TeldriveError):
    """
    Raised when the source stream is shorter than its declared size.
    """
    pass
