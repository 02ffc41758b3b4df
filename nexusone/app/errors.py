"""Domain errors raised by services and translated to HTTP responses by routes."""


class NexusError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class NotFoundError(NexusError):
    """Raised when a tenant, employee, company or file record is missing."""


class InvalidRequestError(NexusError):
    """Raised when caller input fails validation."""


class UpstreamUnavailableError(NexusError):
    """Raised when an outbound call to the augmentation service fails or times out."""


class BlobReadError(NexusError):
    """Raised when the blob store fails while streaming a file's chunks."""


class IncompleteFileError(NexusError):
    """Raised when a stored file is read while its chunk set is incomplete."""
