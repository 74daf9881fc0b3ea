"""Errors raised by client operations, each carrying its HTTP status."""

from pydantic import ValidationError


class ClientServiceError(Exception):
    """Base class for client operation failures."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidClientInput(ClientServiceError):
    """Request body could not be bound to a client payload."""

    status_code = 400

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> "InvalidClientInput":
        """Flatten pydantic errors into one readable message."""
        parts = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error["loc"]) or "body"
            parts.append(f"{location}: {error['msg']}")
        return cls("; ".join(parts))


class ClientNotFound(ClientServiceError):
    """No active client exists for the slug."""

    status_code = 404

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__("not found")


class LogoUploadError(ClientServiceError):
    """Logo could not be written to the blob store."""

    def __init__(self, message: str = "upload S3 failed"):
        super().__init__(message)


class ClientPersistenceError(ClientServiceError):
    """The record store rejected or failed a read or write."""
