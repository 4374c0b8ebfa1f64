"""Error taxonomy for the data access layer."""
from typing import Optional


class DataLayerError(Exception):
    """Base class for errors raised by the data access layer."""
    pass


class AuthenticationExpiredError(DataLayerError):
    """Raised on HTTP 401. The session has already been cleared."""

    def __init__(self, message: str = "Authentication expired. Please login again."):
        super().__init__(message)


class RequestFailedError(DataLayerError):
    """Raised on any other non-2xx response."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        self.message = message or f"HTTP error! status: {status_code}"
        super().__init__(self.message)

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class NetworkError(DataLayerError):
    """Raised when no response was received at all."""

    def __init__(self, detail: str):
        super().__init__(f"Network error: {detail}")


class NotAuthenticatedError(DataLayerError):
    """Raised when a token-only operation is called without a token."""

    def __init__(self, message: str = "No token available"):
        super().__init__(message)


class PermissionDeniedError(DataLayerError):
    """Raised when the current admin lacks a capability."""
    pass


class LocalStorageError(Exception):
    """Read/write failure of the local persistent store (never escapes it)."""
    pass


__all__ = [
    "DataLayerError",
    "AuthenticationExpiredError",
    "RequestFailedError",
    "NetworkError",
    "NotAuthenticatedError",
    "PermissionDeniedError",
    "LocalStorageError",
]
