"""Custom exceptions."""
from typing import Optional

from fastapi import HTTPException, status


# ---- Server side (HTTP) ----


class NotFoundError(HTTPException):
    """Resource not found exception."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail or "Resource not found")


class ValidationError(HTTPException):
    """Validation exception."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail or "Validation error",
        )


class ServiceUnavailableError(HTTPException):
    """Feature not configured on this server."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail or "Service unavailable",
        )


# ---- Client side (sync) ----


class SyncError(Exception):
    """Base class for errors raised while synchronising with the server."""

    retryable = False


class TransportError(SyncError):
    """Remote call failed: network error or a non-success status."""

    retryable = True

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RemoteNotFound(SyncError):
    """Update/delete target does not exist on the server."""

    def __init__(self, remote_id: int):
        super().__init__(f"Task #{remote_id} not found on server")
        self.remote_id = remote_id


class RemoteValidationError(SyncError):
    """Server rejected the payload; the caller must correct it before retrying."""


class TaskValidationError(SyncError):
    """Local task input is invalid (e.g. empty title)."""


class SyncAlreadyRunning(SyncError):
    """A reconcile run is already in flight for this store."""
