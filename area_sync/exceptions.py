"""
Custom exceptions for area synchronization.

All collaborators (remote client, cache, engine) raise these exceptions
so callers can handle failures consistently.
"""


class AreaSyncError(Exception):
    """Base exception for all area sync errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConnectivityError(AreaSyncError):
    """Raised when the remote service cannot be reached.

    Covers DNS failures, refused or reset connections and timeouts.
    This is the transient class that triggers offline handling.
    """

    def __init__(self, endpoint: str, cause: Exception | None = None):
        details = {"endpoint": endpoint}
        if cause:
            details["cause"] = str(cause)
        super().__init__(f"Connection failed to {endpoint}", details)
        self.endpoint = endpoint
        self.cause = cause


class OperationError(AreaSyncError):
    """Raised when the remote service rejects or fails a request."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        details = dict(details or {})
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details)
        self.status_code = status_code


class AuthenticationError(OperationError):
    """Raised when the remote service refuses our credentials."""


class RemoteNotFoundError(OperationError):
    """Raised when the remote service does not know the requested area."""


class RemoteValidationError(OperationError):
    """Raised when the remote service rejects the submitted data."""


class AreaNotFoundError(AreaSyncError):
    """Raised when a local-only mutation targets an area missing from the cache."""

    def __init__(self, area_id: str):
        super().__init__(f"Area not found in cache: {area_id}", {"area_id": area_id})
        self.area_id = area_id


class StorageIOError(AreaSyncError):
    """Raised when a cache I/O operation fails."""

    def __init__(self, operation: str, path: str | None = None, cause: Exception | None = None):
        details = {"operation": operation}
        if path:
            details["path"] = path
        if cause:
            details["cause"] = str(cause)
        message = f"Storage I/O error during {operation}"
        if path:
            message += f": {path}"
        super().__init__(message, details)
        self.operation = operation
        self.path = path
        self.cause = cause
