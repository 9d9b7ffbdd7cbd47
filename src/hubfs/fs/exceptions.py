"""Custom exception hierarchy for the hubfs filesystem layer."""


class HubError(Exception):
    """Base exception for all hubfs errors."""


class PathNotFoundError(HubError):
    """Raised when a path does not resolve to a remote object."""


class AlreadyExistsError(HubError):
    """Raised when a create targets a path that already exists."""


class UnsupportedOperationError(HubError):
    """Raised when a mutation is not meaningful for the target path."""


class TooLargeError(HubError):
    """Raised when the remote reports a tree listing as truncated."""


class AuthenticationError(HubError):
    """Raised when the remote rejects the credentials (HTTP 401)."""


class ForbiddenError(HubError):
    """Raised when the credentials lack access to a resource (HTTP 403)."""


class ConflictError(HubError):
    """Raised when the remote rejects a write because the sha is stale."""


class RemoteError(HubError):
    """Raised on any other remote failure (server errors, transport errors)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
