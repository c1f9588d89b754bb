"""Exceptions raised by the Tumbi API client."""

from typing import Optional


class ApiError(Exception):
    """Base class for every failure the client reports."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationFailed(ApiError):
    """The server rejected the request body or parameters (400, 422)."""


class AuthenticationRequired(ApiError):
    """Missing, invalid or expired token (401). The user must sign in again."""


class Forbidden(ApiError):
    """Signed in, but not allowed to touch this resource (403)."""


class NotFound(ApiError):
    """The resource does not exist, or is not ours to change (404)."""


class Conflict(ApiError):
    """A uniqueness rule was violated (409)."""


class TransientError(ApiError):
    """Network failure, rate limit or server error. Safe to retry later."""


_STATUS_ERRORS = {
    400: ValidationFailed,
    401: AuthenticationRequired,
    403: Forbidden,
    404: NotFound,
    409: Conflict,
    422: ValidationFailed,
    429: TransientError,
}


def error_for_status(status_code: int, message: str) -> ApiError:
    """Map an HTTP error status to the matching exception."""
    if status_code >= 500:
        return TransientError(message, status_code)
    return _STATUS_ERRORS.get(status_code, ApiError)(message, status_code)
