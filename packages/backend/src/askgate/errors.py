"""Application-level errors.

These are raised by the gateway, the store and the conversation proxy,
never built as HTTP responses there. One handler in main.py renders any
AppError as ``{"success": false, "error": message}`` with its status.
"""

from typing import Optional


class AppError(Exception):
    """Base for every error that maps onto an HTTP status."""

    status_code = 500

    def __init__(self, message: str, headers: Optional[dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.headers = headers


class BadRequest(AppError):
    """Missing or malformed input."""

    status_code = 400


class Unauthenticated(AppError):
    """Bad credentials, or a missing/invalid/expired token."""

    status_code = 401

    def __init__(self, message: str = "Not authorized to access this route"):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class NotFound(AppError):
    status_code = 404


class Conflict(AppError):
    """A unique field is already taken."""

    status_code = 409


class RateLimited(AppError):
    status_code = 429


class Internal(AppError):
    status_code = 500

    def __init__(self, message: str = "Internal server error."):
        super().__init__(message)


class UpstreamUnavailable(AppError):
    status_code = 502


class ServiceUnavailable(AppError):
    status_code = 503


# ─── Classified upstream failures ───────────────────────


class UpstreamCredentialsRejected(Unauthenticated):
    """The generative service refused our API key."""

    def __init__(self, message: str):
        AppError.__init__(self, message)


class UpstreamFailure(Internal):
    """The generative service failed in a way we can't classify further."""
