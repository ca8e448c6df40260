"""
Base exception classes for the Storefy client core.

Each module defines its own exceptions on top of these categories. The
category decides how a failure travels:

- ValidationError / AuthenticationError: expected state transitions
  (corrupt record, expired PIN session, stale selection). Handled inside
  the resolver that detects them, never shown as an error.
- NotFoundError / AuthorizationError: rejected user actions.
- ExternalServiceError: the backend failed. The only category that moves
  the sequencer to `error`, and retrying may succeed.
"""

from typing import Optional, Any


class StorefyError(Exception):
    """
    Base exception for all Storefy errors.

    `code` falls back to the category's `default_code`.
    """

    default_code = "STOREFY_ERROR"
    retryable = False

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for error displays."""
        return {
            "error": self.code,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }


class NotFoundError(StorefyError):
    """A store or record the caller asked for does not exist."""

    default_code = "NOT_FOUND"


class ValidationError(StorefyError):
    """Persisted or supplied data is unusable; recovered by discarding it."""

    default_code = "INVALID_DATA"


class AuthenticationError(StorefyError):
    """A credential is missing, malformed or expired."""

    default_code = "UNAUTHENTICATED"


class AuthorizationError(StorefyError):
    """The acting principal may not do this."""

    default_code = "FORBIDDEN"


class ExternalServiceError(StorefyError):
    """The backend (auth, database, RPC) failed or timed out."""

    default_code = "BACKEND_UNAVAILABLE"
    retryable = True

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
