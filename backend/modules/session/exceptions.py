"""
Session module exceptions.

None of these reach the user. Decode and expiry conditions are expected
state transitions: the Session Store recovers from them locally.
"""

from shared.exceptions import StorefyError, ValidationError, AuthenticationError


class SessionError(StorefyError):
    """Base exception for session storage errors."""

    default_code = "SESSION_ERROR"


class SessionDecodeError(ValidationError):
    """Raised when a persisted record is malformed or missing fields."""

    def __init__(self, key: str, reason: str):
        super().__init__(
            f"Persisted record '{key}' is invalid: {reason}",
            code="SESSION_DECODE_ERROR",
            details={"key": key, "reason": reason},
        )


class PinSessionExpiredError(AuthenticationError):
    """Raised when a PIN session is past its absolute expiry."""

    def __init__(self, member_id: str, store_id: str):
        super().__init__(
            "PIN session has expired",
            code="PIN_SESSION_EXPIRED",
            details={"member_id": member_id, "store_id": store_id},
        )


class NoPinSessionError(SessionError):
    """Raised when an operation needs an active PIN session and there is none."""

    def __init__(self):
        super().__init__("No active PIN session", code="NO_PIN_SESSION")
