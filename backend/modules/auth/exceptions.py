"""
Authentication module exceptions.

Token errors are raised while reading the identity session and are
handled inside the auth client (an unreadable or expired token means
"not signed in"). AuthServiceUnavailableError is the one that reaches
the initialization sequencer.
"""

from shared.exceptions import AuthenticationError, ExternalServiceError


class InvalidTokenError(AuthenticationError):
    """Raised when an access token is invalid or malformed."""

    def __init__(self, message: str = "Invalid authentication token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(AuthenticationError):
    """Raised when an access token has expired."""

    def __init__(self, message: str = "Authentication token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class AuthServiceUnavailableError(ExternalServiceError):
    """Raised when the auth service cannot report the current session."""

    def __init__(self, message: str):
        super().__init__(
            f"Auth service unavailable: {message}",
            service="supabase_auth",
            code="AUTH_SERVICE_UNAVAILABLE",
        )
