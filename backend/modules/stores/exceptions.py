"""
Store module exceptions.
"""

from typing import Optional

from shared.exceptions import (
    AuthorizationError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)


class StoreLoadError(ExternalServiceError):
    """
    Raised when the backend fails to list or load stores.

    Surfaced to the user through the sequencer's error phase; recoverable
    with retry_initialization().
    """

    def __init__(self, message: str, store_id: Optional[str] = None):
        details = {"store_id": store_id} if store_id else {}
        super().__init__(
            f"Failed to load stores: {message}",
            service="supabase",
            code="STORE_LOAD_ERROR",
            details=details,
        )


class StaleSelectionError(ValidationError):
    """
    Raised internally when a persisted store selection can't be reused.

    Either it belongs to another identity or the store no longer exists.
    Never user-visible: the selection is discarded.
    """

    def __init__(self, store_id: str, reason: str):
        super().__init__(
            f"Stale store selection {store_id}: {reason}",
            code="STALE_SELECTION",
            details={"store_id": store_id, "reason": reason},
        )
        self.reason = reason


class StoreNotFoundError(NotFoundError):
    """Raised when a store ID is not among the principal's stores."""

    def __init__(self, store_id: str):
        super().__init__(
            f"Store not found: {store_id}",
            code="STORE_NOT_FOUND",
            details={"store_id": store_id},
        )


class StoreSelectionNotAllowedError(AuthorizationError):
    """Raised when the current principal cannot choose a store."""

    def __init__(self, reason: str):
        super().__init__(
            f"Store selection not allowed: {reason}",
            code="STORE_SELECTION_NOT_ALLOWED",
            details={"reason": reason},
        )
