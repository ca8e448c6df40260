"""
Session module interface.

The resolvers depend on IPinSessionStore rather than the concrete
PinSessionStore so they can be tested against simple fakes.
"""

from typing import Callable, Optional, Protocol, runtime_checkable

from .models import PinSession, PinSessionFields, SessionInfo


@runtime_checkable
class IPinSessionStore(Protocol):
    """Contract of the Session Store for PIN sessions."""

    def get_pin_session(self) -> Optional[PinSession]:
        """
        Get the live PIN session.

        Returns:
            The session, or None if absent, malformed or expired
        """
        ...

    def peek_pin_session(self) -> Optional[PinSession]:
        """Like get_pin_session(), but never clears, notifies or fires callbacks."""
        ...

    def create_pin_session(self, fields: PinSessionFields) -> PinSession:
        """Persist a new session expiring one TTL from now."""
        ...

    def refresh_session(self) -> bool:
        """Extend a live session; no-op for an expired one."""
        ...

    def clear_pin_session(self) -> None:
        """Idempotent delete."""
        ...

    def subscribe(
        self, listener: Callable[[Optional[PinSession]], None]
    ) -> Callable[[], None]:
        """Listen for create/refresh/clear; returns an unsubscribe function."""
        ...

    def get_session_info(self) -> SessionInfo:
        """Debug snapshot."""
        ...

    @property
    def last_expired_session(self) -> Optional[PinSession]:
        """The most recent session that ran out, until a new one is created."""
        ...
