"""
PIN session store.

Owns the lifecycle of the short-lived PIN session: creation with an
absolute expiry, activity-based renewal, expiry detection and the
warning/expired side-channel callbacks driven by the periodic monitor.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Callable, Optional

from shared.config import Settings, get_settings
from shared.models import utc_now

from .exceptions import NoPinSessionError, PinSessionExpiredError
from .models import PinSession, PinSessionFields, SessionInfo
from .vault import SessionVault

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
SessionListener = Callable[[Optional[PinSession]], None]


class PinSessionStore:
    """
    Durable, synchronous access to the PIN session.

    Every read goes through the vault, so the store never serves a
    cached copy that another process has already replaced.
    """

    def __init__(
        self,
        vault: SessionVault,
        settings: Optional[Settings] = None,
        clock: Clock = utc_now,
    ):
        """
        Initialize the PIN session store.

        Args:
            vault: Session envelope persistence
            settings: TTL and warning threshold source (defaults to global settings)
            clock: Returns the current aware UTC time
        """
        settings = settings or get_settings()
        self._vault = vault
        self._clock = clock
        self._ttl = timedelta(minutes=settings.pin_session_ttl_minutes)
        self._warning_minutes = settings.session_warning_minutes

        self._warning_callback: Optional[Callable[[int], None]] = None
        self._expired_callback: Optional[Callable[[], None]] = None
        self._listeners: list[SessionListener] = []

        self._warned = False
        self._expired_key: Optional[tuple[str, str]] = None
        self._last_expired: Optional[PinSession] = None

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    @property
    def vault(self) -> SessionVault:
        return self._vault

    @property
    def last_expired_session(self) -> Optional[PinSession]:
        """The most recent PIN session that ran out, until a new one is created."""
        return self._last_expired

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def get_pin_session(self) -> Optional[PinSession]:
        """
        Return the current PIN session, or None.

        Absent, malformed and expired records all read as None. Malformed
        records are deleted by the vault; expired ones are cleared here.
        """
        session = self._vault.read().pin_session
        if session is None:
            return None
        if session.is_expired(self._clock()):
            self._expire(session)
            return None
        return session

    def peek_pin_session(self) -> Optional[PinSession]:
        """
        Return the live PIN session without changing anything.

        Unlike get_pin_session(), an expired or corrupt record is left in
        place and no callback or listener fires.
        """
        session = self._vault.read(repair=False).pin_session
        if session is None or session.is_expired(self._clock()):
            return None
        return session

    def has_pin_session(self) -> bool:
        return self.get_pin_session() is not None

    def create_pin_session(self, fields: PinSessionFields) -> PinSession:
        """Persist a new PIN session expiring one TTL from now."""
        now = self._clock()
        session = PinSession(
            member_id=fields.member_id,
            user_id=fields.user_id,
            store_id=fields.store_id,
            role=fields.role,
            name=fields.name,
            store_name=fields.store_name,
            login_time=fields.login_time or now,
            last_activity=now,
            expires_at=now + self._ttl,
        )
        self._vault.update(pin_session=session)
        self._warned = False
        self._last_expired = None
        logger.info(
            f"PIN session created for member {session.member_id} at store {session.store_id}"
        )
        self._notify(session)
        return session

    def refresh_session(self) -> bool:
        """
        Record activity and push the expiry one TTL past now.

        Refreshing an expired session is a no-op: the session is cleared,
        never resurrected.

        Returns:
            True if a live session was extended
        """
        session = self._vault.read().pin_session
        if session is None:
            return False

        now = self._clock()
        if session.is_expired(now):
            self._expire(session)
            return False

        refreshed = session.model_copy(
            update={"last_activity": now, "expires_at": now + self._ttl}
        )
        self._vault.update(pin_session=refreshed)
        self._warned = False
        self._notify(refreshed)
        return True

    def clear_pin_session(self) -> None:
        """Delete the PIN session. Safe to call when there is none."""
        envelope = self._vault.read()
        if envelope.pin_session is None:
            return
        self._vault.update(pin_session=None)
        self._warned = False
        logger.info(f"PIN session ended for member {envelope.pin_session.member_id}")
        self._notify(None)

    def require_pin_session(self) -> PinSession:
        """
        Return the live PIN session.

        Raises:
            PinSessionExpiredError: If the stored session has expired
            NoPinSessionError: If there is no session at all
        """
        session = self._vault.read().pin_session
        if session is None:
            raise NoPinSessionError()
        if session.is_expired(self._clock()):
            self._expire(session)
            raise PinSessionExpiredError(session.member_id, session.store_id)
        return session

    # -------------------------------------------------------------------------
    # Expiry monitoring
    # -------------------------------------------------------------------------

    def on_session_warning(self, callback: Optional[Callable[[int], None]]) -> None:
        """Set the callback fired once when remaining time drops under the threshold."""
        self._warning_callback = callback

    def on_session_expired(self, callback: Optional[Callable[[], None]]) -> None:
        """Set the callback fired exactly once per session when it expires."""
        self._expired_callback = callback

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a listener for PIN session changes (create, refresh, clear).

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def check_expiry(self) -> None:
        """
        One tick of the periodic expiry check.

        Fires the warning callback once when the remaining time crosses
        the warning threshold, and the expired callback when the
        session runs out. Ticks are coarse; a
        missed tick only delays the callbacks.
        """
        session = self._vault.read().pin_session
        if session is None:
            return

        now = self._clock()
        if session.is_expired(now):
            self._expire(session)
            return

        seconds_left = session.seconds_left(now)
        if seconds_left > self._warning_minutes * 60:
            self._warned = False
            return

        if not self._warned:
            self._warned = True
            minutes_left = math.ceil(seconds_left / 60)
            logger.debug(f"PIN session expires in {minutes_left} minute(s)")
            self._fire(self._warning_callback, minutes_left)

    def get_session_info(self) -> SessionInfo:
        """Debug snapshot of the PIN session."""
        session = self.get_pin_session()
        if session is None:
            return SessionInfo(has_pin_session=False)
        return SessionInfo(
            has_pin_session=True,
            pin_expires_at=session.expires_at,
            minutes_left=math.floor(session.seconds_left(self._clock()) / 60),
            last_activity=session.last_activity,
        )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _expire(self, session: PinSession) -> None:
        current = self._vault.read().pin_session
        if current is not None and current.session_key == session.session_key:
            self._vault.update(pin_session=None)
        self._warned = False

        if session.session_key == self._expired_key:
            return
        self._expired_key = session.session_key
        self._last_expired = session

        # Shift change, not a failure
        logger.debug(f"PIN session for member {session.member_id} expired")
        self._notify(None)
        self._fire(self._expired_callback)

    def _fire(self, callback: Optional[Callable[..., None]], *args) -> None:
        # UI callbacks must not stop expiry handling
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:
            logger.exception("PIN session callback failed")

    def _notify(self, session: Optional[PinSession]) -> None:
        for listener in list(self._listeners):
            listener(session)
