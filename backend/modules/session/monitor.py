"""
Periodic PIN session monitoring and activity tracking.

The monitor polls instead of arming a precise timer: a suspended or
backgrounded process simply catches up on its next tick.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional

from shared.config import Settings, get_settings
from shared.models import utc_now

from .service import Clock, PinSessionStore

logger = logging.getLogger(__name__)


class SessionMonitor:
    """Runs PinSessionStore.check_expiry() every interval on the event loop."""

    def __init__(
        self,
        store: PinSessionStore,
        interval_seconds: Optional[float] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        self._store = store
        self._interval = (
            interval_seconds
            if interval_seconds is not None
            else settings.session_check_interval_seconds
        )
        self._task: Optional[asyncio.Task] = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start polling. Must be called from a running event loop."""
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        """Stop polling and wait for the loop task to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        while True:
            try:
                self._store.check_expiry()
            except Exception:
                logger.exception("PIN session expiry check failed")
            await asyncio.sleep(self._interval)


class ActivityTracker:
    """
    Extends the PIN session when the user does something.

    Activity arrives in bursts (every keypress, every scan), so renewals
    are throttled to one per `activity_throttle_seconds`.
    """

    def __init__(
        self,
        store: PinSessionStore,
        throttle_seconds: Optional[float] = None,
        settings: Optional[Settings] = None,
        clock: Clock = utc_now,
    ):
        settings = settings or get_settings()
        self._store = store
        self._throttle = (
            throttle_seconds
            if throttle_seconds is not None
            else settings.activity_throttle_seconds
        )
        self._clock = clock
        self._last_refresh: Optional[datetime] = None

    def register_activity(self) -> bool:
        """
        Note user activity.

        Returns:
            True if the PIN session was extended by this call
        """
        now = self._clock()
        if (
            self._last_refresh is not None
            and (now - self._last_refresh).total_seconds() < self._throttle
        ):
            return False

        if not self._store.refresh_session():
            return False
        self._last_refresh = now
        return True
