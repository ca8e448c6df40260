"""
Security audit through backend RPCs.

Wraps the `log_security_event` and `check_user_permission` functions.
Audit logging must never interrupt the user: failures are logged and
swallowed into a False result. Server-side checks fail closed.
"""

import asyncio
import logging
from typing import Any, Optional

from supabase import Client

from shared.models import utc_now

logger = logging.getLogger(__name__)

UNAUTHORIZED_PAGE_ACCESS = "unauthorized_page_access"
UNAUTHORIZED_ACTION_ATTEMPT = "unauthorized_action_attempt"


class SecurityAuditor:
    """ISecurityAuditor backed by Supabase RPCs."""

    def __init__(self, client: Client, enabled: bool = True):
        self._client = client
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def log_event(
        self,
        store_id: str,
        event_type: str,
        details: Optional[dict[str, Any]] = None,
    ) -> bool:
        if not self._enabled:
            return False

        payload = {**(details or {}), "timestamp": utc_now().isoformat()}
        try:
            await asyncio.to_thread(
                self._rpc,
                "log_security_event",
                {"_store_id": store_id, "_event_type": event_type, "_details": payload},
            )
        except Exception as e:
            logger.warning(f"Failed to record security event {event_type}: {e}")
            return False
        return True

    async def log_unauthorized_page_access(
        self, store_id: str, page: str, role: Optional[str]
    ) -> bool:
        return await self.log_event(
            store_id,
            UNAUTHORIZED_PAGE_ACCESS,
            {"page": page, "user_role": role, "severity": "high"},
        )

    async def log_unauthorized_action(
        self, store_id: str, action: str, role: Optional[str]
    ) -> bool:
        return await self.log_event(
            store_id,
            UNAUTHORIZED_ACTION_ATTEMPT,
            {"attempted_action": action, "user_role": role, "severity": "high"},
        )

    async def check_permission(self, store_id: str, action: str) -> bool:
        try:
            data = await asyncio.to_thread(
                self._rpc,
                "check_user_permission",
                {"_store_id": store_id, "_action": action},
            )
        except Exception as e:
            logger.warning(f"Permission check for {action} failed: {e}")
            return False
        return data is True

    def _rpc(self, name: str, params: dict[str, Any]) -> Any:
        return self._client.rpc(name, params).execute().data
