"""
Permission module interface.

The context depends on ISecurityAuditor so audit calls can be faked or
disabled in tests.
"""

from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class ISecurityAuditor(Protocol):
    """Records security events and runs server-side permission checks."""

    async def log_event(
        self,
        store_id: str,
        event_type: str,
        details: Optional[dict[str, Any]] = None,
    ) -> bool:
        """
        Record a security event for a store.

        Returns:
            True if the event was recorded. Failures never raise.
        """
        ...

    async def check_permission(self, store_id: str, action: str) -> bool:
        """
        Ask the backend whether the caller may perform an action.

        Returns:
            The backend's answer; False on any failure
        """
        ...
