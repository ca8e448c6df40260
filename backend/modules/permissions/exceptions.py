"""
Permission module exceptions.

Access-denied outcomes of the route guard are return values, not
exceptions. InsufficientPermissionsError is for action code that must
not proceed without a permission.
"""

from typing import Optional

from shared.exceptions import AuthorizationError


class InsufficientPermissionsError(AuthorizationError):
    """Raised when the current role lacks a required action."""

    def __init__(self, action: str, role: Optional[str]):
        super().__init__(
            f"Insufficient permissions. Required: {action}, role: {role or 'none'}",
            code="INSUFFICIENT_PERMISSIONS",
            details={"action": action, "role": role},
        )
