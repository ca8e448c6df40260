"""
Permissions module.

Maps the acting role to the pages and actions it may use, from a static
table shipped with the application.

Public API:
- Page / Action: Closed enums of protected pages and gated actions
- can_access_page / can_perform / require_permission: Table lookups
- PermissionResolver: ResolvedRole and PermissionSet computation
- ISecurityAuditor / SecurityAuditor: Backend security audit
"""

from .models import Page, Action, ResolvedRole, PermissionSet
from .exceptions import InsufficientPermissionsError
from .table import (
    PERMISSION_TABLE_VERSION,
    LIFECYCLE_ACTIONS,
    can_access_page,
    can_perform,
    permission_set_for,
    require_permission,
)
from .resolver import PermissionResolver
from .interfaces import ISecurityAuditor
from .audit import SecurityAuditor, UNAUTHORIZED_PAGE_ACCESS, UNAUTHORIZED_ACTION_ATTEMPT

__all__ = [
    # Models
    "Page",
    "Action",
    "ResolvedRole",
    "PermissionSet",
    # Exceptions
    "InsufficientPermissionsError",
    # Table
    "PERMISSION_TABLE_VERSION",
    "LIFECYCLE_ACTIONS",
    "can_access_page",
    "can_perform",
    "permission_set_for",
    "require_permission",
    # Resolution
    "PermissionResolver",
    # Audit
    "ISecurityAuditor",
    "SecurityAuditor",
    "UNAUTHORIZED_PAGE_ACCESS",
    "UNAUTHORIZED_ACTION_ATTEMPT",
]
