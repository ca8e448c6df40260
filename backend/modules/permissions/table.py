"""
Static role -> permission table.

Shipped with the application and never fetched, so page gating keeps
working when the backend is unreachable. This is UI gating only; the
backend enforces the real rules through RLS.

Every lookup is fail-closed: an unknown role, page or action has no
permission.
"""

from typing import Optional, assert_never

from shared.models import Role

from .exceptions import InsufficientPermissionsError
from .models import Action, Page, PermissionSet

PERMISSION_TABLE_VERSION = 3

ALL_PAGES: frozenset[Page] = frozenset(Page)
ALL_ACTIONS: frozenset[Action] = frozenset(Action)

LIFECYCLE_ACTIONS: frozenset[Action] = frozenset(
    {
        Action.CREATE_STORE,
        Action.DELETE_STORE,
        Action.CHANGE_OWNERSHIP,
        Action.MANAGE_BILLING,
    }
)

CASHIER_PAGES: frozenset[Page] = frozenset({Page.DASHBOARD, Page.POS})

CASHIER_ACTIONS: frozenset[Action] = frozenset(
    {
        Action.VIEW_DASHBOARD,
        Action.PROCESS_TRANSACTION,
        Action.VIEW_PRODUCTS,
        Action.VIEW_CUSTOMERS,
        Action.CREATE_CUSTOMER,
        Action.UPDATE_CUSTOMER_BASIC,
        Action.VIEW_LAYBY,
        Action.PROCESS_LAYBY_PAYMENT,
        Action.VIEW_INVENTORY_BASIC,
        Action.CREATE_EXPENSE,
    }
)


def pages_for_role(role: Role) -> frozenset[Page]:
    if role is Role.OWNER:
        return ALL_PAGES
    elif role is Role.MANAGER:
        return ALL_PAGES
    elif role is Role.CASHIER:
        return CASHIER_PAGES
    else:
        assert_never(role)


def actions_for_role(role: Role) -> frozenset[Action]:
    if role is Role.OWNER:
        return ALL_ACTIONS
    elif role is Role.MANAGER:
        return ALL_ACTIONS - LIFECYCLE_ACTIONS
    elif role is Role.CASHIER:
        return CASHIER_ACTIONS
    else:
        assert_never(role)


def can_access_page(role: Optional[Role | str], page: Page | str) -> bool:
    """
    Check whether a role may open a page.

    Total over any input: values outside the Role or Page enums return False.
    """
    parsed_role = _parse(Role, role)
    parsed_page = _parse(Page, page)
    if parsed_role is None or parsed_page is None:
        return False
    return parsed_page in pages_for_role(parsed_role)


def can_perform(role: Optional[Role | str], action: Action | str) -> bool:
    """Check whether a role may perform an action. Fail-closed like can_access_page."""
    parsed_role = _parse(Role, role)
    parsed_action = _parse(Action, action)
    if parsed_role is None or parsed_action is None:
        return False
    return parsed_action in actions_for_role(parsed_role)


def permission_set_for(role: Optional[Role]) -> PermissionSet:
    """Build the full permission set for a role (empty for no role)."""
    if role is None:
        return PermissionSet(table_version=PERMISSION_TABLE_VERSION)
    return PermissionSet(
        role=role,
        pages=pages_for_role(role),
        actions=actions_for_role(role),
        table_version=PERMISSION_TABLE_VERSION,
    )


def require_permission(permissions: PermissionSet, action: Action | str) -> None:
    """
    Guard for action code.

    Raises:
        InsufficientPermissionsError: If the permission set lacks the action
    """
    if not permissions.can(action):
        role = permissions.role.value if permissions.role is not None else None
        raise InsufficientPermissionsError(str(getattr(action, "value", action)), role)


def _parse(enum_type, value):
    if value is None:
        return None
    try:
        return enum_type(value)
    except ValueError:
        return None
