"""
Permission resolution.

Turns the resolved auth state and current store into the acting role
and its permission set. Pure and synchronous: permissions are recomputed
in the same step that changes the role, never later.
"""

import logging
from typing import Optional

from modules.auth.models import AuthResolution, AuthType
from modules.stores.models import Store
from shared.models import Role

from .models import PermissionSet, ResolvedRole
from .table import PERMISSION_TABLE_VERSION, permission_set_for

logger = logging.getLogger(__name__)


class PermissionResolver:
    """Computes ResolvedRole and PermissionSet from the static table."""

    @property
    def table_version(self) -> int:
        return PERMISSION_TABLE_VERSION

    def resolve_role(
        self, auth: AuthResolution, store: Optional[Store]
    ) -> Optional[ResolvedRole]:
        """
        Derive the effective role at the current store.

        PIN sessions carry their own role. Identity sessions use the
        membership role attached to the store, and the owner role when
        the identity owns the store.

        Returns:
            ResolvedRole, or None when no store is selected or no role is known
        """
        if store is None:
            return None

        if auth.auth_type is AuthType.PIN and auth.pin_session is not None:
            pin = auth.pin_session
            return ResolvedRole(
                role=pin.role,
                is_owner=pin.role is Role.OWNER,
                member_id=pin.member_id,
                member_name=pin.name,
            )

        if auth.auth_type is AuthType.IDENTITY and auth.identity is not None:
            identity = auth.identity
            is_owner = store.owner_id == identity.id or store.role is Role.OWNER
            role = Role.OWNER if is_owner else store.role
            if role is None:
                logger.debug(f"No membership role for {identity.id} at store {store.id}")
                return None
            return ResolvedRole(
                role=role,
                is_owner=is_owner,
                member_name=identity.email or None,
            )

        return None

    def compute(self, role: Optional[ResolvedRole]) -> PermissionSet:
        return permission_set_for(role.role if role is not None else None)

    def resolve(
        self, auth: AuthResolution, store: Optional[Store]
    ) -> tuple[Optional[ResolvedRole], PermissionSet]:
        """Resolve the role and its permissions in one step."""
        role = self.resolve_role(auth, store)
        return role, self.compute(role)
