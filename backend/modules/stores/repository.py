"""
Store repository for database access.

Encapsulates the Supabase queries and row mapping for:
- stores (stores the user owns)
- store_members (stores the user is an active member of)

Queries run under the signed-in user's session, so RLS limits every
result to rows that user may see.
"""

import logging
from typing import Any, Optional

from shared.models import Role
from shared.repository import BaseRepository

from .models import Store

logger = logging.getLogger(__name__)

STORE_COLUMNS = "id, name, owner_id, store_code"


class StoreRepository(BaseRepository[Store]):
    """
    Repository for store data access.

    Note: This repository does NOT decide which store is current.
    The resolver is responsible for selection rules.
    """

    def list_owned_stores(self, user_id: str) -> list[Store]:
        """Stores whose owner_id is the user."""
        result = (
            self._db.table("stores")
            .select(STORE_COLUMNS)
            .eq("owner_id", user_id)
            .execute()
        )
        return [self._map_to_store(row, Role.OWNER) for row in result.data or []]

    def list_member_stores(self, user_id: str) -> list[Store]:
        """Stores where the user has an active store_members row."""
        result = (
            self._db.table("store_members")
            .select(f"store_id, role, stores({STORE_COLUMNS})")
            .eq("user_id", user_id)
            .eq("is_active", True)
            .execute()
        )

        stores: list[Store] = []
        for row in result.data or []:
            store_row = row.get("stores")
            if not store_row:
                # Membership of a store hidden by RLS or deleted
                continue
            stores.append(self._map_to_store(store_row, self._map_role(row.get("role"))))
        return stores

    def list_stores_for_user(self, user_id: str) -> list[Store]:
        """
        Owned stores followed by member stores.

        A store that is both owned and joined appears once, as owner.
        """
        merged: dict[str, Store] = {}
        for store in self.list_owned_stores(user_id):
            merged[store.id] = store
        for store in self.list_member_stores(user_id):
            merged.setdefault(store.id, store)
        return list(merged.values())

    def get_store(self, store_id: str) -> Optional[Store]:
        """Get a store by ID, without membership context."""
        result = (
            self._db.table("stores")
            .select(STORE_COLUMNS)
            .eq("id", store_id)
            .limit(1)
            .execute()
        )
        if not result.data:
            return None
        return self._map_to_store(result.data[0], None)

    # -------------------------------------------------------------------------
    # Mapping helpers
    # -------------------------------------------------------------------------

    def _map_role(self, value: Any) -> Role:
        try:
            return Role(value)
        except ValueError:
            logger.warning(f"Unknown store role {value!r}, treating as cashier")
            return Role.CASHIER

    def _map_to_store(self, data: dict[str, Any], role: Optional[Role]) -> Store:
        return Store(
            id=str(data["id"]),
            name=data.get("name") or "",
            role=role,
            owner_id=data.get("owner_id"),
            store_code=data.get("store_code"),
        )
