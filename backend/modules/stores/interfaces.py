"""
Store module interface.

The resolvers depend on IStoreDataService, not on Supabase. Both calls
are idempotent reads.
"""

from typing import Optional, Protocol, runtime_checkable

from .models import Store


@runtime_checkable
class IStoreDataService(Protocol):
    """Interface to the backend's store data."""

    async def list_stores_for_identity(self, identity_id: str) -> list[Store]:
        """
        List every store the identity can act on, with its role there.

        Args:
            identity_id: Supabase user ID (UUID)

        Returns:
            Stores the identity owns or is an active member of

        Raises:
            StoreLoadError: If the backend is unreachable or errors
        """
        ...

    async def get_store_by_id(self, store_id: str) -> Optional[Store]:
        """
        Load one store.

        Returns:
            The store, or None if it does not exist (or RLS hides it)

        Raises:
            StoreLoadError: If the backend is unreachable or errors
        """
        ...
