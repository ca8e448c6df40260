"""
Store data service implementation.

Provides both in-memory (for testing) and Supabase-backed (for production)
implementations of IStoreDataService.
"""

import asyncio
import logging
from typing import Optional

from .exceptions import StoreLoadError
from .models import Store
from .repository import StoreRepository

logger = logging.getLogger(__name__)


class InMemoryStoreService:
    """
    Store data service with in-memory storage.

    For testing and development. Use SupabaseStoreService for production.
    """

    def __init__(self, stores_by_identity: Optional[dict[str, list[Store]]] = None):
        """
        Initialize the in-memory store service.

        Args:
            stores_by_identity: identity ID -> stores that identity can access
        """
        self._stores: dict[str, list[Store]] = {
            identity_id: list(stores)
            for identity_id, stores in (stores_by_identity or {}).items()
        }

    def add_store(self, identity_id: str, store: Store) -> None:
        self._stores.setdefault(identity_id, []).append(store)

    def delete_store(self, store_id: str) -> None:
        for identity_id, stores in self._stores.items():
            self._stores[identity_id] = [s for s in stores if s.id != store_id]

    async def list_stores_for_identity(self, identity_id: str) -> list[Store]:
        return list(self._stores.get(identity_id, []))

    async def get_store_by_id(self, store_id: str) -> Optional[Store]:
        for stores in self._stores.values():
            for store in stores:
                if store.id == store_id:
                    return store.model_copy(update={"role": None})
        return None


class SupabaseStoreService:
    """
    Store data service backed by Supabase.

    The repository is synchronous (supabase-py's sync client); calls run
    in a worker thread so the event loop stays free and callers can bound
    them with asyncio.wait_for().
    """

    def __init__(self, repository: StoreRepository):
        self._repository = repository

    async def list_stores_for_identity(self, identity_id: str) -> list[Store]:
        try:
            stores = await asyncio.to_thread(
                self._repository.list_stores_for_user, identity_id
            )
        except Exception as e:
            raise StoreLoadError(str(e)) from e
        logger.debug(f"Loaded {len(stores)} store(s) for identity {identity_id}")
        return stores

    async def get_store_by_id(self, store_id: str) -> Optional[Store]:
        try:
            return await asyncio.to_thread(self._repository.get_store, store_id)
        except Exception as e:
            raise StoreLoadError(str(e), store_id=store_id) from e
