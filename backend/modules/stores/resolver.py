"""
Store resolution.

Decides the one current store every later read and write is scoped to:
- identity sessions: restore a validated persisted selection, else
  auto-select a single store, else no store
- PIN sessions: the store fixed at PIN login
"""

import logging
from typing import Optional

from modules.session.models import PinSession, StoreSelection
from modules.session.service import Clock
from modules.session.vault import SessionVault
from shared.models import IdentitySession, utc_now

from .exceptions import StaleSelectionError, StoreNotFoundError
from .interfaces import IStoreDataService
from .models import SelectionSource, Store, StoreResolution

logger = logging.getLogger(__name__)


class StoreResolver:
    """
    Resolves and persists the current store.

    Persisted selections are always checked against the current identity
    and the freshly loaded store list before reuse. A selection that fails
    either check is deleted, never reassigned.
    """

    def __init__(
        self,
        store_service: IStoreDataService,
        vault: SessionVault,
        clock: Clock = utc_now,
    ):
        self._store_service = store_service
        self._vault = vault
        self._clock = clock

    async def load_stores(self, identity: IdentitySession) -> list[Store]:
        """
        List the stores the identity can act on.

        Raises:
            StoreLoadError: If the backend call fails
        """
        return await self._store_service.list_stores_for_identity(identity.id)

    async def resolve_for_identity(self, identity: IdentitySession) -> StoreResolution:
        """Load the identity's stores and pick the current one."""
        stores = await self.load_stores(identity)
        return self.restore_selection(identity, stores)

    def restore_selection(
        self, identity: IdentitySession, stores: list[Store]
    ) -> StoreResolution:
        """
        Pick the current store from an already loaded store list.

        Order: valid persisted selection, then the only store, then none.
        """
        discarded_reason: Optional[str] = None
        selection = self._vault.read().store_selection

        if selection is not None:
            try:
                store = self._validate_selection(selection, identity, stores)
            except StaleSelectionError as e:
                discarded_reason = e.reason
                logger.debug(f"Discarding store selection {selection.store_id}: {e.reason}")
                self._vault.update(store_selection=None)
            else:
                if selection.legacy:
                    # Rewrite in the current format, keyed to this identity
                    self._persist(identity, store)
                return StoreResolution(
                    stores=stores,
                    current_store=store,
                    source=SelectionSource.RESTORED,
                )

        if len(stores) == 1:
            store = stores[0]
            self._persist(identity, store)
            logger.debug(f"Auto-selected store {store.id}")
            return StoreResolution(
                stores=stores,
                current_store=store,
                source=SelectionSource.AUTO_SELECTED,
                discarded_reason=discarded_reason,
            )

        return StoreResolution(
            stores=stores,
            source=SelectionSource.NONE,
            discarded_reason=discarded_reason,
        )

    async def resolve_for_pin(self, pin_session: PinSession) -> StoreResolution:
        """
        Load the store a PIN session is bound to.

        A store that no longer exists resolves to no store; a failing
        backend call raises.

        Raises:
            StoreLoadError: If the store could not be loaded
        """
        store = await self._store_service.get_store_by_id(pin_session.store_id)
        if store is None:
            logger.debug(f"PIN session store {pin_session.store_id} no longer exists")
            return StoreResolution(
                source=SelectionSource.NONE,
                discarded_reason="store not found",
            )

        store = store.model_copy(update={"role": pin_session.role})
        return StoreResolution(
            stores=[store],
            current_store=store,
            source=SelectionSource.PIN,
        )

    def select_store(
        self, identity: IdentitySession, stores: list[Store], store_id: str
    ) -> StoreResolution:
        """
        Make an explicit store choice and persist it immediately.

        Raises:
            StoreNotFoundError: If the store is not among the identity's stores
        """
        store = next((s for s in stores if s.id == store_id), None)
        if store is None:
            raise StoreNotFoundError(store_id)

        self._persist(identity, store)
        logger.info(f"Store {store.id} selected by {identity.id}")
        return StoreResolution(
            stores=stores,
            current_store=store,
            source=SelectionSource.EXPLICIT,
        )

    def clear_selection(self) -> None:
        self._vault.update(store_selection=None)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _validate_selection(
        self,
        selection: StoreSelection,
        identity: IdentitySession,
        stores: list[Store],
    ) -> Store:
        if not selection.legacy and not selection.belongs_to(identity.id):
            raise StaleSelectionError(selection.store_id, "selected by another identity")

        store = next((s for s in stores if s.id == selection.store_id), None)
        if store is None:
            raise StaleSelectionError(selection.store_id, "store no longer available")
        return store

    def _persist(self, identity: IdentitySession, store: Store) -> None:
        selection = StoreSelection(
            store_id=store.id,
            user_id=identity.id,
            timestamp=int(self._clock().timestamp() * 1000),
        )
        self._vault.update(store_selection=selection)
