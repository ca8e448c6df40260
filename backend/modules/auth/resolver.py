"""
Auth state classification.

Decides which principal is acting: a cashier on a PIN session, a
signed-in account, or nobody. The PIN session wins when both exist,
since it belongs to whoever is physically at the till.
"""

import logging
from typing import Optional

from modules.session.interfaces import IPinSessionStore
from modules.stores.interfaces import IStoreDataService

from .interfaces import IAuthClient
from .models import AuthResolution, AuthType, UNAUTHENTICATED

logger = logging.getLogger(__name__)


class AuthResolver:
    """Classifies the current auth state as none, identity or pin."""

    def __init__(
        self,
        pin_store: IPinSessionStore,
        auth_client: IAuthClient,
        store_service: Optional[IStoreDataService] = None,
    ):
        """
        Initialize the resolver.

        Args:
            pin_store: PIN session source
            auth_client: Identity session source
            store_service: Used to check the PIN session's store when an
                identity session is also live. Without it the check is skipped.
        """
        self._pin_store = pin_store
        self._auth_client = auth_client
        self._store_service = store_service

    async def resolve(self) -> AuthResolution:
        """
        Classify the current auth state. First match wins:

        1. live PIN session -> pin
        2. identity session -> identity
        3. otherwise -> none

        When both sessions exist and the PIN session's store is gone, the
        PIN session is cleared and the identity session is used.

        Raises:
            AuthServiceUnavailableError: If the auth service fails
            StoreLoadError: If the PIN store check fails
        """
        pin_session = self._pin_store.get_pin_session()
        identity = await self._auth_client.get_current_identity()

        if pin_session is not None:
            if identity is not None and self._store_service is not None:
                store = await self._store_service.get_store_by_id(pin_session.store_id)
                if store is None:
                    logger.debug(
                        f"PIN session store {pin_session.store_id} is gone, "
                        f"falling back to identity {identity.id}"
                    )
                    self._pin_store.clear_pin_session()
                    return AuthResolution(auth_type=AuthType.IDENTITY, identity=identity)
            return AuthResolution(
                auth_type=AuthType.PIN,
                identity=identity,
                pin_session=pin_session,
            )

        if identity is not None:
            return AuthResolution(auth_type=AuthType.IDENTITY, identity=identity)

        return UNAUTHENTICATED
