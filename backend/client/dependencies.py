"""
Dependency wiring for the client core.

This module provides the "container" that wires together all module
implementations. Each module exposes its collaborators through an
interface, and this file creates the concrete implementations.

Collaborators can be injected (in-memory auth client, in-memory store
service, MemoryStorage) so tests and offline tools never touch Supabase.
"""

from typing import TYPE_CHECKING, Optional

from shared.config import Settings, get_settings
from shared.models import utc_now

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from supabase import Client

    from client.context import StorefyContext
    from modules.auth.interfaces import IAuthClient
    from modules.auth.resolver import AuthResolver
    from modules.initialization.sequencer import InitializationSequencer
    from modules.permissions.interfaces import ISecurityAuditor
    from modules.permissions.resolver import PermissionResolver
    from modules.routing.guard import RouteGuard
    from modules.session.monitor import ActivityTracker, SessionMonitor
    from modules.session.service import Clock, PinSessionStore
    from modules.session.vault import SessionVault
    from modules.stores.interfaces import IStoreDataService
    from modules.stores.resolver import StoreResolver
    from shared.storage import KeyValueStorage


class ServiceContainer:
    """
    Container for all collaborator instances.

    Instances are created lazily on first access and cached for the
    container's lifetime. Use reset() to drop them.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        storage: "KeyValueStorage | None" = None,
        auth_client: "IAuthClient | None" = None,
        store_service: "IStoreDataService | None" = None,
        auditor: "ISecurityAuditor | None" = None,
        clock: "Clock" = utc_now,
    ) -> None:
        self._settings = settings
        self._own_settings = settings is not None
        self._clock = clock
        self._injected = {
            "storage": storage,
            "auth_client": auth_client,
            "store_service": store_service,
            "auditor": auditor,
        }
        self.reset()

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def clock(self) -> "Clock":
        return self._clock

    @property
    def supabase(self) -> "Client":
        """Get the Supabase client (anon key, end-user session)."""
        if self._supabase is None:
            from shared.database import create_supabase_client, get_supabase_client
            # Injected settings get their own client
            if self._own_settings:
                self._supabase = create_supabase_client(self.settings)
            else:
                self._supabase = get_supabase_client()
        return self._supabase

    @property
    def storage(self) -> "KeyValueStorage":
        """Get the persistent key-value storage."""
        if self._storage is None:
            from shared.storage import FileStorage
            self._storage = FileStorage(self.settings.storage_path)
        return self._storage

    @property
    def vault(self) -> "SessionVault":
        if self._vault is None:
            from modules.session.vault import SessionVault
            self._vault = SessionVault(self.storage)
        return self._vault

    @property
    def pin_store(self) -> "PinSessionStore":
        """Get the PIN session store."""
        if self._pin_store is None:
            from modules.session.service import PinSessionStore
            self._pin_store = PinSessionStore(
                self.vault, settings=self.settings, clock=self._clock
            )
        return self._pin_store

    @property
    def monitor(self) -> "SessionMonitor":
        if self._monitor is None:
            from modules.session.monitor import SessionMonitor
            self._monitor = SessionMonitor(self.pin_store, settings=self.settings)
        return self._monitor

    @property
    def activity_tracker(self) -> "ActivityTracker":
        if self._activity_tracker is None:
            from modules.session.monitor import ActivityTracker
            self._activity_tracker = ActivityTracker(
                self.pin_store, settings=self.settings, clock=self._clock
            )
        return self._activity_tracker

    @property
    def auth_client(self) -> "IAuthClient":
        """Get the auth service client."""
        if self._auth_client is None:
            from modules.auth.client import SupabaseAuthClient
            self._auth_client = SupabaseAuthClient(
                self.supabase, jwt_secret=self.settings.supabase_jwt_secret
            )
        return self._auth_client

    @property
    def store_service(self) -> "IStoreDataService":
        """Get the store data service."""
        if self._store_service is None:
            from modules.stores.repository import StoreRepository
            from modules.stores.service import SupabaseStoreService
            self._store_service = SupabaseStoreService(StoreRepository(self.supabase))
        return self._store_service

    @property
    def auditor(self) -> "ISecurityAuditor | None":
        """Get the security auditor, or None when auditing is disabled."""
        if self._auditor is None and self.settings.enable_security_audit:
            from modules.permissions.audit import SecurityAuditor
            self._auditor = SecurityAuditor(self.supabase)
        return self._auditor

    @property
    def auth_resolver(self) -> "AuthResolver":
        if self._auth_resolver is None:
            from modules.auth.resolver import AuthResolver
            self._auth_resolver = AuthResolver(
                self.pin_store, self.auth_client, self.store_service
            )
        return self._auth_resolver

    @property
    def store_resolver(self) -> "StoreResolver":
        if self._store_resolver is None:
            from modules.stores.resolver import StoreResolver
            self._store_resolver = StoreResolver(
                self.store_service, self.vault, clock=self._clock
            )
        return self._store_resolver

    @property
    def permission_resolver(self) -> "PermissionResolver":
        if self._permission_resolver is None:
            from modules.permissions.resolver import PermissionResolver
            self._permission_resolver = PermissionResolver()
        return self._permission_resolver

    @property
    def sequencer(self) -> "InitializationSequencer":
        """Get the initialization sequencer."""
        if self._sequencer is None:
            from modules.initialization.sequencer import InitializationSequencer
            self._sequencer = InitializationSequencer(
                self.auth_client,
                self.auth_resolver,
                self.store_resolver,
                self.permission_resolver,
                settings=self.settings,
            )
        return self._sequencer

    @property
    def guard(self) -> "RouteGuard":
        if self._guard is None:
            from modules.routing.guard import RouteGuard
            self._guard = RouteGuard(self.pin_store, settings=self.settings)
        return self._guard

    @property
    def context(self) -> "StorefyContext":
        """Get the application state context."""
        if self._context is None:
            from client.context import StorefyContext
            self._context = StorefyContext(self)
        return self._context

    def reset(self) -> None:
        """
        Reset all cached instances.

        Injected collaborators are kept; everything built from them is
        recreated on next access.
        """
        self._supabase: "Client | None" = None
        self._storage = self._injected["storage"]
        self._vault: "SessionVault | None" = None
        self._pin_store: "PinSessionStore | None" = None
        self._monitor: "SessionMonitor | None" = None
        self._activity_tracker: "ActivityTracker | None" = None
        self._auth_client = self._injected["auth_client"]
        self._store_service = self._injected["store_service"]
        self._auditor = self._injected["auditor"]
        self._auth_resolver: "AuthResolver | None" = None
        self._store_resolver: "StoreResolver | None" = None
        self._permission_resolver: "PermissionResolver | None" = None
        self._sequencer: "InitializationSequencer | None" = None
        self._guard: "RouteGuard | None" = None
        self._context: "StorefyContext | None" = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    The next call to get_container() creates a fresh container.
    Primarily used for testing.
    """
    global _container
    _container = None


def get_context() -> "StorefyContext":
    """Get the application context from the singleton container."""
    return get_container().context
