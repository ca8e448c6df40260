"""
Initialization sequencer.

Runs the resolvers in a fixed phase order and publishes one state that
every route guard waits on:

    starting -> checking-auth -> checking-pin -> loading-stores
             -> restoring-state -> ready

with `error` reachable from any phase when the backend fails. Each run
carries a generation number; a run that a newer one has replaced drops
its results at its next suspension point instead of overwriting fresher
state.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

from modules.auth.exceptions import AuthServiceUnavailableError
from modules.auth.interfaces import IAuthClient
from modules.auth.models import AuthType
from modules.auth.resolver import AuthResolver
from modules.permissions.resolver import PermissionResolver
from modules.stores.exceptions import StoreLoadError, StoreSelectionNotAllowedError
from modules.stores.models import NO_STORE, StoreResolution
from modules.stores.resolver import StoreResolver
from shared.config import Settings, get_settings
from shared.exceptions import StorefyError

from .exceptions import InitializationError, PhaseOrderError
from .models import PHASE_ORDER, InitializationState, InitPhase

logger = logging.getLogger(__name__)

StateListener = Callable[[InitializationState], None]
ContextKey = tuple[Optional[str], bool]


def check_transition(current: InitPhase, target: InitPhase) -> None:
    """
    Validate a phase transition.

    Allowed: the next phase in order, or ERROR from any phase.

    Raises:
        PhaseOrderError: For any other transition
    """
    if target is InitPhase.ERROR:
        return
    if current in PHASE_ORDER and target in PHASE_ORDER:
        if PHASE_ORDER.index(target) == PHASE_ORDER.index(current) + 1:
            return
    raise PhaseOrderError(current.value, target.value)


class _Superseded(Exception):
    """A newer run replaced the current one."""


class InitializationSequencer:
    """
    Orchestrates auth, store and permission resolution.

    Role and store depend on each other, so any change of the acting
    principal restarts the whole sequence instead of patching state.
    """

    def __init__(
        self,
        auth_client: IAuthClient,
        auth_resolver: AuthResolver,
        store_resolver: StoreResolver,
        permission_resolver: Optional[PermissionResolver] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        self._auth_client = auth_client
        self._auth_resolver = auth_resolver
        self._store_resolver = store_resolver
        self._permission_resolver = permission_resolver or PermissionResolver()
        self._auth_timeout = settings.auth_ready_timeout_seconds
        self._store_timeout = settings.store_load_timeout_seconds

        self._state = InitializationState()
        self._generation = 0
        self._context_key: Optional[ContextKey] = None
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> InitializationState:
        return self._state

    @property
    def context_key(self) -> Optional[ContextKey]:
        """(identity ID, PIN session present) of the latest resolved auth state."""
        return self._context_key

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a listener called on every state change.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Runs
    # -------------------------------------------------------------------------

    async def initialize(self) -> InitializationState:
        """
        Start a new run from `starting` and wait for it to settle.

        Any run still in flight is superseded.

        Returns:
            The state at the end of this run (or the newer run's state if
            this one was superseded)
        """
        self._generation += 1
        generation = self._generation
        self._context_key = None
        self._set_state(InitializationState(generation=generation))

        try:
            await self._run(generation)
        except _Superseded:
            logger.debug(f"Initialization run {generation} superseded")
        return self._state

    async def retry_initialization(self) -> InitializationState:
        """Reset to `starting` and run again. Safe to call from `error`."""
        logger.info("Retrying initialization")
        return await self.initialize()

    def needs_restart(self, identity_id: Optional[str], has_pin_session: bool) -> bool:
        """
        Whether an auth change invalidates the current state.

        True when the identity or PIN session presence differs from the
        last resolved run, when a run is in flight that has not yet
        resolved auth, or after a failed run.
        """
        if self._state.is_error:
            return True
        if self._context_key is None:
            return self._state.is_initializing
        return self._context_key != (identity_id, has_pin_session)

    async def refresh(
        self, identity_id: Optional[str], has_pin_session: bool
    ) -> InitializationState:
        """Restart from scratch if the acting principal changed, else keep state."""
        if not self.needs_restart(identity_id, has_pin_session):
            return self._state
        logger.debug(
            f"Auth context changed to ({identity_id}, pin={has_pin_session}), restarting"
        )
        return await self.initialize()

    def select_store(self, store_id: str) -> InitializationState:
        """
        Make an explicit store choice for the signed-in identity.

        The role and permission set are recomputed in the same step.

        Raises:
            StoreSelectionNotAllowedError: If not ready or not an identity session
            StoreNotFoundError: If the store is not among the identity's stores
        """
        state = self._state
        if not state.is_ready:
            raise StoreSelectionNotAllowedError("initialization is not complete")
        if state.auth.auth_type is not AuthType.IDENTITY or state.auth.identity is None:
            raise StoreSelectionNotAllowedError(
                f"{state.auth.auth_type.value} sessions cannot choose a store"
            )

        resolution = self._store_resolver.select_store(
            state.auth.identity, state.stores.stores, store_id
        )
        role, permissions = self._permission_resolver.resolve(
            state.auth, resolution.current_store
        )
        self._set_state(
            state.model_copy(
                update={"stores": resolution, "role": role, "permissions": permissions}
            )
        )
        return self._state

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _run(self, generation: int) -> None:
        try:
            self._advance(generation, InitPhase.CHECKING_AUTH)
            await self._bounded(
                self._auth_client.wait_until_ready(),
                self._auth_timeout,
                AuthServiceUnavailableError,
            )
            self._ensure_current(generation)

            self._advance(generation, InitPhase.CHECKING_PIN)
            auth = await self._bounded(
                self._auth_resolver.resolve(),
                self._auth_timeout,
                AuthServiceUnavailableError,
            )
            self._ensure_current(generation)
            self._context_key = (auth.identity_id, auth.pin_session is not None)

            self._advance(generation, InitPhase.LOADING_STORES, auth=auth)
            stores = []
            if auth.auth_type is AuthType.IDENTITY:
                stores = await self._bounded(
                    self._store_resolver.load_stores(auth.identity),
                    self._store_timeout,
                    StoreLoadError,
                )
                self._ensure_current(generation)

            self._advance(generation, InitPhase.RESTORING_STATE)
            resolution: StoreResolution = NO_STORE
            if auth.auth_type is AuthType.IDENTITY:
                resolution = self._store_resolver.restore_selection(auth.identity, stores)
            elif auth.auth_type is AuthType.PIN:
                resolution = await self._bounded(
                    self._store_resolver.resolve_for_pin(auth.pin_session),
                    self._store_timeout,
                    StoreLoadError,
                )
                self._ensure_current(generation)

            role, permissions = self._permission_resolver.resolve(
                auth, resolution.current_store
            )
            self._advance(
                generation,
                InitPhase.READY,
                stores=resolution,
                role=role,
                permissions=permissions,
            )

        except (_Superseded, PhaseOrderError, asyncio.CancelledError):
            raise
        except StorefyError as e:
            self._fail(generation, e)
        except Exception as e:
            logger.exception(f"Unexpected failure during {self._state.phase.value}")
            self._fail(generation, InitializationError(str(e)))

    async def _bounded(
        self, awaitable: Any, timeout: float, error: Callable[[str], StorefyError]
    ) -> Any:
        try:
            return await asyncio.wait_for(awaitable, timeout=timeout)
        except TimeoutError:
            raise error(f"timed out after {timeout:g}s")

    def _ensure_current(self, generation: int) -> None:
        if generation != self._generation:
            raise _Superseded()

    def _advance(self, generation: int, phase: InitPhase, **changes: Any) -> None:
        self._ensure_current(generation)
        check_transition(self._state.phase, phase)
        logger.debug(f"Initialization phase: {self._state.phase.value} -> {phase.value}")
        self._set_state(self._state.model_copy(update={"phase": phase, **changes}))

    def _fail(self, generation: int, error: StorefyError) -> None:
        if generation != self._generation:
            return
        logger.error(
            f"Initialization failed during {self._state.phase.value}: {error.message}"
        )
        self._set_state(
            self._state.model_copy(
                update={
                    "phase": InitPhase.ERROR,
                    "error": error.message,
                    "error_code": error.code,
                }
            )
        )

    def _set_state(self, state: InitializationState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)
