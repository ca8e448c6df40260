"""
Application state context.

StorefyContext is the one object the UI talks to. It owns the lifecycle
of the resolution pipeline (subscriptions, expiry monitor, restarts on
auth changes) and exposes the resolved state:

    context = StorefyContext(ServiceContainer(...))
    await context.start()
    decision = await context.guard(Page.REPORTS, "/reports")
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Callable, Optional

from modules.auth.models import AuthType
from modules.initialization.models import InitializationState
from modules.permissions.audit import UNAUTHORIZED_ACTION_ATTEMPT, UNAUTHORIZED_PAGE_ACCESS
from modules.permissions.models import Action, Page, PermissionSet, ResolvedRole
from modules.routing.models import RouteDecision, RouteOutcome
from modules.session.models import PinSession, SessionInfo
from modules.stores.models import Store
from shared.models import IdentitySession

if TYPE_CHECKING:
    from client.dependencies import ServiceContainer

logger = logging.getLogger(__name__)

ContextKey = tuple[Optional[str], bool]


class StorefyContext:
    """
    Explicit state container for one running client.

    Build one per container; tests build isolated instances with
    in-memory collaborators.
    """

    def __init__(self, container: "ServiceContainer"):
        self._container = container
        self._sequencer = container.sequencer
        self._pin_store = container.pin_store

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._unsubscribers: list[Callable[[], None]] = []
        self._identity_id: Optional[str] = None
        self._refresh_task: Optional[asyncio.Task] = None
        self._pending_key: Optional[ContextKey] = None
        self._started = False

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> InitializationState:
        """
        Subscribe to auth and PIN session changes, start the expiry
        monitor and run the first initialization.
        """
        if self._started:
            return await self.settle()
        self._started = True
        self._loop = asyncio.get_running_loop()

        self._unsubscribers = [
            self._container.auth_client.on_identity_change(self._on_identity_change),
            self._pin_store.subscribe(self._on_pin_session_change),
            self._sequencer.subscribe(self._on_state_change),
        ]
        self._container.monitor.start()

        await self._sequencer.initialize()
        return await self.settle()

    async def stop(self) -> None:
        """Undo start(): drop subscriptions, stop the monitor, cancel restarts."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        await self._container.monitor.stop()

        task, self._refresh_task = self._refresh_task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._started = False

    async def settle(self) -> InitializationState:
        """Wait for any pending restart to finish and return the state."""
        while self._refresh_task is not None and not self._refresh_task.done():
            await asyncio.shield(self._refresh_task)
        return self._sequencer.state

    # -------------------------------------------------------------------------
    # Resolved state
    # -------------------------------------------------------------------------

    @property
    def initialization_state(self) -> InitializationState:
        """phase, is_ready and error of the sequencer."""
        return self._sequencer.state

    @property
    def auth_type(self) -> AuthType:
        return self._sequencer.state.auth_type

    @property
    def identity(self) -> Optional[IdentitySession]:
        return self._sequencer.state.auth.identity

    @property
    def pin_session(self) -> Optional[PinSession]:
        return self._sequencer.state.auth.pin_session

    @property
    def current_store(self) -> Optional[Store]:
        state = self._sequencer.state
        return state.current_store if state.is_ready else None

    @property
    def stores(self) -> list[Store]:
        return list(self._sequencer.state.stores.stores)

    @property
    def role(self) -> Optional[ResolvedRole]:
        return self._sequencer.state.role

    @property
    def permissions(self) -> PermissionSet:
        return self._sequencer.state.permissions

    def can_access_page(self, page: Page | str) -> bool:
        """False until ready, then the static table's answer for the current role."""
        state = self._sequencer.state
        return state.is_ready and state.permissions.can_access_page(page)

    def can(self, action: Action | str) -> bool:
        state = self._sequencer.state
        return state.is_ready and state.permissions.can(action)

    def get_session_info(self) -> SessionInfo:
        return self._pin_store.get_session_info()

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    async def retry_initialization(self) -> InitializationState:
        return await self._sequencer.retry_initialization()

    async def select_store(self, store_id: str) -> Optional[Store]:
        """
        Choose the current store for the signed-in identity.

        Raises:
            StoreSelectionNotAllowedError: If not ready or not an identity session
            StoreNotFoundError: If the store is not among the identity's stores
        """
        await self.settle()
        return self._sequencer.select_store(store_id).current_store

    async def end_pin_session(self) -> InitializationState:
        """Clear the PIN session and re-resolve."""
        self._pin_store.clear_pin_session()
        self._request_refresh((self._identity_id, False))
        return await self.settle()

    async def sign_out(self) -> InitializationState:
        """
        End the identity session and re-resolve.

        The persisted store selection is kept so the same identity resumes
        its store on the next sign-in.
        """
        await self._container.auth_client.sign_out()
        logger.info("Signed out")
        self._identity_id = None
        self._request_refresh((None, self._pin_store.has_pin_session()))
        return await self.settle()

    def register_activity(self) -> bool:
        """Extend the PIN session on user activity (throttled)."""
        if self.auth_type is not AuthType.PIN:
            return False
        return self._container.activity_tracker.register_activity()

    def on_session_warning(self, callback: Optional[Callable[[int], None]]) -> None:
        self._pin_store.on_session_warning(callback)

    def on_session_expired(self, callback: Optional[Callable[[], None]]) -> None:
        self._pin_store.on_session_expired(callback)

    async def guard(
        self, page: Optional[Page | str] = None, path: Optional[str] = None
    ) -> RouteDecision:
        """
        Evaluate a navigation with the route guard.

        Denied page accesses are reported to the security audit.
        """
        state = self._sequencer.state
        decision = self._container.guard.evaluate(state, page, path)

        if decision.outcome is RouteOutcome.ACCESS_DENIED:
            await self._audit_page_denial(state, decision)
        return decision

    async def check_permission(self, action: Action | str) -> bool:
        """
        Check an action locally, then with the backend when auditing is on.

        Fails closed: no store, a local denial or a failed backend check
        all return False.
        """
        store = self.current_store
        if store is None:
            return False

        action_name = action.value if isinstance(action, Action) else str(action)
        auditor = self._container.auditor
        role = self.role.role.value if self.role is not None else None

        if not self.can(action):
            if auditor is not None:
                await auditor.log_event(
                    store.id,
                    UNAUTHORIZED_ACTION_ATTEMPT,
                    {"attempted_action": action_name, "user_role": role},
                )
            return False

        if auditor is None:
            return True
        return await auditor.check_permission(store.id, action_name)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _audit_page_denial(
        self, state: InitializationState, decision: RouteDecision
    ) -> None:
        auditor = self._container.auditor
        store = state.current_store
        if auditor is None or store is None:
            return
        role = state.role.role.value if state.role is not None else None
        await auditor.log_event(
            store.id,
            UNAUTHORIZED_PAGE_ACCESS,
            {"page": decision.page, "user_role": role},
        )

    def _on_identity_change(self, identity: Optional[IdentitySession]) -> None:
        identity_id = identity.id if identity is not None else None
        self._dispatch(self._handle_identity_change, identity_id)

    def _on_pin_session_change(self, session: Optional[PinSession]) -> None:
        self._dispatch(self._handle_pin_change, session is not None)

    def _on_state_change(self, state: InitializationState) -> None:
        if state.is_ready:
            self._identity_id = state.auth.identity_id

    def _handle_identity_change(self, identity_id: Optional[str]) -> None:
        self._identity_id = identity_id
        self._request_refresh((identity_id, self._pin_store.has_pin_session()))

    def _handle_pin_change(self, has_pin_session: bool) -> None:
        self._request_refresh((self._identity_id, has_pin_session))

    def _dispatch(self, handler: Callable, *args) -> None:
        # Auth callbacks may arrive on the SDK's worker thread
        loop = self._loop
        if loop is None:
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            handler(*args)
        else:
            loop.call_soon_threadsafe(handler, *args)

    def _request_refresh(self, key: ContextKey) -> None:
        if self._loop is None:
            return
        pending = self._refresh_task is not None and not self._refresh_task.done()
        if pending and key == self._pending_key:
            return
        if not self._sequencer.needs_restart(*key):
            return
        self._pending_key = key
        self._refresh_task = self._loop.create_task(self._sequencer.refresh(*key))
