"""
Route guard.

The single enforcement point for protected pages. Reads the sequencer
state and returns a decision; the only state it ever changes is
clearing a PIN session whose store no longer resolves.
"""

import logging
from typing import Optional

from modules.auth.models import AuthType
from modules.initialization.models import InitializationState
from modules.permissions.models import Page
from modules.session.interfaces import IPinSessionStore
from shared.config import Settings, get_settings

from .models import RouteDecision, RouteOutcome

logger = logging.getLogger(__name__)


class RouteGuard:
    """
    Evaluates navigations against the initialization state.

    Rows are checked top to bottom, first match wins:

    1. sequencer in error        -> error view
    2. not ready                 -> loading, never a redirect
    3. no identity, no PIN       -> landing (PIN login after a PIN expiry)
    4. identity, email unverified -> email verification page
    5. identity, no store        -> store selection
    6. PIN, store unresolvable   -> clear PIN session, PIN login
    7. page not permitted        -> access denied, or the fallback path
    8. otherwise                 -> render
    """

    def __init__(self, pin_store: IPinSessionStore, settings: Optional[Settings] = None):
        self._pin_store = pin_store
        self._settings = settings or get_settings()

    @property
    def public_paths(self) -> frozenset[str]:
        """Paths that render without any session."""
        s = self._settings
        return frozenset({s.landing_path, s.pin_login_path, s.auth_path})

    def evaluate(
        self,
        state: InitializationState,
        page: Optional[Page | str] = None,
        path: Optional[str] = None,
    ) -> RouteDecision:
        """
        Decide what to do with a navigation.

        Args:
            state: Current sequencer state
            page: Protected page the route requires, None for unprotected routes
            path: Requested path, used to avoid redirecting to where the user already is

        Returns:
            RouteDecision
        """
        settings = self._settings
        page_name = _page_name(page)

        if state.is_error:
            return RouteDecision(
                outcome=RouteOutcome.ERROR, page=page_name, message=state.error
            )

        if not state.is_ready:
            return RouteDecision(outcome=RouteOutcome.LOADING, page=page_name)

        auth = state.auth

        if auth.auth_type is AuthType.NONE:
            if path is not None and path in self.public_paths:
                return RouteDecision(outcome=RouteOutcome.RENDER, page=page_name)
            return self._redirect(self._signed_out_path(), page_name)

        if auth.auth_type is AuthType.IDENTITY:
            identity = auth.identity
            if (
                settings.require_email_verification
                and identity is not None
                and not identity.email_verified
            ):
                if path == settings.verify_email_path:
                    return RouteDecision(outcome=RouteOutcome.RENDER, page=page_name)
                return self._redirect(settings.verify_email_path, page_name)

            if state.current_store is None:
                if path == settings.store_selection_path:
                    return RouteDecision(outcome=RouteOutcome.RENDER, page=page_name)
                return self._redirect(settings.store_selection_path, page_name)

        if auth.auth_type is AuthType.PIN:
            if state.current_store is None:
                logger.debug("PIN session store unresolvable, clearing PIN session")
                self._pin_store.clear_pin_session()
                return RouteDecision(
                    outcome=RouteOutcome.REDIRECT,
                    redirect_to=settings.pin_login_path,
                    page=page_name,
                    cleared_pin_session=True,
                )
            if self._pin_store.peek_pin_session() is None:
                # Expired since the last run; the monitor clears it and the sequencer restarts
                return self._redirect(settings.pin_login_path, page_name)

        if page is not None and not state.permissions.can_access_page(page):
            if settings.show_unauthorized_message:
                return RouteDecision(
                    outcome=RouteOutcome.ACCESS_DENIED,
                    page=page_name,
                    message=f"Your role cannot access {page_name}",
                )
            return self._redirect(settings.fallback_path, page_name)

        return RouteDecision(outcome=RouteOutcome.RENDER, page=page_name)

    def _signed_out_path(self) -> str:
        if self._pin_store.last_expired_session is not None:
            return self._settings.pin_login_path
        return self._settings.landing_path

    def _redirect(self, target: str, page: Optional[str]) -> RouteDecision:
        return RouteDecision(outcome=RouteOutcome.REDIRECT, redirect_to=target, page=page)


def _page_name(page: Optional[Page | str]) -> Optional[str]:
    if page is None:
        return None
    return page.value if isinstance(page, Page) else str(page)
