"""Tests for modules/initialization/models.py."""

from modules.auth.models import AuthType
from modules.initialization.models import PHASE_ORDER, InitializationState, InitPhase
from modules.permissions.models import Page


class TestInitializationState:
    def test_defaults(self):
        """A new state is starting, unauthenticated and permits nothing."""
        state = InitializationState()
        assert state.phase is InitPhase.STARTING
        assert state.is_initializing
        assert state.auth_type is AuthType.NONE
        assert state.current_store is None
        assert state.role is None
        assert not state.permissions.can_access_page(Page.DASHBOARD)

    def test_ready_and_error_are_terminal(self):
        assert InitializationState(phase=InitPhase.READY).is_ready
        error = InitializationState(phase=InitPhase.ERROR, error="boom")
        assert error.is_error
        assert not error.is_initializing

    def test_phase_order_excludes_error(self):
        assert InitPhase.ERROR not in PHASE_ORDER
        assert PHASE_ORDER[0] is InitPhase.STARTING
        assert PHASE_ORDER[-1] is InitPhase.READY
