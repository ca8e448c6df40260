"""
Initialization module.

Sequences auth, store and permission resolution and exposes the single
ready/error gate the route guard waits on.

Public API:
- InitializationSequencer: Phase-ordered resolution runs
- InitializationState / InitPhase: Published state
- check_transition: Phase order rule
"""

from .models import InitPhase, InitializationState, PHASE_ORDER
from .exceptions import InitializationError, PhaseOrderError
from .sequencer import InitializationSequencer, check_transition

__all__ = [
    # Models
    "InitPhase",
    "InitializationState",
    "PHASE_ORDER",
    # Exceptions
    "InitializationError",
    "PhaseOrderError",
    # Sequencer
    "InitializationSequencer",
    "check_transition",
]
