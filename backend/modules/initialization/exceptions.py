"""
Initialization module exceptions.
"""

from shared.exceptions import StorefyError


class InitializationError(StorefyError):
    """A run failed for a reason other than a known backend error."""

    default_code = "INITIALIZATION_FAILED"
    retryable = True


class PhaseOrderError(InitializationError):
    """Raised when a transition would skip or reorder phases."""

    retryable = False

    def __init__(self, current: str, target: str):
        super().__init__(
            f"Illegal phase transition: {current} -> {target}",
            code="PHASE_ORDER",
            details={"current": current, "target": target},
        )
