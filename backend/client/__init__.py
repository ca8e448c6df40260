"""
Client wiring.

Public API:
- StorefyContext: Resolved session state and actions for the UI
- ServiceContainer: Lazy construction of every collaborator
"""

from .context import StorefyContext
from .dependencies import ServiceContainer, get_container, reset_container, get_context

__all__ = [
    "StorefyContext",
    "ServiceContainer",
    "get_container",
    "reset_container",
    "get_context",
]
