"""
Routing module.

Public API:
- RouteGuard: Allow, redirect or reject a navigation
- RouteDecision / RouteOutcome: Guard verdicts
"""

from .models import RouteOutcome, RouteDecision
from .guard import RouteGuard

__all__ = [
    "RouteOutcome",
    "RouteDecision",
    "RouteGuard",
]
