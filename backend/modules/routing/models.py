"""
Routing module data models.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RouteOutcome(str, Enum):
    """What the UI should do with a navigation."""

    LOADING = "loading"  # show a loading indicator, decide later
    RENDER = "render"
    REDIRECT = "redirect"
    ACCESS_DENIED = "access_denied"  # show the "access denied" view
    ERROR = "error"  # show the error view with a retry affordance


class RouteDecision(BaseModel):
    """Route guard verdict for one navigation."""

    outcome: RouteOutcome
    redirect_to: Optional[str] = Field(None, description="Target path for REDIRECT")
    page: Optional[str] = Field(None, description="Requested page")
    message: Optional[str] = Field(None, description="Error or denial message")
    cleared_pin_session: bool = Field(
        default=False, description="The guard removed a PIN session bound to a missing store"
    )

    model_config = ConfigDict(frozen=True)

    @property
    def allowed(self) -> bool:
        return self.outcome is RouteOutcome.RENDER
