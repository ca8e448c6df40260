"""
Store module data models.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from shared.models import Role


class Store(BaseModel):
    """
    A retail location the current principal can act on.

    `role` is the principal's role at this store. It is None when the
    store was loaded by ID without membership context (PIN sessions carry
    their own role).
    """

    id: str = Field(..., description="Store ID (UUID)")
    name: str = Field(..., description="Display name")
    role: Optional[Role] = Field(None, description="Principal's role at the store")
    owner_id: Optional[str] = Field(None, description="Owning account ID")
    store_code: Optional[str] = Field(None, description="Short code for PIN login links")

    model_config = {"frozen": True, "extra": "ignore"}


class SelectionSource(str, Enum):
    """How the current store came to be selected."""

    RESTORED = "restored"  # valid persisted selection
    AUTO_SELECTED = "auto_selected"  # exactly one store available
    EXPLICIT = "explicit"  # user picked it
    PIN = "pin"  # fixed by the PIN session
    NONE = "none"  # nothing selected


class StoreResolution(BaseModel):
    """Result of store resolution for the current principal."""

    stores: list[Store] = Field(default_factory=list, description="Stores available")
    current_store: Optional[Store] = Field(None, description="Selected store, if any")
    source: SelectionSource = Field(default=SelectionSource.NONE)
    discarded_reason: Optional[str] = Field(
        None, description="Why a persisted selection was thrown away"
    )

    model_config = {"frozen": True}

    @property
    def has_selection(self) -> bool:
        return self.current_store is not None


NO_STORE = StoreResolution()
