"""
Initialization module data models.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from modules.auth.models import AuthResolution, AuthType, UNAUTHENTICATED
from modules.permissions.models import PermissionSet, ResolvedRole
from modules.permissions.table import permission_set_for
from modules.stores.models import NO_STORE, Store, StoreResolution


class InitPhase(str, Enum):
    """Sequencer phases. ERROR is reachable from every other phase."""

    STARTING = "starting"
    CHECKING_AUTH = "checking-auth"
    CHECKING_PIN = "checking-pin"
    LOADING_STORES = "loading-stores"
    RESTORING_STATE = "restoring-state"
    READY = "ready"
    ERROR = "error"


PHASE_ORDER: tuple[InitPhase, ...] = (
    InitPhase.STARTING,
    InitPhase.CHECKING_AUTH,
    InitPhase.CHECKING_PIN,
    InitPhase.LOADING_STORES,
    InitPhase.RESTORING_STATE,
    InitPhase.READY,
)


class InitializationState(BaseModel):
    """
    Snapshot of the sequencer.

    Auth, store and permission fields are only meaningful once the phase
    that produces them has passed; the route guard only reads them when
    `is_ready`.
    """

    phase: InitPhase = InitPhase.STARTING
    error: Optional[str] = Field(None, description="Message of the failure that caused ERROR")
    error_code: Optional[str] = Field(None, description="Code of that failure")
    generation: int = Field(default=0, description="Run that produced this state")

    auth: AuthResolution = UNAUTHENTICATED
    stores: StoreResolution = NO_STORE
    role: Optional[ResolvedRole] = None
    permissions: PermissionSet = Field(default_factory=lambda: permission_set_for(None))

    model_config = ConfigDict(frozen=True)

    @property
    def is_ready(self) -> bool:
        return self.phase is InitPhase.READY

    @property
    def is_error(self) -> bool:
        return self.phase is InitPhase.ERROR

    @property
    def is_initializing(self) -> bool:
        return not (self.is_ready or self.is_error)

    @property
    def auth_type(self) -> AuthType:
        return self.auth.auth_type

    @property
    def current_store(self) -> Optional[Store]:
        return self.stores.current_store
