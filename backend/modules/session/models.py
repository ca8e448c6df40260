"""
Session module data models.

These models mirror the records persisted in the device's key-value
storage and the values the Session Store hands to the resolvers.
"""

from datetime import datetime
from typing import Optional

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from shared.models import Role


class PinSessionFields(BaseModel):
    """Fields supplied by the PIN-entry flow when a cashier logs in."""

    member_id: str = Field(..., min_length=1, description="Store member ID")
    user_id: Optional[str] = Field(
        None, description="Account that set up the till (store owner)"
    )
    store_id: str = Field(..., min_length=1, description="Store the session is bound to")
    role: Role = Field(..., description="Member role at the store")
    name: str = Field(..., description="Member display name")
    store_name: str = Field(..., description="Store display name")
    login_time: Optional[AwareDatetime] = Field(
        None, description="Login time (defaults to now)"
    )


class PinSession(BaseModel):
    """
    A short-lived, store-scoped login on a shared device.

    Always bound to exactly one store. Persisted under the `pin_session`
    key; every timestamp is an aware UTC datetime.
    """

    member_id: str = Field(..., min_length=1)
    user_id: Optional[str] = None
    store_id: str = Field(..., min_length=1)
    role: Role
    name: str
    store_name: str
    login_time: AwareDatetime
    last_activity: AwareDatetime
    expires_at: AwareDatetime

    model_config = ConfigDict(frozen=True, extra="ignore")

    def is_expired(self, now: datetime) -> bool:
        """A session is dead once now is past its absolute expiry."""
        return now > self.expires_at

    def seconds_left(self, now: datetime) -> float:
        return (self.expires_at - now).total_seconds()

    @property
    def session_key(self) -> tuple[str, str]:
        """Identifies one login, independent of activity extensions."""
        return (self.member_id, self.login_time.isoformat())


class StoreSelection(BaseModel):
    """
    The store an identity-authenticated user last chose.

    Persisted under `storefy_selected_store` as
    `{"storeId": ..., "userId": ..., "timestamp": <epoch ms>}`. Older
    clients wrote the bare store ID; such records decode with
    `legacy=True` and no owning identity.
    """

    store_id: str = Field(..., alias="storeId", min_length=1)
    user_id: Optional[str] = Field(None, alias="userId")
    timestamp: int = Field(0, description="Selection time, epoch milliseconds")
    legacy: bool = Field(default=False, exclude=True)

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    def belongs_to(self, identity_id: str) -> bool:
        return self.user_id == identity_id


class SessionEnvelope(BaseModel):
    """
    Everything the core persists, read and written as one value.

    The envelope is the only path to the storage keys, so a store
    selection can never be written without the PIN session state it was
    read alongside, and vice versa.
    """

    version: int = 2
    pin_session: Optional[PinSession] = None
    store_selection: Optional[StoreSelection] = None

    model_config = ConfigDict(frozen=True)


class SessionInfo(BaseModel):
    """Debug snapshot of the PIN session state."""

    has_pin_session: bool
    pin_expires_at: Optional[datetime] = None
    minutes_left: Optional[int] = None
    last_activity: Optional[datetime] = None
