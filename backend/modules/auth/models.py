"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from shared.models import IdentitySession
from modules.session.models import PinSession


class AuthType(str, Enum):
    """Which kind of principal is currently acting."""

    NONE = "none"
    IDENTITY = "identity"  # owner/manager account
    PIN = "pin"  # cashier on a shared till


class JWTPayload(BaseModel):
    """
    Decoded access token payload from Supabase.

    This matches the structure of Supabase Auth JWTs.
    """

    sub: str = Field(..., description="Subject (user ID)")
    email: Optional[str] = Field(None, description="User's email")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")
    aud: str = Field(default="authenticated", description="Audience")
    role: str = Field(default="authenticated", description="Postgres role")
    email_confirmed_at: Optional[str] = Field(None, description="Email confirmation time")

    # Supabase-specific claims
    app_metadata: dict = Field(default_factory=dict)
    user_metadata: dict = Field(default_factory=dict)


class AuthResolution(BaseModel):
    """
    Outcome of auth classification.

    For PIN sessions `identity` may still be set: the owner's account can
    stay signed in in the background while a cashier uses the till.
    """

    auth_type: AuthType = Field(..., description="Normalized auth state")
    identity: Optional[IdentitySession] = Field(None, description="Identity session, if any")
    pin_session: Optional[PinSession] = Field(None, description="PIN session, if acting")

    model_config = {"frozen": True}

    @property
    def identity_id(self) -> Optional[str]:
        return self.identity.id if self.identity is not None else None

    @property
    def is_authenticated(self) -> bool:
        return self.auth_type is not AuthType.NONE


UNAUTHENTICATED = AuthResolution(auth_type=AuthType.NONE)
