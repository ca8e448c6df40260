"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


def utc_now() -> datetime:
    """Current time as an aware UTC datetime. Default clock for every module."""
    return datetime.now(timezone.utc)


class Role(str, Enum):
    """Roles a person can hold at a store."""

    OWNER = "owner"
    MANAGER = "manager"
    CASHIER = "cashier"


class IdentitySession(BaseModel):
    """
    A long-lived authenticated principal (owner/manager account).

    Populated from the auth service's session. Read-only for the core:
    it is created on sign-in and destroyed on sign-out or expiry by the
    auth service, never by this package.
    """

    id: str = Field(..., description="Principal ID (UUID from Supabase)")
    email: str = Field(default="", description="Account email address")
    email_verified: bool = Field(default=False, description="Whether email is verified")

    issued_at: Optional[datetime] = Field(None, description="Token issue time")
    expires_at: Optional[datetime] = Field(None, description="Token expiry time")

    model_config = {
        "frozen": True,
        "extra": "ignore",  # Ignore extra fields from JWT
    }
