"""
Shared infrastructure for the Storefy client core.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- storage: Persistent key-value storage back ends
- models: Identity and role types shared across modules

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import create_supabase_client, get_supabase_client, reset_client_cache
from .exceptions import (
    StorefyError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
)
from .models import IdentitySession, Role, utc_now
from .storage import KeyValueStorage, MemoryStorage, FileStorage

__all__ = [
    "Settings",
    "get_settings",
    "create_supabase_client",
    "get_supabase_client",
    "reset_client_cache",
    "StorefyError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "ExternalServiceError",
    "IdentitySession",
    "Role",
    "utc_now",
    "KeyValueStorage",
    "MemoryStorage",
    "FileStorage",
]
