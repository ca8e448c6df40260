"""
Authentication module.

Reads the identity session from the hosted auth service and classifies
the current auth state.

Public API:
- IAuthClient: Interface to the auth service
- SupabaseAuthClient / InMemoryAuthClient: Implementations
- AuthResolver: none / identity / pin classification
- Models: AuthType, AuthResolution, JWTPayload
- Auth exceptions: InvalidTokenError, ExpiredTokenError, AuthServiceUnavailableError
"""

from .interfaces import IAuthClient, IdentityListener
from .models import AuthType, AuthResolution, JWTPayload, UNAUTHENTICATED
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    AuthServiceUnavailableError,
)
from .client import (
    SupabaseAuthClient,
    InMemoryAuthClient,
    decode_identity_token,
    identity_from_payload,
)
from .resolver import AuthResolver

__all__ = [
    # Interface
    "IAuthClient",
    "IdentityListener",
    # Models
    "AuthType",
    "AuthResolution",
    "JWTPayload",
    "UNAUTHENTICATED",
    # Exceptions
    "InvalidTokenError",
    "ExpiredTokenError",
    "AuthServiceUnavailableError",
    # Implementations
    "SupabaseAuthClient",
    "InMemoryAuthClient",
    "decode_identity_token",
    "identity_from_payload",
    "AuthResolver",
]
