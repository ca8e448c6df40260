"""
Session module.

Persists the PIN session and the store selection in device storage and
tracks PIN session expiry.

Public API:
- IPinSessionStore: Interface for PIN session operations
- PinSessionStore: Storage-backed implementation
- SessionVault: Single read/write path for persisted session state
- SessionMonitor / ActivityTracker: Expiry polling and activity renewal
- Models: PinSession, PinSessionFields, StoreSelection, SessionEnvelope, SessionInfo
"""

from .interfaces import IPinSessionStore
from .models import (
    PinSession,
    PinSessionFields,
    StoreSelection,
    SessionEnvelope,
    SessionInfo,
)
from .exceptions import (
    SessionError,
    SessionDecodeError,
    PinSessionExpiredError,
    NoPinSessionError,
)
from .vault import (
    SessionVault,
    PIN_SESSION_KEY,
    STORE_SELECTION_KEY,
    ENVELOPE_VERSION_KEY,
    decode_pin_session,
    decode_store_selection,
)
from .service import PinSessionStore
from .monitor import SessionMonitor, ActivityTracker

__all__ = [
    # Interface
    "IPinSessionStore",
    # Models
    "PinSession",
    "PinSessionFields",
    "StoreSelection",
    "SessionEnvelope",
    "SessionInfo",
    # Exceptions
    "SessionError",
    "SessionDecodeError",
    "PinSessionExpiredError",
    "NoPinSessionError",
    # Persistence
    "SessionVault",
    "PIN_SESSION_KEY",
    "STORE_SELECTION_KEY",
    "ENVELOPE_VERSION_KEY",
    "decode_pin_session",
    "decode_store_selection",
    # Service
    "PinSessionStore",
    "SessionMonitor",
    "ActivityTracker",
]
