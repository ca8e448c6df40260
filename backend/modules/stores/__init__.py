"""
Stores module.

Loads the stores a principal can act on and resolves the current store.

Public API:
- IStoreDataService: Interface for store data access
- InMemoryStoreService / SupabaseStoreService: Implementations
- StoreRepository: Supabase queries for stores and memberships
- StoreResolver: Selection restore, auto-select and explicit choice
- Models: Store, StoreResolution, SelectionSource
"""

from .interfaces import IStoreDataService
from .models import Store, StoreResolution, SelectionSource, NO_STORE
from .exceptions import (
    StoreLoadError,
    StaleSelectionError,
    StoreNotFoundError,
    StoreSelectionNotAllowedError,
)
from .repository import StoreRepository
from .service import InMemoryStoreService, SupabaseStoreService
from .resolver import StoreResolver

__all__ = [
    # Interface
    "IStoreDataService",
    # Models
    "Store",
    "StoreResolution",
    "SelectionSource",
    "NO_STORE",
    # Exceptions
    "StoreLoadError",
    "StaleSelectionError",
    "StoreNotFoundError",
    "StoreSelectionNotAllowedError",
    # Implementations
    "StoreRepository",
    "InMemoryStoreService",
    "SupabaseStoreService",
    "StoreResolver",
]
