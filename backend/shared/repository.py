"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and providing shared utilities for data operations.
"""

from typing import TypeVar, Generic
from supabase import Client


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints

    Subclasses implement domain-specific data access methods and handle
    dict-to-Pydantic model mapping internally. Repository methods are
    synchronous; services decide how to schedule them.

    Example:
        class StoreRepository(BaseRepository[Store]):
            def get_store(self, store_id: str) -> Optional[Store]:
                result = self._db.table("stores").select("*").eq("id", store_id).execute()
                if not result.data:
                    return None
                return self._map_to_store(result.data[0])
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db
