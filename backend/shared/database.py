"""
Database client factory for Supabase.

The Storefy core runs on the end user's device, so it only ever talks to
Supabase with the public anon key. Row Level Security is the real
authorization boundary; nothing here bypasses it.
"""

from typing import Optional
from supabase import create_client, Client

from .config import Settings, get_settings

# Module-level client cache
_client: Optional[Client] = None


def create_supabase_client(settings: Settings) -> Client:
    """
    Build a Supabase client from the given settings.

    The client keeps the signed-in user's session, so every query it makes
    is scoped by RLS to that user.

    Raises:
        RuntimeError: If the URL or anon key is not configured
    """
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise RuntimeError(
            "Supabase configuration missing. "
            "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables."
        )
    return create_client(
        settings.supabase_url,
        settings.supabase_anon_key,
    )


def get_supabase_client() -> Client:
    """
    Get the process-wide Supabase client built from the global settings.

    Returns:
        Supabase client configured with the anon key
    """
    global _client

    if _client is None:
        _client = create_supabase_client(get_settings())

    return _client


def reset_client_cache() -> None:
    """
    Reset the cached database client.

    Useful for testing or when configuration changes.
    """
    global _client
    _client = None
