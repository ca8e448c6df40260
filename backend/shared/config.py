"""
Centralized configuration for the Storefy client core.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings are namespaced by prefix (e.g., SUPABASE_*, PIN_SESSION_*).
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Storefy"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Supabase (end-user client, RLS applies)
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_jwt_secret: Optional[str] = None

    # Persistent key-value storage
    storage_path: str = "~/.storefy/session.json"

    # PIN sessions
    pin_session_ttl_minutes: int = 480  # one work shift
    session_warning_minutes: int = 5
    session_check_interval_seconds: float = 60.0
    activity_throttle_seconds: float = 30.0

    # Backend call bounds
    store_load_timeout_seconds: float = 20.0
    auth_ready_timeout_seconds: float = 20.0

    # Route guard
    landing_path: str = "/"
    store_selection_path: str = "/stores"
    pin_login_path: str = "/pin-login"
    auth_path: str = "/auth"
    verify_email_path: str = "/verify-email"
    fallback_path: str = "/dashboard"
    show_unauthorized_message: bool = True
    require_email_verification: bool = True

    # Feature Flags
    enable_security_audit: bool = True


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
