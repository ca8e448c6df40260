"""Tests for shared/config.py."""

from unittest.mock import patch
import os

from shared.config import Settings, get_settings


class TestSettings:
    def test_default_values(self):
        """Settings should have sensible defaults."""
        settings = Settings(_env_file=None)
        assert settings.app_name == "Storefy"
        assert settings.debug is False
        assert settings.app_version == "0.1.0"
        assert settings.storage_path == "~/.storefy/session.json"
        assert settings.enable_security_audit is True

    def test_session_defaults(self):
        """PIN session timing should default to one shift with a 5 minute warning."""
        settings = Settings(_env_file=None)
        assert settings.pin_session_ttl_minutes == 480
        assert settings.session_warning_minutes == 5
        assert settings.session_check_interval_seconds == 60.0
        assert settings.activity_throttle_seconds == 30.0

    def test_timeouts_within_recommended_bounds(self):
        """Backend call bounds should default to between 15 and 30 seconds."""
        settings = Settings(_env_file=None)
        assert 15 <= settings.store_load_timeout_seconds <= 30
        assert 15 <= settings.auth_ready_timeout_seconds <= 30

    def test_route_defaults(self):
        """Route guard paths should have defaults."""
        settings = Settings(_env_file=None)
        assert settings.landing_path == "/"
        assert settings.store_selection_path == "/stores"
        assert settings.pin_login_path == "/pin-login"
        assert settings.fallback_path == "/dashboard"
        assert settings.show_unauthorized_message is True
        assert settings.require_email_verification is True

    def test_loads_from_env(self):
        """Settings should load from environment variables."""
        with patch.dict(os.environ, {"DEBUG": "true", "PIN_SESSION_TTL_MINUTES": "60"}):
            settings = Settings(_env_file=None)
            assert settings.debug is True
            assert settings.pin_session_ttl_minutes == 60

    def test_loads_supabase_config_from_env(self):
        """Settings should load Supabase configuration from environment variables."""
        with patch.dict(os.environ, {
            "SUPABASE_URL": "https://test.supabase.co",
            "SUPABASE_ANON_KEY": "test-anon-key",
            "SUPABASE_JWT_SECRET": "test-secret",
        }):
            settings = Settings(_env_file=None)
            assert settings.supabase_url == "https://test.supabase.co"
            assert settings.supabase_anon_key == "test-anon-key"
            assert settings.supabase_jwt_secret == "test-secret"

    def test_env_is_case_insensitive(self):
        """Lower-case variable names should work too."""
        with patch.dict(os.environ, {"show_unauthorized_message": "false"}):
            settings = Settings(_env_file=None)
            assert settings.show_unauthorized_message is False


class TestGetSettings:
    def test_get_settings_returns_settings_instance(self):
        """get_settings should return a Settings instance."""
        get_settings.cache_clear()
        settings = get_settings()
        assert isinstance(settings, Settings)

    def test_get_settings_is_cached(self):
        """get_settings should return the same instance."""
        get_settings.cache_clear()
        assert get_settings() is get_settings()
