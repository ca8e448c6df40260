"""Tests for shared/database.py."""

from unittest.mock import MagicMock, patch

import pytest

from shared.database import create_supabase_client, get_supabase_client, reset_client_cache


@pytest.fixture
def create_client():
    reset_client_cache()
    with patch("shared.database.create_client") as mock_create:
        mock_create.side_effect = lambda url, key: MagicMock(name=f"client:{url}")
        yield mock_create
    reset_client_cache()


def use_settings(settings, **overrides):
    return patch(
        "shared.database.get_settings",
        return_value=settings.model_copy(update=overrides),
    )


class TestCreateSupabaseClient:
    def test_uses_given_settings(self, create_client, settings):
        """The given settings are used as is, without the global ones."""
        settings = settings.model_copy(update={"supabase_url": "https://shop.supabase.co"})
        with patch("shared.database.get_settings", side_effect=AssertionError):
            create_supabase_client(settings)

        create_client.assert_called_once_with("https://shop.supabase.co", "test-anon-key")

    def test_not_cached(self, create_client, settings):
        assert create_supabase_client(settings) is not create_supabase_client(settings)

    def test_missing_configuration(self, create_client, settings):
        with pytest.raises(RuntimeError, match="SUPABASE_URL"):
            create_supabase_client(settings.model_copy(update={"supabase_url": ""}))


class TestGetSupabaseClient:
    def test_built_with_anon_key(self, create_client, settings):
        """The device client only ever uses the public anon key."""
        with use_settings(settings):
            get_supabase_client()

        create_client.assert_called_once_with("https://test.supabase.co", "test-anon-key")

    def test_shared_between_callers(self, create_client, settings):
        """Auth and store services should share one client and its session."""
        with use_settings(settings):
            assert get_supabase_client() is get_supabase_client()
        assert create_client.call_count == 1

    @pytest.mark.parametrize(
        "overrides",
        [{"supabase_url": ""}, {"supabase_anon_key": ""}],
    )
    def test_missing_configuration(self, create_client, settings, overrides):
        with use_settings(settings, **overrides):
            with pytest.raises(RuntimeError, match="SUPABASE_URL and SUPABASE_ANON_KEY"):
                get_supabase_client()
        create_client.assert_not_called()

    def test_reset_builds_new_client(self, create_client, settings):
        """After reset the next call picks up changed configuration."""
        with use_settings(settings):
            first = get_supabase_client()
        reset_client_cache()
        with use_settings(settings, supabase_url="https://other.supabase.co"):
            second = get_supabase_client()

        assert first is not second
        assert create_client.call_args.args[0] == "https://other.supabase.co"
