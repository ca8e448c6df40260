"""Tests for modules/session/models.py."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from modules.session.models import PinSession, PinSessionFields, StoreSelection
from shared.models import Role


NOW = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def session() -> PinSession:
    return PinSession(
        member_id="m1",
        store_id="s1",
        role=Role.MANAGER,
        name="Sipho",
        store_name="Main St",
        login_time=NOW,
        last_activity=NOW,
        expires_at=NOW + timedelta(hours=8),
    )


class TestPinSession:
    def test_is_expired(self, session):
        """Expired only strictly after expires_at."""
        assert not session.is_expired(NOW + timedelta(hours=8))
        assert session.is_expired(NOW + timedelta(hours=8, microseconds=1))

    def test_seconds_left(self, session):
        """seconds_left should count down to expiry."""
        assert session.seconds_left(NOW + timedelta(hours=7)) == 3600

    def test_session_key_ignores_activity(self, session):
        """Refreshes should not change the session key."""
        refreshed = session.model_copy(update={"last_activity": NOW + timedelta(hours=1)})
        assert refreshed.session_key == session.session_key

    def test_frozen(self, session):
        """PIN sessions are immutable values."""
        with pytest.raises(ValidationError):
            session.store_id = "s2"


class TestPinSessionFields:
    def test_requires_store(self):
        """A PIN session must be bound to a store."""
        with pytest.raises(ValidationError):
            PinSessionFields(
                member_id="m1", store_id="", role=Role.CASHIER, name="x", store_name="y"
            )


class TestStoreSelection:
    def test_populate_by_alias_or_name(self):
        """Both wire names and field names should be accepted."""
        by_alias = StoreSelection.model_validate({"storeId": "s1", "userId": "u1"})
        by_name = StoreSelection(store_id="s1", user_id="u1")
        assert by_alias == by_name

    def test_belongs_to(self):
        """belongs_to should compare the owning identity."""
        selection = StoreSelection(store_id="s1", user_id="u1")
        assert selection.belongs_to("u1")
        assert not selection.belongs_to("u2")

    def test_legacy_excluded_from_dump(self):
        """The legacy marker is not part of the wire format."""
        selection = StoreSelection(store_id="s1", legacy=True)
        assert "legacy" not in selection.model_dump(by_alias=True)
