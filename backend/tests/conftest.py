"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest
from datetime import datetime, timezone, timedelta
from typing import Optional
import jwt  # PyJWT

from client.dependencies import reset_container
from modules.session.models import PinSessionFields
from modules.session.service import PinSessionStore
from modules.session.vault import SessionVault
from modules.stores.models import Store
from shared.config import Settings, get_settings
from shared.models import IdentitySession, Role
from shared.storage import MemoryStorage


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"

START_TIME = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    expired: bool = False,
    email_verified: bool = True,
    secret: str = TEST_JWT_SECRET,
) -> str:
    """
    Create a test Supabase access token.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        expired: If True, creates an expired token
        email_verified: Whether the email should be marked as confirmed
        secret: Signing secret

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "email": email,
        "email_confirmed_at": now.isoformat() if email_verified else None,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm="HS256")


class FakeClock:
    """Controllable clock; call it to read the time."""

    def __init__(self, start: datetime = START_TIME):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        """Move forward by timedelta(**kwargs)."""
        self.now = self.now + timedelta(**kwargs)
        return self.now


def make_store(
    store_id: str = "s1",
    name: str = "Main St",
    role: Optional[Role] = Role.OWNER,
    owner_id: Optional[str] = None,
) -> Store:
    return Store(id=store_id, name=name, role=role, owner_id=owner_id)


def make_identity(user_id: str = "u1", email_verified: bool = True) -> IdentitySession:
    return IdentitySession(
        id=user_id,
        email=f"{user_id}@example.com",
        email_verified=email_verified,
    )


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached settings and the service container around each test."""
    get_settings.cache_clear()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_container()


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        supabase_url="https://test.supabase.co",
        supabase_anon_key="test-anon-key",
        storage_path="/tmp/storefy-test-unused.json",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def vault(storage: MemoryStorage) -> SessionVault:
    return SessionVault(storage)


@pytest.fixture
def pin_store(vault: SessionVault, settings: Settings, clock: FakeClock) -> PinSessionStore:
    return PinSessionStore(vault, settings=settings, clock=clock)


@pytest.fixture
def pin_fields() -> PinSessionFields:
    return PinSessionFields(
        member_id="m1",
        user_id="u1",
        store_id="s1",
        role=Role.CASHIER,
        name="Thandi",
        store_name="Main St",
    )


@pytest.fixture
def identity() -> IdentitySession:
    return make_identity("u1")
