"""Tests for modules/permissions/resolver.py."""

import pytest

from tests.conftest import make_identity, make_store
from modules.auth.models import AuthResolution, AuthType, UNAUTHENTICATED
from modules.permissions.models import Page
from modules.permissions.resolver import PermissionResolver
from modules.permissions.table import PERMISSION_TABLE_VERSION
from shared.models import Role


@pytest.fixture
def resolver():
    return PermissionResolver()


def identity_auth(user_id="u1"):
    return AuthResolution(auth_type=AuthType.IDENTITY, identity=make_identity(user_id))


class TestResolveRole:
    def test_no_store(self, resolver):
        """Without a store there is no role."""
        assert resolver.resolve_role(identity_auth(), None) is None

    def test_unauthenticated(self, resolver):
        """Nobody signed in has no role."""
        assert resolver.resolve_role(UNAUTHENTICATED, make_store()) is None

    def test_identity_membership_role(self, resolver):
        """The membership role at the store should be used."""
        role = resolver.resolve_role(identity_auth(), make_store(role=Role.MANAGER, owner_id="u9"))
        assert role.role is Role.MANAGER
        assert role.is_owner is False
        assert role.member_name == "u1@example.com"

    def test_identity_owning_store(self, resolver):
        """Owning the store should make the identity owner."""
        role = resolver.resolve_role(identity_auth(), make_store(role=Role.CASHIER, owner_id="u1"))
        assert role.role is Role.OWNER
        assert role.is_owner is True

    def test_identity_without_membership_role(self, resolver):
        """A store without a role for the identity should give no role."""
        assert resolver.resolve_role(identity_auth(), make_store(role=None)) is None

    def test_pin_role(self, resolver, pin_store, pin_fields):
        """PIN sessions should use their own role and member details."""
        session = pin_store.create_pin_session(pin_fields)
        auth = AuthResolution(auth_type=AuthType.PIN, pin_session=session)

        role = resolver.resolve_role(auth, make_store(role=Role.OWNER))

        assert role.role is Role.CASHIER
        assert role.member_id == "m1"
        assert role.member_name == "Thandi"
        assert role.is_owner is False


class TestCompute:
    def test_compute_for_role(self, resolver):
        """compute should follow the static table."""
        role = resolver.resolve_role(identity_auth(), make_store(role=Role.CASHIER))
        permissions = resolver.compute(role)
        assert permissions.can_access_page(Page.POS)
        assert not permissions.can_access_page(Page.REPORTS)

    def test_compute_without_role(self, resolver):
        """No role should give an empty set."""
        assert resolver.compute(None).pages == frozenset()

    def test_resolve_is_synchronous_with_role(self, resolver):
        """resolve should return a role and the matching permission set together."""
        role, permissions = resolver.resolve(identity_auth(), make_store(role=Role.OWNER))
        assert role.role is Role.OWNER
        assert permissions.role is Role.OWNER
        assert permissions.can_access_page(Page.SETTINGS)

    def test_table_version(self, resolver):
        """The resolver should expose the table version."""
        assert resolver.table_version == PERMISSION_TABLE_VERSION
