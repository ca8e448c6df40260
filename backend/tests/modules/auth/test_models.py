from modules.auth.models import AuthResolution, AuthType, JWTPayload, UNAUTHENTICATED
from shared.models import IdentitySession


class TestAuthType:
    def test_values(self):
        """AuthType should expose the three normalized states."""
        assert [t.value for t in AuthType] == ["none", "identity", "pin"]


class TestAuthResolution:
    def test_unauthenticated(self):
        """The unauthenticated constant should carry no principal."""
        assert UNAUTHENTICATED.auth_type is AuthType.NONE
        assert UNAUTHENTICATED.identity_id is None
        assert UNAUTHENTICATED.is_authenticated is False

    def test_identity(self):
        """identity_id should come from the identity session."""
        resolution = AuthResolution(
            auth_type=AuthType.IDENTITY, identity=IdentitySession(id="u1")
        )
        assert resolution.identity_id == "u1"
        assert resolution.is_authenticated is True


class TestJWTPayload:
    def test_defaults(self):
        """Supabase claim defaults should apply."""
        payload = JWTPayload(sub="u1", exp=2, iat=1)
        assert payload.aud == "authenticated"
        assert payload.email is None
        assert payload.email_confirmed_at is None
        assert payload.app_metadata == {}
