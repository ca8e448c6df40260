import asyncio
from unittest.mock import MagicMock

import jwt
import pytest

from tests.conftest import TEST_JWT_SECRET, create_test_token, make_identity
from modules.auth.client import (
    InMemoryAuthClient,
    SupabaseAuthClient,
    decode_identity_token,
    identity_from_payload,
)
from modules.auth.exceptions import (
    AuthServiceUnavailableError,
    ExpiredTokenError,
    InvalidTokenError,
)


class TestDecodeIdentityToken:
    def test_verified_decode(self):
        """A token signed with the secret should decode."""
        payload = decode_identity_token(create_test_token(user_id="u1"), TEST_JWT_SECRET)
        assert payload.sub == "u1"
        assert payload.email == "test@example.com"

    def test_wrong_secret(self):
        """A token signed with another secret should be rejected."""
        token = create_test_token(secret="another-secret")
        with pytest.raises(InvalidTokenError):
            decode_identity_token(token, TEST_JWT_SECRET)

    def test_unverified_decode_without_secret(self):
        """Without a secret the claims should be read as-is."""
        token = create_test_token(user_id="u1", secret="whatever-the-server-uses")
        assert decode_identity_token(token).sub == "u1"

    def test_expired(self):
        """Expired tokens should raise ExpiredTokenError with or without a secret."""
        token = create_test_token(expired=True)
        with pytest.raises(ExpiredTokenError):
            decode_identity_token(token, TEST_JWT_SECRET)
        with pytest.raises(ExpiredTokenError):
            decode_identity_token(token)

    def test_wrong_audience(self):
        """Verified decoding should check the audience."""
        token = jwt.encode(
            {"sub": "u1", "aud": "anon", "exp": 9999999999, "iat": 1},
            TEST_JWT_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            decode_identity_token(token, TEST_JWT_SECRET)

    @pytest.mark.parametrize("token", ["", "not-a-token"])
    def test_malformed(self, token):
        """Empty or malformed tokens should raise InvalidTokenError."""
        with pytest.raises(InvalidTokenError):
            decode_identity_token(token)

    def test_missing_claims(self):
        """A token without a subject should raise InvalidTokenError."""
        token = jwt.encode({"exp": 9999999999, "iat": 1}, TEST_JWT_SECRET, algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            decode_identity_token(token)


class TestIdentityFromPayload:
    def test_email_verified_from_claim(self):
        """Email verification should follow email_confirmed_at."""
        verified = decode_identity_token(create_test_token(email_verified=True))
        unverified = decode_identity_token(create_test_token(email_verified=False))
        assert identity_from_payload(verified).email_verified is True
        assert identity_from_payload(unverified).email_verified is False

    def test_explicit_confirmation_wins(self):
        """An explicit confirmation flag should override the claim."""
        payload = decode_identity_token(create_test_token(email_verified=False))
        assert identity_from_payload(payload, email_confirmed=True).email_verified is True

    def test_timestamps_are_aware(self):
        """issued_at and expires_at should be aware UTC datetimes."""
        identity = identity_from_payload(decode_identity_token(create_test_token()))
        assert identity.issued_at.tzinfo is not None
        assert identity.expires_at > identity.issued_at


class TestSupabaseAuthClient:
    @pytest.fixture
    def supabase(self):
        client = MagicMock()
        session = MagicMock()
        session.access_token = create_test_token(user_id="u1")
        session.user.email_confirmed_at = "2025-01-01T00:00:00Z"
        client.auth.get_session.return_value = session
        return client

    @pytest.fixture
    def auth_client(self, supabase):
        return SupabaseAuthClient(supabase, jwt_secret=TEST_JWT_SECRET)

    @pytest.mark.asyncio
    async def test_get_current_identity(self, auth_client):
        """The SDK session should map to an IdentitySession."""
        identity = await auth_client.get_current_identity()
        assert identity.id == "u1"
        assert identity.email_verified is True

    @pytest.mark.asyncio
    async def test_no_session(self, auth_client, supabase):
        """No SDK session should mean no identity."""
        supabase.auth.get_session.return_value = None
        assert await auth_client.get_current_identity() is None

    @pytest.mark.asyncio
    async def test_expired_token_means_signed_out(self, auth_client, supabase):
        """An expired access token should read as no identity."""
        supabase.auth.get_session.return_value.access_token = create_test_token(expired=True)
        assert await auth_client.get_current_identity() is None

    @pytest.mark.asyncio
    async def test_unreadable_token_means_signed_out(self, auth_client, supabase):
        """A garbage access token should read as no identity."""
        supabase.auth.get_session.return_value.access_token = "garbage"
        assert await auth_client.get_current_identity() is None

    @pytest.mark.asyncio
    async def test_sdk_failure_raises_unavailable(self, auth_client, supabase):
        """SDK errors should surface as AuthServiceUnavailableError."""
        supabase.auth.get_session.side_effect = ConnectionError("offline")
        with pytest.raises(AuthServiceUnavailableError) as exc_info:
            await auth_client.get_current_identity()
        assert exc_info.value.service == "supabase_auth"

    @pytest.mark.asyncio
    async def test_wait_until_ready(self, auth_client, supabase):
        """Readiness should be established once."""
        await auth_client.wait_until_ready()
        await auth_client.wait_until_ready()
        supabase.auth.get_session.assert_called_once()

    @pytest.mark.asyncio
    async def test_wait_until_ready_failure(self, auth_client, supabase):
        """A failing bootstrap should raise AuthServiceUnavailableError."""
        supabase.auth.get_session.side_effect = RuntimeError("boom")
        with pytest.raises(AuthServiceUnavailableError):
            await auth_client.wait_until_ready()

    def test_on_identity_change(self, auth_client, supabase):
        """SDK auth events should be forwarded as identities."""
        callback = MagicMock()
        unsubscribe = auth_client.on_identity_change(callback)

        handler = supabase.auth.on_auth_state_change.call_args.args[0]
        handler("SIGNED_OUT", None)

        callback.assert_called_once_with(None)
        assert unsubscribe is supabase.auth.on_auth_state_change.return_value.unsubscribe

    @pytest.mark.asyncio
    async def test_sign_out(self, auth_client, supabase):
        """sign_out should call the SDK."""
        await auth_client.sign_out()
        supabase.auth.sign_out.assert_called_once()


class TestInMemoryAuthClient:
    @pytest.mark.asyncio
    async def test_identity(self):
        """The configured identity should be returned."""
        client = InMemoryAuthClient(make_identity("u1"))
        await client.wait_until_ready()
        assert (await client.get_current_identity()).id == "u1"

    @pytest.mark.asyncio
    async def test_loading_blocks_until_finished(self):
        """wait_until_ready should block while loading."""
        client = InMemoryAuthClient(loading=True)
        waiter = asyncio.ensure_future(client.wait_until_ready())
        await asyncio.sleep(0)
        assert not waiter.done()

        client.finish_loading()
        await asyncio.wait_for(waiter, timeout=1)

    @pytest.mark.asyncio
    async def test_sign_in_and_out_notify(self):
        """Listeners should see sign-in and sign-out."""
        client = InMemoryAuthClient()
        callback = MagicMock()
        client.on_identity_change(callback)

        client.sign_in(make_identity("u1"))
        await client.sign_out()

        assert callback.call_args_list[0].args[0].id == "u1"
        assert callback.call_args_list[1].args[0] is None
        assert client.identity is None
