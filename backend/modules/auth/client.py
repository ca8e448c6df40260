"""
Auth service clients.

Provides both in-memory (for testing and offline diagnostics) and
Supabase-backed (for production) implementations of IAuthClient.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

import jwt
from supabase import Client

from shared.models import IdentitySession

from .exceptions import AuthServiceUnavailableError, ExpiredTokenError, InvalidTokenError
from .interfaces import IdentityListener
from .models import JWTPayload

logger = logging.getLogger(__name__)


def decode_identity_token(token: str, jwt_secret: Optional[str] = None) -> JWTPayload:
    """
    Decode a Supabase access token.

    With a JWT secret the signature and audience are verified. Without
    one the claims are read as-is, like a browser SDK does; the token is
    still rejected once expired.

    Raises:
        InvalidTokenError: If the token is missing or malformed
        ExpiredTokenError: If the token has expired
    """
    if not token:
        raise InvalidTokenError("Missing access token")

    try:
        if jwt_secret:
            payload = jwt.decode(
                token,
                jwt_secret,
                algorithms=["HS256"],
                audience="authenticated",
            )
        else:
            payload = jwt.decode(
                token,
                options={
                    "verify_signature": False,
                    "verify_exp": True,
                    "verify_aud": False,
                },
            )
        return JWTPayload(**payload)

    except jwt.ExpiredSignatureError:
        raise ExpiredTokenError()
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError(str(e))
    except (TypeError, ValueError) as e:
        # Decodes, but the claims don't fit JWTPayload
        raise InvalidTokenError(str(e))


def identity_from_payload(
    payload: JWTPayload,
    email_confirmed: Optional[bool] = None,
) -> IdentitySession:
    """Build the core's IdentitySession from decoded token claims."""
    if email_confirmed is None:
        email_confirmed = payload.email_confirmed_at is not None
    return IdentitySession(
        id=payload.sub,
        email=payload.email or "",
        email_verified=email_confirmed,
        issued_at=datetime.fromtimestamp(payload.iat, tz=timezone.utc),
        expires_at=datetime.fromtimestamp(payload.exp, tz=timezone.utc),
    )


class SupabaseAuthClient:
    """
    IAuthClient backed by supabase-py's auth client.

    The SDK restores the persisted session when the client is created;
    the first successful get_session() call marks the client ready.
    """

    def __init__(self, client: Client, jwt_secret: Optional[str] = None):
        self._client = client
        self._jwt_secret = jwt_secret
        self._ready = False

    async def wait_until_ready(self) -> None:
        if self._ready:
            return
        try:
            await asyncio.to_thread(self._client.auth.get_session)
        except Exception as e:
            raise AuthServiceUnavailableError(str(e)) from e
        self._ready = True

    async def get_current_identity(self) -> Optional[IdentitySession]:
        try:
            session = await asyncio.to_thread(self._client.auth.get_session)
        except Exception as e:
            raise AuthServiceUnavailableError(str(e)) from e
        self._ready = True
        return self._identity_from_session(session)

    def on_identity_change(self, callback: IdentityListener) -> Callable[[], None]:
        def handle(event: Any, session: Any) -> None:
            logger.debug(f"Auth state changed: {event}")
            callback(self._identity_from_session(session))

        subscription = self._client.auth.on_auth_state_change(handle)
        return subscription.unsubscribe

    async def sign_out(self) -> None:
        try:
            await asyncio.to_thread(self._client.auth.sign_out)
        except Exception as e:
            raise AuthServiceUnavailableError(str(e)) from e
        logger.info("Identity session signed out")

    def _identity_from_session(self, session: Any) -> Optional[IdentitySession]:
        if session is None or not getattr(session, "access_token", None):
            return None
        try:
            payload = decode_identity_token(session.access_token, self._jwt_secret)
        except ExpiredTokenError:
            logger.debug("Stored identity token has expired")
            return None
        except InvalidTokenError as e:
            logger.warning(f"Ignoring unreadable identity token: {e.message}")
            return None

        user = getattr(session, "user", None)
        email_confirmed = None
        if user is not None:
            email_confirmed = getattr(user, "email_confirmed_at", None) is not None
        return identity_from_payload(payload, email_confirmed=email_confirmed)


class InMemoryAuthClient:
    """
    IAuthClient with the identity held in memory.

    For testing and development. Set `loading=True` to simulate an auth
    service that is still restoring its session; call finish_loading()
    to release waiters.
    """

    def __init__(
        self,
        identity: Optional[IdentitySession] = None,
        loading: bool = False,
    ):
        self._identity = identity
        self._listeners: list[IdentityListener] = []
        self._ready = asyncio.Event()
        if not loading:
            self._ready.set()

    @property
    def identity(self) -> Optional[IdentitySession]:
        return self._identity

    def finish_loading(self) -> None:
        self._ready.set()

    async def wait_until_ready(self) -> None:
        await self._ready.wait()

    async def get_current_identity(self) -> Optional[IdentitySession]:
        return self._identity

    def on_identity_change(self, callback: IdentityListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def sign_in(self, identity: IdentitySession) -> None:
        self._identity = identity
        self._notify()

    async def sign_out(self) -> None:
        self._identity = None
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._identity)
