"""
Authentication module interface.

The resolvers depend on IAuthClient, not on the Supabase SDK. This
enables testing with in-memory clients and swapping the auth backend.
"""

from typing import Callable, Optional, Protocol, runtime_checkable

from shared.models import IdentitySession

IdentityListener = Callable[[Optional[IdentitySession]], None]


@runtime_checkable
class IAuthClient(Protocol):
    """
    Interface to the hosted auth service.

    This protocol defines the contract the core consumes. Implementations
    must provide all these methods.
    """

    async def wait_until_ready(self) -> None:
        """
        Wait for the auth service's own bootstrap (session restore) to finish.

        Raises:
            AuthServiceUnavailableError: If the bootstrap fails
        """
        ...

    async def get_current_identity(self) -> Optional[IdentitySession]:
        """
        Get the signed-in identity.

        Returns:
            IdentitySession if a live session exists, None otherwise
        """
        ...

    def on_identity_change(self, callback: IdentityListener) -> Callable[[], None]:
        """
        Subscribe to sign-in, sign-out and token refresh events.

        Args:
            callback: Called with the new identity (None after sign-out)

        Returns:
            Function that cancels the subscription
        """
        ...

    async def sign_out(self) -> None:
        """End the identity session."""
        ...
