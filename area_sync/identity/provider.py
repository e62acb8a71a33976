"""
Identity provider abstract interface.
"""

from abc import ABC, abstractmethod

from .types import AuthenticationRequiredError, AuthProvider, UserIdentity


class IdentityProvider(ABC):
    """Abstract current-user provider.

    The sync engine only needs to know who is logged in, to stamp the
    owner of areas it creates while offline.
    """

    @abstractmethod
    async def get_current_identity(self) -> UserIdentity:
        """Get the current user identity.

        Raises:
            AuthenticationRequiredError: If nobody is signed in
        """
        ...

    @abstractmethod
    async def sign_out(self) -> None:
        """Forget the cached identity."""
        ...

    @property
    @abstractmethod
    def provider_type(self) -> AuthProvider:
        """Get the provider type."""
        ...


class StaticIdentityProvider(IdentityProvider):
    """Provider for a host application that already knows the user."""

    def __init__(self, identity: UserIdentity | None = None):
        self._identity = identity

    async def get_current_identity(self) -> UserIdentity:
        if self._identity is None:
            raise AuthenticationRequiredError()
        return self._identity

    async def sign_out(self) -> None:
        self._identity = None

    def sign_in(self, identity: UserIdentity) -> None:
        self._identity = identity

    @property
    def provider_type(self) -> AuthProvider:
        return AuthProvider.STATIC
