"""
Current-user identity for the area sync layer.
"""

from .config_provider import ConfigFileIdentityProvider
from .provider import IdentityProvider, StaticIdentityProvider
from .types import AuthenticationRequiredError, AuthProvider, UserIdentity

__all__ = [
    "AuthProvider",
    "UserIdentity",
    "AuthenticationRequiredError",
    "IdentityProvider",
    "StaticIdentityProvider",
    "ConfigFileIdentityProvider",
]
