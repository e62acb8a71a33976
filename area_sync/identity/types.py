"""
Identity types and data classes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class AuthProvider(Enum):
    """Supported identity sources."""

    CONFIG = "config"  # Local settings file
    STATIC = "static"  # Supplied by the host application


@dataclass
class UserIdentity:
    """Identity of the logged-in user.

    Stamped as owner onto areas created while offline.
    """

    user_id: str
    display_name: str
    email: str | None = None
    org_id: str | None = None
    auth_provider: AuthProvider = AuthProvider.CONFIG
    auth_token: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "user_id": self.user_id,
            "display_name": self.display_name,
            "email": self.email,
            "org_id": self.org_id,
            "auth_provider": self.auth_provider.value,
            # Note: auth_token intentionally excluded
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserIdentity":
        """Deserialize from dictionary."""
        return cls(
            user_id=data["user_id"],
            display_name=data.get("display_name", data["user_id"]),
            email=data.get("email"),
            org_id=data.get("org_id"),
            auth_provider=AuthProvider(data.get("auth_provider", "config")),
        )


class AuthenticationRequiredError(Exception):
    """Raised when no user is signed in."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)
        self.message = message
