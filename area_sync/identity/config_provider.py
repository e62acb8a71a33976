"""
Config file identity provider.

Reads the current user from a local settings file, for offline-first usage.
"""

import getpass
import logging
import uuid
from pathlib import Path
from typing import Any

import yaml

from .provider import IdentityProvider
from .types import AuthProvider, UserIdentity

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".area_sync" / "settings.yaml"


class ConfigFileIdentityProvider(IdentityProvider):
    """Identity provider that reads from local config.

    Configuration in ~/.area_sync/settings.yaml:

    ```yaml
    identity:
      user_id: "user-abc123"
      display_name: "Alice Surveyor"
      email: "alice@example.com"
      org_id: "org-xyz"
      auth_token: "..."  # Optional
    ```

    If the identity section is missing, a local identity is generated from
    a persistent device ID stored next to the settings file.
    """

    def __init__(self, config_path: Path | None = None):
        """Initialize the config file provider.

        Args:
            config_path: Path to settings.yaml. Defaults to ~/.area_sync/settings.yaml
        """
        self.config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._identity: UserIdentity | None = None
        self._device_id: str | None = None

    async def get_current_identity(self) -> UserIdentity:
        """Get the current user identity from config.

        Returns cached identity if available, otherwise loads from config.
        """
        if self._identity is not None:
            return self._identity

        identity_config = self._load_config().get("identity") or {}

        user_id = identity_config.get("user_id")
        if not user_id:
            user_id = f"local-{self.get_device_id()[:8]}"

        self._identity = UserIdentity(
            user_id=user_id,
            display_name=identity_config.get("display_name", self._get_default_display_name()),
            email=identity_config.get("email"),
            org_id=identity_config.get("org_id"),
            auth_provider=AuthProvider.CONFIG,
            auth_token=identity_config.get("auth_token"),
        )
        logger.debug(f"Loaded identity {user_id} from {self.config_path}")
        return self._identity

    async def sign_out(self) -> None:
        """Clear cached identity. The config file is not modified."""
        self._identity = None

    @property
    def provider_type(self) -> AuthProvider:
        return AuthProvider.CONFIG

    def get_device_id(self) -> str:
        """Get or create the persistent device ID.

        Stored in .device_id beside the settings file.
        """
        if self._device_id is not None:
            return self._device_id

        device_file = self.config_path.parent / ".device_id"

        if device_file.exists():
            self._device_id = device_file.read_text().strip()
            return self._device_id

        self._device_id = str(uuid.uuid4())
        device_file.parent.mkdir(parents=True, exist_ok=True)
        device_file.write_text(self._device_id)
        return self._device_id

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            return {}

        try:
            content = self.config_path.read_text()
            return yaml.safe_load(content) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not read identity config {self.config_path}: {e}")
            return {}

    def _get_default_display_name(self) -> str:
        try:
            return getpass.getuser().title()
        except (OSError, KeyError):
            return "Local User"

    async def update_config(
        self,
        user_id: str | None = None,
        display_name: str | None = None,
        email: str | None = None,
        org_id: str | None = None,
    ) -> UserIdentity:
        """Update the identity section and return the new identity.

        Only provided values are updated; None values are left unchanged.
        """
        config = self._load_config()
        # A bare `identity:` key loads as None
        identity_config: dict[str, Any] = config.get("identity") or {}
        config["identity"] = identity_config

        if user_id is not None:
            identity_config["user_id"] = user_id
        if display_name is not None:
            identity_config["display_name"] = display_name
        if email is not None:
            identity_config["email"] = email
        if org_id is not None:
            identity_config["org_id"] = org_id

        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(yaml.safe_dump(config, default_flow_style=False))

        self._identity = None
        return await self.get_current_identity()
