"""
Configuration for the area sync layer.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

DEFAULT_TIMEOUT = 30.0  # seconds
DEFAULT_PAGE_SIZE = 20


@dataclass
class SyncConfig:
    """Configuration for the remote client, the local cache and identity.

    Configuration can be provided directly, via environment variables or
    from a YAML settings file.

    Environment Variables:
        AREA_SYNC_API_URL: Base URL of the areas service
        AREA_SYNC_API_TOKEN: Bearer token for the areas service
        AREA_SYNC_TIMEOUT: Request timeout in seconds (default: 30)
        AREA_SYNC_PAGE_SIZE: Default page size (default: 20)
        AREA_SYNC_CACHE_PATH: Path of the cache snapshot file
            (unset: in-memory cache)
        AREA_SYNC_IDENTITY_CONFIG: Path of the identity settings.yaml

    Attributes:
        api_url: Base URL of the areas service
        api_token: Optional bearer token
        timeout: Total request timeout in seconds
        page_size: Default page size for listings
        cache_path: Cache snapshot file, or None for an in-memory cache
        identity_config_path: settings.yaml holding the identity section
        options: Additional options
    """

    api_url: str
    api_token: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    page_size: int = DEFAULT_PAGE_SIZE
    cache_path: Path | None = None
    identity_config_path: Path | None = None
    options: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.api_url:
            raise ValueError("api_url must not be empty")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be > 0, got {self.timeout}")
        if self.page_size < 0:
            raise ValueError(f"page_size must be >= 0, got {self.page_size}")

        self.api_url = self.api_url.rstrip("/")
        if self.cache_path is not None:
            self.cache_path = Path(self.cache_path).expanduser()
        if self.identity_config_path is not None:
            self.identity_config_path = Path(self.identity_config_path).expanduser()

    @classmethod
    def from_environment(cls) -> SyncConfig:
        """Create configuration from environment variables.

        Raises:
            ValueError: If AREA_SYNC_API_URL is not set
        """
        api_url = os.environ.get("AREA_SYNC_API_URL")
        if not api_url:
            raise ValueError("AREA_SYNC_API_URL environment variable not set")

        cache_path = os.environ.get("AREA_SYNC_CACHE_PATH")
        identity_path = os.environ.get("AREA_SYNC_IDENTITY_CONFIG")

        return cls(
            api_url=api_url,
            api_token=os.environ.get("AREA_SYNC_API_TOKEN"),
            timeout=float(os.environ.get("AREA_SYNC_TIMEOUT", DEFAULT_TIMEOUT)),
            page_size=int(os.environ.get("AREA_SYNC_PAGE_SIZE", DEFAULT_PAGE_SIZE)),
            cache_path=Path(cache_path) if cache_path else None,
            identity_config_path=Path(identity_path) if identity_path else None,
        )

    @classmethod
    def from_yaml(cls, path: Path) -> SyncConfig:
        """Create configuration from the `area_sync` section of a YAML file.

        ```yaml
        area_sync:
          api_url: "https://api.example.com"
          api_token: "secret"
          timeout: 10
          cache_path: "~/.area_sync/cache.json"
        identity:
          user_id: "user-abc123"
          display_name: "Alice"
        ```

        The identity section is read from the same file unless
        identity_config_path points elsewhere.
        """
        content = Path(path).read_text(encoding="utf-8")
        config = yaml.safe_load(content) or {}
        section: dict[str, Any] = dict(config.get("area_sync") or {})

        known = {
            "api_url",
            "api_token",
            "timeout",
            "page_size",
            "cache_path",
            "identity_config_path",
        }
        options = {k: v for k, v in section.items() if k not in known}

        return cls(
            api_url=section.get("api_url", ""),
            api_token=section.get("api_token"),
            timeout=float(section.get("timeout", DEFAULT_TIMEOUT)),
            page_size=int(section.get("page_size", DEFAULT_PAGE_SIZE)),
            cache_path=section.get("cache_path"),
            identity_config_path=section.get("identity_config_path") or path,
            options=options,
        )
