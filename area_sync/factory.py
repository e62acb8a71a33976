"""
Wiring helpers that assemble an AreaService from configuration.
"""

from __future__ import annotations

import logging

from .api import HttpAreasAPI
from .cache import AreaCache, FileAreaCache, MemoryAreaCache
from .config import SyncConfig
from .events import EventChannel
from .identity import ConfigFileIdentityProvider, IdentityProvider
from .service import AreaService

logger = logging.getLogger(__name__)


async def create_cache(config: SyncConfig) -> AreaCache:
    """Create the cache named by the configuration, loading any snapshot."""
    if config.cache_path is None:
        return MemoryAreaCache()

    cache = FileAreaCache(config.cache_path)
    await cache.load()
    return cache


async def create_area_service(
    config: SyncConfig,
    identity_provider: IdentityProvider | None = None,
    events: EventChannel | None = None,
) -> AreaService:
    """Build a ready-to-use AreaService.

    Args:
        config: Sync configuration
        identity_provider: Overrides the settings-file identity provider
        events: Shared event channel (a new one is created if omitted)

    Returns:
        AreaService backed by the HTTP client and the configured cache.
        Call `await service.api.close()` when done.
    """
    cache = await create_cache(config)
    provider = identity_provider or ConfigFileIdentityProvider(config.identity_config_path)

    logger.debug(
        f"Creating area service for {config.api_url} "
        f"({'file' if config.cache_path else 'memory'} cache)"
    )
    return AreaService(HttpAreasAPI(config), cache, provider, events)
