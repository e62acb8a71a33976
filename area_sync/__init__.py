"""
Area Sync

Offline-tolerant synchronization of areas between a remote service and a
local cache.

Provides:
- AreaService: reads with cached fallback, offline-capable mutations,
  reconciliation of pending offline changes
- HTTP client for the areas service (aiohttp)
- In-memory and JSON-file caches tracking pending offline flags
- Event channel reporting outcomes to observers

Usage:

    >>> from area_sync import SyncConfig, create_area_service
    >>> service = await create_area_service(SyncConfig.from_environment())
    >>> area = await service.add_area({"name": "North field"})
    >>> # Unreachable service: area is cached with OfflineFlags.ADDED
    >>> await service.sync_offline_changes()
"""

from .api import AreasAPI, FailureKind, HttpAreasAPI, RemoteResult
from .cache import AreaCache, FileAreaCache, MemoryAreaCache
from .config import SyncConfig
from .events import AreaServiceEvent, EventChannel, EventRecorder, ServiceEvent
from .exceptions import (
    AreaNotFoundError,
    AreaSyncError,
    AuthenticationError,
    ConnectivityError,
    OperationError,
    RemoteNotFoundError,
    RemoteValidationError,
    StorageIOError,
)
from .factory import create_area_service
from .identity import (
    ConfigFileIdentityProvider,
    IdentityProvider,
    StaticIdentityProvider,
    UserIdentity,
)
from .models import Area, AreasPage, CategoryMap, OfflineFlags, PendingState
from .service import AreaService

__all__ = [
    # Engine
    "AreaService",
    "create_area_service",
    "SyncConfig",
    # Models
    "Area",
    "AreasPage",
    "CategoryMap",
    "OfflineFlags",
    "PendingState",
    # Remote client
    "AreasAPI",
    "HttpAreasAPI",
    "RemoteResult",
    "FailureKind",
    # Cache
    "AreaCache",
    "MemoryAreaCache",
    "FileAreaCache",
    # Events
    "AreaServiceEvent",
    "EventChannel",
    "EventRecorder",
    "ServiceEvent",
    # Identity
    "IdentityProvider",
    "ConfigFileIdentityProvider",
    "StaticIdentityProvider",
    "UserIdentity",
    # Exceptions
    "AreaSyncError",
    "ConnectivityError",
    "OperationError",
    "AuthenticationError",
    "RemoteNotFoundError",
    "RemoteValidationError",
    "AreaNotFoundError",
    "StorageIOError",
]

__version__ = "0.1.0"
