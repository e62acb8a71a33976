"""
Shared test configuration and fixtures.

Provides an in-memory fake of the areas service that can be switched
offline or told to reject specific calls, so engine behavior can be tested
without a network.
"""

from __future__ import annotations

from typing import Any

import pytest

from area_sync.api import AreasAPI, RemoteResult
from area_sync.cache import MemoryAreaCache
from area_sync.events import EventRecorder
from area_sync.exceptions import AreaSyncError, ConnectivityError, RemoteNotFoundError
from area_sync.id_utils import new_object_id
from area_sync.identity import StaticIdentityProvider, UserIdentity
from area_sync.models import Area, AreasPage, CategoryMap
from area_sync.service import AreaService


class FakeAreasAPI(AreasAPI):
    """
    Fake areas service backed by a dictionary.

    - offline=True makes every call a connectivity failure
    - failures["create_area"] = SomeOperationError(...) rejects that call
    - create_id forces the id assigned to the next created area
    - calls records (method, argument) tuples in order
    """

    def __init__(self) -> None:
        self.server: dict[str, Area] = {}
        self.categories: CategoryMap = {0: "Forest", 1: "Meadow", 2: "Wetland"}
        self.offline = False
        self.failures: dict[str, AreaSyncError] = {}
        self.create_id: str | None = None
        self.calls: list[tuple[str, Any]] = []

    def _failure(self, method: str) -> RemoteResult[Any] | None:
        if self.offline:
            return RemoteResult.connectivity_failure(ConnectivityError("fake://areas"))
        if method in self.failures:
            return RemoteResult.operation_failure(self.failures[method])
        return None

    def called(self, method: str) -> list[Any]:
        return [arg for name, arg in self.calls if name == method]

    async def get_categories(self) -> RemoteResult[CategoryMap]:
        self.calls.append(("get_categories", None))
        return self._failure("get_categories") or RemoteResult.success(dict(self.categories))

    async def get_page(self, page: int, limit: int) -> RemoteResult[AreasPage]:
        self.calls.append(("get_page", (page, limit)))
        failure = self._failure("get_page")
        if failure:
            return failure

        items = list(self.server.values())
        if limit > 0:
            items = items[page * limit : (page + 1) * limit]
        return RemoteResult.success(
            AreasPage(items=[a.copy() for a in items], item_count=len(self.server))
        )

    async def get_area(self, area_id: str) -> RemoteResult[Area]:
        self.calls.append(("get_area", area_id))
        failure = self._failure("get_area")
        if failure:
            return failure
        if area_id not in self.server:
            return RemoteResult.operation_failure(
                RemoteNotFoundError(f"Area {area_id} not found", status_code=404)
            )
        return RemoteResult.success(self.server[area_id].copy())

    async def create_area(self, data: dict[str, Any]) -> RemoteResult[Area]:
        self.calls.append(("create_area", dict(data)))
        failure = self._failure("create_area")
        if failure:
            return failure

        area_id = self.create_id or new_object_id()
        self.create_id = None
        area = Area.from_dict({**data, "id": area_id, "owner": "user-123"})
        self.server[area_id] = area
        return RemoteResult.success(area.copy())

    async def patch_area(self, area_id: str, data: dict[str, Any]) -> RemoteResult[Area]:
        self.calls.append(("patch_area", (area_id, dict(data))))
        failure = self._failure("patch_area")
        if failure:
            return failure
        if area_id not in self.server:
            return RemoteResult.operation_failure(
                RemoteNotFoundError(f"Area {area_id} not found", status_code=404)
            )
        self.server[area_id] = self.server[area_id].with_changes(data)
        return RemoteResult.success(self.server[area_id].copy())

    async def delete_area(self, area_id: str) -> RemoteResult[None]:
        self.calls.append(("delete_area", area_id))
        failure = self._failure("delete_area")
        if failure:
            return failure
        if area_id not in self.server:
            return RemoteResult.operation_failure(
                RemoteNotFoundError(f"Area {area_id} not found", status_code=404)
            )
        del self.server[area_id]
        return RemoteResult.success(None)


@pytest.fixture
def api() -> FakeAreasAPI:
    return FakeAreasAPI()


@pytest.fixture
def cache() -> MemoryAreaCache:
    return MemoryAreaCache()


@pytest.fixture
def identity_provider() -> StaticIdentityProvider:
    return StaticIdentityProvider(UserIdentity(user_id="user-123", display_name="Test User"))


@pytest.fixture
def service(
    api: FakeAreasAPI,
    cache: MemoryAreaCache,
    identity_provider: StaticIdentityProvider,
) -> AreaService:
    return AreaService(api, cache, identity_provider)


@pytest.fixture
def recorder(service: AreaService) -> EventRecorder:
    """Records every event the service emits."""
    return EventRecorder().attach(service.events)


@pytest.fixture
def seed(api: FakeAreasAPI, cache: MemoryAreaCache):
    """Put a clean area on both the fake server and the cache."""

    async def _seed(area: Area) -> Area:
        api.server[area.id] = area.copy()
        await cache.set_record(area)
        return area

    return _seed
