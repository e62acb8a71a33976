"""
In-memory area cache.
"""

from __future__ import annotations

import logging
from typing import Any

from ..exceptions import AreaNotFoundError
from ..models import Area, CategoryMap, OfflineFlags
from .base import AreaCache

logger = logging.getLogger(__name__)


class MemoryAreaCache(AreaCache):
    """Area cache held in process memory.

    Records are kept in insertion order, which is also the listing order.
    Subclasses can persist state by overriding `_changed`.
    """

    def __init__(self) -> None:
        self._records: dict[str, Area] = {}
        self._categories: CategoryMap | None = None

    async def _changed(self) -> None:
        """Called after every mutation."""
        return None

    def _require(self, area_id: str) -> Area:
        area = self._records.get(area_id)
        if area is None:
            raise AreaNotFoundError(area_id)
        return area

    async def set_categories(self, categories: CategoryMap) -> None:
        self._categories = dict(categories)
        await self._changed()

    async def get_categories(self) -> CategoryMap | None:
        if self._categories is None:
            return None
        return dict(self._categories)

    async def category_text(self, code: int) -> str | None:
        if self._categories is None:
            return None
        return self._categories.get(code)

    async def clear_listing(self) -> None:
        kept = {area_id: area for area_id, area in self._records.items() if not area.is_clean}
        dropped = len(self._records) - len(kept)
        self._records = kept
        logger.debug(f"Cleared listing: dropped {dropped}, kept {len(kept)} pending")
        await self._changed()

    async def set_record(self, area: Area) -> None:
        self._records[area.id] = area.copy()
        await self._changed()

    async def refresh_record(self, area: Area) -> bool:
        cached = self._records.get(area.id)
        if cached is not None and not cached.is_clean:
            logger.debug(f"Kept pending area {area.id} over fetched copy")
            return False
        await self.set_record(area)
        return True

    async def get_record(self, area_id: str) -> Area | None:
        area = self._records.get(area_id)
        return area.copy() if area else None

    async def get_paginated(
        self,
        page: int,
        limit: int,
        cached_only: bool = True,
        search: str = "",
    ) -> list[Area] | None:
        listing = [
            area
            for area in self._records.values()
            if OfflineFlags.DELETED not in area.offline_flags
        ]

        if search:
            needle = search.casefold()
            listing = [
                area
                for area in listing
                if needle in area.name.casefold() or needle in area.description.casefold()
            ]

        if limit <= 0:
            start, end = (0, len(listing)) if page == 0 else (len(listing), len(listing))
        else:
            start, end = page * limit, (page + 1) * limit

        if cached_only and page > 0 and start >= len(listing):
            return None

        return [area.copy() for area in listing[start:end]]

    async def add_offline(self, area: Area) -> None:
        stored = area.copy()
        stored.offline_flags = OfflineFlags.ADDED
        self._records[stored.id] = stored
        await self._changed()

    async def patch_offline(self, area_id: str, data: dict[str, Any]) -> None:
        area = self._require(area_id).with_changes(data)
        # A local-only record will be replayed as an add with its latest fields
        if OfflineFlags.ADDED not in area.offline_flags:
            area.offline_flags |= OfflineFlags.UPDATED
        self._records[area_id] = area
        await self._changed()

    async def delete_record(self, area_id: str) -> None:
        if self._records.pop(area_id, None) is not None:
            await self._changed()

    async def delete_offline(self, area_id: str) -> None:
        area = self._records.get(area_id)
        if area is None:
            self._records[area_id] = Area(id=area_id, offline_flags=OfflineFlags.DELETED)
        elif OfflineFlags.ADDED in area.offline_flags:
            # Never reached the server, nothing to replay
            del self._records[area_id]
        else:
            area.offline_flags = OfflineFlags.DELETED
        await self._changed()

    async def clear_pending_flags(self, area_id: str) -> None:
        area = self._records.get(area_id)
        if area is None or area.is_clean:
            return
        area.offline_flags = OfflineFlags.none()
        await self._changed()

    async def list_pending(self) -> list[Area]:
        return [area.copy() for area in self._records.values() if not area.is_clean]

    def snapshot(self) -> dict[str, Any]:
        """Serializable copy of the cache state."""
        categories = None
        if self._categories is not None:
            categories = {str(code): text for code, text in self._categories.items()}
        return {
            "categories": categories,
            "areas": [area.to_dict() for area in self._records.values()],
        }

    def restore(self, data: dict[str, Any]) -> None:
        """Replace the cache state with a snapshot."""
        categories = data.get("categories")
        self._categories = (
            {int(code): text for code, text in categories.items()}
            if categories is not None
            else None
        )
        self._records = {}
        for item in data.get("areas", []):
            area = Area.from_dict(item)
            self._records[area.id] = area
