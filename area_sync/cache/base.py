"""
Abstract local area cache.

Defines the contract the sync engine relies on. The cache exclusively owns
persisted area state, including the per-record pending offline flags.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..models import Area, CategoryMap


class AreaCache(ABC):
    """Abstract interface for the local area cache.

    All records handed out are copies; mutating them never changes the
    cache. Implementations assume a single writer.
    """

    @abstractmethod
    async def set_categories(self, categories: CategoryMap) -> None:
        """Replace the cached category map."""
        ...

    @abstractmethod
    async def get_categories(self) -> CategoryMap | None:
        """Get the cached category map, or None if never fetched."""
        ...

    @abstractmethod
    async def category_text(self, code: int) -> str | None:
        """Get the display text of a category code."""
        ...

    @abstractmethod
    async def clear_listing(self) -> None:
        """Invalidate the materialized listing.

        Clean records are dropped; records with pending offline flags are
        kept so unsynced changes survive a listing refresh.
        """
        ...

    @abstractmethod
    async def set_record(self, area: Area) -> None:
        """Store a record verbatim (a server copy carries no flags)."""
        ...

    @abstractmethod
    async def refresh_record(self, area: Area) -> bool:
        """Store a fetched server copy unless the cached record has pending flags.

        Returns:
            True if stored, False if a pending local record was kept
        """
        ...

    @abstractmethod
    async def get_record(self, area_id: str) -> Area | None:
        """Get a record, including soft-deleted ones."""
        ...

    @abstractmethod
    async def get_paginated(
        self,
        page: int,
        limit: int,
        cached_only: bool = True,
        search: str = "",
    ) -> list[Area] | None:
        """Get one page of the listing.

        Args:
            page: 0-based page index
            limit: Page size; <= 0 returns the whole listing
            cached_only: Return None when the page lies beyond the cached
                listing instead of an empty page
            search: Case-insensitive filter on name and description

        Returns:
            Areas of the page (soft-deleted records excluded), or None
        """
        ...

    @abstractmethod
    async def add_offline(self, area: Area) -> None:
        """Store a locally created record flagged ADDED."""
        ...

    @abstractmethod
    async def patch_offline(self, area_id: str, data: dict[str, Any]) -> None:
        """Merge a local-only patch into a record and flag it UPDATED.

        Raises:
            AreaNotFoundError: If the record is not cached
        """
        ...

    @abstractmethod
    async def delete_record(self, area_id: str) -> None:
        """Remove a record outright. Missing records are ignored."""
        ...

    @abstractmethod
    async def delete_offline(self, area_id: str) -> None:
        """Soft-delete a record by flagging it DELETED.

        A record that only exists locally (ADDED) is discarded instead. An
        uncached id gets a bare DELETED tombstone so the remote deletion is
        still replayed.
        """
        ...

    @abstractmethod
    async def clear_pending_flags(self, area_id: str) -> None:
        """Mark a record clean."""
        ...

    @abstractmethod
    async def list_pending(self) -> list[Area]:
        """Get every record carrying pending offline flags."""
        ...

    async def close(self) -> None:
        """Release resources. No-op by default."""
        return None
