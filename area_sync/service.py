"""
Area service: offline-tolerant sync engine.

Orchestrates the remote areas client and the local cache:
- Reads fall back to cached data when the service is unreachable
- Mutations made while unreachable are recorded locally with pending flags
- Pending records are replayed against the service on demand

The service holds no area state itself; the cache owns it. Outcomes are
reported through the event channel.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from .api import AreasAPI, FailureKind
from .cache import AreaCache
from .events import AreaServiceEvent, EventChannel
from .exceptions import AreaSyncError
from .id_utils import new_object_id
from .identity import IdentityProvider
from .logging_utils import AreaLoggerAdapter
from .models import Area, CategoryMap, OfflineFlags, PendingState

logger = logging.getLogger(__name__)


class AreaService:
    """Sync engine for areas.

    Example:
        >>> service = AreaService(api, cache, identity_provider)
        >>> service.events.subscribe(AreaServiceEvent.OFFLINE_MODIFICATIONS, on_dirty)
        >>> area = await service.add_area({"name": "North field"})
        >>> # ... later, once back online
        >>> await service.sync_offline_changes()

    Concurrent calls are not serialized internally: run one reconciliation
    pass at a time, and give each cache a single service.
    """

    def __init__(
        self,
        api: AreasAPI,
        cache: AreaCache,
        identity_provider: IdentityProvider,
        events: EventChannel | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            api: Remote areas client
            cache: Local area cache
            identity_provider: Source of the current user
            events: Event channel (a new one is created if omitted)
        """
        self.api = api
        self.cache = cache
        self.identity_provider = identity_provider
        self.events = events or EventChannel()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_area_categories(self) -> CategoryMap | None:
        """Refresh and return the category map.

        Returns:
            The cached category map, or None when the service rejected the
            request (an error event is emitted, the cache is not consulted)
        """
        result = await self.api.get_categories()

        if result.ok:
            await self.cache.set_categories(result.value or {})
        elif result.kind is FailureKind.OPERATION:
            self.events.emit(AreaServiceEvent.AREA_GET_CATEGORIES_ERROR, error=result.error)
            return None
        else:
            logger.info("Areas service unreachable, using cached categories")

        return await self.cache.get_categories()

    async def get_area_category_text(self, code: int | None) -> str | None:
        """Display text of a category code (0 is a valid code)."""
        if code is None:
            return None
        return await self.cache.category_text(code)

    async def get_or_load_areas_page(
        self,
        page: int = 0,
        limit: int = 0,
        search_text: str = "",
    ) -> list[Area] | Literal[False]:
        """Refresh a page of areas and return it from the cache.

        Args:
            page: 0-based page index
            limit: Page size, 0 for everything
            search_text: Filter applied to the cached listing

        Returns:
            The cached page, or False when the service rejected the request,
            reported no areas, or the page lies beyond the cached listing
        """
        result = await self.api.get_page(page, limit)

        if result.kind is FailureKind.CONNECTIVITY:
            self.events.emit(AreaServiceEvent.AREA_GET_PAGE_NETWORK_ERROR, error=result.error)
        elif result.kind is FailureKind.OPERATION:
            self.events.emit(AreaServiceEvent.AREA_GET_PAGE_ERROR, error=result.error)
            return False
        else:
            areas_page = result.value
            assert areas_page is not None

            if page == 0 and not search_text:
                await self.cache.clear_listing()

            if areas_page.is_empty:
                return False

            # Fetched copies never replace records with unsynced local changes
            for area in areas_page.items:
                await self.cache.refresh_record(area)

        areas = await self.cache.get_paginated(page, limit, True, search_text)
        if areas is None:
            return False

        return areas

    async def get_area_details(self, area_id: str) -> Area | None:
        """Refresh one area and return the cached copy.

        A previously cached area stays readable while offline, and a cached
        area with pending offline changes is not overwritten by the fetch.

        Returns:
            The cached area, or None when missing or when the service
            rejected the request
        """
        result = await self.api.get_area(area_id)

        if result.ok:
            assert result.value is not None
            await self.cache.refresh_record(result.value)
        elif result.kind is FailureKind.OPERATION:
            self.events.emit(
                AreaServiceEvent.AREA_GET_DETAILS_ERROR, area_id=area_id, error=result.error
            )
            return None

        return await self.cache.get_record(area_id)

    async def set_area_details(self, area: Area) -> None:
        """Store a fresher copy of an area obtained elsewhere."""
        await self.cache.set_record(area)
        self.events.emit(AreaServiceEvent.AREA_UPDATED, area=area, area_id=area.id)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def add_area(
        self,
        data: dict[str, Any],
        handle_network_error: bool = True,
        emit_event: bool = True,
    ) -> Area | None:
        """Create an area, remotely if possible, otherwise locally.

        Args:
            data: Area fields
            handle_network_error: Record the area locally (flagged ADDED)
                when the service is unreachable, instead of raising
            emit_event: Emit area-added / offline-modifications

        Returns:
            The cached area (canonical, or the local stand-in)

        Raises:
            OperationError: If the service rejected the area
            ConnectivityError: If unreachable and handle_network_error is False
        """
        result = await self.api.create_area(data)

        if result.ok:
            assert result.value is not None
            area_id = result.value.id
            await self.cache.set_record(result.value)
        elif result.kind is FailureKind.OPERATION:
            self.events.emit(AreaServiceEvent.AREA_ADD_ERROR, error=result.error)
            result.raise_for_failure()
        elif not handle_network_error:
            result.raise_for_failure()
        else:
            identity = await self.identity_provider.get_current_identity()
            area_id = new_object_id()
            offline_area = Area.from_dict({**data, "id": area_id, "owner": identity.user_id})
            await self.cache.add_offline(offline_area)
            logger.info(f"Areas service unreachable, area {area_id} added offline")

        area = await self.cache.get_record(area_id)

        if emit_event:
            self.events.emit(AreaServiceEvent.AREA_ADDED, area=area, area_id=area_id)

        if emit_event and area is not None and not area.is_clean:
            self.events.emit(AreaServiceEvent.OFFLINE_MODIFICATIONS, area=area, area_id=area_id)

        return area

    async def update_area(
        self,
        area_id: str,
        data: dict[str, Any],
        handle_network_error: bool = True,
        emit_event: bool = True,
    ) -> Area | None:
        """Patch an area, remotely if possible, otherwise locally.

        Args:
            area_id: Area to patch
            data: Fields to change
            handle_network_error: Record the patch locally (flagged UPDATED)
                when the service is unreachable, instead of raising
            emit_event: Emit area-updated / offline-modifications

        Returns:
            The cached area after the patch, or None when the service is
            unreachable and the area is not cached (nothing is recorded)

        Raises:
            OperationError: If the service rejected the patch
            ConnectivityError: If unreachable and handle_network_error is False
        """
        result = await self.api.patch_area(area_id, data)

        if result.ok:
            assert result.value is not None
            await self.cache.set_record(result.value)
        elif result.kind is FailureKind.OPERATION:
            self.events.emit(
                AreaServiceEvent.AREA_UPDATE_ERROR, area_id=area_id, error=result.error
            )
            result.raise_for_failure()
        elif not handle_network_error:
            result.raise_for_failure()
        elif await self.cache.get_record(area_id) is None:
            logger.warning(
                f"Areas service unreachable and area {area_id} is not cached, update not recorded"
            )
            return None
        else:
            await self.cache.patch_offline(area_id, data)
            logger.info(f"Areas service unreachable, area {area_id} updated offline")

        area = await self.cache.get_record(area_id)

        if emit_event:
            self.events.emit(AreaServiceEvent.AREA_UPDATED, area=area, area_id=area_id)

        if emit_event and area is not None and not area.is_clean:
            self.events.emit(AreaServiceEvent.OFFLINE_MODIFICATIONS, area=area, area_id=area_id)

        return area

    def has_area_offline_flag(self, area: Area | None, flag: OfflineFlags) -> bool:
        return area is not None and area.has_offline_flag(flag)

    async def can_delete_locally_only(self, area_id: str) -> bool:
        """Whether the area only exists locally (never reached the service)."""
        area = await self.cache.get_record(area_id)
        return self.has_area_offline_flag(area, OfflineFlags.ADDED)

    async def delete_area(
        self,
        area_id: str,
        handle_network_error: bool = True,
        emit_event: bool = True,
    ) -> None:
        """Delete an area, remotely if needed and possible, otherwise locally.

        Args:
            area_id: Area to delete
            handle_network_error: Soft-delete locally (flagged DELETED)
                when the service is unreachable, instead of raising. An
                uncached area is recorded as a DELETED tombstone
            emit_event: Emit area-deleted / offline-modifications

        Raises:
            OperationError: If the service rejected the deletion
            ConnectivityError: If unreachable and handle_network_error is False
        """
        offline_modifications = False

        if await self.can_delete_locally_only(area_id):
            await self.cache.delete_record(area_id)
        else:
            result = await self.api.delete_area(area_id)

            if result.ok:
                await self.cache.delete_record(area_id)
            elif result.kind is FailureKind.OPERATION:
                self.events.emit(
                    AreaServiceEvent.AREA_DELETE_ERROR, area_id=area_id, error=result.error
                )
                result.raise_for_failure()
            elif not handle_network_error:
                result.raise_for_failure()
            else:
                await self.cache.delete_offline(area_id)
                offline_modifications = True
                logger.info(f"Areas service unreachable, area {area_id} deleted offline")

        if emit_event:
            self.events.emit(AreaServiceEvent.AREA_DELETED, area_id=area_id)

        if emit_event and offline_modifications:
            self.events.emit(AreaServiceEvent.OFFLINE_MODIFICATIONS, area_id=area_id)

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    async def sync_area_offline_changes(self, area: Area) -> bool:
        """Replay the pending offline change of one area.

        Exactly one change is replayed, by priority DELETED > ADDED > UPDATED.
        Failures of any kind are logged and leave the flags in place for a
        later pass; they never abort a reconciliation batch.

        Returns:
            True if the area is now in sync, False if the replay failed
        """
        log = AreaLoggerAdapter(logger, area)
        state = area.pending_state

        if state is PendingState.CLEAN:
            return True

        try:
            if state is PendingState.DELETED:
                await self.delete_area(area.id, False, False)

            elif state is PendingState.ADDED:
                created = await self.add_area(area.to_add_data(), False, False)
                # Drop the local stand-in unless the service kept its id,
                # in which case the canonical record already replaced it
                if created is not None and created.id != area.id:
                    await self.delete_area(area.id)

            else:
                await self.update_area(area.id, area.to_update_data(), False, False)
                await self.cache.clear_pending_flags(area.id)

        except AreaSyncError as e:
            log.warning(f"Could not sync offline {state.value} area {area.id}: {e}")
            return False
        except Exception as e:
            log.warning(
                f"Unexpected error syncing offline {state.value} area {area.id}: {e}",
                exc_info=True,
            )
            return False

        log.info(f"Synced offline {state.value} area {area.id}")
        return True

    async def sync_offline_changes(self) -> None:
        """Replay every pending offline change, one area at a time.

        Emits a single sync-done event when the pass is over, whatever the
        individual outcomes.
        """
        areas = await self.cache.list_pending()
        logger.info(f"Syncing {len(areas)} areas with offline changes")

        for area in areas:
            await self.sync_area_offline_changes(area)

        self.events.emit(AreaServiceEvent.SYNC_DONE)

    async def has_offline_changes(self) -> bool:
        """Whether any area still has pending offline changes."""
        return bool(await self.cache.list_pending())
