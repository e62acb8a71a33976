"""
Event channel for area service notifications.

Observers (UI, logging, other subsystems) subscribe to named events and
receive them synchronously, in emission order. Missed events are not kept.

Usage:
    channel = EventChannel()
    channel.subscribe(AreaServiceEvent.AREA_ADDED, lambda event: print(event.area))
    channel.subscribe("*", log_everything)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from .models import Area

logger = logging.getLogger(__name__)

WILDCARD = "*"


class AreaServiceEvent(Enum):
    """Events emitted by the area service."""

    AREA_GET_CATEGORIES_ERROR = "area-get-categories-error"
    AREA_GET_PAGE_ERROR = "area-get-page-error"
    AREA_GET_PAGE_NETWORK_ERROR = "area-get-page-network-error"
    AREA_GET_DETAILS_ERROR = "area-get-details-error"
    AREA_ADDED = "area-added"
    AREA_ADD_ERROR = "area-add-error"
    AREA_UPDATED = "area-updated"
    AREA_UPDATE_ERROR = "area-update-error"
    AREA_DELETED = "area-deleted"
    AREA_DELETE_ERROR = "area-delete-error"
    OFFLINE_MODIFICATIONS = "offline-modifications"
    SYNC_DONE = "sync-done"


@dataclass
class ServiceEvent:
    """A notification delivered to subscribers."""

    event_type: AreaServiceEvent
    area: Area | None = None
    area_id: str | None = None
    error: Exception | None = None
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())


EventCallback = Callable[[ServiceEvent], None]


class EventChannel:
    """In-process multi-subscriber event channel.

    Supports:
    - subscribe(event_type, callback): callbacks for one event type
    - subscribe("*", callback): callbacks for every event
    - emit(event_type, ...): synchronous delivery to all matching subscribers
    """

    def __init__(self) -> None:
        self._subscribers: dict[AreaServiceEvent | str, list[EventCallback]] = {}

    def subscribe(self, event_type: AreaServiceEvent | str, callback: EventCallback) -> None:
        """Register a callback for an event type, or "*" for all events."""
        self._subscribers.setdefault(event_type, []).append(callback)
        logger.debug(f"Subscribed to {_event_name(event_type)}")

    def unsubscribe(self, event_type: AreaServiceEvent | str, callback: EventCallback) -> bool:
        """Remove a callback.

        Returns:
            True if the callback was registered, False otherwise
        """
        callbacks = self._subscribers.get(event_type)
        if not callbacks or callback not in callbacks:
            return False

        callbacks.remove(callback)
        if not callbacks:
            del self._subscribers[event_type]
        return True

    def emit(
        self,
        event_type: AreaServiceEvent,
        *,
        area: Area | None = None,
        area_id: str | None = None,
        error: Exception | None = None,
    ) -> ServiceEvent:
        """Deliver an event to its subscribers, then to wildcard subscribers.

        A failing subscriber is logged and does not stop delivery.
        """
        event = ServiceEvent(event_type=event_type, area=area, area_id=area_id, error=error)

        # Copy so callbacks may (un)subscribe while we iterate
        specific = list(self._subscribers.get(event_type, []))
        wildcard = list(self._subscribers.get(WILDCARD, []))

        for callback in specific + wildcard:
            try:
                callback(event)
            except Exception as e:
                logger.error(
                    f"Error in subscriber callback for {event_type.value}: {e}", exc_info=True
                )

        return event

    def clear(self) -> None:
        """Remove all subscriptions."""
        self._subscribers.clear()

    def subscriber_count(self, event_type: AreaServiceEvent | str | None = None) -> int:
        if event_type is not None:
            return len(self._subscribers.get(event_type, []))
        return sum(len(callbacks) for callbacks in self._subscribers.values())


def _event_name(event_type: AreaServiceEvent | str) -> str:
    if isinstance(event_type, AreaServiceEvent):
        return event_type.value
    return event_type


@dataclass
class EventRecorder:
    """Subscriber that records every event it sees.

    Handy for scripts and tests that want the event trail of an operation.
    """

    events: list[ServiceEvent] = field(default_factory=list)

    def __call__(self, event: ServiceEvent) -> None:
        self.events.append(event)

    def attach(self, channel: EventChannel) -> EventRecorder:
        channel.subscribe(WILDCARD, self)
        return self

    def types(self) -> list[AreaServiceEvent]:
        return [event.event_type for event in self.events]

    def count(self, event_type: AreaServiceEvent) -> int:
        return sum(1 for event in self.events if event.event_type == event_type)

    def clear(self) -> None:
        self.events.clear()
