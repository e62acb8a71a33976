"""
Area data model.

Defines the area record, its pending-offline-mutation flags and the
page/category shapes returned by the remote service.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, Flag, auto
from typing import Any

# Category code -> display text
CategoryMap = dict[int, str]

# Wire keys that map onto dedicated Area attributes
_CORE_KEYS = frozenset({"id", "owner", "name", "description", "category", "offlineFlags"})


class OfflineFlags(Flag):
    """Pending offline mutations recorded against a cached area.

    An empty flag set means the record is clean.
    """

    ADDED = auto()  # exists only locally
    UPDATED = auto()  # exists remotely, has unsynced local changes
    DELETED = auto()  # deleted locally, remote deletion pending

    @classmethod
    def none(cls) -> OfflineFlags:
        return cls(0)

    def names(self) -> list[str]:
        """Names of the set members, in declaration order."""
        return [member.name for member in OfflineFlags if member in self]

    @classmethod
    def from_names(cls, names: list[str] | None) -> OfflineFlags:
        flags = cls.none()
        for name in names or []:
            flags |= cls[name]
        return flags


class PendingState(Enum):
    """The single flag that drives reconciliation of a record."""

    CLEAN = "clean"
    ADDED = "added"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass
class Area:
    """An area record as held by the server and the local cache.

    Attributes:
        id: Stable identifier (server-assigned, or a local 24-hex id while
            the area only exists offline)
        owner: User ID of the owner
        name: Display name
        description: Free-form description
        category: Category code (see CategoryMap)
        fields: Any further domain fields returned by the server
        offline_flags: Pending offline mutations
    """

    id: str
    owner: str | None = None
    name: str = ""
    description: str = ""
    category: int | None = None
    fields: dict[str, Any] = field(default_factory=dict)
    offline_flags: OfflineFlags = field(default_factory=OfflineFlags.none)

    @property
    def is_clean(self) -> bool:
        return not self.offline_flags

    def has_offline_flag(self, flag: OfflineFlags) -> bool:
        return flag in self.offline_flags

    @property
    def pending_state(self) -> PendingState:
        """Reconciliation driver, by priority DELETED > ADDED > UPDATED."""
        if OfflineFlags.DELETED in self.offline_flags:
            return PendingState.DELETED
        if OfflineFlags.ADDED in self.offline_flags:
            return PendingState.ADDED
        if OfflineFlags.UPDATED in self.offline_flags:
            return PendingState.UPDATED
        return PendingState.CLEAN

    def copy(self) -> Area:
        return replace(self, fields=dict(self.fields))

    def with_changes(self, data: dict[str, Any]) -> Area:
        """Return a copy with the given wire-format fields merged in."""
        merged = self.to_dict()
        merged.update(data)
        merged["id"] = self.id
        area = Area.from_dict(merged)
        area.offline_flags = self.offline_flags
        return area

    def to_add_data(self) -> dict[str, Any]:
        """Payload for creating this area remotely (domain fields only)."""
        data: dict[str, Any] = dict(self.fields)
        data["name"] = self.name
        data["description"] = self.description
        if self.category is not None:
            data["category"] = self.category
        return data

    def to_update_data(self) -> dict[str, Any]:
        """Payload for patching this area remotely (domain fields only)."""
        return self.to_add_data()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        data: dict[str, Any] = dict(self.fields)
        data.update(
            {
                "id": self.id,
                "owner": self.owner,
                "name": self.name,
                "description": self.description,
                "category": self.category,
            }
        )
        if self.offline_flags:
            data["offlineFlags"] = self.offline_flags.names()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Area:
        """Deserialize from dictionary."""
        owner = data.get("owner")
        if isinstance(owner, dict):
            owner = owner.get("id")

        category = data.get("category")
        return cls(
            id=str(data["id"]),
            owner=owner,
            name=data.get("name") or "",
            description=data.get("description") or "",
            category=int(category) if category is not None else None,
            fields={k: v for k, v in data.items() if k not in _CORE_KEYS},
            offline_flags=OfflineFlags.from_names(data.get("offlineFlags")),
        )


@dataclass
class AreasPage:
    """One page of areas as returned by the remote service."""

    items: list[Area] = field(default_factory=list)
    item_count: int = 0  # server-reported total

    @property
    def is_empty(self) -> bool:
        return self.item_count == 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AreasPage:
        items = [Area.from_dict(item) for item in data.get("items", [])]
        return cls(items=items, item_count=int(data.get("noItems", len(items))))


def categories_from_dict(data: dict[str, Any]) -> CategoryMap:
    """Parse a category map; JSON object keys arrive as strings."""
    return {int(code): str(text) for code, text in data.items()}
