"""
Abstract remote client for the areas service.

Every call returns a RemoteResult instead of raising, so callers branch on
the failure kind rather than on exception types.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from ..exceptions import AreaSyncError, ConnectivityError
from ..models import Area, AreasPage, CategoryMap

T = TypeVar("T")


class FailureKind(Enum):
    """Outcome classification of a remote call."""

    NONE = "none"  # succeeded
    CONNECTIVITY = "connectivity"  # service unreachable, transient
    OPERATION = "operation"  # service answered with a failure


@dataclass(frozen=True)
class RemoteResult(Generic[T]):
    """Value or error of a remote call, tagged with its failure kind."""

    value: T | None = None
    error: AreaSyncError | None = None
    kind: FailureKind = FailureKind.NONE

    @classmethod
    def success(cls, value: T | None = None) -> RemoteResult[T]:
        return cls(value=value)

    @classmethod
    def connectivity_failure(cls, error: ConnectivityError) -> RemoteResult[T]:
        return cls(error=error, kind=FailureKind.CONNECTIVITY)

    @classmethod
    def operation_failure(cls, error: AreaSyncError) -> RemoteResult[T]:
        return cls(error=error, kind=FailureKind.OPERATION)

    @property
    def ok(self) -> bool:
        return self.kind is FailureKind.NONE

    def raise_for_failure(self) -> None:
        """Raise the carried error, if any."""
        if self.error is not None:
            raise self.error


class AreasAPI(ABC):
    """Contract every areas remote client must implement."""

    @abstractmethod
    async def get_categories(self) -> RemoteResult[CategoryMap]:
        """Fetch the category code -> display text map."""
        ...

    @abstractmethod
    async def get_page(self, page: int, limit: int) -> RemoteResult[AreasPage]:
        """Fetch one page of areas.

        Args:
            page: 0-based page index
            limit: Page size, 0 for the server default
        """
        ...

    @abstractmethod
    async def get_area(self, area_id: str) -> RemoteResult[Area]:
        """Fetch a single area."""
        ...

    @abstractmethod
    async def create_area(self, data: dict[str, Any]) -> RemoteResult[Area]:
        """Create an area; the result holds the canonical server record."""
        ...

    @abstractmethod
    async def patch_area(self, area_id: str, data: dict[str, Any]) -> RemoteResult[Area]:
        """Patch an area; the result holds the canonical server record."""
        ...

    @abstractmethod
    async def delete_area(self, area_id: str) -> RemoteResult[None]:
        """Delete an area."""
        ...

    async def close(self) -> None:
        """Release connections. No-op by default."""
        return None
