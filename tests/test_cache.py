"""Tests for the in-memory and file-backed area caches."""

from __future__ import annotations

import json
import tempfile
from collections.abc import Iterator
from pathlib import Path

import pytest

from area_sync.cache import FileAreaCache, MemoryAreaCache
from area_sync.cache.file_ops import create_backup, read_json, write_json_atomic
from area_sync.exceptions import AreaNotFoundError, StorageIOError
from area_sync.models import Area, OfflineFlags


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class TestMemoryAreaCache:
    """Tests for MemoryAreaCache."""

    async def test_records_are_copies(self) -> None:
        """Mutating a returned record never changes the cache."""
        cache = MemoryAreaCache()
        area = Area(id="a1", name="Original", fields={"acreage": 1})
        await cache.set_record(area)

        area.name = "Changed by caller"
        fetched = await cache.get_record("a1")
        assert fetched is not None
        fetched.fields["acreage"] = 99

        again = await cache.get_record("a1")
        assert again is not None
        assert again.name == "Original"
        assert again.fields == {"acreage": 1}

    async def test_categories(self) -> None:
        cache = MemoryAreaCache()
        assert await cache.get_categories() is None
        assert await cache.category_text(0) is None

        await cache.set_categories({0: "Forest", 1: "Meadow"})

        assert await cache.get_categories() == {0: "Forest", 1: "Meadow"}
        assert await cache.category_text(0) == "Forest"
        assert await cache.category_text(5) is None

    async def test_clear_listing_keeps_pending(self) -> None:
        cache = MemoryAreaCache()
        await cache.set_record(Area(id="clean"))
        await cache.add_offline(Area(id="added"))
        await cache.set_record(Area(id="deleted"))
        await cache.delete_offline("deleted")

        await cache.clear_listing()

        assert await cache.get_record("clean") is None
        assert {a.id for a in await cache.list_pending()} == {"added", "deleted"}

    async def test_get_paginated_windows(self) -> None:
        cache = MemoryAreaCache()
        for i in range(5):
            await cache.set_record(Area(id=f"a{i}"))

        page = await cache.get_paginated(1, 2)
        assert page is not None
        assert [a.id for a in page] == ["a2", "a3"]

        last = await cache.get_paginated(2, 2)
        assert last is not None
        assert [a.id for a in last] == ["a4"]

        assert await cache.get_paginated(3, 2) is None
        assert await cache.get_paginated(3, 2, cached_only=False) == []

    async def test_get_paginated_without_limit(self) -> None:
        cache = MemoryAreaCache()
        await cache.set_record(Area(id="a1"))
        await cache.set_record(Area(id="a2"))

        everything = await cache.get_paginated(0, 0)
        assert everything is not None
        assert [a.id for a in everything] == ["a1", "a2"]
        assert await cache.get_paginated(1, 0) is None

    async def test_empty_first_page_is_a_list(self) -> None:
        cache = MemoryAreaCache()

        assert await cache.get_paginated(0, 10) == []

    async def test_get_paginated_search_is_case_insensitive(self) -> None:
        cache = MemoryAreaCache()
        await cache.set_record(Area(id="a1", name="North MEADOW"))
        await cache.set_record(Area(id="a2", name="Pine", description="near the meadow"))
        await cache.set_record(Area(id="a3", name="Pine"))

        found = await cache.get_paginated(0, 0, search="Meadow")

        assert found is not None
        assert [a.id for a in found] == ["a1", "a2"]

    async def test_add_offline_sets_added_only(self) -> None:
        cache = MemoryAreaCache()

        await cache.add_offline(Area(id="x", offline_flags=OfflineFlags.UPDATED))

        stored = await cache.get_record("x")
        assert stored is not None
        assert stored.offline_flags == OfflineFlags.ADDED

    async def test_patch_offline_merges_and_flags(self) -> None:
        cache = MemoryAreaCache()
        await cache.set_record(Area(id="a1", name="Old", category=1, fields={"acreage": 4}))

        await cache.patch_offline("a1", {"category": 2, "acreage": 5})

        stored = await cache.get_record("a1")
        assert stored is not None
        assert stored.name == "Old"
        assert stored.category == 2
        assert stored.fields == {"acreage": 5}
        assert stored.offline_flags == OfflineFlags.UPDATED

    async def test_patch_offline_missing_raises(self) -> None:
        cache = MemoryAreaCache()

        with pytest.raises(AreaNotFoundError) as exc_info:
            await cache.patch_offline("missing", {"name": "X"})

        assert exc_info.value.area_id == "missing"

    async def test_delete_offline_of_local_only_record_discards_it(self) -> None:
        cache = MemoryAreaCache()
        await cache.add_offline(Area(id="x"))

        await cache.delete_offline("x")

        assert await cache.get_record("x") is None
        assert await cache.list_pending() == []

    async def test_delete_offline_soft_deletes(self) -> None:
        """Soft-deleted records stay readable but leave the listing."""
        cache = MemoryAreaCache()
        await cache.set_record(Area(id="a1"))
        await cache.patch_offline("a1", {"name": "Edited"})

        await cache.delete_offline("a1")

        stored = await cache.get_record("a1")
        assert stored is not None
        assert stored.offline_flags == OfflineFlags.DELETED
        assert await cache.get_paginated(0, 0) == []

    async def test_delete_offline_of_uncached_id_records_tombstone(self) -> None:
        cache = MemoryAreaCache()

        await cache.delete_offline("remote-only")

        stored = await cache.get_record("remote-only")
        assert stored is not None
        assert stored.offline_flags == OfflineFlags.DELETED
        assert [a.id for a in await cache.list_pending()] == ["remote-only"]
        assert await cache.get_paginated(0, 0) == []

    async def test_refresh_record(self) -> None:
        """Fetched copies replace clean records and never pending ones."""
        cache = MemoryAreaCache()
        await cache.set_record(Area(id="clean", name="Old"))
        await cache.set_record(Area(id="edited", name="Old"))
        await cache.patch_offline("edited", {"name": "Mine"})

        assert await cache.refresh_record(Area(id="clean", name="Fresh")) is True
        assert await cache.refresh_record(Area(id="edited", name="Fresh")) is False
        assert await cache.refresh_record(Area(id="new", name="Fresh")) is True

        clean = await cache.get_record("clean")
        edited = await cache.get_record("edited")
        assert clean is not None and clean.name == "Fresh"
        assert edited is not None and edited.name == "Mine"
        assert edited.offline_flags == OfflineFlags.UPDATED
        assert await cache.get_record("new") is not None

    async def test_delete_record_ignores_missing(self) -> None:
        cache = MemoryAreaCache()

        await cache.delete_record("missing")

    async def test_clear_pending_flags(self) -> None:
        cache = MemoryAreaCache()
        await cache.set_record(Area(id="a1"))
        await cache.patch_offline("a1", {"name": "Edited"})

        await cache.clear_pending_flags("a1")
        await cache.clear_pending_flags("missing")

        stored = await cache.get_record("a1")
        assert stored is not None
        assert stored.is_clean
        assert stored.name == "Edited"

    async def test_snapshot_restore(self) -> None:
        cache = MemoryAreaCache()
        await cache.set_categories({0: "Forest"})
        await cache.set_record(Area(id="a1", name="Clean"))
        await cache.add_offline(Area(id="x", name="Draft"))

        restored = MemoryAreaCache()
        restored.restore(json.loads(json.dumps(cache.snapshot())))

        assert await restored.get_categories() == {0: "Forest"}
        assert await restored.get_record("a1") == await cache.get_record("a1")
        assert [a.id for a in await restored.list_pending()] == ["x"]


class TestFileAreaCache:
    """Tests for FileAreaCache persistence."""

    async def test_pending_changes_survive_restart(self, temp_dir: Path) -> None:
        path = temp_dir / "cache.json"
        cache = FileAreaCache(path)
        await cache.load()
        await cache.set_categories({0: "Forest", 3: "Orchard"})
        await cache.set_record(Area(id="a1", name="Kept"))
        await cache.add_offline(Area(id="x", owner="user-123", name="Draft"))

        reopened = FileAreaCache(path)
        await reopened.load()

        assert await reopened.get_categories() == {0: "Forest", 3: "Orchard"}
        assert await reopened.category_text(3) == "Orchard"
        pending = await reopened.list_pending()
        assert [a.id for a in pending] == ["x"]
        assert pending[0].offline_flags == OfflineFlags.ADDED
        assert pending[0].owner == "user-123"

    async def test_snapshot_file_format(self, temp_dir: Path) -> None:
        path = temp_dir / "cache.json"
        cache = FileAreaCache(path)
        await cache.set_record(Area(id="a1"))
        await cache.delete_offline("a1")

        data = json.loads(path.read_text())

        assert data["categories"] is None
        assert data["areas"][0]["id"] == "a1"
        assert data["areas"][0]["offlineFlags"] == ["DELETED"]

    async def test_missing_file_loads_empty(self, temp_dir: Path) -> None:
        cache = FileAreaCache(temp_dir / "nested" / "cache.json")

        await cache.load()

        assert await cache.list_pending() == []
        assert await cache.get_categories() is None

    async def test_corrupted_snapshot_is_backed_up(self, temp_dir: Path) -> None:
        path = temp_dir / "cache.json"
        path.write_text("{not json")
        cache = FileAreaCache(path)

        await cache.load()

        assert await cache.list_pending() == []
        backups = list(temp_dir.glob("cache.*.backup.json"))
        assert len(backups) == 1
        assert backups[0].read_text() == "{not json"

    async def test_creates_parent_directory(self, temp_dir: Path) -> None:
        path = temp_dir / "deep" / "dir" / "cache.json"
        cache = FileAreaCache(path)

        await cache.set_record(Area(id="a1"))

        assert path.exists()


class TestFileOps:
    """Tests for the JSON file helpers."""

    async def test_write_and_read(self, temp_dir: Path) -> None:
        path = temp_dir / "data.json"

        await write_json_atomic(path, {"key": "value"})

        assert await read_json(path) == {"key": "value"}
        assert not list(temp_dir.glob(".tmp_*"))

    async def test_read_missing_returns_none(self, temp_dir: Path) -> None:
        assert await read_json(temp_dir / "absent.json") is None

    async def test_read_empty_returns_none(self, temp_dir: Path) -> None:
        path = temp_dir / "empty.json"
        path.write_text("   ")

        assert await read_json(path) is None

    async def test_read_invalid_raises(self, temp_dir: Path) -> None:
        path = temp_dir / "bad.json"
        path.write_text("[1, 2")

        with pytest.raises(StorageIOError) as exc_info:
            await read_json(path)

        assert exc_info.value.operation == "parse_json"

    async def test_backup_missing_file_raises(self, temp_dir: Path) -> None:
        with pytest.raises(StorageIOError) as exc_info:
            await create_backup(temp_dir / "absent.json")

        assert exc_info.value.operation == "backup"
