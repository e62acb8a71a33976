"""
File-backed area cache.

Keeps the cache in memory and mirrors every mutation to a JSON snapshot
on disk so pending offline changes survive restarts.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..exceptions import StorageIOError
from .file_ops import create_backup, read_json, write_json_atomic
from .memory import MemoryAreaCache

logger = logging.getLogger(__name__)


class FileAreaCache(MemoryAreaCache):
    """Area cache persisted as a JSON snapshot.

    Call `load()` once before use. Every mutation rewrites the snapshot
    atomically (temp file + rename).
    """

    def __init__(self, path: Path) -> None:
        """Initialize the file cache.

        Args:
            path: Snapshot file path
        """
        super().__init__()
        self.path = Path(path)

    async def load(self) -> None:
        """Load the snapshot from disk.

        A corrupted snapshot is backed up and replaced by an empty cache.
        """
        try:
            data = await read_json(self.path)
        except StorageIOError as e:
            if e.operation != "parse_json":
                raise
            backup = await create_backup(self.path)
            logger.warning(f"Cache snapshot unreadable, backed up to {backup}: {e.cause}")
            data = None

        if data is not None:
            self.restore(data)
            logger.debug(f"Loaded cache snapshot from {self.path}")

    async def _changed(self) -> None:
        await write_json_atomic(self.path, self.snapshot())
