"""
Local area cache.

Provides the cache contract used by the sync engine and two
implementations: in-memory and JSON-file backed.
"""

from .base import AreaCache
from .file import FileAreaCache
from .memory import MemoryAreaCache

__all__ = [
    "AreaCache",
    "MemoryAreaCache",
    "FileAreaCache",
]
