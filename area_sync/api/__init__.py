"""
Remote client for the areas service.
"""

from .base import AreasAPI, FailureKind, RemoteResult
from .http import HttpAreasAPI

__all__ = [
    "AreasAPI",
    "FailureKind",
    "RemoteResult",
    "HttpAreasAPI",
]
