"""Public cache exports for gdrivecache."""

from __future__ import annotations

from .gateway import CacheGateway
from .manager import FileCacheManager
from .zone import (
    DEFAULT_ZONE_NAME,
    FILE_NAME_SECTION,
    FILE_PATH_SECTION,
    FILE_COMPLETE_SECTION,
    LIST_SECTION,
    CacheZoneController,
)

__all__ = [
    "CacheGateway",
    "FileCacheManager",
    "CacheZoneController",
    "DEFAULT_ZONE_NAME",
    "LIST_SECTION",
    "FILE_NAME_SECTION",
    "FILE_PATH_SECTION",
    "FILE_COMPLETE_SECTION",
]
