"""Cache binding and zone administration for one manager instance."""

from __future__ import annotations

import logging
from typing import Optional

from gdrivecache.errors import ConfigurationError

from .gateway import CacheGateway
from .manager import FileCacheManager

logger = logging.getLogger(__name__)

LIST_SECTION = "getDirectoryList"
FILE_NAME_SECTION = "getFileName"
FILE_PATH_SECTION = "getFileLocalPath"
# Byte count of each fully written download; an entry without one is incomplete.
FILE_COMPLETE_SECTION = "getFileLocalPathComplete"

DEFAULT_ZONE_NAME = "google-drive"


class CacheZoneController:
    """
    Holds the optional cache binding of a manager.

    The binding is set at most once. Every cache-dependent operation asks
    `require()` for the gateway and fails with ConfigurationError when no
    cache was enabled.
    """

    def __init__(self) -> None:
        self._gateway: Optional[CacheGateway] = None
        self._lists_ttl = -1
        self._files_ttl = -1

    @property
    def enabled(self) -> bool:
        return self._gateway is not None

    @property
    def gateway(self) -> Optional[CacheGateway]:
        """The bound gateway, or None when caching is off."""
        return self._gateway

    @property
    def lists_ttl(self) -> int:
        """Seconds of cache for listing operations, or -1 if cache is not enabled."""
        return self._lists_ttl

    @property
    def files_ttl(self) -> int:
        """Seconds of cache for file content operations, or -1 if cache is not enabled."""
        return self._files_ttl

    def enable(
        self,
        root_path: str,
        zone_name: str = DEFAULT_ZONE_NAME,
        lists_ttl: int = 0,
        files_ttl: int = 0,
    ) -> None:
        """Create a FileCacheManager under root_path and bind it."""
        self._ensure_not_enabled()
        self.bind(FileCacheManager(root_path, zone_name), lists_ttl=lists_ttl, files_ttl=files_ttl)

    def bind(self, gateway: CacheGateway, *, lists_ttl: int = 0, files_ttl: int = 0) -> None:
        """Bind an already built cache gateway."""
        self._ensure_not_enabled()
        for ttl in (lists_ttl, files_ttl):
            if not isinstance(ttl, int) or ttl < 0:
                raise ConfigurationError(
                    "Cache time to live must be 0 (infinite) or a positive number of seconds",
                    details={"lists_ttl": lists_ttl, "files_ttl": files_ttl},
                )

        gateway.set_section_ttl(LIST_SECTION, lists_ttl)
        gateway.set_section_ttl(FILE_NAME_SECTION, lists_ttl)
        gateway.set_section_ttl(FILE_PATH_SECTION, files_ttl)
        gateway.set_section_ttl(FILE_COMPLETE_SECTION, 0)

        self._gateway = gateway
        self._lists_ttl = lists_ttl
        self._files_ttl = files_ttl
        logger.info(
            "Cache enabled (zone=%s, lists_ttl=%d, files_ttl=%d)",
            gateway.zone_name(),
            lists_ttl,
            files_ttl,
        )

    def require(self, operation: str) -> CacheGateway:
        if self._gateway is None:
            raise ConfigurationError(
                f"{operation} requires that local cache is enabled for this GoogleDriveManager instance",
                details={"operation": operation},
            )
        return self._gateway

    def zone_name(self) -> str:
        return self._require_enabled().zone_name()

    def clear(self) -> bool:
        return self._require_enabled().clear_zone()

    def _require_enabled(self) -> CacheGateway:
        if self._gateway is None:
            raise ConfigurationError("Cache is not enabled for this instance")
        return self._gateway

    def _ensure_not_enabled(self) -> None:
        if self._gateway is not None:
            raise ConfigurationError("Google drive cache can only be enabled once")
