"""Filesystem cache backend: <root>/<zone>/<section>/<key>."""

from __future__ import annotations

import logging
import os
import shutil
import threading
import time
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from gdrivecache.errors import CacheError, ConfigurationError

logger = logging.getLogger(__name__)

# quote(..., safe="") always escapes "@", so no real key can map to this name.
_EMPTY_KEY_FILENAME = "@root"


class FileCacheManager:
    """
    Cache backend storing every entry as one file on disk.

    Each section is a directory inside the zone; each key is a file whose
    content is the cached value and whose mtime is the write time used for
    TTL checks. Expired entries are deleted lazily when they are read.
    """

    def __init__(self, root_path: str, zone_name: str = "google-drive") -> None:
        """
        Args:
            root_path: Existing directory that holds all cache zones.
            zone_name: Name of the directory that isolates this cache's data.

        Raises:
            ConfigurationError: if root_path is not a directory or zone_name is invalid.
            CacheError: if the zone directory cannot be created.
        """
        if not root_path or not os.path.isdir(root_path):
            raise ConfigurationError(
                "Specified cache root path is not a valid directory",
                details={"root_path": root_path},
            )
        if not zone_name or zone_name in (".", "..") or "/" in zone_name or "\\" in zone_name:
            raise ConfigurationError(
                "Cache zone name must be a non-empty directory name",
                details={"zone_name": zone_name},
            )

        self._root_path = Path(root_path)
        self._zone_name = zone_name
        self._zone_dir = self._root_path / zone_name
        self._section_ttl: dict[str, int] = {}
        self._lock = threading.Lock()

        try:
            self._zone_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CacheError(
                "Cannot create cache zone directory",
                details={"zone_dir": str(self._zone_dir)},
                cause=exc,
            ) from exc

    @property
    def zone_dir(self) -> Path:
        return self._zone_dir

    def zone_name(self) -> str:
        return self._zone_name

    def set_section_ttl(self, section: str, ttl_seconds: int) -> None:
        if ttl_seconds < 0:
            raise ConfigurationError(
                "Section time to live must be 0 (infinite) or a positive number of seconds",
                details={"section": section, "ttl_seconds": ttl_seconds},
            )
        with self._lock:
            self._section_ttl[section] = int(ttl_seconds)

    def get_section_ttl(self, section: str) -> int:
        with self._lock:
            return self._section_ttl.get(section, 0)

    def get(self, section: str, key: str) -> Optional[str]:
        path = self._live_path(section, key)
        if path is None:
            return None
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise CacheError(
                "Cannot read cache entry",
                details={"section": section, "key": key},
                cause=exc,
            ) from exc

    def save(self, section: str, key: str, value: str) -> str:
        path = self._entry_path(section, key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(value, encoding="utf-8")
        except OSError as exc:
            raise CacheError(
                "Cannot write cache entry",
                details={"section": section, "key": key},
                cause=exc,
            ) from exc
        return str(path)

    def get_path(self, section: str, key: str) -> Optional[str]:
        path = self._live_path(section, key)
        return str(path) if path is not None else None

    def clear_key(self, section: str, key: str) -> None:
        path = self._entry_path(section, key)
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            raise CacheError(
                "Cannot remove cache entry",
                details={"section": section, "key": key},
                cause=exc,
            ) from exc

    def clear_section(self, section: str) -> bool:
        section_dir = self._zone_dir / _encode(section)
        if not section_dir.exists():
            return True
        try:
            shutil.rmtree(section_dir)
        except OSError as exc:
            logger.warning("Failed to clear cache section %s: %s", section, exc)
            return False
        return True

    def clear_zone(self) -> bool:
        try:
            if self._zone_dir.exists():
                shutil.rmtree(self._zone_dir)
            self._zone_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.warning("Failed to clear cache zone %s: %s", self._zone_name, exc)
            return False
        logger.info("Cleared cache zone %s", self._zone_name)
        return True

    # ----------------------------
    # Internals
    # ----------------------------
    def _entry_path(self, section: str, key: str) -> Path:
        if not section:
            raise CacheError("Cache section must be a non-empty string")
        return self._zone_dir / _encode(section) / (_encode(key) if key else _EMPTY_KEY_FILENAME)

    def _live_path(self, section: str, key: str) -> Optional[Path]:
        """Return the entry path if it exists and has not expired (expired ones are removed)."""
        path = self._entry_path(section, key)
        try:
            mtime = path.stat().st_mtime
        except FileNotFoundError:
            return None

        ttl = self.get_section_ttl(section)
        if ttl > 0 and time.time() - mtime >= ttl:
            logger.debug("Cache entry expired: %s/%s", section, key)
            self.clear_key(section, key)
            return None
        return path


def _encode(name: str) -> str:
    encoded = quote(name, safe="")
    if encoded in (".", ".."):
        return encoded.replace(".", "%2E")
    return encoded
