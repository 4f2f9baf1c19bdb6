"""Mirror Drive file contents into the local cache."""

from __future__ import annotations

import logging
import os
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

from gdrivecache.cache import FILE_COMPLETE_SECTION, FILE_PATH_SECTION, CacheGateway
from gdrivecache.controller import RemoteResourceService
from gdrivecache.errors import PartialDownloadError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024 * 1024


@dataclass
class _IdLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class ContentMirror:
    """
    Download Drive files into cache-backed local files.

    The cache entry is reserved (saved empty) right before streaming so the
    target path is known. Once the last byte is written, the byte count is
    stored in a separate completion section. A path is only returned while
    that record exists and matches the file size. A reservation left behind
    by an interrupted process has no record, so it is discarded and fetched
    again. Any failure while streaming removes the reservation before the
    error is raised.

    Args:
        authenticate: Returns the authenticated service; only called on a cache miss.
        cache: Returns the bound cache gateway, raising ConfigurationError if none.
        chunk_size: Maximum bytes requested per chunk.
    """

    def __init__(
        self,
        authenticate: Callable[[], RemoteResourceService],
        cache: Callable[[], CacheGateway],
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._authenticate = authenticate
        self._cache = cache
        self._chunk_size = chunk_size
        self._locks: dict[str, _IdLock] = {}
        self._locks_guard = threading.Lock()

    def fetch_content_path(self, file_id: str) -> str:
        cache = self._cache()

        with self._locked(file_id):
            cached_path = self._completed_path(cache, file_id)
            if cached_path is not None:
                logger.debug("File cache hit for %s", file_id)
                return cached_path

            service = self._authenticate()

            self._discard(cache, file_id)
            try:
                local_path = cache.save(FILE_PATH_SECTION, file_id, "")
                written = self._stream_to(service, file_id, local_path)
                cache.save(FILE_COMPLETE_SECTION, file_id, str(written))
            except BaseException as exc:
                logger.warning("Download of %s failed, clearing cache entry: %s", file_id, exc)
                self._discard(cache, file_id)
                if isinstance(exc, PartialDownloadError) or not isinstance(exc, Exception):
                    raise
                raise PartialDownloadError(
                    f"Could not download file content for id {file_id}",
                    details={"file_id": file_id, **getattr(exc, "details", {})},
                    cause=exc,
                ) from exc

        logger.info("Mirrored %s (%d bytes) to %s", file_id, written, local_path)
        return local_path

    def _completed_path(self, cache: CacheGateway, file_id: str) -> Optional[str]:
        """Path of a fully written entry, or None (incomplete entries are discarded)."""
        path = cache.get_path(FILE_PATH_SECTION, file_id)
        if path is None:
            return None

        recorded = cache.get(FILE_COMPLETE_SECTION, file_id)
        try:
            complete = recorded is not None and int(recorded) == os.path.getsize(path)
        except (ValueError, OSError):
            complete = False
        if complete:
            return path

        logger.warning("Discarding incomplete cached download of %s", file_id)
        self._discard(cache, file_id)
        return None

    def _discard(self, cache: CacheGateway, file_id: str) -> None:
        cache.clear_key(FILE_COMPLETE_SECTION, file_id)
        cache.clear_key(FILE_PATH_SECTION, file_id)

    def _stream_to(self, service: RemoteResourceService, file_id: str, local_path: str) -> int:
        written = 0
        with open(local_path, "wb") as out:
            for chunk in service.iter_content(file_id, chunk_size=self._chunk_size):
                out.write(chunk)
                written += len(chunk)
        return written

    @contextmanager
    def _locked(self, file_id: str) -> Iterator[None]:
        """Hold the lock for file_id; the lock is dropped once nobody uses it."""
        with self._locks_guard:
            id_lock = self._locks.get(file_id)
            if id_lock is None:
                id_lock = self._locks[file_id] = _IdLock()
            id_lock.users += 1
        try:
            with id_lock.lock:
                yield
        finally:
            with self._locks_guard:
                id_lock.users -= 1
                if id_lock.users == 0:
                    del self._locks[file_id]
