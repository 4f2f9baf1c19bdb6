"""Paginated directory listing with cached aggregates."""

from __future__ import annotations

import logging
from typing import Callable, Iterator, Optional

from gdrivecache.cache import LIST_SECTION, CacheGateway
from gdrivecache.controller import ListPage, RemoteResourceService
from gdrivecache.errors import CacheError
from gdrivecache.models import Entry, dump_entries, load_entries

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 1000

SHARED_WITH_ME_QUERY = "sharedWithMe"


def build_list_query(parent_id: str) -> str:
    """Drive query for the children of parent_id ("" means resources shared with us)."""
    if not parent_id:
        return SHARED_WITH_ME_QUERY
    escaped = parent_id.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}' in parents"


def iter_pages(
    service: RemoteResourceService,
    query: str,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> Iterator[ListPage]:
    """Yield pages in continuation-token order until the service returns no token."""
    page_token: Optional[str] = None
    while True:
        page = service.list_page(query, page_size=page_size, page_token=page_token)
        yield page
        page_token = page.next_page_token
        if not page_token:
            return


class DirectoryLister:
    """
    Lists Drive folders, caching each complete listing per parent id.

    Args:
        authenticate: Returns the authenticated service; only called on a cache miss.
        cache: Returns the bound cache gateway, or None when caching is off.
        page_size: Items requested per page.
    """

    def __init__(
        self,
        authenticate: Callable[[], RemoteResourceService],
        cache: Callable[[], Optional[CacheGateway]],
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._authenticate = authenticate
        self._cache = cache
        self._page_size = page_size

    def list_directory(self, parent_id: str = "") -> list[Entry]:
        cache = self._cache()
        if cache is not None:
            cached = cache.get(LIST_SECTION, parent_id)
            if cached is not None:
                logger.debug("Directory list cache hit for %r", parent_id)
                try:
                    return load_entries(cached)
                except (ValueError, KeyError, TypeError) as exc:
                    raise CacheError(
                        "Cached directory list is corrupted",
                        details={"parent_id": parent_id},
                        cause=exc,
                    ) from exc

        service = self._authenticate()
        query = build_list_query(parent_id)

        entries: list[Entry] = []
        pages = 0
        for page in iter_pages(service, query, page_size=self._page_size):
            pages += 1
            entries.extend(Entry.from_drive_item(item) for item in page.items)

        logger.debug("Listed %d entries in %d pages for %r", len(entries), pages, parent_id)

        if cache is not None:
            cache.save(LIST_SECTION, parent_id, dump_entries(entries))

        return entries
