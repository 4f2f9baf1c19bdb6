"""
Remote resource service protocol.

The narrow set of Drive operations the listing and mirroring layers need.
GoogleDriveController implements it over the Drive API v3; tests use fakes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class ListPage:
    """One page of a `files.list` response."""

    items: list[dict[str, Any]] = field(default_factory=list)
    next_page_token: Optional[str] = None


@runtime_checkable
class RemoteResourceService(Protocol):
    def list_page(
        self,
        query: str,
        *,
        page_size: int,
        page_token: Optional[str] = None,
        order_by: str = "name",
    ) -> ListPage:
        """Fetch one page of items matching a Drive query.

        Args:
            query: Drive search expression (e.g. "'<id>' in parents" or "sharedWithMe").
            page_size: Maximum number of items in the page.
            page_token: Continuation token from the previous page, None for the first.
            order_by: Drive sort expression.
        """
        ...

    def get_metadata(self, file_id: str, fields: str) -> dict[str, Any]:
        """Return the requested metadata fields of one item."""
        ...

    def iter_content(self, file_id: str, *, chunk_size: int) -> Iterator[bytes]:
        """Yield the raw bytes of a file in order, at most chunk_size bytes at a time."""
        ...
