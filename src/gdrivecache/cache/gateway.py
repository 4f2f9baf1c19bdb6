"""
Cache gateway protocol.

Defines the sectioned, zoned, TTL-aware key/value and blob store the
listing and mirroring layers talk to. FileCacheManager is the bundled
implementation; any object with these methods can be bound instead.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class CacheGateway(Protocol):
    """Capability interface over a cache backend bound to a single zone."""

    def set_section_ttl(self, section: str, ttl_seconds: int) -> None:
        """Set the time to live for every entry in a section (0 = never expires)."""
        ...

    def get(self, section: str, key: str) -> Optional[str]:
        """Return the cached value, or None when missing or expired."""
        ...

    def save(self, section: str, key: str, value: str) -> str:
        """Store a value and return the path of its backing file.

        An empty value is a valid write (used to reserve a blob path).
        """
        ...

    def get_path(self, section: str, key: str) -> Optional[str]:
        """Return the backing file path of a saved, non-expired entry."""
        ...

    def clear_key(self, section: str, key: str) -> None:
        """Remove one entry and its backing file."""
        ...

    def clear_zone(self) -> bool:
        """Remove every entry of every section in the zone."""
        ...

    def zone_name(self) -> str:
        """Name of the zone this gateway is bound to."""
        ...
