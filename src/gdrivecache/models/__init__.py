"""Public model exports for gdrivecache."""

from __future__ import annotations

from .entry import Entry, dump_entries, load_entries

__all__ = [
    "Entry",
    "dump_entries",
    "load_entries",
]
