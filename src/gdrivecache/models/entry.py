"""Data model for directory listing entries."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable

from gdrivecache.errors import RemoteServiceError
from gdrivecache.util.mime import is_folder


@dataclass(slots=True, frozen=True)
class Entry:
    """
    One child of a Drive directory listing.

    Notes:
        - `id` is the Drive file id, stable across requests.
        - `name` is the display name and is not unique among siblings.
    """

    id: str
    name: str
    is_directory: bool

    @classmethod
    def from_drive_item(cls, item: dict[str, Any]) -> "Entry":
        """Normalize a raw `files.list` item into an Entry."""
        file_id = item.get("id")
        if not isinstance(file_id, str) or not file_id:
            raise RemoteServiceError(
                "Drive listing returned an item without an id",
                details={"item": item},
            )
        mime_type = item.get("mimeType", "")
        return cls(
            id=file_id,
            name=str(item.get("name", "")),
            is_directory=is_folder(mime_type if isinstance(mime_type, str) else ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "isDirectory": self.is_directory, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Entry":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            is_directory=bool(data["isDirectory"]),
        )


def dump_entries(entries: Iterable[Entry]) -> str:
    """Serialize entries to the JSON text stored in the listing cache."""
    return json.dumps([e.to_dict() for e in entries], ensure_ascii=False)


def load_entries(text: str) -> list[Entry]:
    """Decode a cached listing back into entries, preserving order."""
    payload = json.loads(text)
    if not isinstance(payload, list):
        raise ValueError("Cached directory list must be a JSON array")
    return [Entry.from_dict(item) for item in payload]
