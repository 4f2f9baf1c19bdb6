"""Field definitions for Google Drive API requests."""

from __future__ import annotations

LIST_ITEM_FIELDS: str = "id, name, mimeType, owners"

LIST_FIELDS: str = f"nextPageToken, files({LIST_ITEM_FIELDS})"

NAME_FIELDS: str = "name"
