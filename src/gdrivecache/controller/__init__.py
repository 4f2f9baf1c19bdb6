"""Remote service exports for gdrivecache."""

from __future__ import annotations

from .drive_controller import GoogleDriveController
from .service import ListPage, RemoteResourceService

__all__ = ["GoogleDriveController", "ListPage", "RemoteResourceService"]
