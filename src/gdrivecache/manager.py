"""GoogleDriveManager: browse and read Google Drive like a local filesystem."""

from __future__ import annotations

import logging
import os
from typing import Optional, Sequence

from gdrivecache.auth import AuthenticationGate, AuthInfo
from gdrivecache.auth.gate import ServiceFactory
from gdrivecache.cache import FILE_NAME_SECTION, CacheGateway, CacheZoneController
from gdrivecache.cache.zone import DEFAULT_ZONE_NAME
from gdrivecache.config import AppConfig
from gdrivecache.controller import RemoteResourceService
from gdrivecache.controller.drive_controller import RetryPolicy
from gdrivecache.controller.fields import NAME_FIELDS
from gdrivecache.errors import ConfigurationError, GDriveCacheError, RemoteServiceError
from gdrivecache.listing import DEFAULT_PAGE_SIZE, DirectoryLister
from gdrivecache.mirror import DEFAULT_CHUNK_SIZE, ContentMirror
from gdrivecache.models import Entry

logger = logging.getLogger(__name__)


class GoogleDriveManager:
    """
    Abstraction of the Google Drive API that lets us browse and read a Drive
    account the way we use a standard file system.

    How to use this class:

    - Create a service account and a service account key on the Google API
      console, and pass the key file to `set_service_account_credentials`
      (or use `set_oauth_credentials` for a regular user account).
    - Share with the service account every Drive file or folder it must
      reach. Resources explicitly shared with it form the listing root.
    - Optionally call `enable_cache` so listings and file contents are kept
      locally; `get_file_local_path` requires it.

    Authentication is deferred until a call actually needs the API, so
    fully cached calls never pay for it.
    """

    def __init__(
        self,
        *,
        scopes: Optional[Sequence[str]] = None,
        supports_all_drives: bool = True,
        retry_policy: Optional[RetryPolicy] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        service_factory: Optional[ServiceFactory] = None,
    ) -> None:
        self._gate = AuthenticationGate(
            scopes=scopes,
            supports_all_drives=supports_all_drives,
            retry_policy=retry_policy,
            service_factory=service_factory,
        )
        self._zone = CacheZoneController()
        self._lister = DirectoryLister(
            self._gate.ensure_authenticated,
            lambda: self._zone.gateway,
            page_size=page_size,
        )
        self._mirror = ContentMirror(
            self._gate.ensure_authenticated,
            lambda: self._zone.require("get_file_local_path"),
            chunk_size=chunk_size,
        )

    @classmethod
    def from_service(cls, service: RemoteResourceService, **kwargs) -> "GoogleDriveManager":
        """Create a manager that uses an already built service (useful for tests).

        The service is still handed out through the authentication gate, so
        the session only becomes authenticated on the first uncached call.
        """
        return cls(service_factory=lambda _auth_info: service, **kwargs)

    @classmethod
    def from_config(cls, config: AppConfig) -> "GoogleDriveManager":
        """Create and configure a manager from an AppConfig."""
        drive = config.drive
        obj = cls(
            supports_all_drives=drive.supports_all_drives,
            retry_policy=RetryPolicy(
                max_retries=drive.max_retries,
                initial_delay_sec=drive.retry_delay_seconds,
            ),
            page_size=drive.page_size,
            chunk_size=drive.chunk_size,
        )

        auth = config.auth
        if auth.kind == "service_account":
            obj.set_service_account_credentials(auth.credentials_file or "")
        elif auth.kind == "oauth":
            obj.set_oauth_credentials(auth.client_secrets_file or "", auth.token_file or "")

        cache = config.cache
        if cache.enabled:
            obj.enable_cache(
                cache.root_path or "",
                cache.zone_name,
                cache.lists_ttl_seconds,
                cache.files_ttl_seconds,
            )
        return obj

    # ----------------------------
    # Setup
    # ----------------------------
    def enable_cache(
        self,
        root_path: str,
        zone_name: str = DEFAULT_ZONE_NAME,
        lists_time_to_live: int = 0,
        files_time_to_live: int = 0,
    ) -> None:
        """
        Enable the local cache for Drive listings and file contents.

        Args:
            root_path: Existing directory where all cached data is stored.
            zone_name: Name isolating this instance's data from anything else in root_path.
            lists_time_to_live: Seconds before listing and name data expires, 0 for never.
                (1 hour = 3600, 1 day = 86400, 1 month = 2592000, 1 year = 31536000)
            files_time_to_live: Seconds before downloaded file contents expire, 0 for never.

        Raises:
            ConfigurationError: if the cache was already enabled or root_path is invalid.
        """
        self._zone.enable(root_path, zone_name, lists_time_to_live, files_time_to_live)

    def bind_cache(
        self,
        gateway: CacheGateway,
        lists_time_to_live: int = 0,
        files_time_to_live: int = 0,
    ) -> None:
        """Like `enable_cache`, but with an already built cache gateway."""
        self._zone.bind(gateway, lists_ttl=lists_time_to_live, files_ttl=files_time_to_live)

    def set_service_account_credentials(self, service_account_credentials: str) -> None:
        """
        Authenticate with a service account key file.

        Raises:
            ConfigurationError: if the file does not exist.
        """
        if not service_account_credentials or not os.path.isfile(service_account_credentials):
            raise ConfigurationError(
                "Could not find serviceAccountCredentials file. Make sure you download the "
                "generated service account key json file and specify it here",
                details={"path": service_account_credentials},
            )
        self._gate.configure(AuthInfo.service_account(service_account_credentials))

    def set_oauth_credentials(self, client_secrets_file: str, token_file: str) -> None:
        """Authenticate as a user through OAuth, keeping the token in token_file."""
        try:
            auth_info = AuthInfo.oauth(client_secrets_file, token_file)
        except ValueError as exc:
            raise ConfigurationError(str(exc), cause=exc) from exc
        self._gate.configure(auth_info)

    # ----------------------------
    # Cache settings
    # ----------------------------
    def get_lists_time_to_live(self) -> int:
        """Cache seconds for listing operations, or -1 if cache is not enabled."""
        return self._zone.lists_ttl

    def get_files_time_to_live(self) -> int:
        """Cache seconds for file content operations, or -1 if cache is not enabled."""
        return self._zone.files_ttl

    def get_cache_zone_name(self) -> str:
        """Name of the cache zone in use. Raises ConfigurationError without cache."""
        return self._zone.zone_name()

    def clear_cache(self) -> bool:
        """Remove every locally cached listing, name and file of this zone."""
        return self._zone.clear()

    # ----------------------------
    # Drive access
    # ----------------------------
    def get_directory_list(self, parent_id: str = "") -> list[Entry]:
        """
        List the items under a Drive folder.

        Args:
            parent_id: Drive id of the folder. Empty lists the root, which is
                every resource specifically shared with this account.

        Returns:
            One Entry (id, name, is_directory) per child, sorted by name.
        """
        return self._lister.list_directory(parent_id)

    def get_file_name(self, file_id: str) -> str:
        """Real name of the Drive item with the given id."""
        cache = self._zone.gateway
        if cache is not None:
            cached = cache.get(FILE_NAME_SECTION, file_id)
            if cached is not None:
                logger.debug("File name cache hit for %s", file_id)
                return cached

        service = self._gate.ensure_authenticated()

        try:
            metadata = service.get_metadata(file_id, NAME_FIELDS)
        except GDriveCacheError as exc:
            raise type(exc)(
                f"Could not retrieve file name for id {file_id}",
                details={"file_id": file_id, **exc.details},
                cause=exc,
            ) from exc
        except Exception as exc:
            raise RemoteServiceError(
                f"Could not retrieve file name for id {file_id}",
                details={"file_id": file_id},
                cause=exc,
            ) from exc

        name = metadata.get("name")
        if not isinstance(name, str):
            raise RemoteServiceError(
                f"Could not retrieve file name for id {file_id}",
                details={"file_id": file_id},
            )

        if cache is not None:
            cache.save(FILE_NAME_SECTION, file_id, name)
        return name

    def get_file_local_path(self, file_id: str) -> str:
        """
        Download a Drive file into the cache and return its local path.

        The path contains the Drive id, not the real file name; use
        `get_file_name` for that. Requires `enable_cache`.
        """
        return self._mirror.fetch_content_path(file_id)
