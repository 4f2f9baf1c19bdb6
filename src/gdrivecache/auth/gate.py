"""Deferred authentication to the Drive API."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional, Sequence

from gdrivecache.controller import GoogleDriveController, RemoteResourceService
from gdrivecache.controller.drive_controller import RetryPolicy
from gdrivecache.errors import AuthError

from .auth_info import OAUTH, SERVICE_ACCOUNT, AuthInfo
from .oauth_client import OAuthClient
from .service_account import ServiceAccountClient

logger = logging.getLogger(__name__)

DEFAULT_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/drive",)

ServiceFactory = Callable[[Optional[AuthInfo]], RemoteResourceService]


class SessionState(Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class AuthenticationGate:
    """
    Authenticate lazily, on the first call that actually needs the Drive API.

    The session starts UNAUTHENTICATED and moves to AUTHENTICATED exactly
    once, when the service factory succeeds; the resulting service is built
    once and reused. A failed attempt leaves the session UNAUTHENTICATED so
    the next call tries again. Cache hits never reach this gate.
    """

    def __init__(
        self,
        *,
        scopes: Optional[Sequence[str]] = None,
        supports_all_drives: bool = True,
        retry_policy: Optional[RetryPolicy] = None,
        service_factory: Optional[ServiceFactory] = None,
    ) -> None:
        self._scopes = tuple(scopes) if scopes is not None else DEFAULT_SCOPES
        self._supports_all_drives = supports_all_drives
        self._retry_policy = retry_policy
        self._service_factory = service_factory

        self._auth_info: Optional[AuthInfo] = None
        self._state = SessionState.UNAUTHENTICATED
        self._service: Optional[RemoteResourceService] = None

    @property
    def is_authenticated(self) -> bool:
        return self._state is SessionState.AUTHENTICATED

    def configure(self, auth_info: AuthInfo) -> None:
        """Select the authentication strategy used by the next authentication."""
        if self._state is SessionState.AUTHENTICATED:
            logger.warning(
                "Credentials changed after authentication; the current session is kept"
            )
        self._auth_info = auth_info

    def ensure_authenticated(self) -> RemoteResourceService:
        """
        Return the authenticated service, authenticating first if needed.

        Raises:
            AuthError: when no strategy is configured or authentication fails.
        """
        if self._state is SessionState.AUTHENTICATED and self._service is not None:
            return self._service

        if self._service_factory is None and self._auth_info is None:
            raise AuthError("Could not perform google drive authentication")

        factory = self._service_factory or self._connect_drive
        try:
            service = factory(self._auth_info)
        except AuthError:
            raise
        except Exception as exc:
            raise AuthError(
                "Could not perform google drive authentication",
                details={"kind": getattr(self._auth_info, "kind", None)},
                cause=exc,
            ) from exc

        self._service = service
        self._state = SessionState.AUTHENTICATED
        logger.info("Authenticated to Google Drive (%s)", getattr(self._auth_info, "kind", "injected"))
        return service

    def _connect_drive(self, auth_info: Optional[AuthInfo]) -> RemoteResourceService:
        if auth_info is None:  # pragma: no cover
            raise AuthError("Could not perform google drive authentication")
        if auth_info.kind == SERVICE_ACCOUNT:
            creds = ServiceAccountClient(auth_info).get_credentials(self._scopes)
        elif auth_info.kind == OAUTH:
            creds = OAuthClient(auth_info).get_credentials(self._scopes)
        else:  # pragma: no cover
            raise AuthError("Unsupported authentication kind", details={"kind": auth_info.kind})

        return GoogleDriveController.from_credentials(
            creds,
            supports_all_drives=self._supports_all_drives,
            retry_policy=self._retry_policy,
        )
