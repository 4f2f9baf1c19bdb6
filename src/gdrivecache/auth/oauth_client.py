"""OAuth (installed application) credentials for gdrivecache."""

from __future__ import annotations

import logging
import os
from typing import Sequence

from gdrivecache.errors import AuthError, ConfigurationError

from .auth_info import OAUTH, AuthInfo

logger = logging.getLogger(__name__)


class OAuthClient:
    """
    User credentials kept in a token file.

    The token file is tried first and refreshed in place when its access
    token has expired. The browser consent flow only runs when there is no
    token file or it cannot be made valid.
    """

    def __init__(self, auth_info: AuthInfo) -> None:
        if auth_info.kind != OAUTH:
            raise ConfigurationError("OAuthClient requires AuthInfo(kind='oauth')")
        self._auth_info = auth_info

    def get_credentials(self, scopes: Sequence[str]):
        """
        Return valid OAuth credentials for the given scopes.

        Returns:
            google.oauth2.credentials.Credentials

        Raises:
            AuthError: when the token cannot be loaded, refreshed or obtained.
            ConfigurationError: if scopes is invalid.
        """
        if not scopes or not all(isinstance(s, str) and s.strip() for s in scopes):
            raise ConfigurationError("scopes must be a non-empty sequence of strings")
        scope_list = list(scopes)

        creds = self._load_token(scope_list)
        if creds is not None and not creds.valid and creds.refresh_token:
            self._refresh(creds)
        if creds is not None and creds.valid:
            return creds

        creds = self._authorize(scope_list)
        self._save_token(creds)
        return creds

    def _load_token(self, scopes: list[str]):
        token_file = self._auth_info.token_file
        if not os.path.exists(token_file):
            return None

        from google.oauth2.credentials import Credentials

        try:
            return Credentials.from_authorized_user_file(token_file, scopes=scopes)
        except (OSError, ValueError) as exc:
            raise AuthError(
                "OAuth token file is unreadable",
                details={"token_file": token_file},
                cause=exc,
            ) from exc

    def _refresh(self, creds) -> None:
        from google.auth.exceptions import GoogleAuthError
        from google.auth.transport.requests import Request

        try:
            creds.refresh(Request())
        except GoogleAuthError as exc:
            raise AuthError(
                "OAuth access token refresh was rejected",
                details={"token_file": self._auth_info.token_file},
                cause=exc,
            ) from exc
        logger.debug("Refreshed OAuth access token")
        self._save_token(creds)

    def _authorize(self, scopes: list[str]):
        client_secrets = self._auth_info.client_secrets_file
        if not os.path.isfile(client_secrets):
            raise AuthError(
                "No usable OAuth token and client secrets file not found",
                details={"client_secrets_file": client_secrets},
            )

        from google_auth_oauthlib.flow import InstalledAppFlow

        logger.info("Starting OAuth consent flow for %s", client_secrets)
        try:
            flow = InstalledAppFlow.from_client_secrets_file(client_secrets, scopes=scopes)
            return flow.run_local_server(port=0)
        except Exception as exc:
            raise AuthError(
                "OAuth consent flow failed",
                details={"client_secrets_file": client_secrets},
                cause=exc,
            ) from exc

    def _save_token(self, creds) -> None:
        token_file = self._auth_info.token_file
        try:
            token_dir = os.path.dirname(token_file)
            if token_dir:
                os.makedirs(token_dir, exist_ok=True)
            with open(token_file, "w", encoding="utf-8") as f:
                f.write(creds.to_json())
        except OSError as exc:
            raise AuthError(
                "Cannot write OAuth token file",
                details={"token_file": token_file},
                cause=exc,
            ) from exc
