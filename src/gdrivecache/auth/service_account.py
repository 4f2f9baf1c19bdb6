"""Service account credentials for gdrivecache."""

from __future__ import annotations

import os
from typing import Sequence

from gdrivecache.errors import AuthError, ConfigurationError

from .auth_info import SERVICE_ACCOUNT, AuthInfo


class ServiceAccountClient:
    """
    Load credentials from a service account key file.

    Drive resources must be shared with the service account's e-mail before
    they become visible to it; the "shared with me" listing is the root of
    what such an account can see.
    """

    def __init__(self, auth_info: AuthInfo) -> None:
        if auth_info.kind != SERVICE_ACCOUNT:
            raise ConfigurationError("ServiceAccountClient requires AuthInfo(kind='service_account')")
        self._auth_info = auth_info

    def get_credentials(self, scopes: Sequence[str]):
        """
        Return service account credentials for the given scopes.

        Returns:
            google.oauth2.service_account.Credentials

        Raises:
            AuthError: if the key file is missing or cannot be parsed.
        """
        if not scopes or not all(isinstance(s, str) and s.strip() for s in scopes):
            raise ConfigurationError("scopes must be a non-empty sequence of strings")

        try:
            from google.oauth2 import service_account
        except Exception as exc:  # pragma: no cover
            raise AuthError(
                "Google auth libraries are not available",
                details={"hint": "Install google-auth"},
                cause=exc,
            ) from exc

        credentials_file = self._auth_info.credentials_file
        if not os.path.isfile(credentials_file):
            raise AuthError(
                "Service account credentials file not found",
                details={"credentials_file": credentials_file},
            )

        try:
            return service_account.Credentials.from_service_account_file(
                credentials_file,
                scopes=list(scopes),
            )
        except Exception as exc:
            raise AuthError(
                "Failed to load service account credentials",
                details={"credentials_file": credentials_file},
                cause=exc,
            ) from exc
