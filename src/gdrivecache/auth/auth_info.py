"""Authentication information for gdrivecache."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

SERVICE_ACCOUNT = "service_account"
OAUTH = "oauth"

_REQUIRED_KEYS: dict[str, tuple[str, ...]] = {
    SERVICE_ACCOUNT: ("credentials_file",),
    OAUTH: ("client_secrets_file", "token_file"),
}


@dataclass(slots=True, frozen=True)
class AuthInfo:
    """
    Authentication information for one authentication strategy.

    Supported kinds:
        kind = "service_account"
            data must include:
                - credentials_file (service account key JSON)
        kind = "oauth"
            data must include:
                - client_secrets_file
                - token_file
    """

    kind: str
    data: dict[str, Any]

    def __post_init__(self) -> None:
        if self.kind not in _REQUIRED_KEYS:
            raise ValueError("AuthInfo.kind must be 'service_account' or 'oauth'")

        if not isinstance(self.data, dict):
            raise TypeError("AuthInfo.data must be a dict")

        for key in _REQUIRED_KEYS[self.kind]:
            value = self.data.get(key)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"AuthInfo.data['{key}'] must be a non-empty string")

    @classmethod
    def service_account(cls, credentials_file: str) -> "AuthInfo":
        return cls(kind=SERVICE_ACCOUNT, data={"credentials_file": credentials_file})

    @classmethod
    def oauth(cls, client_secrets_file: str, token_file: str) -> "AuthInfo":
        return cls(
            kind=OAUTH,
            data={"client_secrets_file": client_secrets_file, "token_file": token_file},
        )

    @property
    def credentials_file(self) -> str:
        """Path to the service account key JSON."""
        return str(self.data["credentials_file"])

    @property
    def client_secrets_file(self) -> str:
        """Path to OAuth client secrets JSON."""
        return str(self.data["client_secrets_file"])

    @property
    def token_file(self) -> str:
        """Path to OAuth token JSON (authorized user)."""
        return str(self.data["token_file"])
