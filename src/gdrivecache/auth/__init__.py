"""Public auth exports for gdrivecache."""

from __future__ import annotations

from .auth_info import AuthInfo
from .gate import AuthenticationGate, SessionState
from .oauth_client import OAuthClient
from .service_account import ServiceAccountClient

__all__ = [
    "AuthInfo",
    "AuthenticationGate",
    "SessionState",
    "OAuthClient",
    "ServiceAccountClient",
]
