"""gdrivecache public API."""

from __future__ import annotations

from gdrivecache.auth import AuthenticationGate, AuthInfo, OAuthClient, ServiceAccountClient
from gdrivecache.cache import CacheGateway, CacheZoneController, FileCacheManager
from gdrivecache.config import AppConfig, load_config
from gdrivecache.controller import GoogleDriveController, ListPage, RemoteResourceService
from gdrivecache.errors import (
    ApiError,
    AuthError,
    CacheError,
    ConfigurationError,
    GDriveCacheError,
    HttpErrorInfo,
    InvalidArgumentError,
    NetworkError,
    NotFoundError,
    PartialDownloadError,
    PermissionError,
    QuotaExceededError,
    RateLimitError,
    RemoteServiceError,
    map_http_error,
)
from gdrivecache.listing import DirectoryLister
from gdrivecache.logger import setup_logging
from gdrivecache.manager import GoogleDriveManager
from gdrivecache.mirror import ContentMirror
from gdrivecache.models import Entry

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # High-level
    "GoogleDriveManager",
    "DirectoryLister",
    "ContentMirror",
    # Auth
    "AuthInfo",
    "AuthenticationGate",
    "OAuthClient",
    "ServiceAccountClient",
    # Cache
    "CacheGateway",
    "CacheZoneController",
    "FileCacheManager",
    # Remote service
    "RemoteResourceService",
    "GoogleDriveController",
    "ListPage",
    # Models
    "Entry",
    # Config / logging
    "AppConfig",
    "load_config",
    "setup_logging",
    # Errors
    "GDriveCacheError",
    "ConfigurationError",
    "AuthError",
    "CacheError",
    "RemoteServiceError",
    "InvalidArgumentError",
    "PermissionError",
    "NotFoundError",
    "RateLimitError",
    "QuotaExceededError",
    "NetworkError",
    "ApiError",
    "PartialDownloadError",
    "HttpErrorInfo",
    "map_http_error",
]
