"""Public error exports for gdrivecache."""

from __future__ import annotations

from .exceptions import (
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

__all__ = [
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
