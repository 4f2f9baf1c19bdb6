"""Exception hierarchy and HTTP error mapping for gdrivecache."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class GDriveCacheError(Exception):
    """
    Base exception for gdrivecache.

    Attributes:
        details: Optional structured information (operation, file_id, HTTP status...).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class ConfigurationError(GDriveCacheError):
    """Raised when the manager is misconfigured (cache enabled twice, no cache, no credentials)."""


class AuthError(GDriveCacheError):
    """Raised when authentication to the Drive API fails."""


class CacheError(GDriveCacheError):
    """Raised when the local cache backend cannot be read or written."""


class RemoteServiceError(GDriveCacheError):
    """Base for transport and Drive API failures."""


class InvalidArgumentError(RemoteServiceError):
    """Raised when request arguments are invalid (HTTP 400)."""


class PermissionError(RemoteServiceError):
    """Raised when the account cannot read the resource (HTTP 403)."""


class NotFoundError(RemoteServiceError):
    """Raised when a Drive resource is not found or not shared with us (HTTP 404)."""


class RateLimitError(RemoteServiceError):
    """Raised when Drive asks us to slow down (HTTP 429, or 403 with a rate limit reason)."""


class QuotaExceededError(RemoteServiceError):
    """Raised when a daily or per-file download quota is exhausted (HTTP 403)."""


class NetworkError(RemoteServiceError):
    """Raised when network/timeout issues prevent the request."""


class ApiError(RemoteServiceError):
    """Raised for unclassified API errors (5xx, unknown 4xx, etc.)."""


class PartialDownloadError(RemoteServiceError):
    """
    Raised when streaming a file into the local cache fails midway.

    The reserved cache entry has already been removed when this is raised.
    """


@dataclass(frozen=True)
class HttpErrorInfo:
    """Status and error reason pulled out of a Drive HTTP error response."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


# Drive reports both throttling and quota exhaustion as 403; only throttling
# clears up by waiting.
_RATE_LIMIT_REASONS = frozenset({"ratelimitexceeded", "userratelimitexceeded"})
_QUOTA_REASONS = frozenset({"dailylimitexceeded", "downloadquotaexceeded", "quotaexceeded"})

_ERROR_BY_STATUS: dict[int, type[GDriveCacheError]] = {
    400: InvalidArgumentError,
    401: AuthError,
    404: NotFoundError,
    429: RateLimitError,
}


def _classify_forbidden(reason: str | None) -> type[GDriveCacheError]:
    key = (reason or "").lower()
    if key in _RATE_LIMIT_REASONS:
        return RateLimitError
    if key in _QUOTA_REASONS:
        return QuotaExceededError
    return PermissionError


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> GDriveCacheError:
    """
    Turn a Drive HTTP error into the matching gdrivecache exception.

    403 is split by reason into RateLimitError, QuotaExceededError or
    PermissionError. Statuses with no dedicated class become ApiError.
    """
    if info.status_code == 403:
        error_cls = _classify_forbidden(info.reason)
    else:
        error_cls = _ERROR_BY_STATUS.get(info.status_code, ApiError)

    details: dict[str, Any] = {"status_code": info.status_code, "reason": info.reason}
    details.update(info.details or {})

    return error_cls(
        info.message or f"HTTP error {info.status_code}",
        details=details,
        cause=cause,
    )
