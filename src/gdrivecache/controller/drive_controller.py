"""Google Drive API controller (internal use only)."""

from __future__ import annotations

import io
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, TypeVar

from gdrivecache.errors import (
    ApiError,
    AuthError,
    GDriveCacheError,
    HttpErrorInfo,
    InvalidArgumentError,
    NetworkError,
    RateLimitError,
    map_http_error,
)

from .fields import LIST_FIELDS
from .service import ListPage

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Transport-level retry for rate limits, 5xx responses and network errors."""

    max_retries: int = 3
    initial_delay_sec: float = 1.0


class GoogleDriveController:
    """
    Drive API v3 implementation of RemoteResourceService.

    Notes:
        - The Drive `service` object is NOT exposed.
        - `supports_all_drives` is applied to all requests consistently.
    """

    def __init__(
        self,
        service: Any,
        *,
        supports_all_drives: bool = True,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> None:
        self._service = service
        self._supports_all_drives = supports_all_drives
        self._retry_policy = retry_policy or RetryPolicy()

    @classmethod
    def from_credentials(
        cls,
        credentials: Any,
        *,
        supports_all_drives: bool = True,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> "GoogleDriveController":
        """Build the Drive service resource for `credentials` and wrap it."""
        try:
            from googleapiclient.discovery import build
        except Exception as exc:  # pragma: no cover
            raise AuthError(
                "google-api-python-client is not available",
                details={"hint": "Install google-api-python-client"},
                cause=exc,
            ) from exc

        try:
            service = build("drive", "v3", credentials=credentials, cache_discovery=False)
        except Exception as exc:
            raise AuthError("Failed to build Drive service", cause=exc) from exc

        return cls(
            service,
            supports_all_drives=supports_all_drives,
            retry_policy=retry_policy,
        )

    # ----------------------------
    # Public API
    # ----------------------------
    def list_page(
        self,
        query: str,
        *,
        page_size: int,
        page_token: Optional[str] = None,
        order_by: str = "name",
    ) -> ListPage:
        kwargs: dict[str, Any] = {
            "q": query,
            "pageSize": page_size,
            "fields": LIST_FIELDS,
            "orderBy": order_by,
            **self._common_list_kwargs(),
        }
        if page_token:
            kwargs["pageToken"] = page_token

        req = self._service.files().list(**kwargs)
        data = self._execute(req.execute, operation="list", details={"q": query})

        files = data.get("files", []) or []
        next_token = data.get("nextPageToken")
        logger.debug("Fetched page of %d items for %s", len(files), query)
        return ListPage(
            items=[f for f in files if isinstance(f, dict)],
            next_page_token=next_token if isinstance(next_token, str) and next_token else None,
        )

    def get_metadata(self, file_id: str, fields: str) -> dict[str, Any]:
        req = self._service.files().get(
            fileId=file_id,
            fields=fields,
            **self._common_get_kwargs(),
        )
        return self._execute(req.execute, operation="get", details={"file_id": file_id})

    def iter_content(self, file_id: str, *, chunk_size: int) -> Iterator[bytes]:
        if chunk_size <= 0:
            raise InvalidArgumentError("chunk_size must be a positive integer")

        try:
            from googleapiclient.http import MediaIoBaseDownload
        except Exception as exc:  # pragma: no cover
            raise AuthError(
                "google-api-python-client is not available",
                cause=exc,
            ) from exc

        req = self._service.files().get_media(
            fileId=file_id,
            **self._common_get_kwargs(),
        )

        buffer = io.BytesIO()
        downloader = MediaIoBaseDownload(buffer, req, chunksize=chunk_size)
        done = False
        while not done:
            _, done = self._execute(
                downloader.next_chunk,
                operation="get_media",
                details={"file_id": file_id},
            )
            chunk = buffer.getvalue()
            buffer.seek(0)
            buffer.truncate(0)
            if chunk:
                yield chunk

    # ----------------------------
    # Internals
    # ----------------------------
    def _common_get_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True}

    def _common_list_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True, "includeItemsFromAllDrives": True}

    def _execute(
        self,
        func: Callable[[], T],
        *,
        operation: str,
        details: Optional[dict[str, Any]] = None,
    ) -> T:
        delay = self._retry_policy.initial_delay_sec
        for attempt in range(self._retry_policy.max_retries + 1):
            try:
                return func()
            except Exception as exc:
                mapped = self._map_exception(exc)
                mapped.details.setdefault("operation", operation)
                for key, value in (details or {}).items():
                    mapped.details.setdefault(key, value)

                if self._should_retry(mapped) and attempt < self._retry_policy.max_retries:
                    logger.warning(
                        "Drive %s failed (attempt %d/%d): %s; retrying in %.1fs",
                        operation,
                        attempt + 1,
                        self._retry_policy.max_retries + 1,
                        mapped,
                        delay,
                    )
                    time.sleep(delay)
                    delay *= 2
                    continue
                raise mapped from exc

        raise ApiError("Unexpected retry loop termination")

    def _should_retry(self, exc: Exception) -> bool:
        if isinstance(exc, RateLimitError):
            return True
        if isinstance(exc, NetworkError):
            return True
        if isinstance(exc, ApiError):
            status_code = getattr(exc, "details", {}).get("status_code")
            return isinstance(status_code, int) and 500 <= status_code <= 599
        return False

    def _map_exception(self, exc: Exception) -> GDriveCacheError:
        try:
            from googleapiclient.errors import HttpError
        except Exception:  # pragma: no cover
            HttpError = None  # type: ignore[assignment]

        if HttpError is not None and isinstance(exc, HttpError):
            info = _http_error_to_info(exc)
            return map_http_error(info, cause=exc)

        if isinstance(exc, (OSError, TimeoutError)):
            return NetworkError("Network error", cause=exc)

        return ApiError("Drive API error", cause=exc)


def _http_error_to_info(exc: Any) -> HttpErrorInfo:
    status_code = getattr(getattr(exc, "resp", None), "status", None)
    reason = getattr(getattr(exc, "resp", None), "reason", None)

    message = None
    details: dict[str, Any] = {}

    content = getattr(exc, "content", None)
    if isinstance(content, (bytes, bytearray)):
        try:
            payload = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            payload = None

        err = payload.get("error", {}) if isinstance(payload, dict) else {}
        if isinstance(err, dict):
            message = err.get("message") or None
            errors = err.get("errors") or []
            if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                details["domain"] = errors[0].get("domain")
                details["reason_detail"] = errors[0].get("reason")
                if isinstance(errors[0].get("reason"), str):
                    reason = errors[0]["reason"]

    if not isinstance(status_code, int):
        status_code = 0

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message,
        details=details or None,
    )
