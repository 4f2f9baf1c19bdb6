import unittest

from gdrivecache.errors.exceptions import (
    ApiError,
    AuthError,
    GDriveCacheError,
    HttpErrorInfo,
    InvalidArgumentError,
    NotFoundError,
    PartialDownloadError,
    PermissionError,
    QuotaExceededError,
    RateLimitError,
    RemoteServiceError,
    map_http_error,
)


class TestExceptions(unittest.TestCase):
    def test_base_error_keeps_details_and_cause(self) -> None:
        cause = RuntimeError("root")
        err = GDriveCacheError("msg", details={"k": "v"}, cause=cause)
        self.assertEqual(str(err), "msg")
        self.assertEqual(err.details["k"], "v")
        self.assertIs(err.cause, cause)

    def test_remote_errors_share_a_base(self) -> None:
        for cls in (NotFoundError, RateLimitError, ApiError, PartialDownloadError):
            self.assertTrue(issubclass(cls, RemoteServiceError))
        self.assertFalse(issubclass(AuthError, RemoteServiceError))

    def test_map_http_error_basic(self) -> None:
        err = map_http_error(HttpErrorInfo(status_code=404, message="not found"))
        self.assertIsInstance(err, NotFoundError)

        err = map_http_error(HttpErrorInfo(status_code=400, message="bad req"))
        self.assertIsInstance(err, InvalidArgumentError)

        err = map_http_error(HttpErrorInfo(status_code=429, message="rate"))
        self.assertIsInstance(err, RateLimitError)

        err = map_http_error(HttpErrorInfo(status_code=401, message="auth"))
        self.assertIsInstance(err, AuthError)

    def test_map_http_error_403_quota_vs_permission(self) -> None:
        err = map_http_error(
            HttpErrorInfo(status_code=403, reason="quotaExceeded", message="quota")
        )
        self.assertIsInstance(err, QuotaExceededError)

        err = map_http_error(
            HttpErrorInfo(status_code=403, reason="insufficientPermissions", message="x")
        )
        self.assertIsInstance(err, PermissionError)

        err = map_http_error(
            HttpErrorInfo(status_code=403, reason="downloadQuotaExceeded", message="q")
        )
        self.assertIsInstance(err, QuotaExceededError)

    def test_map_http_error_403_rate_limit_is_retryable_kind(self) -> None:
        err = map_http_error(
            HttpErrorInfo(status_code=403, reason="userRateLimitExceeded", message="slow")
        )
        self.assertIsInstance(err, RateLimitError)
        self.assertEqual(err.details["reason"], "userRateLimitExceeded")

    def test_map_http_error_keeps_extra_details(self) -> None:
        err = map_http_error(HttpErrorInfo(status_code=409, details={"domain": "global"}))
        self.assertIsInstance(err, ApiError)
        self.assertEqual(err.details["domain"], "global")
        self.assertEqual(err.details["status_code"], 409)

    def test_map_http_error_5xx_and_unknown_are_api_errors(self) -> None:
        err = map_http_error(HttpErrorInfo(status_code=503, message="unavail"))
        self.assertIsInstance(err, ApiError)
        self.assertEqual(err.details["status_code"], 503)

        err = map_http_error(HttpErrorInfo(status_code=418))
        self.assertIsInstance(err, ApiError)
        self.assertEqual(str(err), "HTTP error 418")


if __name__ == "__main__":
    unittest.main()
