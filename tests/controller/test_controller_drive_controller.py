import json
import unittest
from unittest.mock import Mock, patch

from gdrivecache.controller import GoogleDriveController, ListPage
from gdrivecache.controller.drive_controller import RetryPolicy, _http_error_to_info
from gdrivecache.controller.fields import LIST_FIELDS
from gdrivecache.errors import (
    InvalidArgumentError,
    NetworkError,
    NotFoundError,
    PermissionError,
    RateLimitError,
)


def _http_error(status: int, reason: str, body: dict | None = None):
    from googleapiclient.errors import HttpError

    resp = Mock()
    resp.status = status
    resp.reason = reason
    content = json.dumps(body).encode("utf-8") if body is not None else b"{}"
    return HttpError(resp=resp, content=content)


class FakeDownloader:
    """Stands in for MediaIoBaseDownload: writes one chunk per next_chunk call."""

    chunks: list[bytes] = []
    fail_at: int | None = None

    def __init__(self, fd, request, chunksize=0) -> None:
        self._fd = fd
        self._index = 0
        self.chunksize = chunksize

    def next_chunk(self):
        if self.fail_at is not None and self._index == self.fail_at:
            raise OSError("connection reset")
        self._fd.write(self.chunks[self._index])
        self._index += 1
        return None, self._index >= len(self.chunks)


class TestDriveControllerHelpers(unittest.TestCase):
    def test_http_error_to_info_reads_error_body(self) -> None:
        err = _http_error(
            403,
            "Forbidden",
            {"error": {"message": "nope", "errors": [{"domain": "global", "reason": "forbidden"}]}},
        )
        info = _http_error_to_info(err)
        self.assertEqual(info.status_code, 403)
        self.assertEqual(info.reason, "forbidden")
        self.assertEqual(info.message, "nope")
        self.assertEqual(info.details["domain"], "global")

    def test_http_error_to_info_tolerates_non_json_body(self) -> None:
        from googleapiclient.errors import HttpError

        resp = Mock()
        resp.status = 500
        resp.reason = "Internal"
        info = _http_error_to_info(HttpError(resp=resp, content=b"<html>oops</html>"))
        self.assertEqual(info.status_code, 500)
        self.assertEqual(info.reason, "Internal")
        self.assertIsNone(info.message)


class TestDriveControllerMocked(unittest.TestCase):
    def _mock_service_with_list(self, responses):
        service = Mock()
        files_resource = Mock()
        request = Mock()

        service.files.return_value = files_resource
        request.execute.side_effect = responses
        files_resource.list.return_value = request
        return service, files_resource, request

    def test_list_page_request_parameters(self) -> None:
        service, files_resource, _ = self._mock_service_with_list(
            [{"files": [{"id": "F1", "name": "a", "mimeType": "text/plain"}]}]
        )
        controller = GoogleDriveController(service, supports_all_drives=True)

        page = controller.list_page("'P1' in parents", page_size=1000)

        kwargs = files_resource.list.call_args.kwargs
        self.assertEqual(kwargs["q"], "'P1' in parents")
        self.assertEqual(kwargs["pageSize"], 1000)
        self.assertEqual(kwargs["orderBy"], "name")
        self.assertEqual(kwargs["fields"], LIST_FIELDS)
        self.assertTrue(kwargs.get("supportsAllDrives"))
        self.assertTrue(kwargs.get("includeItemsFromAllDrives"))
        self.assertNotIn("pageToken", kwargs)

        self.assertEqual(page, ListPage(items=[{"id": "F1", "name": "a", "mimeType": "text/plain"}]))

    def test_list_page_passes_and_returns_tokens(self) -> None:
        service, files_resource, _ = self._mock_service_with_list(
            [{"files": [], "nextPageToken": "T2"}]
        )
        controller = GoogleDriveController(service, supports_all_drives=False)

        page = controller.list_page("sharedWithMe", page_size=10, page_token="T1")

        kwargs = files_resource.list.call_args.kwargs
        self.assertEqual(kwargs["pageToken"], "T1")
        self.assertNotIn("supportsAllDrives", kwargs)
        self.assertEqual(page.next_page_token, "T2")

    def test_get_metadata_maps_http_404_to_not_found(self) -> None:
        service = Mock()
        files_resource = Mock()
        req = Mock()

        service.files.return_value = files_resource
        files_resource.get.return_value = req
        req.execute.side_effect = _http_error(404, "Not Found")

        controller = GoogleDriveController(service)

        with self.assertRaises(NotFoundError) as ctx:
            controller.get_metadata("X", "name")
        self.assertEqual(ctx.exception.details["file_id"], "X")
        self.assertEqual(ctx.exception.details["operation"], "get")

    def test_permission_error_is_not_retried(self) -> None:
        service = Mock()
        req = service.files.return_value.get.return_value
        req.execute.side_effect = _http_error(403, "insufficientPermissions")

        controller = GoogleDriveController(service)

        with patch("time.sleep", return_value=None) as sleep:
            with self.assertRaises(PermissionError):
                controller.get_metadata("X", "name")
        sleep.assert_not_called()
        self.assertEqual(req.execute.call_count, 1)

    def test_retry_on_429(self) -> None:
        service = Mock()
        req = service.files.return_value.get.return_value
        http_err = _http_error(
            429,
            "rateLimitExceeded",
            {"error": {"message": "rate limited", "errors": [{"reason": "rateLimitExceeded"}]}},
        )

        req.execute.side_effect = [http_err, http_err, {"name": "n"}]

        controller = GoogleDriveController(service)

        with patch("time.sleep", return_value=None):
            data = controller.get_metadata("F1", "name")

        self.assertEqual(data, {"name": "n"})
        self.assertEqual(req.execute.call_count, 3)

    def test_retries_exhausted_raises_rate_limit(self) -> None:
        service = Mock()
        req = service.files.return_value.get.return_value
        req.execute.side_effect = _http_error(429, "rateLimitExceeded")

        controller = GoogleDriveController(service, retry_policy=RetryPolicy(max_retries=2))

        with patch("time.sleep", return_value=None):
            with self.assertRaises(RateLimitError):
                controller.get_metadata("X", "name")
        self.assertEqual(req.execute.call_count, 3)

    def test_zero_retries_fails_immediately(self) -> None:
        service = Mock()
        req = service.files.return_value.list.return_value
        req.execute.side_effect = OSError("reset")

        controller = GoogleDriveController(service, retry_policy=RetryPolicy(max_retries=0))

        with self.assertRaises(NetworkError):
            controller.list_page("sharedWithMe", page_size=1)
        self.assertEqual(req.execute.call_count, 1)

    def test_iter_content_yields_chunks_in_order(self) -> None:
        service = Mock()
        FakeDownloader.chunks = [b"abc", b"def", b"g"]
        FakeDownloader.fail_at = None

        controller = GoogleDriveController(service)
        with patch("googleapiclient.http.MediaIoBaseDownload", FakeDownloader):
            chunks = list(controller.iter_content("F1", chunk_size=3))

        self.assertEqual(chunks, [b"abc", b"def", b"g"])
        kwargs = service.files.return_value.get_media.call_args.kwargs
        self.assertEqual(kwargs["fileId"], "F1")

    def test_iter_content_propagates_mapped_errors(self) -> None:
        service = Mock()
        FakeDownloader.chunks = [b"abc", b"def"]
        FakeDownloader.fail_at = 1

        controller = GoogleDriveController(service, retry_policy=RetryPolicy(max_retries=0))
        received = []
        with patch("googleapiclient.http.MediaIoBaseDownload", FakeDownloader):
            with self.assertRaises(NetworkError) as ctx:
                for chunk in controller.iter_content("F1", chunk_size=3):
                    received.append(chunk)

        self.assertEqual(received, [b"abc"])
        self.assertEqual(ctx.exception.details["file_id"], "F1")

    def test_iter_content_rejects_bad_chunk_size(self) -> None:
        controller = GoogleDriveController(Mock())
        with self.assertRaises(InvalidArgumentError):
            list(controller.iter_content("F1", chunk_size=0))


if __name__ == "__main__":
    unittest.main()
