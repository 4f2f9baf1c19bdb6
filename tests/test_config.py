import tempfile
import unittest
from pathlib import Path

from gdrivecache.config import load_config


class TestLoadConfig(unittest.TestCase):
    def _write(self, tmp: str, text: str) -> str:
        path = Path(tmp) / "gdrivecache.ini"
        path.write_text(text, encoding="utf-8")
        return str(path)

    def test_defaults(self) -> None:
        config = load_config()
        self.assertIsNone(config.auth.kind)
        self.assertFalse(config.cache.enabled)
        self.assertEqual(config.cache.zone_name, "google-drive")
        self.assertEqual(config.drive.page_size, 1000)
        self.assertEqual(config.logging.level, "INFO")

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_config("/nonexistent/gdrivecache.ini")

    def test_ini_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = self._write(
                tmp,
                "[auth]\n"
                "kind = service_account\n"
                "credentials_file = /secrets/key.json\n"
                "[cache]\n"
                "enabled = yes\n"
                f"root_path = {tmp}\n"
                "lists_ttl_seconds = 3600\n"
                "[drive]\n"
                "supports_all_drives = false\n"
                "max_retries = 0\n"
                "[logging]\n"
                "level = DEBUG\n",
            )
            config = load_config(path)

        self.assertEqual(config.auth.kind, "service_account")
        self.assertEqual(config.auth.credentials_file, "/secrets/key.json")
        self.assertTrue(config.cache.enabled)
        self.assertEqual(config.cache.lists_ttl_seconds, 3600)
        self.assertEqual(config.cache.files_ttl_seconds, 0)
        self.assertFalse(config.drive.supports_all_drives)
        self.assertEqual(config.drive.max_retries, 0)
        self.assertEqual(config.logging.level, "DEBUG")

    def test_overrides_take_precedence(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = self._write(tmp, "[drive]\npage_size = 50\n")
            config = load_config(path, drive_page_size=200, logging_level="WARNING")

        self.assertEqual(config.drive.page_size, 200)
        self.assertEqual(config.logging.level, "WARNING")

    def test_invalid_integer(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = self._write(tmp, "[cache]\nlists_ttl_seconds = soon\n")
            with self.assertRaisesRegex(ValueError, "lists_ttl_seconds"):
                load_config(path)

    def test_unknown_key(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = self._write(tmp, "[cache]\ncolour = blue\n")
            with self.assertRaises(ValueError):
                load_config(path)
        with self.assertRaises(ValueError):
            load_config(cache_colour="blue")

    def test_validation(self) -> None:
        with self.assertRaises(ValueError):
            load_config(auth_kind="api_key")
        with self.assertRaises(ValueError):
            load_config(auth_kind="service_account")
        with self.assertRaises(ValueError):
            load_config(cache_enabled=True)
        with self.assertRaises(ValueError):
            load_config(cache_files_ttl_seconds=-1)


if __name__ == "__main__":
    unittest.main()
