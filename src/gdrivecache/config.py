"""Configuration dataclasses and INI loading for gdrivecache."""

from __future__ import annotations

import configparser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from gdrivecache.auth.auth_info import OAUTH, SERVICE_ACCOUNT


@dataclass
class AuthConfig:
    kind: Optional[str] = None  # "service_account" or "oauth"
    credentials_file: Optional[str] = None
    client_secrets_file: Optional[str] = None
    token_file: Optional[str] = None


@dataclass
class CacheConfig:
    enabled: bool = False
    root_path: Optional[str] = None
    zone_name: str = "google-drive"
    lists_ttl_seconds: int = 0  # 0 = never expires
    files_ttl_seconds: int = 0


@dataclass
class DriveConfig:
    page_size: int = 1000
    chunk_size: int = 1024 * 1024
    supports_all_drives: bool = True
    max_retries: int = 3
    retry_delay_seconds: float = 1.0


@dataclass
class LogConfig:
    level: str = "INFO"
    file: Optional[str] = None
    console: bool = True


@dataclass
class AppConfig:
    auth: AuthConfig = field(default_factory=AuthConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    drive: DriveConfig = field(default_factory=DriveConfig)
    logging: LogConfig = field(default_factory=LogConfig)


_TRUE_VALUES = ("true", "1", "yes", "on")

_INT_KEYS = {
    ("cache", "lists_ttl_seconds"),
    ("cache", "files_ttl_seconds"),
    ("drive", "page_size"),
    ("drive", "chunk_size"),
    ("drive", "max_retries"),
}
_FLOAT_KEYS = {("drive", "retry_delay_seconds")}
_BOOL_KEYS = {
    ("cache", "enabled"),
    ("drive", "supports_all_drives"),
    ("logging", "console"),
}


def load_config(config_path: str | None = None, **overrides: Any) -> AppConfig:
    """
    Load configuration from an INI file and/or keyword overrides.

    Overrides are named `<section>_<key>` (e.g. `cache_root_path="/tmp/c"`)
    and take precedence over the file.

    Args:
        config_path: Path to the INI configuration file.
        **overrides: Values that replace file values.

    Returns:
        AppConfig: The populated configuration object.

    Raises:
        FileNotFoundError: If config_path is provided but does not exist.
        ValueError: If a value has the wrong type or a required field is missing.
    """
    config = AppConfig()
    sections = {
        "auth": config.auth,
        "cache": config.cache,
        "drive": config.drive,
        "logging": config.logging,
    }

    if config_path is not None:
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        parser = configparser.ConfigParser()
        parser.read(config_file, encoding="utf-8")

        for name, target in sections.items():
            if not parser.has_section(name):
                continue
            for key, raw in parser[name].items():
                if not hasattr(target, key):
                    raise ValueError(f"Unknown setting in config: [{name}] {key}")
                if raw == "":
                    continue
                setattr(target, key, _coerce(name, key, raw))

    for option, value in overrides.items():
        if value is None:
            continue
        name, _, key = option.partition("_")
        target = sections.get(name)
        if target is None or not hasattr(target, key):
            raise ValueError(f"Unknown configuration override: {option}")
        setattr(target, key, _coerce(name, key, value) if isinstance(value, str) else value)

    _validate(config)
    return config


def _coerce(section: str, key: str, raw: str) -> Any:
    if (section, key) in _BOOL_KEYS:
        return raw.strip().lower() in _TRUE_VALUES
    if (section, key) in _INT_KEYS:
        try:
            return int(raw)
        except ValueError:
            raise ValueError(
                f"Invalid {key} value in config: '{raw}' - must be an integer"
            ) from None
    if (section, key) in _FLOAT_KEYS:
        try:
            return float(raw)
        except ValueError:
            raise ValueError(
                f"Invalid {key} value in config: '{raw}' - must be a number"
            ) from None
    return raw


def _validate(config: AppConfig) -> None:
    auth = config.auth
    if auth.kind is not None and auth.kind not in (SERVICE_ACCOUNT, OAUTH):
        raise ValueError(f"Invalid auth kind: '{auth.kind}' - must be 'service_account' or 'oauth'")
    if auth.kind == SERVICE_ACCOUNT and not auth.credentials_file:
        raise ValueError("auth.credentials_file is required for service_account authentication")
    if auth.kind == OAUTH and not (auth.client_secrets_file and auth.token_file):
        raise ValueError("auth.client_secrets_file and auth.token_file are required for oauth")

    cache = config.cache
    if cache.enabled and not cache.root_path:
        raise ValueError("cache.root_path is required when the cache is enabled")
    if cache.lists_ttl_seconds < 0 or cache.files_ttl_seconds < 0:
        raise ValueError("cache time to live values must be 0 or positive")

    drive = config.drive
    if drive.page_size <= 0 or drive.chunk_size <= 0:
        raise ValueError("drive.page_size and drive.chunk_size must be positive")
    if drive.max_retries < 0:
        raise ValueError("drive.max_retries must be 0 or positive")
