from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List

import appdirs
from dotenv import load_dotenv

APP_NAME = "sqd-assistant"
APP_AUTHOR = "sqd"

_LOOPBACK_HOSTS = {"127.0.0.1", "localhost", "::1"}


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - SQD_DATA_DIR: per-user data directory holding database.db and logs/
    - SQD_DB_POOL_SIZE: maximum number of pooled sqlite connections (default 10)
    - SQD_DB_POOL_TIMEOUT: seconds to wait for a free connection (default 30)
    - SQD_LOG_LEVEL: root log level name (default INFO)
    - SQD_LOG_CONSOLE: 'false' to disable the console log handler
    - SQD_HOST / SQD_PORT: loopback address of the command bridge
    - CORS_ALLOW_ORIGINS: comma-separated origins of the webview UI
    """

    data_dir: str
    db_pool_size: int
    db_pool_timeout: float
    log_level: str
    log_console: bool
    host: str
    port: int
    cors_allow_origins: List[str]

    @property
    def database_path(self) -> str:
        return os.path.join(self.data_dir, "database.db")

    @property
    def logs_dir(self) -> str:
        return os.path.join(self.data_dir, "logs")


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_int(value: str, default: int, minimum: int = 1) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed >= minimum else default


def _parse_float(value: str, default: float) -> float:
    try:
        parsed = float(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


def default_data_dir() -> str:
    """Per-user application data directory for this platform."""
    return appdirs.user_data_dir(APP_NAME, APP_AUTHOR)


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    load_dotenv(override=False)

    data_dir = os.path.expanduser(_get_env("SQD_DATA_DIR", default_data_dir()).strip())

    host = _get_env("SQD_HOST", "127.0.0.1").strip().lower()
    if host not in _LOOPBACK_HOSTS:
        # The bridge only ever listens on loopback
        host = "127.0.0.1"

    log_level = _get_env("SQD_LOG_LEVEL", "INFO").strip().upper()

    return Settings(
        data_dir=data_dir,
        db_pool_size=_parse_int(_get_env("SQD_DB_POOL_SIZE", "10"), 10),
        db_pool_timeout=_parse_float(_get_env("SQD_DB_POOL_TIMEOUT", "30"), 30.0),
        log_level=log_level,
        log_console=_parse_bool(_get_env("SQD_LOG_CONSOLE", "true"), True),
        host=host,
        port=_parse_int(_get_env("SQD_PORT", "1430"), 1430),
        cors_allow_origins=_parse_origins(
            _get_env("CORS_ALLOW_ORIGINS", "tauri://localhost,http://localhost:1420")
        ),
    )
