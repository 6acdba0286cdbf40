"""
Runtime configuration for the Hunter System.

Every setting has a default and can be overridden through a HUNTER_*
environment variable. Explicit constructor arguments win over the
environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import tzinfo
from zoneinfo import ZoneInfo

STORAGE_BACKENDS = ("sqlite", "mysql", "memory")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class HunterConfig:
    """
    Hunter System settings.

    Configuration via environment variables:
        HUNTER_STORAGE: sqlite (default), mysql or memory
        HUNTER_SQLITE_PATH: Database file (default: ./database/hunter.db)
        HUNTER_MYSQL_HOST / _PORT / _USER / _PASSWORD / _DATABASE
        HUNTER_TIMEZONE: IANA zone for day boundaries (default: system local)
        HUNTER_FLAVOR_ENABLED: Use an LLM for flavor text (default: false)
        HUNTER_FLAVOR_BASE_URL: OpenAI-compatible endpoint
        HUNTER_FLAVOR_MODEL: Model name (default: llama3.1:8b)
        HUNTER_FLAVOR_API_KEY: API key, if the endpoint needs one
        HUNTER_FLAVOR_TIMEOUT: Seconds before falling back to templates
        HUNTER_LOG_LEVEL: Logging level (default: INFO)
    """

    storage: str | None = None
    sqlite_path: str | None = None

    mysql_host: str | None = None
    mysql_port: int | None = None
    mysql_user: str | None = None
    mysql_password: str | None = None
    mysql_database: str | None = None

    timezone_name: str | None = None

    flavor_enabled: bool | None = None
    flavor_base_url: str | None = None
    flavor_model: str | None = None
    flavor_api_key: str | None = None
    flavor_timeout: float | None = None

    log_level: str | None = None

    def __post_init__(self) -> None:
        """Fill unset fields from the environment, then defaults."""
        if self.storage is None:
            self.storage = os.getenv("HUNTER_STORAGE", "sqlite").lower()
        if self.storage not in STORAGE_BACKENDS:
            raise ValueError(
                f"Unknown storage backend: {self.storage} (expected one of {', '.join(STORAGE_BACKENDS)})"
            )

        if self.sqlite_path is None:
            self.sqlite_path = os.getenv("HUNTER_SQLITE_PATH", "./database/hunter.db")

        if self.mysql_host is None:
            self.mysql_host = os.getenv("HUNTER_MYSQL_HOST", "localhost")
        if self.mysql_port is None:
            self.mysql_port = int(os.getenv("HUNTER_MYSQL_PORT", "3306"))
        if self.mysql_user is None:
            self.mysql_user = os.getenv("HUNTER_MYSQL_USER", "root")
        if self.mysql_password is None:
            self.mysql_password = os.getenv("HUNTER_MYSQL_PASSWORD", "")
        if self.mysql_database is None:
            self.mysql_database = os.getenv("HUNTER_MYSQL_DATABASE", "hunter_system")

        if self.timezone_name is None:
            self.timezone_name = os.getenv("HUNTER_TIMEZONE", "")

        if self.flavor_enabled is None:
            self.flavor_enabled = _env_bool("HUNTER_FLAVOR_ENABLED", False)
        if self.flavor_base_url is None:
            self.flavor_base_url = os.getenv("HUNTER_FLAVOR_BASE_URL", "http://localhost:11434/v1")
        if self.flavor_model is None:
            self.flavor_model = os.getenv("HUNTER_FLAVOR_MODEL", "llama3.1:8b")
        if self.flavor_api_key is None:
            self.flavor_api_key = os.getenv("HUNTER_FLAVOR_API_KEY")
        if self.flavor_timeout is None:
            self.flavor_timeout = float(os.getenv("HUNTER_FLAVOR_TIMEOUT", "5"))

        if self.log_level is None:
            self.log_level = os.getenv("HUNTER_LOG_LEVEL", "INFO").upper()

    @property
    def tz(self) -> tzinfo | None:
        """Configured timezone, or None for the system local zone."""
        return ZoneInfo(self.timezone_name) if self.timezone_name else None
