"""Settings for the esa.io client.

Values come from the process environment first, then from a `.env` file in
the working directory; the file never overrides a variable that is already
set. `LOG_JSON` selects JSON (default) or plain console output.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

ENV_FILE = Path(".env")

DEFAULT_API_BASE_URL = "https://api.esa.io/v1/teams"
DEFAULT_USER_AGENT = "esa-attachments/0.1.0"


def _load_env_file() -> None:
    if not ENV_FILE.exists():
        return
    # KEY=value lines; quotes around the value are dropped.
    for raw_line in ENV_FILE.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


def _as_bool(value: str | None, default: bool) -> bool:
    """Read "1", "true", "yes", "on" (any case) as True; unset keeps ``default``."""
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "y", "on"}


def _as_optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass
class Settings:
    ESA_ACCESS_TOKEN: str | None = None
    ESA_API_BASE_URL: str = DEFAULT_API_BASE_URL
    ESA_TEAM: str | None = None
    ESA_HTTP_TIMEOUT_SECONDS: float = 30.0
    ESA_USER_AGENT: str = DEFAULT_USER_AGENT
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    def __post_init__(self) -> None:
        self.ESA_API_BASE_URL = self.ESA_API_BASE_URL.rstrip("/")
        scheme = self.ESA_API_BASE_URL.split(":", 1)[0].lower()
        if scheme not in {"http", "https"}:
            raise ValueError(
                "ESA_API_BASE_URL must be an http(s) URL (https://api.esa.io/v1/teams)."
            )
        if self.ESA_HTTP_TIMEOUT_SECONDS <= 0:
            raise ValueError("ESA_HTTP_TIMEOUT_SECONDS must be positive.")
        self.LOG_LEVEL = self.LOG_LEVEL.upper()

    @classmethod
    def from_environment(cls) -> "Settings":
        _load_env_file()
        return cls(
            ESA_ACCESS_TOKEN=_as_optional(os.environ.get("ESA_ACCESS_TOKEN")),
            ESA_API_BASE_URL=os.environ.get("ESA_API_BASE_URL", cls.ESA_API_BASE_URL),
            ESA_TEAM=_as_optional(os.environ.get("ESA_TEAM")),
            ESA_HTTP_TIMEOUT_SECONDS=float(
                os.environ.get(
                    "ESA_HTTP_TIMEOUT_SECONDS", cls.ESA_HTTP_TIMEOUT_SECONDS
                )
            ),
            ESA_USER_AGENT=os.environ.get("ESA_USER_AGENT", cls.ESA_USER_AGENT),
            LOG_LEVEL=os.environ.get("LOG_LEVEL", cls.LOG_LEVEL),
            LOG_JSON=_as_bool(os.environ.get("LOG_JSON"), cls.LOG_JSON),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_environment()
