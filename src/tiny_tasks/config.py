# src/tiny_tasks/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is required at import time: every value has a fallback.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TINY_TASKS"

DEFAULT_API_URL = "http://localhost:3000/tasks"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_float(name: str, default: float | None) -> float | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Remote task store ----
    api_url: str
    http_timeout_seconds: float | None

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "Tiny Tasks").strip() or "Tiny Tasks"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tiny_tasks"))

        # Accept the unprefixed API_URL too; the first non-empty one wins.
        api_url = (_first_env(_k("API_URL"), "API_URL", default=DEFAULT_API_URL) or DEFAULT_API_URL).strip()
        api_url = api_url.rstrip("/") or DEFAULT_API_URL

        # None => let httpx apply its own default timeout.
        timeout = _env_float(_k("HTTP_TIMEOUT_SECONDS"), None)
        if timeout is not None and timeout <= 0:
            timeout = None

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            api_url=api_url,
            http_timeout_seconds=timeout,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, reading the environment on first use."""
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
