from __future__ import annotations

import os
from dataclasses import dataclass

STORAGE_FORMATS = ("json", "csv")


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - TODO_STORAGE_NAME: base name of the storage file, without extension. Default 'todo_list'
    - TODO_STORAGE_FORMAT: 'json' (default) or 'csv'
    - TODO_LOG_LEVEL: log level name for diagnostics on stderr. Default 'WARNING'
    - TODO_LOG_JSON: 'true' to emit JSON log lines instead of console output (default: false)
    """

    storage_name: str
    storage_format: str
    log_level: str
    log_json: bool


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


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    storage_format = _get_env("TODO_STORAGE_FORMAT", "json").strip().lower()
    if storage_format not in STORAGE_FORMATS:
        # Fallback to json if unsupported
        storage_format = "json"

    return Settings(
        storage_name=_get_env("TODO_STORAGE_NAME", "todo_list").strip(),
        storage_format=storage_format,
        log_level=_get_env("TODO_LOG_LEVEL", "WARNING").strip().upper(),
        log_json=_parse_bool(_get_env("TODO_LOG_JSON", "false"), False),
    )
