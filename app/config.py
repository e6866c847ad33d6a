"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


@dataclass(frozen=True)
class WorkerImportSettings:
    """
    Runtime settings for worker CSV import.
    """

    batch_size: int = 100
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    log_validation_errors: bool = True
    allow_partial: bool = False
    typo_threshold: float = 0.85


@dataclass(frozen=True)
class LoggingSettings:
    """
    Root logger configuration.
    """

    level: str = "INFO"


@lru_cache(maxsize=1)
def get_worker_import_settings() -> WorkerImportSettings:
    """
    Return cached worker import settings from environment variables.
    """

    return WorkerImportSettings(
        batch_size=max(1, _get_int_env("WORKER_IMPORT_BATCH_SIZE", 100)),
        max_upload_bytes=max(
            1, _get_int_env("WORKER_IMPORT_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)
        ),
        log_validation_errors=_get_bool_env("WORKER_IMPORT_LOG_VALIDATION_ERRORS", True),
        allow_partial=_get_bool_env("WORKER_IMPORT_ALLOW_PARTIAL", False),
        typo_threshold=min(1.0, max(0.0, _get_float_env("WORKER_IMPORT_TYPO_THRESHOLD", 0.85))),
    )


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """
    Return root logging settings from environment variables.
    """

    return LoggingSettings(level=_get_str_env("LOG_LEVEL", "INFO").upper())
