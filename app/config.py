"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from db.config import load_env_files

_DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024


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
class BulkImportSettings:
    """
    Runtime settings for CSV bulk imports.
    """

    insert_batch_size: int = 1000
    max_upload_bytes: int = _DEFAULT_MAX_UPLOAD_BYTES
    upload_dir: Path = Path(tempfile.gettempdir()) / "school-uploads"
    log_row_errors: bool = True


@dataclass(frozen=True)
class LoggingSettings:
    level: int = logging.INFO


@lru_cache(maxsize=1)
def get_bulk_import_settings() -> BulkImportSettings:
    """
    Return cached bulk-import settings from environment variables.
    """

    default_dir = Path(tempfile.gettempdir()) / "school-uploads"
    return BulkImportSettings(
        insert_batch_size=max(1, _get_int_env("BULK_IMPORT_INSERT_BATCH_SIZE", 1000)),
        max_upload_bytes=max(1, _get_int_env("BULK_IMPORT_MAX_UPLOAD_BYTES", _DEFAULT_MAX_UPLOAD_BYTES)),
        upload_dir=Path(_get_str_env("BULK_IMPORT_UPLOAD_DIR", str(default_dir))),
        log_row_errors=_get_bool_env("BULK_IMPORT_LOG_ROW_ERRORS", True),
    )


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """
    Return the configured log level; unknown names fall back to INFO.
    """

    name = _get_str_env("LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    return LoggingSettings(level=level if isinstance(level, int) else logging.INFO)
