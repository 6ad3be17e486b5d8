"""
tests/test_config.py

Environment-driven settings.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from app.config import get_bulk_import_settings, get_logging_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_bulk_import_settings.cache_clear()
    get_logging_settings.cache_clear()
    yield
    get_bulk_import_settings.cache_clear()
    get_logging_settings.cache_clear()


def test_bulk_import_defaults(monkeypatch) -> None:
    for name in (
        "BULK_IMPORT_INSERT_BATCH_SIZE",
        "BULK_IMPORT_MAX_UPLOAD_BYTES",
        "BULK_IMPORT_UPLOAD_DIR",
        "BULK_IMPORT_LOG_ROW_ERRORS",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = get_bulk_import_settings()

    assert settings.insert_batch_size == 1000
    assert settings.max_upload_bytes == 5 * 1024 * 1024
    assert settings.upload_dir.name == "school-uploads"
    assert settings.log_row_errors is True


def test_bulk_import_overrides(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("BULK_IMPORT_INSERT_BATCH_SIZE", "250")
    monkeypatch.setenv("BULK_IMPORT_MAX_UPLOAD_BYTES", "1024")
    monkeypatch.setenv("BULK_IMPORT_UPLOAD_DIR", str(tmp_path))
    monkeypatch.setenv("BULK_IMPORT_LOG_ROW_ERRORS", "off")

    settings = get_bulk_import_settings()

    assert settings.insert_batch_size == 250
    assert settings.max_upload_bytes == 1024
    assert settings.upload_dir == Path(tmp_path)
    assert settings.log_row_errors is False


@pytest.mark.parametrize("raw", ["zero", "0", "-5"])
def test_bad_batch_size_falls_back_to_a_usable_value(monkeypatch, raw) -> None:
    monkeypatch.setenv("BULK_IMPORT_INSERT_BATCH_SIZE", raw)

    assert get_bulk_import_settings().insert_batch_size >= 1


def test_settings_are_cached(monkeypatch) -> None:
    first = get_bulk_import_settings()
    monkeypatch.setenv("BULK_IMPORT_INSERT_BATCH_SIZE", "7")

    assert get_bulk_import_settings() is first


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("debug", logging.DEBUG), ("WARNING", logging.WARNING), ("chatty", logging.INFO)],
)
def test_log_level(monkeypatch, raw, expected) -> None:
    monkeypatch.setenv("LOG_LEVEL", raw)

    assert get_logging_settings().level == expected
