"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from fastapi import File, HTTPException, UploadFile, status

from app.config import BulkImportSettings

logger = logging.getLogger(__name__)

CSV_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "application/vnd.ms-excel",
}

_CHUNK_SIZE = 64 * 1024


def get_csv_upload(file: UploadFile = File(..., alias="csvFile")) -> UploadFile:
    """
    Validate that the uploaded file is a CSV by extension or MIME type.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").strip().lower()

    is_csv_filename = filename.endswith(".csv")
    is_csv_content_type = content_type in CSV_CONTENT_TYPES

    if not is_csv_filename and not is_csv_content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV files are allowed.",
        )

    return file


def spool_upload(file: UploadFile, settings: BulkImportSettings) -> Path:
    """
    Copy the upload into a temp file under the upload dir and return its path.

    Raises 413 once the upload exceeds ``settings.max_upload_bytes``; the
    partial temp file is removed first. The caller owns the returned path.
    """

    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    source = file.file
    source.seek(0)

    written = 0
    with tempfile.NamedTemporaryFile(
        mode="wb",
        dir=settings.upload_dir,
        prefix="bulk-",
        suffix=".csv",
        delete=False,
    ) as target:
        path = Path(target.name)
        try:
            while True:
                chunk = source.read(_CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > settings.max_upload_bytes:
                    break
                target.write(chunk)
        except OSError:
            target.close()
            path.unlink(missing_ok=True)
            raise

    if written > settings.max_upload_bytes:
        path.unlink(missing_ok=True)
        logger.warning(
            "Rejected CSV upload filename=%r larger than %d bytes",
            file.filename,
            settings.max_upload_bytes,
        )
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"CSV file exceeds the {settings.max_upload_bytes} byte upload limit.",
        )
    return path
