"""
app/api/routers/bulk_import.py

CSV bulk-import HTTP endpoints.

POST /api/{entity}/bulk-upload    multipart field ``csvFile``
GET  /api/{entity}/csv-template   upload template download
GET  /api/{entity}/export         persisted records, ``format=csv|json``

``entity`` is one of the registered entity types (students, teachers,
fees, attendance); anything else is a 404. All import logic lives in
BulkImportService; the router only handles HTTP plumbing.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterator

from fastapi import APIRouter, Depends, HTTPException, Query, Response, UploadFile, status
from fastapi.responses import JSONResponse, StreamingResponse
from sqlalchemy.orm import Session

from app.api.dependencies import get_csv_upload, spool_upload
from app.config import BulkImportSettings, get_bulk_import_settings
from app.importers.csv_reader import CSVFormatError
from app.importers.registry import ImportRegistry, UnknownEntityTypeError, get_import_registry
from app.schemas.bulk_import import BulkImportOutcomeResponse
from app.services.bulk_import_service import (
    BulkImportService,
    ImportPersistenceError,
    get_bulk_import_service,
)
from app.services.csv_export_service import CSVExportService, ExportResult, get_csv_export_service
from db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["bulk-import"])

_VALID_FORMATS = frozenset({"csv", "json"})


def _require_entity(entity: str, registry: ImportRegistry) -> str:
    try:
        return registry.get(entity).entity_type
    except UnknownEntityTypeError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


def _to_csv_streaming(result: ExportResult, filename: str) -> StreamingResponse:
    """Stream *result* as a UTF-8 CSV file download."""

    def _generate() -> Iterator[str]:
        buf = io.StringIO()
        writer = csv.DictWriter(buf, fieldnames=result.fields, lineterminator="\n")
        writer.writeheader()
        yield buf.getvalue()

        for row in result.rows:
            buf.seek(0)
            buf.truncate(0)
            writer.writerow(row)
            yield buf.getvalue()

    return StreamingResponse(
        content=_generate(),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "X-Row-Count": str(len(result.rows)),
        },
    )


@router.post("/{entity}/bulk-upload", response_model=BulkImportOutcomeResponse)
def bulk_upload(
    entity: str,
    file: UploadFile = Depends(get_csv_upload),
    db: Session = Depends(get_db),
    registry: ImportRegistry = Depends(get_import_registry),
    settings: BulkImportSettings = Depends(get_bulk_import_settings),
    import_service: BulkImportService = Depends(get_bulk_import_service),
) -> BulkImportOutcomeResponse:
    """
    Import one CSV file of ``entity`` rows and report every row's fate.
    """

    entity_type = _require_entity(entity, registry)
    try:
        path = spool_upload(file, settings)
    finally:
        file.file.close()

    try:
        outcome = import_service.import_file(entity_type=entity_type, path=path, db=db)
    except CSVFormatError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except ImportPersistenceError as exc:
        logger.exception("Bulk import persistence failed entity=%s", entity_type)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to persist uploaded rows.",
        ) from exc

    return BulkImportOutcomeResponse.from_outcome(outcome)


@router.get("/{entity}/csv-template")
def download_csv_template(
    entity: str,
    registry: ImportRegistry = Depends(get_import_registry),
    export_service: CSVExportService = Depends(get_csv_export_service),
) -> Response:
    filename, content = export_service.template(_require_entity(entity, registry))
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{entity}/export", response_model=None)
def export_records(
    entity: str,
    output_format: str = Query(
        default="csv",
        alias="format",
        description='Output format: "csv" (file download) or "json".',
    ),
    db: Session = Depends(get_db),
    registry: ImportRegistry = Depends(get_import_registry),
    export_service: CSVExportService = Depends(get_csv_export_service),
) -> StreamingResponse | JSONResponse:
    """
    Export persisted records in the upload template's column layout.
    """

    entity_type = _require_entity(entity, registry)
    normalized_format = output_format.strip().lower()
    if normalized_format not in _VALID_FORMATS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid format {output_format!r}. Must be one of: {sorted(_VALID_FORMATS)}.",
        )

    result = export_service.export(entity_type, db=db)
    logger.info(
        "Bulk export entity=%s format=%s rows=%d",
        entity_type,
        normalized_format,
        len(result.rows),
    )

    if normalized_format == "csv":
        return _to_csv_streaming(result, f"{entity_type}_export.csv")
    return JSONResponse(
        content={
            "entity": entity_type,
            "rows": len(result.rows),
            "fields": result.fields,
            "data": result.rows,
        }
    )
