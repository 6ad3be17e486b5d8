"""
app/services/csv_export_service.py

Upload templates and exports in the bulk-upload column layout.

An exported CSV can be fed back into the bulk upload unchanged; every
exported row then reports as a duplicate. Serialization to CSV or JSON
is left to the router.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache

from sqlalchemy.orm import Session

from app.importers.registry import ImportRegistry, get_import_registry
from app.repositories.record_store import RecordStore, SQLAlchemyRecordStore


@dataclass(frozen=True)
class ExportResult:
    """
    Flat tabular export of one entity type.

    Attributes
    ----------
    entity_type: Registered entity type that was exported.
    fields:      Ordered column names, identical to the upload template header.
    rows:        One dict of rendered cell strings per persisted record.
    """

    entity_type: str
    fields: list[str] = field(default_factory=list)
    rows: list[dict[str, str]] = field(default_factory=list)


class CSVExportService:
    def __init__(self, registry: ImportRegistry | None = None) -> None:
        self._registry = registry or get_import_registry()

    def template(self, entity_type: str) -> tuple[str, str]:
        """
        Return ``(filename, csv_text)`` for the entity's upload template.
        """
        descriptor = self._registry.get(entity_type)
        return f"{descriptor.entity_type}_upload_template.csv", descriptor.template

    def export(
        self,
        entity_type: str,
        *,
        db: Session,
        store: RecordStore | None = None,
    ) -> ExportResult:
        descriptor = self._registry.get(entity_type)
        store = store or SQLAlchemyRecordStore(db)
        records = store.find(descriptor.entity_type, descriptor.export_filter)
        return ExportResult(
            entity_type=descriptor.entity_type,
            fields=list(descriptor.columns),
            rows=[descriptor.export_row(record) for record in records],
        )


@lru_cache(maxsize=1)
def get_csv_export_service() -> CSVExportService:
    return CSVExportService()
