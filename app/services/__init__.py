"""
app/services package marker.
"""

from app.services.bulk_import_service import (
    BulkImportService,
    ImportPersistenceError,
    get_bulk_import_service,
)
from app.services.csv_export_service import CSVExportService, get_csv_export_service
from app.services.duplicate_reconciler import DuplicateReconciler
from app.services.reference_resolver import ReferenceResolver

__all__ = [
    "BulkImportService",
    "ImportPersistenceError",
    "get_bulk_import_service",
    "CSVExportService",
    "get_csv_export_service",
    "DuplicateReconciler",
    "ReferenceResolver",
]
