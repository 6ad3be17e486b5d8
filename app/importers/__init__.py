"""
Per-entity CSV import descriptors and row parsing.
"""

from app.importers.base import ImportDescriptor, ReferenceField, UniquenessRule
from app.importers.csv_reader import CSVFormatError, read_csv_rows
from app.importers.fields import RowValidationFailure
from app.importers.registry import ImportRegistry, UnknownEntityTypeError, get_import_registry

__all__ = [
    "CSVFormatError",
    "ImportDescriptor",
    "ImportRegistry",
    "ReferenceField",
    "RowValidationFailure",
    "UniquenessRule",
    "UnknownEntityTypeError",
    "get_import_registry",
    "read_csv_rows",
]
