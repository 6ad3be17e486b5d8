"""
app/importers/base.py

Declarative description of one importable entity type.

The bulk-import engine is written once; each entity supplies an
ImportDescriptor naming its columns, its row parser, the references it
needs resolved and the uniqueness rules duplicates are checked against.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from sqlalchemy import String

from app.domain.bulk_import import InvalidRow, ParsedRow, ValidationOutcome, ValidRow
from app.domain.filters import AllOf, Predicate
from app.importers.fields import RowReader, RowValidationFailure


class CreationRequest(Protocol):
    """
    Typed, normalized result of validating one row.
    """

    def to_record(self) -> dict[str, Any]:
        ...


@dataclass(frozen=True)
class ReferenceField:
    """
    A loosely-typed foreign identifier that must be resolved before insert.

    ``request_attr`` holds the supplied value on the creation request;
    the resolved canonical id is written to ``record_field``. Only target
    records matching ``scope`` can be referenced.
    """

    column: str
    request_attr: str
    record_field: str
    target: str
    lookup_fields: tuple[str, ...]
    label: str
    scope: Predicate = field(default_factory=AllOf.of)


@dataclass(frozen=True)
class UniquenessRule:
    """
    Business-key rule: at most one persisted record per combination of ``fields``.
    """

    name: str
    fields: tuple[str, ...]
    description: str


@dataclass(frozen=True)
class ImportDescriptor:
    entity_type: str
    label: str
    columns: tuple[str, ...]
    required_columns: tuple[str, ...]
    parse_row: Callable[[RowReader], CreationRequest]
    export_row: Callable[[Mapping[str, Any]], dict[str, str]]
    template: str
    uniqueness_rules: tuple[UniquenessRule, ...] = ()
    references: tuple[ReferenceField, ...] = ()
    export_filter: Predicate = field(default_factory=AllOf.of)
    column_lengths: Mapping[str, int] = field(default_factory=dict)

    def validate(self, row: ParsedRow) -> ValidationOutcome:
        """
        Validate one parsed row without touching the database.

        Required columns are checked first, in declared order, so the
        message always names the first missing one.
        """

        reader = RowReader(row.values)
        try:
            reader.ensure_well_formed()
            reader.require_columns(self.required_columns)
            reader.check_lengths(self.column_lengths)
            request = self.parse_row(reader)
        except RowValidationFailure as exc:
            return InvalidRow(row_number=row.row_number, reason=str(exc))
        return ValidRow(row_number=row.row_number, request=request)


def string_column_lengths(model: type, column_fields: Mapping[str, str]) -> dict[str, int]:
    """
    Map CSV columns to the length limit of their VARCHAR column on ``model``.
    """

    limits: dict[str, int] = {}
    for column, name in column_fields.items():
        column_type = model.__table__.columns[name].type
        if isinstance(column_type, String) and column_type.length:
            limits[column] = column_type.length
    return limits


def format_cell(value: Any) -> str:
    """
    Render one record value for CSV export.
    """

    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)
