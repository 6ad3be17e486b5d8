"""
app/domain/bulk_import.py

Domain models used by the CSV bulk-import flow.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

RawRow = dict[str, Any]


class RowState(str, Enum):
    """
    Per-row lifecycle. Terminal states are VALIDATION_FAILED,
    REFERENCE_UNRESOLVED, DUPLICATE and INSERTED.
    """

    PARSED = "parsed"
    VALIDATION_FAILED = "validation_failed"
    VALIDATED = "validated"
    REFERENCE_UNRESOLVED = "reference_unresolved"
    REFERENCE_RESOLVED = "reference_resolved"
    DUPLICATE = "duplicate"
    READY_TO_INSERT = "ready_to_insert"
    INSERTED = "inserted"


@dataclass(frozen=True)
class ParsedRow:
    """
    One CSV data row with its 1-based position (header excluded).
    """

    row_number: int
    values: RawRow


@dataclass(frozen=True)
class ValidRow:
    row_number: int
    request: Any


@dataclass(frozen=True)
class InvalidRow:
    row_number: int
    reason: str


ValidationOutcome = Union[ValidRow, InvalidRow]


@dataclass(frozen=True)
class BusinessKey:
    """
    Natural uniqueness key of a record under one named rule.

    Keys compare by rule name and the exact tuple of typed values, so
    ("A1", "B") and ("A", "1B") never collide.
    """

    rule: str
    values: tuple[Any, ...]

    @classmethod
    def from_record(cls, rule: str, fields: tuple[str, ...], record: dict[str, Any]) -> BusinessKey:
        return cls(rule=rule, values=tuple(record.get(name) for name in fields))


@dataclass(frozen=True)
class ResolutionResult:
    """
    Supplied identifier -> canonical identifier for one reference class.
    """

    resolved: dict[str, uuid.UUID] = field(default_factory=dict)
    unresolved: dict[str, str] = field(default_factory=dict)

    def lookup(self, supplied: str) -> uuid.UUID | None:
        return self.resolved.get(supplied)


@dataclass(frozen=True)
class CandidateRow:
    """
    A validated row whose references are resolved, ready for duplicate checks.
    """

    row_number: int
    record: dict[str, Any]


@dataclass(frozen=True)
class DuplicateRow:
    row_number: int
    reason: str


@dataclass(frozen=True)
class ImportOutcome:
    """
    Structured result of one bulk import call.
    """

    total_rows: int
    successful_uploads: int
    duplicates: int
    invalid_references: int
    errors: int
    uploaded_records: list[dict[str, Any]] = field(default_factory=list)
    duplicate_messages: list[str] = field(default_factory=list)
    invalid_reference_messages: list[str] = field(default_factory=list)
    validation_error_messages: list[str] = field(default_factory=list)


def row_message(row_number: int, reason: str) -> str:
    return f"Row {row_number}: {reason}"
