"""
app/importers/fees.py

Fee rows. Each row names its student by studentId, which may be the
student's canonical id, school-issued student code or roll number.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from app.domain.filters import Equals
from app.importers.base import (
    ImportDescriptor,
    ReferenceField,
    UniquenessRule,
    format_cell,
    string_column_lengths,
)
from app.importers.fields import RowReader, RowValidationFailure
from db.models import Fee, FeeStatus

FEE_TYPES: tuple[str, ...] = (
    "tuition",
    "transport",
    "library",
    "sports",
    "examination",
    "admission",
    "other",
)

MONTHS: tuple[str, ...] = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)

ACADEMIC_YEAR_PATTERN = re.compile(r"^(\d{4})-(\d{4})$")

COLUMN_FIELDS: dict[str, str] = {
    "studentId": "student_id",
    "feeType": "fee_type",
    "amount": "amount",
    "dueDate": "due_date",
    "academicYear": "academic_year",
    "month": "month",
    "term": "term",
    "description": "description",
    "status": "status",
}

REQUIRED_COLUMNS: tuple[str, ...] = (
    "studentId",
    "feeType",
    "amount",
    "dueDate",
    "academicYear",
)

TEMPLATE = """\
studentId,feeType,amount,dueDate,academicYear,month,term,description
STU001,tuition,5000,2024-01-15,2023-2024,january,,Monthly tuition fee
STU001,transport,1500,2024-01-15,2023-2024,january,,Monthly transport fee
STU002,library,500,2024-01-15,2023-2024,,,Annual library fee
STU002,sports,2000,2024-01-15,2023-2024,,Term 1,Annual sports fee
"""

STUDENT_REFERENCE = ReferenceField(
    column="studentId",
    request_attr="student_ref",
    record_field="student_id",
    target="students",
    lookup_fields=("student_code", "roll_number"),
    label="Student",
    scope=Equals("is_active", True),
)


@dataclass(frozen=True)
class FeeCreate:
    student_ref: str
    fee_type: str
    amount: Decimal
    due_date: date
    academic_year: str
    month: str | None = None
    term: str | None = None
    description: str | None = None

    def to_record(self) -> dict[str, Any]:
        return {
            "fee_type": self.fee_type,
            "amount": self.amount,
            "due_date": self.due_date,
            "academic_year": self.academic_year,
            "month": self.month,
            "term": self.term,
            "description": self.description,
            "status": FeeStatus.PENDING,
        }


def parse_academic_year(raw: str) -> str:
    match = ACADEMIC_YEAR_PATTERN.match(raw)
    if match is None or int(match.group(2)) != int(match.group(1)) + 1:
        raise RowValidationFailure(
            f"Invalid academicYear '{raw}'. Use YYYY-YYYY with consecutive years, e.g. 2023-2024"
        )
    return raw


def parse_fee_row(row: RowReader) -> FeeCreate:
    return FeeCreate(
        student_ref=row.text("studentId"),
        fee_type=row.choice("feeType", FEE_TYPES),
        amount=row.decimal(
            "amount",
            positive=True,
            max_digits=Fee.__table__.c.amount.type.precision,
            places=Fee.__table__.c.amount.type.scale,
        ),
        due_date=row.date("dueDate"),
        academic_year=parse_academic_year(row.text("academicYear")),
        month=row.choice("month", MONTHS, required=False),
        term=row.optional_text("term"),
        description=row.optional_text("description"),
    )


def export_fee_row(record: Mapping[str, Any]) -> dict[str, str]:
    return {column: format_cell(record.get(name)) for column, name in COLUMN_FIELDS.items()}


FEE_IMPORT = ImportDescriptor(
    entity_type="fees",
    label="Fee",
    columns=tuple(COLUMN_FIELDS),
    required_columns=REQUIRED_COLUMNS,
    parse_row=parse_fee_row,
    export_row=export_fee_row,
    template=TEMPLATE,
    uniqueness_rules=(
        UniquenessRule(
            name="student_fee_period",
            fields=("student_id", "fee_type", "academic_year", "month"),
            description="student, feeType, academicYear and month",
        ),
    ),
    references=(STUDENT_REFERENCE,),
    column_lengths=string_column_lengths(Fee, COLUMN_FIELDS),
)
