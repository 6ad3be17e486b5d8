"""
app/importers/attendance.py

Daily attendance rows.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from app.importers.base import ImportDescriptor, UniquenessRule, format_cell, string_column_lengths
from app.importers.fees import STUDENT_REFERENCE
from app.importers.fields import RowReader, RowValidationFailure
from db.models import Attendance

ATTENDANCE_STATUSES: tuple[str, ...] = ("present", "absent", "late", "excused")

COLUMN_FIELDS: dict[str, str] = {
    "studentId": "student_id",
    "date": "date",
    "status": "status",
    "checkInTime": "check_in_time",
    "checkOutTime": "check_out_time",
    "notes": "notes",
}

REQUIRED_COLUMNS: tuple[str, ...] = ("studentId", "date", "status")

TEMPLATE = """\
studentId,date,status,checkInTime,checkOutTime,notes
STU001,2024-01-15,present,08:45,15:30,
STU002,2024-01-15,late,09:20,15:30,Bus delayed
STU001,2024-01-16,absent,,,Sick leave
STU002,2024-01-16,present,15:30,08:45,Check-out before check-in is rejected
"""


@dataclass(frozen=True)
class AttendanceCreate:
    student_ref: str
    date: date
    status: str
    check_in_time: datetime | None = None
    check_out_time: datetime | None = None
    notes: str | None = None

    def to_record(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "status": self.status,
            "check_in_time": self.check_in_time,
            "check_out_time": self.check_out_time,
            "notes": self.notes,
        }


def parse_attendance_row(row: RowReader) -> AttendanceCreate:
    student_ref = row.text("studentId")
    on_date = row.date("date")
    status = row.choice("status", ATTENDANCE_STATUSES)
    check_in = row.optional_time("checkInTime", on_date=on_date)
    check_out = row.optional_time("checkOutTime", on_date=on_date)
    if check_in is not None and check_out is not None and check_out <= check_in:
        raise RowValidationFailure("checkOutTime must be after checkInTime")

    return AttendanceCreate(
        student_ref=student_ref,
        date=on_date,
        status=status,
        check_in_time=check_in,
        check_out_time=check_out,
        notes=row.optional_text("notes"),
    )


def export_attendance_row(record: Mapping[str, Any]) -> dict[str, str]:
    return {column: format_cell(record.get(name)) for column, name in COLUMN_FIELDS.items()}


ATTENDANCE_IMPORT = ImportDescriptor(
    entity_type="attendance",
    label="Attendance",
    columns=tuple(COLUMN_FIELDS),
    required_columns=REQUIRED_COLUMNS,
    parse_row=parse_attendance_row,
    export_row=export_attendance_row,
    template=TEMPLATE,
    uniqueness_rules=(
        UniquenessRule(
            name="student_date",
            fields=("student_id", "date"),
            description="student and date",
        ),
    ),
    references=(STUDENT_REFERENCE,),
    column_lengths=string_column_lengths(Attendance, COLUMN_FIELDS),
)
