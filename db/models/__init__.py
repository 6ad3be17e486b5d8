"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.attendance import Attendance, AttendanceStatus
from db.models.fee import Fee, FeeStatus, FeeType
from db.models.student import Gender, Student
from db.models.teacher import Teacher

__all__ = [
    "Attendance",
    "AttendanceStatus",
    "Fee",
    "FeeStatus",
    "FeeType",
    "Gender",
    "Student",
    "Teacher",
]
