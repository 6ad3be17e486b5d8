"""
db/models/teacher.py

Teaching staff record.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Index, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from db.base import ActiveFlagMixin, Base, IdentifierMixin, JSONList, TimestampMixin


class Teacher(Base, IdentifierMixin, ActiveFlagMixin, TimestampMixin):
    __tablename__ = "teachers"

    teacher_code: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="School-issued teacher ID, e.g. TCH001",
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    gender: Mapped[str] = mapped_column(String(16), nullable=False)

    street: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(120), nullable=False)
    state: Mapped[str] = mapped_column(String(120), nullable=False)
    zip_code: Mapped[str] = mapped_column(String(20), nullable=False)
    country: Mapped[str] = mapped_column(String(120), nullable=False)

    qualifications: Mapped[list[str]] = mapped_column(JSONList, nullable=False)
    subjects: Mapped[list[str]] = mapped_column(JSONList, nullable=False)
    experience: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Years of teaching experience",
    )
    joining_date: Mapped[date] = mapped_column(Date, nullable=False)
    salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    emergency_contact_name: Mapped[str] = mapped_column(String(200), nullable=False)
    emergency_contact_relationship: Mapped[str] = mapped_column(String(64), nullable=False)
    emergency_contact_phone: Mapped[str] = mapped_column(String(32), nullable=False)

    profile_image: Mapped[str | None] = mapped_column(String(512), nullable=True)
    blood_group: Mapped[str | None] = mapped_column(String(8), nullable=True)
    bank_account_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    bank_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    ifsc_code: Mapped[str | None] = mapped_column(String(32), nullable=True)

    __table_args__ = (
        UniqueConstraint("teacher_code", name="uq_teachers_teacher_code"),
        UniqueConstraint("email", name="uq_teachers_email"),
        Index("ix_teachers_is_active", "is_active"),
    )
