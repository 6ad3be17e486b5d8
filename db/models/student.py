"""
db/models/student.py

Student roster record. `student_code` is the school-issued identifier
(the `studentId` CSV column); `id` is the canonical identifier that fees
and attendance rows reference.
"""

from datetime import date

from sqlalchemy import Date, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from db.base import ActiveFlagMixin, Base, IdentifierMixin, JSONList, TimestampMixin


class Gender:
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Student(Base, IdentifierMixin, ActiveFlagMixin, TimestampMixin):
    __tablename__ = "students"

    student_code: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="School-issued student ID, e.g. STU001",
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    gender: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        comment="male, female, other",
    )

    street: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(120), nullable=False)
    state: Mapped[str] = mapped_column(String(120), nullable=False)
    zip_code: Mapped[str] = mapped_column(String(20), nullable=False)
    country: Mapped[str] = mapped_column(String(120), nullable=False)

    father_name: Mapped[str] = mapped_column(String(200), nullable=False)
    mother_name: Mapped[str] = mapped_column(String(200), nullable=False)
    guardian_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    parent_contact_number: Mapped[str] = mapped_column(String(32), nullable=False)
    parent_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    class_name: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Class / grade label, e.g. Grade 5",
    )
    section: Mapped[str] = mapped_column(String(16), nullable=False)
    roll_number: Mapped[str] = mapped_column(String(32), nullable=False)
    admission_date: Mapped[date] = mapped_column(Date, nullable=False)

    emergency_contact_name: Mapped[str] = mapped_column(String(200), nullable=False)
    emergency_contact_relationship: Mapped[str] = mapped_column(String(64), nullable=False)
    emergency_contact_phone: Mapped[str] = mapped_column(String(32), nullable=False)

    profile_image: Mapped[str | None] = mapped_column(String(512), nullable=True)
    blood_group: Mapped[str | None] = mapped_column(String(8), nullable=True)
    medical_conditions: Mapped[list[str] | None] = mapped_column(JSONList, nullable=True)

    __table_args__ = (
        UniqueConstraint("student_code", name="uq_students_student_code"),
        UniqueConstraint(
            "class_name",
            "section",
            "roll_number",
            name="uq_students_class_section_roll_number",
        ),
        Index("ix_students_roll_number", "roll_number"),
        Index("ix_students_is_active", "is_active"),
    )
