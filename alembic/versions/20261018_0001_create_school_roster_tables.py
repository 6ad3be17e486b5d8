"""create students, teachers, fees and attendance tables

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def _address() -> list[sa.Column]:
    return [
        sa.Column("street", sa.String(length=255), nullable=False),
        sa.Column("city", sa.String(length=120), nullable=False),
        sa.Column("state", sa.String(length=120), nullable=False),
        sa.Column("zip_code", sa.String(length=20), nullable=False),
        sa.Column("country", sa.String(length=120), nullable=False),
    ]


def _emergency_contact() -> list[sa.Column]:
    return [
        sa.Column("emergency_contact_name", sa.String(length=200), nullable=False),
        sa.Column("emergency_contact_relationship", sa.String(length=64), nullable=False),
        sa.Column("emergency_contact_phone", sa.String(length=32), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "students",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("student_code", sa.String(length=64), nullable=False, comment="School-issued student ID, e.g. STU001"),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.Column("gender", sa.String(length=16), nullable=False, comment="male, female, other"),
        *_address(),
        sa.Column("father_name", sa.String(length=200), nullable=False),
        sa.Column("mother_name", sa.String(length=200), nullable=False),
        sa.Column("guardian_name", sa.String(length=200), nullable=True),
        sa.Column("parent_contact_number", sa.String(length=32), nullable=False),
        sa.Column("parent_email", sa.String(length=255), nullable=True),
        sa.Column("class_name", sa.String(length=64), nullable=False, comment="Class / grade label, e.g. Grade 5"),
        sa.Column("section", sa.String(length=16), nullable=False),
        sa.Column("roll_number", sa.String(length=32), nullable=False),
        sa.Column("admission_date", sa.Date(), nullable=False),
        *_emergency_contact(),
        sa.Column("profile_image", sa.String(length=512), nullable=True),
        sa.Column("blood_group", sa.String(length=8), nullable=True),
        sa.Column("medical_conditions", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("student_code", name="uq_students_student_code"),
        sa.UniqueConstraint(
            "class_name",
            "section",
            "roll_number",
            name="uq_students_class_section_roll_number",
        ),
    )
    op.create_index("ix_students_roll_number", "students", ["roll_number"], unique=False)
    op.create_index("ix_students_is_active", "students", ["is_active"], unique=False)

    op.create_table(
        "teachers",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("teacher_code", sa.String(length=64), nullable=False, comment="School-issued teacher ID, e.g. TCH001"),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.Column("gender", sa.String(length=16), nullable=False),
        *_address(),
        sa.Column("qualifications", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("subjects", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("experience", sa.Integer(), nullable=False, comment="Years of teaching experience"),
        sa.Column("joining_date", sa.Date(), nullable=False),
        sa.Column("salary", sa.Numeric(precision=12, scale=2), nullable=False),
        *_emergency_contact(),
        sa.Column("profile_image", sa.String(length=512), nullable=True),
        sa.Column("blood_group", sa.String(length=8), nullable=True),
        sa.Column("bank_account_number", sa.String(length=64), nullable=True),
        sa.Column("bank_name", sa.String(length=200), nullable=True),
        sa.Column("ifsc_code", sa.String(length=32), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("teacher_code", name="uq_teachers_teacher_code"),
        sa.UniqueConstraint("email", name="uq_teachers_email"),
    )
    op.create_index("ix_teachers_is_active", "teachers", ["is_active"], unique=False)

    op.create_table(
        "fees",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "fee_type",
            sa.String(length=32),
            nullable=False,
            comment="tuition, transport, library, sports, examination, admission, other",
        ),
        sa.Column("amount", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("academic_year", sa.String(length=9), nullable=False, comment="e.g. 2023-2024"),
        sa.Column(
            "month",
            sa.String(length=16),
            nullable=True,
            comment="Lower-case month name for monthly fees; NULL for annual fees",
        ),
        sa.Column("term", sa.String(length=32), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["student_id"], ["students.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "student_id",
            "fee_type",
            "academic_year",
            "month",
            name="uq_fees_student_type_year_month",
        ),
    )
    op.create_index("ix_fees_student_id", "fees", ["student_id"], unique=False)
    op.create_index("ix_fees_status", "fees", ["status"], unique=False)
    op.create_index("ix_fees_due_date", "fees", ["due_date"], unique=False)

    op.create_table(
        "attendance",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("student_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, comment="present, absent, late, excused"),
        sa.Column("check_in_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("check_out_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["student_id"], ["students.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("student_id", "date", name="uq_attendance_student_date"),
    )
    op.create_index("ix_attendance_date", "attendance", ["date"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_attendance_date", table_name="attendance")
    op.drop_table("attendance")

    op.drop_index("ix_fees_due_date", table_name="fees")
    op.drop_index("ix_fees_status", table_name="fees")
    op.drop_index("ix_fees_student_id", table_name="fees")
    op.drop_table("fees")

    op.drop_index("ix_teachers_is_active", table_name="teachers")
    op.drop_table("teachers")

    op.drop_index("ix_students_is_active", table_name="students")
    op.drop_index("ix_students_roll_number", table_name="students")
    op.drop_table("students")
