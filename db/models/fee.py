"""
db/models/fee.py

Fee charged to one student for one billing period.
"""

import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Numeric, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, IdentifierMixin, TimestampMixin


class FeeType:
    TUITION = "tuition"
    TRANSPORT = "transport"
    LIBRARY = "library"
    SPORTS = "sports"
    EXAMINATION = "examination"
    ADMISSION = "admission"
    OTHER = "other"


class FeeStatus:
    """Lifecycle of a fee: pending → partial → paid, or pending → overdue."""

    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    PARTIAL = "partial"


class Fee(Base, IdentifierMixin, TimestampMixin):
    __tablename__ = "fees"

    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
    )
    fee_type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="tuition, transport, library, sports, examination, admission, other",
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=FeeStatus.PENDING,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    academic_year: Mapped[str] = mapped_column(
        String(9),
        nullable=False,
        comment="e.g. 2023-2024",
    )
    month: Mapped[str | None] = mapped_column(
        String(16),
        nullable=True,
        comment="Lower-case month name for monthly fees; NULL for annual fees",
    )
    term: Mapped[str | None] = mapped_column(String(32), nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "student_id",
            "fee_type",
            "academic_year",
            "month",
            name="uq_fees_student_type_year_month",
        ),
        Index("ix_fees_student_id", "student_id"),
        Index("ix_fees_status", "status"),
        Index("ix_fees_due_date", "due_date"),
    )
