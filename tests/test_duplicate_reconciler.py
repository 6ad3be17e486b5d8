"""
tests/test_duplicate_reconciler.py

Business-key duplicate detection against persisted and in-upload rows.
"""

from __future__ import annotations

from datetime import date

from app.domain.bulk_import import BusinessKey, CandidateRow
from app.importers.attendance import ATTENDANCE_IMPORT
from app.importers.fees import FEE_IMPORT
from app.services.duplicate_reconciler import DuplicateReconciler


def _attendance(row_number: int, student_id, day: date) -> CandidateRow:
    return CandidateRow(
        row_number=row_number,
        record={"student_id": student_id, "date": day, "status": "present"},
    )


def _fee(row_number: int, student_id, fee_type: str, month: str | None) -> CandidateRow:
    return CandidateRow(
        row_number=row_number,
        record={
            "student_id": student_id,
            "fee_type": fee_type,
            "amount": 100,
            "due_date": date(2024, 1, 15),
            "academic_year": "2023-2024",
            "month": month,
            "status": "pending",
        },
    )


class TestBusinessKey:
    def test_keys_compare_by_typed_values(self) -> None:
        fields = ("a", "b")
        assert BusinessKey.from_record("r", fields, {"a": "A1", "b": "B"}) != BusinessKey.from_record(
            "r", fields, {"a": "A", "b": "1B"}
        )
        assert BusinessKey.from_record("r", fields, {"a": 1, "b": None}) == BusinessKey("r", (1, None))


class TestDuplicateReconciler:
    def test_single_query_for_all_candidates(self, seeded_students, counting_store) -> None:
        sid = seeded_students["STU001"]
        candidates = [_attendance(n, sid, date(2024, 1, n)) for n in range(1, 8)]

        ready, duplicates = DuplicateReconciler(counting_store).reconcile(ATTENDANCE_IMPORT, candidates)

        assert counting_store.calls == [("find_many", "attendance")]
        assert len(ready) == 7
        assert duplicates == []

    def test_no_candidates_issue_no_query(self, counting_store) -> None:
        assert DuplicateReconciler(counting_store).reconcile(ATTENDANCE_IMPORT, []) == ([], [])
        assert counting_store.calls == []

    def test_persisted_key_is_a_duplicate(self, seeded_students, counting_store, db_session) -> None:
        sid = seeded_students["STU001"]
        counting_store.insert_batch("attendance", [_attendance(1, sid, date(2024, 1, 15)).record])
        db_session.commit()

        ready, duplicates = DuplicateReconciler(counting_store).reconcile(
            ATTENDANCE_IMPORT,
            [_attendance(4, sid, date(2024, 1, 15)), _attendance(5, sid, date(2024, 1, 16))],
        )

        assert [row.row_number for row in ready] == [5]
        assert [row.row_number for row in duplicates] == [4]
        assert duplicates[0].reason.startswith("Attendance with student and date (")
        assert duplicates[0].reason.endswith(", 2024-01-15) already exists")

    def test_repeat_within_upload_points_at_first_row(self, seeded_students, counting_store) -> None:
        sid = seeded_students["STU002"]

        ready, duplicates = DuplicateReconciler(counting_store).reconcile(
            ATTENDANCE_IMPORT,
            [_attendance(2, sid, date(2024, 1, 15)), _attendance(9, sid, date(2024, 1, 15))],
        )

        assert [row.row_number for row in ready] == [2]
        assert duplicates[0].row_number == 9
        assert duplicates[0].reason.endswith("duplicates row 2 in this upload")

    def test_null_period_matches_persisted_null_period(self, seeded_students, counting_store, db_session) -> None:
        sid = seeded_students["STU001"]
        counting_store.insert_batch("fees", [_fee(1, sid, "library", None).record])
        db_session.commit()

        ready, duplicates = DuplicateReconciler(counting_store).reconcile(
            FEE_IMPORT,
            [_fee(1, sid, "library", None), _fee(2, sid, "library", "march")],
        )

        assert [row.row_number for row in duplicates] == [1]
        assert [row.row_number for row in ready] == [2]
