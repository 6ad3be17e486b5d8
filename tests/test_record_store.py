"""
tests/test_record_store.py

SQLAlchemyRecordStore against an in-memory SQLite database.
"""

from __future__ import annotations

import uuid
from datetime import date

import pytest

from app.domain.filters import AllOf, Equals, InSet, Range
from app.repositories.record_store import SQLAlchemyRecordStore


def _student(code: str, roll: str, *, section: str = "A", active: bool = True) -> dict:
    return {
        "student_code": code,
        "first_name": "Test",
        "last_name": code,
        "date_of_birth": date(2011, 1, 1),
        "gender": "male",
        "street": "1 Lane",
        "city": "Springfield",
        "state": "IL",
        "zip_code": "62701",
        "country": "USA",
        "father_name": "F",
        "mother_name": "M",
        "parent_contact_number": "+1",
        "class_name": "Grade 5",
        "section": section,
        "roll_number": roll,
        "admission_date": date(2023, 8, 15),
        "emergency_contact_name": "M",
        "emergency_contact_relationship": "Mother",
        "emergency_contact_phone": "+2",
        "is_active": active,
    }


@pytest.fixture()
def store(db_session) -> SQLAlchemyRecordStore:
    return SQLAlchemyRecordStore(db_session, batch_size=2)


class TestSQLAlchemyRecordStore:
    def test_insert_batch_returns_ids_in_input_order(self, store, db_session) -> None:
        records = [_student(f"S{i}", str(i)) for i in range(5)]

        ids = store.insert_batch("students", records)
        db_session.commit()

        assert len(ids) == 5
        assert all(isinstance(value, uuid.UUID) for value in ids)
        found = {row["student_code"]: row["id"] for row in store.find("students", AllOf.of())}
        assert [found[f"S{i}"] for i in range(5)] == ids

    def test_insert_batch_keeps_supplied_ids(self, store) -> None:
        fixed = uuid.uuid4()

        assert store.insert_batch("students", [{**_student("S1", "1"), "id": fixed}]) == [fixed]

    def test_insert_batch_with_no_records_is_a_no_op(self, store) -> None:
        assert store.insert_batch("students", []) == []

    def test_equals_none_matches_null(self, store) -> None:
        store.insert_batch("students", [_student("S1", "1"), {**_student("S2", "2"), "email": "s2@x.io"}])

        rows = store.find("students", Equals("email", None))

        assert [row["student_code"] for row in rows] == ["S1"]

    def test_find_many_ors_predicates(self, store) -> None:
        store.insert_batch(
            "students",
            [_student("S1", "1"), _student("S2", "2"), _student("S3", "3", active=False)],
        )

        rows = store.find_many(
            "students",
            [InSet.of("student_code", ["S1"]), AllOf.of(Equals("roll_number", "3"), Equals("is_active", False))],
        )

        assert sorted(row["student_code"] for row in rows) == ["S1", "S3"]

    def test_find_many_without_predicates_issues_no_query(self, store) -> None:
        assert store.find_many("students", []) == []

    def test_empty_in_set_matches_nothing(self, store) -> None:
        store.insert_batch("students", [_student("S1", "1")])

        assert store.find("students", InSet.of("student_code", [])) == []

    def test_range_bounds(self, store) -> None:
        store.insert_batch(
            "students",
            [
                {**_student("S1", "1"), "admission_date": date(2022, 1, 1)},
                {**_student("S2", "2"), "admission_date": date(2023, 1, 1)},
                {**_student("S3", "3"), "admission_date": date(2024, 1, 1)},
            ],
        )

        rows = store.find("students", Range("admission_date", gt=date(2022, 1, 1), lte=date(2023, 1, 1)))

        assert [row["student_code"] for row in rows] == ["S2"]

    def test_unknown_entity_type(self, store) -> None:
        with pytest.raises(KeyError, match="Unknown entity type 'homework'"):
            store.find("homework", AllOf.of())

    def test_unknown_field(self, store) -> None:
        with pytest.raises(KeyError, match="no column 'nickname'"):
            store.find("students", Equals("nickname", "x"))

    def test_in_set_of_drops_repeats_and_keeps_order(self) -> None:
        assert InSet.of("roll_number", ["2", "1", "2"]).values == ("2", "1")
