"""
tests/test_bulk_import_router.py

HTTP surface of the bulk-import API, served from an app whose database
dependency yields the in-memory SQLite session.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from app.config import BulkImportSettings, get_bulk_import_settings
from app.importers import attendance, students
from app.main import create_app
from db.session import get_db


@pytest.fixture()
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture()
def client(db_session, upload_dir) -> Iterator[TestClient]:
    application = create_app(check_environment=False)

    def _override_db():
        yield db_session

    application.dependency_overrides[get_db] = _override_db
    application.dependency_overrides[get_bulk_import_settings] = lambda: BulkImportSettings(
        insert_batch_size=2,
        max_upload_bytes=4096,
        upload_dir=upload_dir,
    )
    with TestClient(application) as test_client:
        yield test_client


def _upload(client: TestClient, entity: str, content: bytes, filename: str = "rows.csv", content_type: str = "text/csv"):
    return client.post(
        f"/api/{entity}/bulk-upload",
        files={"csvFile": (filename, content, content_type)},
    )


class TestBulkUpload:
    def test_student_template_upload_returns_camel_case_outcome(self, client, upload_dir) -> None:
        response = _upload(client, "students", students.TEMPLATE.encode("utf-8"))

        assert response.status_code == 200
        body = response.json()
        assert body["totalRows"] == 4
        assert body["successfulUploads"] == 2
        assert body["duplicates"] == 0
        assert body["invalidReferences"] == 0
        assert body["errors"] == 2
        assert body["validationErrorMessages"][0] == "Row 3: Invalid email format: 'invalid-email'"
        assert {record["studentCode"] for record in body["uploadedRecords"]} == {"STU001", "STU002"}
        assert all("id" in record for record in body["uploadedRecords"])
        assert list(upload_dir.iterdir()) == []

    def test_entity_segment_is_case_insensitive(self, client) -> None:
        response = _upload(client, "Students", students.TEMPLATE.encode("utf-8"))

        assert response.status_code == 200

    def test_second_attendance_upload_reports_duplicate(self, client) -> None:
        _upload(client, "students", students.TEMPLATE.encode("utf-8"))
        payload = b"studentId,date,status\nSTU001,2024-01-15,present\n"

        first = _upload(client, "attendance", payload).json()
        second = _upload(client, "attendance", payload).json()

        assert first["successfulUploads"] == 1
        assert second["successfulUploads"] == 0
        assert second["duplicates"] == 1

    def test_unknown_student_reference(self, client) -> None:
        payload = b"studentId,feeType,amount,dueDate,academicYear\nSTU999,tuition,500,2024-01-15,2023-2024\n"

        body = _upload(client, "fees", payload).json()

        assert body["invalidReferences"] == 1
        assert body["invalidReferenceMessages"] == ["Row 1: Student not found for studentId 'STU999'"]

    def test_non_csv_upload_is_rejected(self, client) -> None:
        response = _upload(client, "students", b"%PDF-1.4", filename="roster.pdf", content_type="application/pdf")

        assert response.status_code == 400
        assert response.json()["detail"] == "Only CSV files are allowed."

    def test_missing_file_field_is_unprocessable(self, client) -> None:
        response = client.post("/api/students/bulk-upload", files={"file": ("rows.csv", b"a\n1\n", "text/csv")})

        assert response.status_code == 422

    def test_unknown_entity_is_not_found(self, client) -> None:
        response = _upload(client, "homework", b"a,b\n1,2\n")

        assert response.status_code == 404
        assert "Allowed types: attendance, fees, students, teachers." in response.json()["detail"]

    def test_oversized_upload_is_rejected_and_not_kept(self, client, upload_dir) -> None:
        header = "studentId,date,status\n"
        rows = "".join(f"STU001,2024-01-{day % 28 + 1:02d},present\n" for day in range(400))

        response = _upload(client, "attendance", (header + rows).encode("utf-8"))

        assert response.status_code == 413
        assert list(upload_dir.iterdir()) == []

    def test_non_utf8_upload_is_a_bad_request(self, client, upload_dir) -> None:
        response = _upload(client, "attendance", "studentId,date,status\nSTÜ1,2024-01-15,present\n".encode("latin-1"))

        assert response.status_code == 400
        assert response.json()["detail"] == "CSV must be UTF-8 encoded."
        assert list(upload_dir.iterdir()) == []


class TestTemplatesAndExports:
    def test_template_download(self, client) -> None:
        response = client.get("/api/attendance/csv-template")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.headers["content-disposition"] == 'attachment; filename="attendance_upload_template.csv"'
        assert response.text == attendance.TEMPLATE

    def test_template_for_unknown_entity(self, client) -> None:
        assert client.get("/api/homework/csv-template").status_code == 404

    def test_csv_export_round_trips_through_upload(self, client) -> None:
        _upload(client, "students", students.TEMPLATE.encode("utf-8"))

        exported = client.get("/api/students/export")

        assert exported.status_code == 200
        assert exported.headers["x-row-count"] == "2"
        assert exported.headers["content-disposition"] == 'attachment; filename="students_export.csv"'
        rows = list(csv.DictReader(io.StringIO(exported.text)))
        assert sorted(row["studentId"] for row in rows) == ["STU001", "STU002"]

        reimport = _upload(client, "students", exported.content).json()
        assert reimport["duplicates"] == reimport["totalRows"] == 2

    def test_json_export(self, client) -> None:
        _upload(client, "students", students.TEMPLATE.encode("utf-8"))

        body = client.get("/api/students/export", params={"format": "JSON"}).json()

        assert body["entity"] == "students"
        assert body["rows"] == 2
        assert body["fields"] == list(students.COLUMN_FIELDS)
        assert sorted(row["studentId"] for row in body["data"]) == ["STU001", "STU002"]

    def test_invalid_export_format(self, client) -> None:
        response = client.get("/api/students/export", params={"format": "xlsx"})

        assert response.status_code == 400


def test_health(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
