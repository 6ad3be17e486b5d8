"""
tests/test_csv_reader.py

Decoding of uploaded CSV files into numbered rows.
"""

from __future__ import annotations

import pytest

from app.importers.csv_reader import CSVFormatError, read_csv_rows


class TestReadCsvRows:
    def test_rows_are_numbered_from_one_excluding_header(self, write_csv) -> None:
        path = write_csv("studentId,date,status\nSTU001,2024-01-15,present\nSTU002,2024-01-15,absent\n")

        rows = read_csv_rows(path)

        assert [row.row_number for row in rows] == [1, 2]
        assert rows[0].values == {"studentId": "STU001", "date": "2024-01-15", "status": "present"}

    def test_utf8_bom_and_padded_headers_are_tolerated(self, write_csv) -> None:
        path = write_csv("\ufeff studentId , date ,status\nSTU001,2024-01-15,present\n")

        rows = read_csv_rows(path)

        assert set(rows[0].values) == {"studentId", "date", "status"}

    def test_blank_lines_are_skipped(self, write_csv) -> None:
        path = write_csv("studentId,date,status\n\nSTU001,2024-01-15,present\n\n")

        assert len(read_csv_rows(path)) == 1

    def test_rows_with_only_blank_cells_are_kept(self, write_csv) -> None:
        path = write_csv("studentId,date,status\n,,\n")

        rows = read_csv_rows(path)

        assert len(rows) == 1
        assert rows[0].values == {"studentId": "", "date": "", "status": ""}

    def test_extra_cells_land_under_none_key(self, write_csv) -> None:
        path = write_csv("studentId,date\nSTU001,2024-01-15,surplus\n")

        rows = read_csv_rows(path)

        assert rows[0].values[None] == ["surplus"]

    def test_quoted_commas_and_newlines(self, write_csv) -> None:
        path = write_csv('teacherId,subjects\nTCH001,"Physics, Chemistry"\nTCH002,"Line one\nline two"\n')

        rows = read_csv_rows(path)

        assert rows[0].values["subjects"] == "Physics, Chemistry"
        assert rows[1].values["subjects"] == "Line one\nline two"

    def test_empty_file_has_no_header(self, write_csv) -> None:
        with pytest.raises(CSVFormatError, match="header row is missing"):
            read_csv_rows(write_csv(""))

    def test_duplicate_header_columns_are_rejected(self, write_csv) -> None:
        with pytest.raises(CSVFormatError, match="Duplicate column"):
            read_csv_rows(write_csv("studentId,date,studentId\nA,2024-01-15,B\n"))

    def test_non_utf8_file_is_rejected(self, write_csv) -> None:
        path = write_csv("studentId,notes\nSTU001,café\n", encoding="latin-1")

        with pytest.raises(CSVFormatError, match="UTF-8"):
            read_csv_rows(path)

    def test_malformed_quoting_is_rejected(self, write_csv) -> None:
        path = write_csv('studentId,notes\nSTU001,"unterminated\n')

        with pytest.raises(CSVFormatError, match="Invalid CSV format"):
            read_csv_rows(path)

    def test_missing_file_is_a_format_error(self, tmp_path) -> None:
        with pytest.raises(CSVFormatError, match="Unable to read"):
            read_csv_rows(tmp_path / "absent.csv")
