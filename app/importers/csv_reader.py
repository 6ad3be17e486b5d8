"""
app/importers/csv_reader.py

Decode an uploaded CSV file into ordered row mappings.

The whole file is read before any row is validated, so a decoding or
quoting failure aborts the import without exposing partial results.
"""

from __future__ import annotations

import csv
from collections import Counter
from pathlib import Path

from app.domain.bulk_import import ParsedRow


class CSVFormatError(ValueError):
    """
    Raised when the uploaded file cannot be decoded as CSV with a header row.
    """


def read_csv_rows(path: str | Path) -> list[ParsedRow]:
    """
    Read ``path`` as UTF-8 CSV (BOM tolerated) keyed by its header row.

    Row numbers are 1-based and count data rows only. Lines that are
    completely empty are skipped by the reader and do not consume a number.
    """

    try:
        with open(path, encoding="utf-8-sig", newline="") as handle:
            reader = csv.DictReader(handle, strict=True)
            headers = reader.fieldnames
            if not headers or all(not (header or "").strip() for header in headers):
                raise CSVFormatError("CSV header row is missing.")

            cleaned = [(header or "").strip() for header in headers]
            repeated = sorted(name for name, count in Counter(cleaned).items() if name and count > 1)
            if repeated:
                raise CSVFormatError(f"Duplicate column(s) in CSV header: {', '.join(repeated)}.")
            reader.fieldnames = cleaned

            return [
                ParsedRow(row_number=row_number, values=dict(raw_row))
                for row_number, raw_row in enumerate(reader, start=1)
            ]
    except UnicodeDecodeError as exc:
        raise CSVFormatError("CSV must be UTF-8 encoded.") from exc
    except csv.Error as exc:
        raise CSVFormatError(f"Invalid CSV format: {exc}") from exc
    except OSError as exc:
        raise CSVFormatError(f"Unable to read uploaded CSV: {exc}") from exc
