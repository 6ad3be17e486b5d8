"""
Run one CSV bulk import from CLI.

    python -m scripts.run_bulk_import students ./students.csv

The source file is copied into the upload dir first; the service deletes
only that copy.
"""

from __future__ import annotations

import argparse
import json
import logging
import shutil
import sys
import tempfile
from collections.abc import Sequence
from pathlib import Path

from app.config import get_bulk_import_settings, get_logging_settings
from app.importers.csv_reader import CSVFormatError
from app.importers.registry import get_import_registry
from app.schemas.bulk_import import BulkImportOutcomeResponse
from app.services.bulk_import_service import ImportPersistenceError, get_bulk_import_service
from db.session import SessionLocal


def _stage_copy(source: Path, upload_dir: Path) -> Path:
    upload_dir.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(dir=upload_dir, prefix="cli-", suffix=".csv", delete=False) as target:
        staged = Path(target.name)
    shutil.copyfile(source, staged)
    return staged


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Bulk import one CSV file into the school database.")
    parser.add_argument(
        "entity",
        choices=get_import_registry().entity_types,
        help="Entity type the CSV rows describe.",
    )
    parser.add_argument("path", type=Path, help="CSV file to import.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=get_logging_settings().level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if not args.path.is_file():
        print(f"CSV file not found: {args.path}", file=sys.stderr)
        return 2

    staged = _stage_copy(args.path, get_bulk_import_settings().upload_dir)
    service = get_bulk_import_service()
    try:
        with SessionLocal() as db:
            outcome = service.import_file(entity_type=args.entity, path=staged, db=db)
    except CSVFormatError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    except ImportPersistenceError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    payload = BulkImportOutcomeResponse.from_outcome(outcome).model_dump(mode="json", by_alias=True)
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
