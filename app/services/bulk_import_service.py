"""
app/services/bulk_import_service.py

Service layer for the CSV bulk-import workflow.

One import runs strictly in this order:

    1. read_csv_rows()                  - decode the whole file (fatal on failure)
    2. ImportDescriptor.validate()      - per-row validation, pure
    3. ReferenceResolver.resolve()      - at most two queries per reference class
    4. DuplicateReconciler.reconcile()  - one query for all business keys
    5. RecordStore.insert_batch()       - one batched insert for every ready row

Every row ends in exactly one terminal category; row-level problems are
reported in the ImportOutcome and never raised. The uploaded file is
removed on every exit path.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from functools import lru_cache
from pathlib import Path
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_bulk_import_settings
from app.domain.bulk_import import (
    CandidateRow,
    ImportOutcome,
    InvalidRow,
    ParsedRow,
    ResolutionResult,
    RowState,
    ValidRow,
    row_message,
)
from app.importers.base import ImportDescriptor
from app.importers.csv_reader import read_csv_rows
from app.importers.registry import ImportRegistry, get_import_registry
from app.logging_utils import log_event
from app.repositories.record_store import RecordStore, SQLAlchemyRecordStore
from app.services.duplicate_reconciler import DuplicateReconciler
from app.services.reference_resolver import ReferenceResolver

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ImportPersistenceError(RuntimeError):
    """
    Raised when the backing store fails during resolution, duplicate checks or insert.
    """


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class BulkImportService:
    """
    Coordinates CSV parsing, validation, reference resolution, duplicate
    reconciliation and the batched insert for any registered entity type.
    """

    def __init__(
        self,
        *,
        insert_batch_size: int,
        log_row_errors: bool,
        registry: ImportRegistry | None = None,
    ) -> None:
        self._insert_batch_size = max(1, insert_batch_size)
        self._log_row_errors = log_row_errors
        self._registry = registry or get_import_registry()

    def import_file(
        self,
        *,
        entity_type: str,
        path: str | Path,
        db: Session,
        store: RecordStore | None = None,
    ) -> ImportOutcome:
        """
        Import the CSV at ``path`` and commit every accepted row.

        ``path`` is treated as a temporary upload and deleted before
        returning, whether or not the import succeeds.

        Raises:
            UnknownEntityTypeError: ``entity_type`` is not registered.
            CSVFormatError:         the file cannot be decoded; nothing is inserted.
            ImportPersistenceError: a store operation or the commit failed;
                                    the session is rolled back.
        """
        try:
            descriptor = self._registry.get(entity_type)
            rows = read_csv_rows(path)
            store = store or SQLAlchemyRecordStore(db, batch_size=self._insert_batch_size)
            try:
                outcome, states = self._run(descriptor=descriptor, rows=rows, store=store)
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                raise ImportPersistenceError(
                    f"Failed to persist {descriptor.entity_type} bulk import."
                ) from exc
        finally:
            self._remove_upload(path)

        log_event(
            logger,
            logging.INFO,
            "bulk_import.completed",
            entity_type=descriptor.entity_type,
            total_rows=outcome.total_rows,
            successful_uploads=outcome.successful_uploads,
            duplicates=outcome.duplicates,
            invalid_references=outcome.invalid_references,
            errors=outcome.errors,
            row_states=dict(sorted(Counter(state.value for state in states.values()).items())),
        )
        return outcome

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _run(
        self,
        *,
        descriptor: ImportDescriptor,
        rows: Sequence[ParsedRow],
        store: RecordStore,
    ) -> tuple[ImportOutcome, dict[int, RowState]]:
        states: dict[int, RowState] = {row.row_number: RowState.PARSED for row in rows}

        valid_rows: list[ValidRow] = []
        validation_errors: list[str] = []
        for row in rows:
            result = descriptor.validate(row)
            if isinstance(result, InvalidRow):
                states[result.row_number] = RowState.VALIDATION_FAILED
                validation_errors.append(row_message(result.row_number, result.reason))
                self._log_rejected(descriptor, result.row_number, "validation", result.reason)
                continue
            states[result.row_number] = RowState.VALIDATED
            valid_rows.append(result)

        candidates, reference_errors = self._resolve_references(
            descriptor=descriptor,
            valid_rows=valid_rows,
            store=store,
            states=states,
        )

        ready, duplicate_rows = DuplicateReconciler(store).reconcile(descriptor, candidates)
        duplicate_messages: list[str] = []
        for duplicate in duplicate_rows:
            states[duplicate.row_number] = RowState.DUPLICATE
            duplicate_messages.append(row_message(duplicate.row_number, duplicate.reason))
            self._log_rejected(descriptor, duplicate.row_number, "duplicate", duplicate.reason)
        for candidate in ready:
            states[candidate.row_number] = RowState.READY_TO_INSERT

        uploaded: list[dict[str, Any]] = []
        if ready:
            ids = store.insert_batch(descriptor.entity_type, [candidate.record for candidate in ready])
            for candidate, record_id in zip(ready, ids):
                states[candidate.row_number] = RowState.INSERTED
                uploaded.append({"id": record_id, **candidate.record})

        outcome = ImportOutcome(
            total_rows=len(rows),
            successful_uploads=len(uploaded),
            duplicates=len(duplicate_messages),
            invalid_references=len(reference_errors),
            errors=len(validation_errors),
            uploaded_records=uploaded,
            duplicate_messages=duplicate_messages,
            invalid_reference_messages=reference_errors,
            validation_error_messages=validation_errors,
        )
        return outcome, states

    def _resolve_references(
        self,
        *,
        descriptor: ImportDescriptor,
        valid_rows: Sequence[ValidRow],
        store: RecordStore,
        states: dict[int, RowState],
    ) -> tuple[list[CandidateRow], list[str]]:
        resolver = ReferenceResolver(store)
        resolutions: dict[str, ResolutionResult] = {}
        if valid_rows:
            for reference in descriptor.references:
                resolutions[reference.column] = resolver.resolve(
                    reference,
                    (getattr(row.request, reference.request_attr) for row in valid_rows),
                )

        candidates: list[CandidateRow] = []
        messages: list[str] = []
        for row in valid_rows:
            record = row.request.to_record()
            failure: str | None = None
            for reference in descriptor.references:
                supplied = getattr(row.request, reference.request_attr)
                resolution = resolutions[reference.column]
                canonical_id = resolution.lookup(supplied)
                if canonical_id is None:
                    failure = resolution.unresolved[supplied]
                    break
                record[reference.record_field] = canonical_id

            if failure is not None:
                states[row.row_number] = RowState.REFERENCE_UNRESOLVED
                messages.append(row_message(row.row_number, failure))
                self._log_rejected(descriptor, row.row_number, "reference", failure)
                continue
            states[row.row_number] = RowState.REFERENCE_RESOLVED
            candidates.append(CandidateRow(row_number=row.row_number, record=record))
        return candidates, messages

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _log_rejected(
        self,
        descriptor: ImportDescriptor,
        row_number: int,
        category: str,
        reason: str,
    ) -> None:
        if self._log_row_errors:
            logger.warning(
                "Bulk import row rejected entity=%s row=%s category=%s reason=%s",
                descriptor.entity_type,
                row_number,
                category,
                reason,
            )

    @staticmethod
    def _remove_upload(path: str | Path) -> None:
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Failed to remove uploaded CSV path=%s: %s", path, exc)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_bulk_import_service() -> BulkImportService:
    """
    Build and cache the bulk-import service with env-driven settings.
    """
    settings = get_bulk_import_settings()
    return BulkImportService(
        insert_batch_size=settings.insert_batch_size,
        log_row_errors=settings.log_row_errors,
    )
