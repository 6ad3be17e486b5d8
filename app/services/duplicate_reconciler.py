"""
app/services/duplicate_reconciler.py

Business-key duplicate detection for rows that are otherwise ready to insert.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from app.domain.bulk_import import BusinessKey, CandidateRow, DuplicateRow
from app.domain.filters import AllOf, InSet, Predicate
from app.importers.base import ImportDescriptor, UniquenessRule, format_cell
from app.repositories.record_store import RecordStore

logger = logging.getLogger(__name__)


class DuplicateReconciler:
    """
    Split candidate rows into insertable rows and duplicates.

    A row is a duplicate when any of its business keys is already
    persisted, or was claimed by an earlier row of the same upload.
    Persisted keys are fetched with a single store query.
    """

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    def reconcile(
        self,
        descriptor: ImportDescriptor,
        candidates: Sequence[CandidateRow],
    ) -> tuple[list[CandidateRow], list[DuplicateRow]]:
        rules = descriptor.uniqueness_rules
        if not candidates or not rules:
            return list(candidates), []

        persisted = self._store.find_many(
            descriptor.entity_type,
            [_rule_predicate(rule, candidates) for rule in rules],
        )
        existing = {
            BusinessKey.from_record(rule.name, rule.fields, record)
            for record in persisted
            for rule in rules
        }

        claimed: dict[BusinessKey, int] = {}
        ready: list[CandidateRow] = []
        duplicates: list[DuplicateRow] = []
        for candidate in candidates:
            keys = [
                (rule, BusinessKey.from_record(rule.name, rule.fields, candidate.record))
                for rule in rules
            ]
            reason = _duplicate_reason(descriptor, keys, existing, claimed)
            if reason is not None:
                duplicates.append(DuplicateRow(row_number=candidate.row_number, reason=reason))
                continue
            for _, key in keys:
                claimed[key] = candidate.row_number
            ready.append(candidate)

        logger.debug(
            "Duplicate check entity=%s candidates=%d persisted_matches=%d duplicates=%d",
            descriptor.entity_type,
            len(candidates),
            len(persisted),
            len(duplicates),
        )
        return ready, duplicates


def _rule_predicate(rule: UniquenessRule, candidates: Sequence[CandidateRow]) -> Predicate:
    """
    Build a predicate selecting every persisted record that could share a key.

    Composite rules constrain each field independently, which may
    over-select; exact key equality is applied afterwards. A field with a
    missing candidate value is left unconstrained so NULL keys still match.
    """

    constraints: list[Predicate] = []
    for field_name in rule.fields:
        values = [candidate.record.get(field_name) for candidate in candidates]
        if any(value is None for value in values):
            continue
        constraints.append(InSet.of(field_name, values))
    if len(constraints) == 1:
        return constraints[0]
    return AllOf.of(*constraints)


def _duplicate_reason(
    descriptor: ImportDescriptor,
    keys: list[tuple[UniquenessRule, BusinessKey]],
    existing: set[BusinessKey],
    claimed: dict[BusinessKey, int],
) -> str | None:
    for rule, key in keys:
        if key in existing:
            return f"{descriptor.label} with {_describe(rule, key)} already exists"
        if key in claimed:
            return (
                f"{descriptor.label} with {_describe(rule, key)} "
                f"duplicates row {claimed[key]} in this upload"
            )
    return None


def _describe(rule: UniquenessRule, key: BusinessKey) -> str:
    rendered: list[Any] = [format_cell(value) or "-" for value in key.values]
    if len(rendered) == 1:
        return f"{rule.description} '{rendered[0]}'"
    return f"{rule.description} ({', '.join(rendered)})"
