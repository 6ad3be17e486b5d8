"""
app/services/reference_resolver.py

Batch resolution of loosely-typed foreign identifiers.

Supplied values are split into two partitions: values that already are a
canonical id (verified to still exist) and values that must be looked up
by human-facing code. Each non-empty partition costs exactly one store
query, so a reference class needs at most two queries per import.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable

from app.domain.bulk_import import ResolutionResult
from app.domain.filters import AllOf, InSet
from app.importers.base import ReferenceField
from app.repositories.record_store import RecordStore

logger = logging.getLogger(__name__)


def as_canonical_id(value: str) -> uuid.UUID | None:
    """
    Return the UUID when ``value`` is its canonical text form, in either case.
    """

    try:
        parsed = uuid.UUID(value)
    except ValueError:
        return None
    return parsed if str(parsed) == value.lower() else None


class ReferenceResolver:
    def __init__(self, store: RecordStore) -> None:
        self._store = store

    def resolve(self, reference: ReferenceField, supplied: Iterable[str]) -> ResolutionResult:
        canonical: dict[str, uuid.UUID] = {}
        lookup: list[str] = []
        for value in dict.fromkeys(supplied):
            parsed = as_canonical_id(value)
            if parsed is None:
                lookup.append(value)
            else:
                canonical[value] = parsed

        resolved: dict[str, uuid.UUID] = {}
        unresolved: dict[str, str] = {}
        if canonical:
            self._verify_canonical(reference, canonical, resolved, unresolved)
        if lookup:
            self._lookup_codes(reference, lookup, resolved, unresolved)

        logger.debug(
            "Resolved %s references target=%s resolved=%d unresolved=%d",
            reference.column,
            reference.target,
            len(resolved),
            len(unresolved),
        )
        return ResolutionResult(resolved=resolved, unresolved=unresolved)

    def _verify_canonical(
        self,
        reference: ReferenceField,
        canonical: dict[str, uuid.UUID],
        resolved: dict[str, uuid.UUID],
        unresolved: dict[str, str],
    ) -> None:
        records = self._store.find(
            reference.target,
            AllOf.of(InSet.of("id", canonical.values()), reference.scope),
        )
        existing = {record["id"] for record in records}
        for value, canonical_id in canonical.items():
            if canonical_id in existing:
                resolved[value] = canonical_id
            else:
                unresolved[value] = _not_found(reference, value)

    def _lookup_codes(
        self,
        reference: ReferenceField,
        lookup: list[str],
        resolved: dict[str, uuid.UUID],
        unresolved: dict[str, str],
    ) -> None:
        records = self._store.find_many(
            reference.target,
            [
                AllOf.of(InSet.of(field_name, lookup), reference.scope)
                for field_name in reference.lookup_fields
            ],
        )

        # field -> supplied value -> matching ids, in store order
        matches: dict[str, dict[str, list[uuid.UUID]]] = {
            field_name: {} for field_name in reference.lookup_fields
        }
        for record in records:
            for field_name in reference.lookup_fields:
                key = record.get(field_name)
                if key is None:
                    continue
                ids = matches[field_name].setdefault(str(key), [])
                if record["id"] not in ids:
                    ids.append(record["id"])

        for value in lookup:
            for field_name in reference.lookup_fields:
                ids = matches[field_name].get(value, [])
                if len(ids) == 1:
                    resolved[value] = ids[0]
                    break
                if len(ids) > 1:
                    unresolved[value] = (
                        f"{reference.label} reference '{value}' for {reference.column} is "
                        f"ambiguous: matches {len(ids)} records by {field_name}"
                    )
                    break
            else:
                unresolved[value] = _not_found(reference, value)


def _not_found(reference: ReferenceField, value: str) -> str:
    return f"{reference.label} not found for {reference.column} '{value}'"
