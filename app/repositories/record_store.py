"""
app/repositories/record_store.py

Record-level persistence used by the bulk-import pipeline.

Records cross this boundary as plain dicts keyed by column name. The
store never commits; the caller owns the transaction.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from sqlalchemy import ColumnElement, and_, false, insert, inspect, or_, select, true
from sqlalchemy.orm import Session

from app.domain.filters import AllOf, Equals, InSet, Predicate, Range
from db.base import Base
from db.models import Attendance, Fee, Student, Teacher

_DEFAULT_BATCH_SIZE = 1000

ENTITY_MODELS: dict[str, type[Base]] = {
    "students": Student,
    "teachers": Teacher,
    "fees": Fee,
    "attendance": Attendance,
}


class RecordStore(Protocol):
    """
    Read/write contract the import pipeline depends on.
    """

    def find(self, entity_type: str, predicate: Predicate) -> list[dict[str, Any]]:
        ...

    def find_many(self, entity_type: str, predicates: Sequence[Predicate]) -> list[dict[str, Any]]:
        ...

    def insert_batch(self, entity_type: str, records: Sequence[Mapping[str, Any]]) -> list[uuid.UUID]:
        ...


class SQLAlchemyRecordStore:
    """
    RecordStore backed by the ORM models in ``db.models``.
    """

    def __init__(
        self,
        session: Session,
        *,
        batch_size: int = _DEFAULT_BATCH_SIZE,
        models: Mapping[str, type[Base]] | None = None,
    ) -> None:
        self._session = session
        self._batch_size = max(1, batch_size)
        self._models = dict(models or ENTITY_MODELS)

    def find(self, entity_type: str, predicate: Predicate) -> list[dict[str, Any]]:
        model = self._model(entity_type)
        return self._select(model, self._compile(model, predicate))

    def find_many(self, entity_type: str, predicates: Sequence[Predicate]) -> list[dict[str, Any]]:
        """
        Return records matching any of ``predicates`` in one query.
        """

        if not predicates:
            return []
        model = self._model(entity_type)
        clause = or_(*(self._compile(model, predicate) for predicate in predicates))
        return self._select(model, clause)

    def insert_batch(self, entity_type: str, records: Sequence[Mapping[str, Any]]) -> list[uuid.UUID]:
        """
        Insert records with chunked multi-row INSERTs and return their ids.

        Ids are assigned here when a record does not carry one, in input order.
        """

        if not records:
            return []

        model = self._model(entity_type)
        payloads: list[dict[str, Any]] = []
        for record in records:
            payload = dict(record)
            payload.setdefault("id", uuid.uuid4())
            payloads.append(payload)

        for start in range(0, len(payloads), self._batch_size):
            chunk = payloads[start : start + self._batch_size]
            self._session.execute(insert(model), chunk)

        return [payload["id"] for payload in payloads]

    def _model(self, entity_type: str) -> type[Base]:
        model = self._models.get(entity_type)
        if model is None:
            allowed = ", ".join(sorted(self._models))
            raise KeyError(f"Unknown entity type '{entity_type}'. Allowed types: {allowed}.")
        return model

    def _select(self, model: type[Base], clause: ColumnElement[bool]) -> list[dict[str, Any]]:
        stmt = select(model).where(clause).order_by(model.created_at, model.id)
        keys = [attr.key for attr in inspect(model).column_attrs]
        return [
            {key: getattr(instance, key) for key in keys}
            for instance in self._session.scalars(stmt).all()
        ]

    def _compile(self, model: type[Base], predicate: Predicate) -> ColumnElement[bool]:
        if isinstance(predicate, AllOf):
            if not predicate.predicates:
                return true()
            return and_(*(self._compile(model, inner) for inner in predicate.predicates))

        column = self._column(model, predicate.field)

        if isinstance(predicate, Equals):
            if predicate.value is None:
                return column.is_(None)
            return column == predicate.value

        if isinstance(predicate, InSet):
            if not predicate.values:
                return false()
            return column.in_(predicate.values)

        if isinstance(predicate, Range):
            bounds: list[ColumnElement[bool]] = []
            if predicate.gt is not None:
                bounds.append(column > predicate.gt)
            if predicate.gte is not None:
                bounds.append(column >= predicate.gte)
            if predicate.lt is not None:
                bounds.append(column < predicate.lt)
            if predicate.lte is not None:
                bounds.append(column <= predicate.lte)
            return and_(*bounds) if bounds else true()

        raise TypeError(f"Unsupported filter predicate: {predicate!r}")

    @staticmethod
    def _column(model: type[Base], field: str) -> Any:
        column = model.__table__.c.get(field)
        if column is None:
            raise KeyError(f"{model.__name__} has no column '{field}'.")
        return column
