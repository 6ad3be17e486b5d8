"""
app/domain/filters.py

Typed filter predicates accepted by the record store.

The set is closed: stores translate exactly these four shapes and reject
anything else.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Equals:
    """field == value; a None value matches NULL."""

    field: str
    value: Any


@dataclass(frozen=True)
class InSet:
    field: str
    values: tuple[Any, ...]

    @classmethod
    def of(cls, field: str, values: Iterable[Any]) -> InSet:
        # dict.fromkeys keeps first-seen order while dropping repeats
        return cls(field=field, values=tuple(dict.fromkeys(values)))


@dataclass(frozen=True)
class Range:
    """Bounds left as None are open."""

    field: str
    gt: Any = None
    gte: Any = None
    lt: Any = None
    lte: Any = None


@dataclass(frozen=True)
class AllOf:
    """Conjunction of predicates."""

    predicates: tuple[Predicate, ...]

    @classmethod
    def of(cls, *predicates: Predicate) -> AllOf:
        return cls(predicates=tuple(predicates))


Predicate = Union[Equals, InSet, Range, AllOf]
