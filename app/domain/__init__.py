"""
app/domain package marker.
"""

from app.domain.bulk_import import (
    BusinessKey,
    CandidateRow,
    DuplicateRow,
    ImportOutcome,
    InvalidRow,
    ParsedRow,
    ResolutionResult,
    RowState,
    ValidRow,
)
from app.domain.filters import AllOf, Equals, InSet, Predicate, Range

__all__ = [
    "AllOf",
    "BusinessKey",
    "CandidateRow",
    "DuplicateRow",
    "Equals",
    "ImportOutcome",
    "InSet",
    "InvalidRow",
    "ParsedRow",
    "Predicate",
    "Range",
    "ResolutionResult",
    "RowState",
    "ValidRow",
]
