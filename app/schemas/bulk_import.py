"""
app/schemas/bulk_import.py

Response schemas for bulk-import endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.domain.bulk_import import ImportOutcome


class BulkImportOutcomeResponse(BaseModel):
    """
    API response model for one bulk upload. Serialized with camelCase keys.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_rows: int = Field(..., ge=0)
    successful_uploads: int = Field(..., ge=0)
    duplicates: int = Field(..., ge=0)
    invalid_references: int = Field(..., ge=0)
    errors: int = Field(..., ge=0)
    uploaded_records: list[dict[str, Any]] = Field(default_factory=list)
    duplicate_messages: list[str] = Field(default_factory=list)
    invalid_reference_messages: list[str] = Field(default_factory=list)
    validation_error_messages: list[str] = Field(default_factory=list)

    @classmethod
    def from_outcome(cls, outcome: ImportOutcome) -> BulkImportOutcomeResponse:
        return cls(
            total_rows=outcome.total_rows,
            successful_uploads=outcome.successful_uploads,
            duplicates=outcome.duplicates,
            invalid_references=outcome.invalid_references,
            errors=outcome.errors,
            uploaded_records=[
                {to_camel(key): value for key, value in record.items()}
                for record in outcome.uploaded_records
            ],
            duplicate_messages=list(outcome.duplicate_messages),
            invalid_reference_messages=list(outcome.invalid_reference_messages),
            validation_error_messages=list(outcome.validation_error_messages),
        )


class HealthResponse(BaseModel):
    status: str = "ok"
