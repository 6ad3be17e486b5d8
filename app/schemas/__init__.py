"""
app/schemas package marker.
"""

from app.schemas.bulk_import import BulkImportOutcomeResponse, HealthResponse

__all__ = [
    "BulkImportOutcomeResponse",
    "HealthResponse",
]
