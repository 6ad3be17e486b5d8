"""
app/repositories package marker.
"""

from app.repositories.record_store import ENTITY_MODELS, RecordStore, SQLAlchemyRecordStore

__all__ = [
    "ENTITY_MODELS",
    "RecordStore",
    "SQLAlchemyRecordStore",
]
