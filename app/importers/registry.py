"""
Import descriptor registry keyed by entity type.
"""

from __future__ import annotations

from collections.abc import Iterable
from functools import lru_cache

from app.importers.attendance import ATTENDANCE_IMPORT
from app.importers.base import ImportDescriptor
from app.importers.fees import FEE_IMPORT
from app.importers.students import STUDENT_IMPORT
from app.importers.teachers import TEACHER_IMPORT


class UnknownEntityTypeError(KeyError):
    """
    Raised when no import descriptor is registered for an entity type.
    """

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class ImportRegistry:
    """
    Registry of the entity types the bulk importer accepts.
    """

    def __init__(self, descriptors: Iterable[ImportDescriptor] | None = None) -> None:
        builtins = (STUDENT_IMPORT, TEACHER_IMPORT, FEE_IMPORT, ATTENDANCE_IMPORT)
        self._descriptors: dict[str, ImportDescriptor] = {}
        for descriptor in builtins if descriptors is None else descriptors:
            self.register(descriptor)

    def register(self, descriptor: ImportDescriptor) -> None:
        self._descriptors[descriptor.entity_type.strip().lower()] = descriptor

    def get(self, entity_type: str) -> ImportDescriptor:
        resolved = self._descriptors.get(entity_type.strip().lower())
        if resolved is None:
            allowed = ", ".join(self.entity_types)
            raise UnknownEntityTypeError(
                f"Unknown entity type '{entity_type}'. Allowed types: {allowed}."
            )
        return resolved

    @property
    def entity_types(self) -> list[str]:
        return sorted(self._descriptors)


@lru_cache(maxsize=1)
def get_import_registry() -> ImportRegistry:
    return ImportRegistry()
