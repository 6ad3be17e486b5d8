"""
app/importers/fields.py

Row-level field parsing for CSV bulk imports.

Every parser either returns a trimmed, typed value or raises
RowValidationFailure with a user-facing message. The first failure ends
validation of the row.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%d/%m/%Y",
)

TIME_FORMATS: tuple[str, ...] = (
    "%H:%M",
    "%H:%M:%S",
)


class RowValidationFailure(ValueError):
    """
    Raised when one CSV row fails validation. Never escapes the import.
    """


class RowReader:
    """
    Typed accessors over one raw CSV row.
    """

    def __init__(self, values: Mapping[Any, Any]) -> None:
        self._values = values

    def ensure_well_formed(self) -> None:
        extra = self._values.get(None)
        if extra and not self._is_blank(extra):
            raise RowValidationFailure("Row has more values than header columns")
        if all(self._is_blank(value) for key, value in self._values.items() if key is not None):
            raise RowValidationFailure("Row is empty")

    def require_columns(self, columns: Iterable[str]) -> None:
        for column in columns:
            if self._is_blank(self._values.get(column)):
                raise RowValidationFailure(f"Missing required field: {column}")

    def check_lengths(self, limits: Mapping[str, int]) -> None:
        for column, limit in limits.items():
            value = self.optional_text(column)
            if value is not None and len(value) > limit:
                raise RowValidationFailure(f"{column} must be at most {limit} characters")

    def text(self, column: str) -> str:
        value = self.optional_text(column)
        if value is None:
            raise RowValidationFailure(f"Missing required field: {column}")
        return value

    def optional_text(self, column: str) -> str | None:
        value = self._values.get(column)
        if self._is_blank(value):
            return None
        return str(value).strip()

    def choice(
        self,
        column: str,
        allowed: Iterable[str],
        *,
        required: bool = True,
    ) -> str | None:
        raw = self.text(column) if required else self.optional_text(column)
        if raw is None:
            return None

        options = tuple(allowed)
        normalized = raw.lower()
        if normalized not in options:
            raise RowValidationFailure(
                f"Invalid {column} '{raw}'. Allowed values: {', '.join(options)}"
            )
        return normalized

    def email(self, column: str, *, required: bool = False) -> str | None:
        raw = self.text(column) if required else self.optional_text(column)
        if raw is None:
            return None
        if not EMAIL_PATTERN.match(raw):
            raise RowValidationFailure(f"Invalid {column} format: '{raw}'")
        return raw.lower()

    def decimal(
        self,
        column: str,
        *,
        positive: bool = False,
        max_digits: int | None = None,
        places: int | None = None,
    ) -> Decimal:
        """
        Parse a number; ``max_digits`` and ``places`` mirror a NUMERIC(p, s) column.
        """

        raw = self.text(column)
        try:
            value = Decimal(raw.replace(",", ""))
        except InvalidOperation:
            raise RowValidationFailure(f"{column} must be a number, got '{raw}'") from None
        if not value.is_finite():
            raise RowValidationFailure(f"{column} must be a number, got '{raw}'")
        if positive and value <= 0:
            raise RowValidationFailure(f"{column} must be greater than 0")
        if places is not None and value.normalize().as_tuple().exponent < -places:
            raise RowValidationFailure(f"{column} must have at most {places} decimal places")
        if max_digits is not None:
            whole_digits = max_digits - (places or 0)
            if value.adjusted() >= whole_digits:
                raise RowValidationFailure(
                    f"{column} must have at most {whole_digits} digits before the decimal point"
                )
        return value

    def integer(self, column: str, *, minimum: int | None = None) -> int:
        raw = self.text(column)
        try:
            value = Decimal(raw)
        except InvalidOperation:
            raise RowValidationFailure(f"{column} must be a whole number, got '{raw}'") from None
        if not value.is_finite() or value != value.to_integral_value():
            raise RowValidationFailure(f"{column} must be a whole number, got '{raw}'")
        if minimum is not None and value < minimum:
            raise RowValidationFailure(f"{column} must be {minimum} or greater")
        return int(value)

    def date(self, column: str) -> date:
        raw = self.text(column)
        parsed = parse_date(raw)
        if parsed is None:
            raise RowValidationFailure(
                f"Invalid {column} '{raw}'. Use YYYY-MM-DD or DD/MM/YYYY"
            )
        return parsed

    def optional_time(self, column: str, *, on_date: date) -> datetime | None:
        """
        Parse a clock time on ``on_date`` or a full ISO 8601 datetime.

        Naive values are taken as UTC.
        """

        raw = self.optional_text(column)
        if raw is None:
            return None

        for fmt in TIME_FORMATS:
            try:
                clock = datetime.strptime(raw, fmt).time()
            except ValueError:
                continue
            return datetime.combine(on_date, clock, tzinfo=timezone.utc)

        normalized = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
        try:
            parsed = datetime.fromisoformat(normalized)
        except ValueError:
            raise RowValidationFailure(
                f"Invalid {column} '{raw}'. Use HH:MM or an ISO 8601 datetime"
            ) from None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        if parsed.date() != on_date:
            raise RowValidationFailure(f"{column} must fall on {on_date.isoformat()}")
        return parsed

    def string_list(self, column: str, *, non_empty: bool = False) -> list[str]:
        raw = self.optional_text(column) or ""
        items = [item.strip() for item in raw.split(",")]
        items = [item for item in items if item]
        if non_empty and not items:
            raise RowValidationFailure(f"{column} must contain at least one value")
        return items

    @staticmethod
    def _is_blank(value: Any) -> bool:
        if value is None:
            return True
        if isinstance(value, (list, tuple)):
            return all(str(item).strip() == "" for item in value)
        return str(value).strip() == ""


def parse_date(raw: str) -> date | None:
    """Return the date for a YYYY-MM-DD or DD/MM/YYYY string, else None."""
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(raw.strip(), fmt).date()
        except ValueError:
            continue
    return None
