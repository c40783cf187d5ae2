"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone

from stockbook.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot book zero or negative items.
    """

    value: int

    def __post_init__(self) -> None:
        # bool is an int subclass; True must not slip through as 1
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class SourceReference:
    """Pointer back to the sale line a booking was created from."""

    quotation_id: str
    quotation_item_id: str
    quote_number: str | None = None

    def __post_init__(self) -> None:
        if not self.quotation_id or not self.quotation_id.strip():
            raise ValidationError("Source quotation ID is required")
        if not self.quotation_item_id or not self.quotation_item_id.strip():
            raise ValidationError("Source quotation item ID is required")

    def matches(self, reference_id: str) -> bool:
        return reference_id in (self.quotation_item_id, self.quotation_id)

    def __str__(self) -> str:
        label = self.quote_number or self.quotation_id
        return f"{label}/{self.quotation_item_id}"


# ---------------------------------------------------------------------------
# Date coercion
# ---------------------------------------------------------------------------


def as_date(value: date | datetime | str, field_name: str = "date") -> date:
    """Coerce *value* to a calendar date.

    Accepts ``date``, ``datetime`` (its calendar day is used) and ISO strings,
    either ``YYYY-MM-DD`` or a full timestamp.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if "T" in text:
                return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
            return date.fromisoformat(text)
        except ValueError as exc:
            raise ValidationError(f"Invalid {field_name}: {value!r}") from exc
    raise ValidationError(f"Invalid {field_name}: {value!r}")


def as_utc(value: datetime) -> datetime:
    """Return *value* as an aware UTC timestamp (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
