"""StockEvent — one signed entry in a product's stock ledger.

Stock for a product on a given day is the sum of the quantities of all its
events dated on or before that day. The event type only decides the sign a
quantity is stored with; after that, arithmetic uses the stored quantity.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum

from stockbook.domain.exceptions import ValidationError

# reference_type of the SALE event written when a booked sale line ships
SALE_LINE_REFERENCE = "quotation_item"


class StockEventType(Enum):
    IN = "IN"
    PURCHASE = "PURCHASE"
    OUT = "OUT"
    SALE = "SALE"
    ADJUSTMENT = "ADJUSTMENT"

    @property
    def is_outbound(self) -> bool:
        return self in (StockEventType.OUT, StockEventType.SALE)

    @property
    def is_replenishment(self) -> bool:
        return self in (StockEventType.IN, StockEventType.PURCHASE)

    @staticmethod
    def parse(value: StockEventType | str) -> StockEventType:
        if isinstance(value, StockEventType):
            return value
        try:
            return StockEventType(value.strip().upper())
        except (AttributeError, ValueError) as exc:
            raise ValidationError(f"Unknown stock event type: {value!r}") from exc


def signed_quantity(event_type: StockEventType, quantity: int) -> int:
    """Return *quantity* with the sign its event type dictates.

    OUT/SALE are always stored negative and IN/PURCHASE always positive.
    ADJUSTMENT keeps whatever sign the caller gave.
    """
    if not isinstance(quantity, int) or isinstance(quantity, bool):
        raise ValidationError(
            f"Stock quantity must be an integer, got {type(quantity).__name__}"
        )
    if quantity == 0:
        raise ValidationError("Stock event quantity cannot be zero")
    if event_type.is_outbound:
        return -abs(quantity)
    if event_type.is_replenishment:
        return abs(quantity)
    return quantity


@dataclass
class StockEvent:
    """A ledger entry. Hard-deleted, never soft-deleted.

    Use ``StockEvent.record()`` for new events; ``__init__`` is kept plain
    so repositories can reconstitute stored events without re-validating.
    """

    id: int | None
    product_id: str
    quantity: int
    event_type: StockEventType
    event_date: date
    reference_type: str | None = None
    reference_id: str | None = None
    notes: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def record(
        product_id: str,
        quantity: int,
        event_type: StockEventType,
        event_date: date,
        reference_type: str | None = None,
        reference_id: str | None = None,
        notes: str | None = None,
        created_at: datetime | None = None,
    ) -> StockEvent:
        event = StockEvent(
            id=None,
            product_id=product_id,
            quantity=signed_quantity(event_type, quantity),
            event_type=event_type,
            event_date=event_date,
            reference_type=reference_type,
            reference_id=reference_id,
            notes=notes,
        )
        if created_at is not None:
            event.created_at = created_at
        return event

    def amend(
        self,
        *,
        quantity: int | None = None,
        event_type: StockEventType | None = None,
        event_date: date | None = None,
        reference_type: str | None = None,
        reference_id: str | None = None,
        notes: str | None = None,
    ) -> None:
        """Apply an inventory correction to this event.

        When the quantity or type changes the sign is re-derived, using the
        current magnitude if only the type was given.
        """
        if quantity is not None or event_type is not None:
            new_type = event_type or self.event_type
            new_qty = quantity if quantity is not None else self.quantity
            self.quantity = signed_quantity(new_type, new_qty)
            self.event_type = new_type
        if event_date is not None:
            self.event_date = event_date
        if reference_type is not None:
            self.reference_type = reference_type
        if reference_id is not None:
            self.reference_id = reference_id
        if notes is not None:
            self.notes = notes
