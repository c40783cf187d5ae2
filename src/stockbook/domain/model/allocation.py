"""Allocation value objects.

These are ephemeral: produced by the allocation engine on every read and
never persisted as a source of truth.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class BookingStatus(Enum):
    CONFIRM = "CONFIRM"
    WAITING_LIST = "WAITING_LIST"


@dataclass(frozen=True)
class AllocationRequest:
    """Immutable view of a booking as the engine sees it."""

    booking_id: int | None
    required_quantity: int
    dispatch_date: date
    booked_on: datetime
    sequence: int


def allocation_order_key(item) -> tuple:
    """Queue priority: earlier dispatch first, then first booked, then first inserted."""
    return (item.dispatch_date, item.booked_on, item.sequence)


@dataclass(frozen=True)
class BookingAllocation:
    """Outcome of the allocation for a single booking."""

    booking_id: int | None
    dispatch_date: date
    booked_on: datetime
    sequence: int
    required_quantity: int
    available_stock_at_booking: int  # snapshot before this booking consumed any
    confirmed_quantity: int
    waiting_quantity: int
    status: BookingStatus

    @property
    def is_partial(self) -> bool:
        return self.status == BookingStatus.WAITING_LIST and self.confirmed_quantity > 0


@dataclass(frozen=True)
class AllocationResult:
    product_id: str
    selected_date: date
    stock_on_selected_date: int
    lines: tuple[BookingAllocation, ...]
    total_confirmed_quantity: int
    total_waiting_quantity: int

    @property
    def remaining_stock(self) -> int:
        """Stock left on the selected date once the queue has been served."""
        return self.stock_on_selected_date - self.total_confirmed_quantity

    def line_for(self, booking_id: int) -> BookingAllocation | None:
        for line in self.lines:
            if line.booking_id == booking_id:
                return line
        return None
