"""Booking aggregate — a reservation of product quantity against stock.

A booking is created once per committed sale line. Its ``status`` and
``waiting_quantity`` are a cache of the last allocation run: they can only
be written from an engine result, and any edit to the booking resets them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from stockbook.domain.exceptions import ValidationError
from stockbook.domain.model.allocation import (
    AllocationRequest,
    BookingAllocation,
    BookingStatus,
)
from stockbook.domain.model.value_objects import Quantity, SourceReference, as_utc


@dataclass
class Booking:
    """Aggregate root for reservations.

    Invariants:
    - ``required_quantity`` is always > 0
    - ``0 <= waiting_quantity <= required_quantity``

    ``sequence`` is the registry's insertion counter. It breaks ties between
    bookings sharing the same dispatch date and booked-on timestamp.
    """

    id: int | None
    product_id: str
    required_quantity: int
    dispatch_date: date
    booked_on: datetime
    source: SourceReference
    sequence: int = 0
    customer_name: str | None = None
    gym_name: str | None = None
    state_code: str | None = None
    city: str | None = None
    status: BookingStatus = BookingStatus.WAITING_LIST
    waiting_quantity: int = 0
    status_computed_at: datetime | None = None

    # --- Factory (used for NEW bookings only) ---------------------------------

    @staticmethod
    def create(
        product_id: str,
        required_quantity: int,
        dispatch_date: date,
        booked_on: datetime,
        source: SourceReference,
        customer_name: str | None = None,
        gym_name: str | None = None,
        state_code: str | None = None,
        city: str | None = None,
    ) -> Booking:
        """Create a new booking with a placeholder WAITING_LIST status.

        The true status is only known once the allocation engine has run.
        """
        if not product_id:
            raise ValidationError("Product ID is required")
        qty = Quantity(required_quantity).value
        return Booking(
            id=None,
            product_id=product_id,
            required_quantity=qty,
            dispatch_date=dispatch_date,
            booked_on=as_utc(booked_on),
            source=source,
            customer_name=customer_name,
            gym_name=gym_name,
            state_code=state_code,
            city=city,
            status=BookingStatus.WAITING_LIST,
            waiting_quantity=qty,
        )

    # --- Mutations ------------------------------------------------------------

    def reschedule(
        self,
        *,
        required_quantity: int | None = None,
        dispatch_date: date | None = None,
    ) -> None:
        """Administrative edit of quantity or dispatch date.

        Priority (``booked_on``/``sequence``) is kept. The status cache goes
        back to its placeholder because it no longer describes this booking.
        """
        if required_quantity is not None:
            self.required_quantity = Quantity(required_quantity).value
        if dispatch_date is not None:
            self.dispatch_date = dispatch_date
        self._reset_status_cache()

    def record_allocation(self, line: BookingAllocation, computed_at: datetime) -> None:
        """Store an engine result as this booking's cached status."""
        if line.booking_id != self.id:
            raise ValidationError(
                f"Allocation line for booking #{line.booking_id} "
                f"cannot be recorded on booking #{self.id}"
            )
        if line.required_quantity != self.required_quantity:
            raise ValidationError(
                f"Stale allocation for booking #{self.id}: computed for "
                f"{line.required_quantity} units, booking now requires "
                f"{self.required_quantity}"
            )
        self.status = line.status
        self.waiting_quantity = line.waiting_quantity
        self.status_computed_at = as_utc(computed_at)

    # --- Queries ----------------------------------------------------------------

    @property
    def is_status_computed(self) -> bool:
        return self.status_computed_at is not None

    def to_request(self) -> AllocationRequest:
        return AllocationRequest(
            booking_id=self.id,
            required_quantity=self.required_quantity,
            dispatch_date=self.dispatch_date,
            booked_on=self.booked_on,
            sequence=self.sequence,
        )

    # --- Internal helpers -----------------------------------------------------

    def _reset_status_cache(self) -> None:
        self.status = BookingStatus.WAITING_LIST
        self.waiting_quantity = self.required_quantity
        self.status_computed_at = None
