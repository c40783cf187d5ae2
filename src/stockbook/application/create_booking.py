"""Application service: Create Booking use case.

Entry point for a committed sale line. The booking is stored with a
placeholder WAITING_LIST status; its real standing is only known when the
allocation engine runs. ``booked_on`` comes from the injected clock and
decides priority among bookings dispatching on the same day.
"""

from __future__ import annotations

import logging

from stockbook.application.dto import BookingDTO, SaleLineSpec, booking_to_dto
from stockbook.domain.clock import Clock, system_clock
from stockbook.domain.exceptions import EntityNotFoundError, ValidationError
from stockbook.domain.model.booking import Booking
from stockbook.domain.model.stock_event import SALE_LINE_REFERENCE
from stockbook.domain.model.value_objects import SourceReference, as_date
from stockbook.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class CreateBookingHandler:

    def __init__(self, uow: UnitOfWork, clock: Clock = system_clock) -> None:
        self._uow = uow
        self._clock = clock

    def handle(self, spec: SaleLineSpec) -> BookingDTO:
        """Create a booking for one sale line.

        Steps:
        1. Validate input before touching the store.
        2. Resolve the product (fail if not found).
        3. Refuse a second booking for a sale line that is still queued
           or has already shipped. A cancelled line may be booked again.
        4. Persist; the registry assigns ID and insertion sequence.
        """
        source = SourceReference(
            quotation_id=spec.quotation_id,
            quotation_item_id=spec.quotation_item_id,
            quote_number=spec.quote_number,
        )
        dispatch_date = as_date(spec.dispatch_date, "dispatch date")

        with self._uow as uow:
            if uow.products.get_by_id(spec.product_id) is None:
                raise EntityNotFoundError(f"Product '{spec.product_id}' not found")

            existing = uow.bookings.get_by_sale_line(source.quotation_item_id)
            if existing is not None:
                raise ValidationError(
                    f"Sale line {source} is already booked (booking #{existing.id})"
                )
            if uow.stock_events.list_by_reference(SALE_LINE_REFERENCE, source.quotation_item_id):
                raise ValidationError(f"Sale line {source} has already been dispatched")

            booking = Booking.create(
                product_id=spec.product_id,
                required_quantity=spec.quantity,
                dispatch_date=dispatch_date,
                booked_on=self._clock(),
                source=source,
                customer_name=spec.customer_name,
                gym_name=spec.gym_name,
                state_code=spec.state_code,
                city=spec.city,
            )
            uow.bookings.save(booking)
            uow.commit()

        logger.info(
            "Booked %d of product %s for dispatch %s (booking #%s, sale line %s)",
            booking.required_quantity, booking.product_id,
            booking.dispatch_date.isoformat(), booking.id, source,
        )
        return booking_to_dto(booking)
