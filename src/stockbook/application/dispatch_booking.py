"""Application service: Dispatch Booking use case.

When booked goods physically leave, the reservation turns into a real
stock-out: a SALE event is recorded against the ledger and the booking
leaves the queue. Both happen in one unit of work, so the ledger never
counts the same units twice (once as an event, once as a queued booking).
"""

from __future__ import annotations

import logging
from datetime import date

from stockbook.application.dto import StockEventDTO, event_to_dto
from stockbook.domain.clock import Clock, system_clock
from stockbook.domain.exceptions import EntityNotFoundError, InsufficientStockError
from stockbook.domain.model.allocation import BookingStatus
from stockbook.domain.model.stock_event import SALE_LINE_REFERENCE, StockEventType
from stockbook.domain.model.value_objects import as_date
from stockbook.domain.repository.unit_of_work import UnitOfWork
from stockbook.domain.service.allocation_engine import BookingAllocationService
from stockbook.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


class DispatchBookingHandler:

    def __init__(self, uow: UnitOfWork, clock: Clock = system_clock) -> None:
        self._uow = uow
        self._clock = clock

    def handle(
        self,
        booking_id: int,
        dispatch_on: date | str | None = None,
        administrative: bool = False,
    ) -> StockEventDTO:
        """Ship a booking.

        Args:
            booking_id: The booking to ship.
            dispatch_on: Date of the stock-out; defaults to the booking's
                dispatch date.
            administrative: Skip the check that the booking is fully
                confirmed by a fresh allocation on that date.
        """
        with self._uow as uow:
            booking = uow.bookings.get_by_id(booking_id)
            if booking is None:
                raise EntityNotFoundError(f"Booking #{booking_id} not found")
            on = as_date(dispatch_on, "dispatch date") if dispatch_on is not None else booking.dispatch_date

            ledger = StockLedger(uow.stock_events, uow.products)

            if not administrative:
                self._check_confirmed(ledger, uow, booking, on)

            event = ledger.record_event(
                product_id=booking.product_id,
                quantity=booking.required_quantity,
                event_type=StockEventType.SALE,
                event_date=on,
                reference_type=SALE_LINE_REFERENCE,
                reference_id=booking.source.quotation_item_id,
                notes=f"Dispatch of booking #{booking_id} ({booking.source})",
                recorded_at=self._clock(),
            )
            uow.bookings.delete(booking_id)
            uow.commit()

        logger.info(
            "Dispatched booking #%s: %d of product %s on %s (event #%s)",
            booking_id, booking.required_quantity, booking.product_id,
            on.isoformat(), event.id,
        )
        return event_to_dto(event)

    @staticmethod
    def _check_confirmed(ledger: StockLedger, uow: UnitOfWork, booking, on: date) -> None:
        """The booking must hold its full quantity in queue order, and the
        stock must physically be there from the day it leaves onward."""
        allocation = BookingAllocationService(ledger, uow.bookings, uow.products)
        # an early dispatch is still judged at the booking's own queue position
        result = allocation.allocate(booking.product_id, max(on, booking.dispatch_date))
        line = result.line_for(booking.id)
        if line is None or line.status != BookingStatus.CONFIRM:
            waiting = line.waiting_quantity if line else booking.required_quantity
            raise InsufficientStockError(
                f"Booking #{booking.id} is not fully confirmed "
                f"({waiting} of {booking.required_quantity} waiting)"
            )
        on_hand = ledger.lowest_stock_from(booking.product_id, on)
        if on_hand < booking.required_quantity:
            raise InsufficientStockError(
                f"Insufficient stock for product '{booking.product_id}' on "
                f"{on.isoformat()}: available {on_hand}, requested {booking.required_quantity}"
            )
