"""Application service: what happened to the reservation for an order line."""

from __future__ import annotations

from stockbook.application.dto import BookingDTO, booking_to_dto
from stockbook.domain.repository.unit_of_work import UnitOfWork
from stockbook.domain.service.allocation_engine import BookingAllocationService
from stockbook.domain.service.stock_ledger import StockLedger


class FindBookingForOrderLineHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, reference_id: str) -> BookingDTO | None:
        """Latest booking for a quotation item (or quotation) ID.

        The status is computed live as of the booking's own dispatch date.
        Returns None when the order line has no booking (never booked, or
        already dispatched or cancelled).
        """
        with self._uow as uow:
            booking = uow.bookings.find_latest_by_order_reference(reference_id)
            if booking is None:
                return None
            ledger = StockLedger(uow.stock_events, uow.products)
            svc = BookingAllocationService(ledger, uow.bookings, uow.products)
            line = svc.allocate(booking.product_id, booking.dispatch_date).line_for(booking.id)
        return booking_to_dto(booking, line)
