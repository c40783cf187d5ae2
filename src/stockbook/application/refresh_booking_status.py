"""Application service: Refresh Booking Status use case.

The only writer of the cached ``status``/``waiting_quantity`` on bookings.
Runs a fresh allocation and stores each line on its booking together with
the time it was computed.
"""

from __future__ import annotations

import logging
from datetime import date

from stockbook.application.dto import AllocationDTO, allocation_to_dto
from stockbook.domain.clock import Clock, system_clock
from stockbook.domain.model.value_objects import as_date
from stockbook.domain.repository.unit_of_work import UnitOfWork
from stockbook.domain.service.allocation_engine import BookingAllocationService
from stockbook.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


class RefreshBookingStatusHandler:

    def __init__(self, uow: UnitOfWork, clock: Clock = system_clock) -> None:
        self._uow = uow
        self._clock = clock

    def handle(self, product_id: str, selected_date: date | str) -> AllocationDTO:
        on = as_date(selected_date, "selected date")
        computed_at = self._clock()

        with self._uow as uow:
            ledger = StockLedger(uow.stock_events, uow.products)
            svc = BookingAllocationService(ledger, uow.bookings, uow.products)
            result = svc.allocate(product_id, on)

            for line in result.lines:
                booking = uow.bookings.get_by_id(line.booking_id)
                booking.record_allocation(line, computed_at)
                uow.bookings.save(booking)
            uow.commit()

        logger.info(
            "Refreshed status of %d bookings for product %s as of %s",
            len(result.lines), product_id, on.isoformat(),
        )
        return allocation_to_dto(result)
