"""Application service: List Bookings use case (query).

Without ``recompute_on`` the cached status is shown, labelled with the time
it was last computed. With it, each product's queue is allocated afresh for
that date and the live figures replace the cache for every booking the
allocation covers.
"""

from __future__ import annotations

from datetime import date

from stockbook.application.dto import BookingDTO, BookingFilter, booking_to_dto
from stockbook.domain.model.allocation import BookingAllocation
from stockbook.domain.model.booking import Booking
from stockbook.domain.model.value_objects import as_date
from stockbook.domain.repository.unit_of_work import UnitOfWork
from stockbook.domain.service.allocation_engine import BookingAllocationService
from stockbook.domain.service.stock_ledger import StockLedger


class ListBookingsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        filters: BookingFilter | None = None,
        recompute_on: date | str | None = None,
    ) -> list[BookingDTO]:
        filters = filters or BookingFilter()
        on = as_date(recompute_on, "recompute date") if recompute_on is not None else None

        with self._uow as uow:
            bookings = [b for b in uow.bookings.list_all() if self._matches(b, filters)]
            live: dict[int, BookingAllocation] = {}
            if on is not None:
                ledger = StockLedger(uow.stock_events, uow.products)
                svc = BookingAllocationService(ledger, uow.bookings, uow.products)
                for product_id in sorted({b.product_id for b in bookings}):
                    for line in svc.allocate(product_id, on).lines:
                        live[line.booking_id] = line

        dtos = [booking_to_dto(b, live.get(b.id), on) for b in bookings]
        if filters.status:
            dtos = [d for d in dtos if d.status == filters.status.upper()]
        return dtos

    @staticmethod
    def _matches(booking: Booking, filters: BookingFilter) -> bool:
        if filters.product_id and booking.product_id != filters.product_id:
            return False
        if filters.dispatch_from and booking.dispatch_date < filters.dispatch_from:
            return False
        if filters.dispatch_to and booking.dispatch_date > filters.dispatch_to:
            return False
        if filters.search:
            needle = filters.search.lower()
            haystack = (
                booking.source.quote_number,
                booking.source.quotation_id,
                booking.customer_name,
                booking.gym_name,
                booking.city,
            )
            if not any(needle in value.lower() for value in haystack if value):
                return False
        return True


class BookingFilterOptionsHandler:
    """Distinct values the booking list can be filtered by."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> dict[str, list[str]]:
        with self._uow as uow:
            bookings = uow.bookings.list_all()
        return {
            "statuses": sorted({b.status.value for b in bookings}),
            "products": sorted({b.product_id for b in bookings}),
        }
