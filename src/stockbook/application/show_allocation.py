"""Application service: Show Allocation use case (query).

Always recomputed from the ledger and the booking registry; cached booking
statuses are never read here.
"""

from __future__ import annotations

from datetime import date

from stockbook.application.dto import AllocationDTO, allocation_to_dto
from stockbook.domain.model.value_objects import as_date
from stockbook.domain.repository.unit_of_work import UnitOfWork
from stockbook.domain.service.allocation_engine import BookingAllocationService
from stockbook.domain.service.stock_ledger import StockLedger


class ShowAllocationHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: str, selected_date: date | str) -> AllocationDTO:
        on = as_date(selected_date, "selected date")
        with self._uow as uow:
            ledger = StockLedger(uow.stock_events, uow.products)
            svc = BookingAllocationService(ledger, uow.bookings, uow.products)
            result = svc.allocate(product_id, on)
        return allocation_to_dto(result)
