"""Application service: Project Stock use case (query).

Read-only what-if view for order entry: stock left on a date after the
booking queue is served, the next incoming delivery, and, optionally, how
much of a prospective booking could be confirmed.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from stockbook.application.dto import ProjectionDTO, projection_to_dto
from stockbook.domain.clock import Clock, system_clock
from stockbook.domain.model.value_objects import as_date
from stockbook.domain.repository.unit_of_work import UnitOfWork
from stockbook.domain.service.allocation_engine import BookingAllocationService
from stockbook.domain.service.stock_ledger import StockLedger
from stockbook.domain.service.stock_projection import (
    DEFAULT_HORIZON_DAYS,
    StockProjectionService,
)


class ProjectStockHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Clock = system_clock,
        horizon_days: Sequence[int] = DEFAULT_HORIZON_DAYS,
    ) -> None:
        self._uow = uow
        self._clock = clock
        self._horizon_days = horizon_days

    def handle(
        self,
        product_id: str,
        selected_date: date | str,
        requested_quantity: int | None = None,
    ) -> ProjectionDTO:
        on = as_date(selected_date, "selected date")
        with self._uow as uow:
            projection = self._service(uow).project(product_id, on, requested_quantity)
        return projection_to_dto(projection)

    def handle_many(
        self, product_ids: Sequence[str], selected_date: date | str
    ) -> list[ProjectionDTO]:
        on = as_date(selected_date, "selected date")
        with self._uow as uow:
            projections = self._service(uow).project_many(product_ids, on)
        return [projection_to_dto(p) for p in projections]

    def _service(self, uow: UnitOfWork) -> StockProjectionService:
        ledger = StockLedger(uow.stock_events, uow.products)
        allocation = BookingAllocationService(ledger, uow.bookings, uow.products)
        return StockProjectionService(ledger, allocation, self._clock, self._horizon_days)
