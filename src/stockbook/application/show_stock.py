"""Application service: stock level and history queries."""

from __future__ import annotations

from datetime import date

from stockbook.application.dto import StockEventDTO, StockLevelDTO, event_to_dto
from stockbook.domain.clock import Clock, system_clock
from stockbook.domain.exceptions import EntityNotFoundError
from stockbook.domain.model.value_objects import as_date
from stockbook.domain.repository.unit_of_work import UnitOfWork
from stockbook.domain.service.stock_ledger import StockLedger


class ShowStockHandler:

    def __init__(self, uow: UnitOfWork, clock: Clock = system_clock) -> None:
        self._uow = uow
        self._clock = clock

    def handle(self, product_id: str, on: date | str | None = None) -> StockLevelDTO:
        """Stock for a product as of *on* (default: today)."""
        day = as_date(on, "date") if on is not None else self._clock().date()
        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product '{product_id}' not found")
            ledger = StockLedger(uow.stock_events, uow.products)
            return StockLevelDTO(
                product_id=product.id,
                product_name=product.name,
                cached_stock=product.todays_stock,
                ledger_stock=ledger.current_stock(product.id),
                on=day.isoformat(),
                stock_on_date=ledger.stock_as_of(product.id, day),
            )


class StockHistoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        product_id: str,
        start: date | str | None = None,
        end: date | str | None = None,
    ) -> list[StockEventDTO]:
        """Ledger events for a product, newest first."""
        start_day = as_date(start, "start date") if start is not None else None
        end_day = as_date(end, "end date") if end is not None else None
        with self._uow as uow:
            if uow.products.get_by_id(product_id) is None:
                raise EntityNotFoundError(f"Product '{product_id}' not found")
            ledger = StockLedger(uow.stock_events, uow.products)
            events = ledger.history(product_id, start_day, end_day)
        return [event_to_dto(e) for e in events]
