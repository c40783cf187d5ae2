"""Application service: Delete Stock Event use case.

Deletion is a hard delete. Allocation is not pushed anywhere: the next
allocation read derives the new state from the ledger.
"""

from __future__ import annotations

from stockbook.application.dto import StockEventDTO, event_to_dto
from stockbook.domain.repository.unit_of_work import UnitOfWork
from stockbook.domain.service.stock_ledger import StockLedger


class DeleteStockEventHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, event_id: int) -> StockEventDTO:
        with self._uow as uow:
            event = StockLedger(uow.stock_events, uow.products).delete_event(event_id)
            uow.commit()
        return event_to_dto(event)
