"""Application service: Update Stock Event use case (inventory correction)."""

from __future__ import annotations

from datetime import date

from stockbook.application.dto import StockEventDTO, event_to_dto
from stockbook.domain.exceptions import ValidationError
from stockbook.domain.model.stock_event import StockEventType
from stockbook.domain.model.value_objects import as_date
from stockbook.domain.repository.unit_of_work import UnitOfWork
from stockbook.domain.service.stock_ledger import StockLedger


class UpdateStockEventHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        event_id: int,
        quantity: int | None = None,
        event_type: StockEventType | str | None = None,
        event_date: date | str | None = None,
        reference_type: str | None = None,
        reference_id: str | None = None,
        notes: str | None = None,
    ) -> StockEventDTO:
        """Correct a ledger event; the product's stock cache is resynchronised."""
        patch: dict = {}
        if quantity is not None:
            patch["quantity"] = quantity
        if event_type is not None:
            patch["event_type"] = StockEventType.parse(event_type)
        if event_date is not None:
            patch["event_date"] = as_date(event_date, "event date")
        if reference_type is not None:
            patch["reference_type"] = reference_type
        if reference_id is not None:
            patch["reference_id"] = reference_id
        if notes is not None:
            patch["notes"] = notes
        if not patch:
            raise ValidationError("Nothing to update")

        with self._uow as uow:
            ledger = StockLedger(uow.stock_events, uow.products)
            event = ledger.update_event(event_id, **patch)
            uow.commit()
        return event_to_dto(event)
