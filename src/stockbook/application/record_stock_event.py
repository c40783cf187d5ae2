"""Application service: Record Stock Event use case.

Live stock-outs (OUT/SALE) are checked before they reach the ledger: they
must fit within the stock on their date and on every later event date.
Administrative entries, such as backdated corrections, skip the check and
may take stock negative.
"""

from __future__ import annotations

import logging
from datetime import date

from stockbook.application.dto import StockEventDTO, event_to_dto
from stockbook.domain.clock import Clock, system_clock
from stockbook.domain.exceptions import EntityNotFoundError, InsufficientStockError
from stockbook.domain.model.stock_event import StockEventType, signed_quantity
from stockbook.domain.model.value_objects import as_date
from stockbook.domain.repository.unit_of_work import UnitOfWork
from stockbook.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


class RecordStockEventHandler:

    def __init__(self, uow: UnitOfWork, clock: Clock = system_clock) -> None:
        self._uow = uow
        self._clock = clock

    def handle(
        self,
        product_id: str,
        quantity: int,
        event_type: StockEventType | str,
        event_date: date | str,
        reference_type: str | None = None,
        reference_id: str | None = None,
        notes: str | None = None,
        administrative: bool = False,
    ) -> StockEventDTO:
        kind = StockEventType.parse(event_type)
        on = as_date(event_date, "event date")

        with self._uow as uow:
            if uow.products.get_by_id(product_id) is None:
                raise EntityNotFoundError(f"Product '{product_id}' not found")
            ledger = StockLedger(uow.stock_events, uow.products)

            if kind.is_outbound and not administrative:
                needed = abs(signed_quantity(kind, quantity))
                available = ledger.lowest_stock_from(product_id, on)
                if available < needed:
                    raise InsufficientStockError(
                        f"Insufficient stock for product '{product_id}' on "
                        f"{on.isoformat()}: available {available}, requested {needed}"
                    )

            event = ledger.record_event(
                product_id=product_id,
                quantity=quantity,
                event_type=kind,
                event_date=on,
                reference_type=reference_type,
                reference_id=reference_id,
                notes=notes,
                recorded_at=self._clock(),
            )
            uow.commit()

        if administrative and kind.is_outbound:
            logger.info("Administrative stock-out #%s bypassed the availability check", event.id)
        return event_to_dto(event)
