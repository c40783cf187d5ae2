"""Domain service: Stock Ledger.

Maintains the append-only signed-quantity log per product and answers
"what is the stock of product P on day D". Every mutation re-sums the
product's events and writes the result into ``Product.todays_stock``;
callers run this inside a unit of work so the event and the cache commit
together.

The ledger never blocks negative stock. Checking availability for live
stock-outs is the caller's job (see ``RecordStockEventHandler``).
"""

from __future__ import annotations

import logging
from datetime import date, datetime

from stockbook.domain.exceptions import EntityNotFoundError
from stockbook.domain.model.product import Product
from stockbook.domain.model.stock_event import StockEvent, StockEventType
from stockbook.domain.repository.product_repository import ProductRepository
from stockbook.domain.repository.stock_event_repository import StockEventRepository

logger = logging.getLogger(__name__)


class StockLedger:

    def __init__(
        self,
        event_repo: StockEventRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._event_repo = event_repo
        self._product_repo = product_repo

    # --- Mutations --------------------------------------------------------------

    def record_event(
        self,
        product_id: str,
        quantity: int,
        event_type: StockEventType,
        event_date: date,
        reference_type: str | None = None,
        reference_id: str | None = None,
        notes: str | None = None,
        recorded_at: datetime | None = None,
    ) -> StockEvent:
        """Append an event and resynchronise the product's stock cache."""
        product = self._require_product(product_id)
        event = StockEvent.record(
            product_id=product.id,
            quantity=quantity,
            event_type=event_type,
            event_date=event_date,
            reference_type=reference_type,
            reference_id=reference_id,
            notes=notes,
            created_at=recorded_at,
        )
        self._event_repo.save(event)
        self._resync(product)
        logger.info(
            "Recorded %s %+d for product %s dated %s (event #%s)",
            event.event_type.value, event.quantity, product.id,
            event.event_date.isoformat(), event.id,
        )
        return event

    def update_event(self, event_id: int, **patch) -> StockEvent:
        """Correct an existing event; see ``StockEvent.amend`` for the fields."""
        event = self._require_event(event_id)
        event.amend(**patch)
        self._event_repo.save(event)
        self._resync(self._require_product(event.product_id))
        logger.info("Amended stock event #%s (%s)", event_id, ", ".join(sorted(patch)))
        return event

    def delete_event(self, event_id: int) -> StockEvent:
        event = self._require_event(event_id)
        self._event_repo.delete(event_id)
        self._resync(self._require_product(event.product_id))
        logger.info("Deleted stock event #%s for product %s", event_id, event.product_id)
        return event

    # --- Queries ----------------------------------------------------------------

    def stock_as_of(self, product_id: str, on: date) -> int:
        """Exact stock at the end of day *on*."""
        return self._event_repo.sum_quantity(product_id, on_or_before=on)

    def current_stock(self, product_id: str) -> int:
        """Sum of every event for the product, future-dated ones included."""
        return self._event_repo.sum_quantity(product_id)

    def lowest_stock_from(self, product_id: str, start: date) -> int:
        """Lowest end-of-day stock on *start* or any later event date.

        A stock-out dated *start* reduces every one of these balances, so
        it is only covered if it fits within the lowest.
        """
        balance = self.stock_as_of(product_id, start)
        lowest = balance
        day = start
        for event in self._event_repo.list_for_product(product_id):
            if event.event_date <= start:
                continue
            if event.event_date != day:
                lowest = min(lowest, balance)
                day = event.event_date
            balance += event.quantity
        return min(lowest, balance)

    def history(
        self,
        product_id: str,
        start: date | None = None,
        end: date | None = None,
    ) -> list[StockEvent]:
        """Events for a product within an optional date window, newest first."""
        events = [
            e
            for e in self._event_repo.list_for_product(product_id)
            if (start is None or e.event_date >= start)
            and (end is None or e.event_date <= end)
        ]
        events.sort(key=lambda e: (e.event_date, e.id or 0), reverse=True)
        return events

    def next_replenishment(self, product_id: str, after: date) -> StockEvent | None:
        """Earliest IN/PURCHASE event dated strictly after *after*."""
        incoming = [
            e
            for e in self._event_repo.list_for_product(product_id)
            if e.event_type.is_replenishment and e.event_date > after
        ]
        if not incoming:
            return None
        return min(incoming, key=lambda e: (e.event_date, e.id or 0))

    # --- Internal helpers -----------------------------------------------------

    def _resync(self, product: Product) -> None:
        product.sync_stock(self.current_stock(product.id))
        self._product_repo.save(product)

    def _require_product(self, product_id: str) -> Product:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product '{product_id}' not found")
        return product

    def _require_event(self, event_id: int) -> StockEvent:
        event = self._event_repo.get_by_id(event_id)
        if event is None:
            raise EntityNotFoundError(f"Stock event #{event_id} not found")
        return event
