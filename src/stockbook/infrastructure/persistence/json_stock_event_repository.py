"""JSON-document-backed implementation of StockEventRepository."""

from __future__ import annotations

from datetime import date, datetime

from stockbook.domain.model.stock_event import StockEvent, StockEventType
from stockbook.domain.repository.stock_event_repository import StockEventRepository


class JsonStockEventRepository(StockEventRepository):

    def __init__(self, document: dict) -> None:
        self._records: list[dict] = document.setdefault("stock_events", [])
        self._counters: dict = document.setdefault("counters", {})

    # --- StockEventRepository interface ---------------------------------------

    def get_by_id(self, event_id: int) -> StockEvent | None:
        for raw in self._records:
            if raw["id"] == event_id:
                return self._to_domain(raw)
        return None

    def list_for_product(self, product_id: str) -> list[StockEvent]:
        events = [
            self._to_domain(raw)
            for raw in self._records
            if raw["product_id"] == product_id
        ]
        events.sort(key=lambda e: (e.event_date, e.id))
        return events

    def sum_quantity(self, product_id: str, on_or_before: date | None = None) -> int:
        # ISO dates compare correctly as strings
        cutoff = on_or_before.isoformat() if on_or_before is not None else None
        return sum(
            raw["quantity"]
            for raw in self._records
            if raw["product_id"] == product_id
            and (cutoff is None or raw["event_date"] <= cutoff)
        )

    def list_by_reference(self, reference_type: str, reference_id: str) -> list[StockEvent]:
        events = [
            self._to_domain(raw)
            for raw in self._records
            if raw.get("reference_type") == reference_type
            and raw.get("reference_id") == reference_id
        ]
        events.sort(key=lambda e: (e.event_date, e.id))
        return events

    def save(self, event: StockEvent) -> None:
        if event.id is None:
            event.id = self._next_id()
            self._records.append(self._to_raw(event))
            return
        for i, raw in enumerate(self._records):
            if raw["id"] == event.id:
                self._records[i] = self._to_raw(event)
                return
        self._records.append(self._to_raw(event))

    def delete(self, event_id: int) -> None:
        self._records[:] = [raw for raw in self._records if raw["id"] != event_id]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(event: StockEvent) -> dict:
        return {
            "id": event.id,
            "product_id": event.product_id,
            "quantity": event.quantity,
            "event_type": event.event_type.value,
            "event_date": event.event_date.isoformat(),
            "reference_type": event.reference_type,
            "reference_id": event.reference_id,
            "notes": event.notes,
            "created_at": event.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> StockEvent:
        return StockEvent(
            id=raw["id"],
            product_id=raw["product_id"],
            quantity=raw["quantity"],
            event_type=StockEventType(raw["event_type"]),
            event_date=date.fromisoformat(raw["event_date"]),
            reference_type=raw.get("reference_type"),
            reference_id=raw.get("reference_id"),
            notes=raw.get("notes"),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )

    # --- ID allocation --------------------------------------------------------

    def _next_id(self) -> int:
        self._counters["stock_event_id"] = self._counters.get("stock_event_id", 0) + 1
        return self._counters["stock_event_id"]
