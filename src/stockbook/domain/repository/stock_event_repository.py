"""Abstract repository for the stock ledger."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from stockbook.domain.model.stock_event import StockEvent


class StockEventRepository(ABC):

    @abstractmethod
    def get_by_id(self, event_id: int) -> StockEvent | None:
        """Return a ledger event by its ID, or None if not found."""

    @abstractmethod
    def list_for_product(self, product_id: str) -> list[StockEvent]:
        """Return every event for a product, oldest first (date, then ID)."""

    @abstractmethod
    def sum_quantity(self, product_id: str, on_or_before: date | None = None) -> int:
        """Sum event quantities for a product.

        With *on_or_before*, only events dated on or before that day count.
        Returns 0 when there are no matching events.
        """

    @abstractmethod
    def list_by_reference(self, reference_type: str, reference_id: str) -> list[StockEvent]:
        """Return every event carrying this reference, oldest first."""

    @abstractmethod
    def save(self, event: StockEvent) -> None:
        """Persist a new or updated event, assigning an ID to new ones."""

    @abstractmethod
    def delete(self, event_id: int) -> None:
        """Hard-delete an event."""
