"""Abstract unit of work — the atomic transaction boundary.

Every mutation and the cache resync that depends on it happen inside one
unit of work. Changes only become visible on ``commit()``; leaving the
``with`` block without committing discards them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockbook.domain.repository.booking_repository import BookingRepository
from stockbook.domain.repository.product_repository import ProductRepository
from stockbook.domain.repository.stock_event_repository import StockEventRepository


class UnitOfWork(ABC):

    products: ProductRepository
    stock_events: StockEventRepository
    bookings: BookingRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, *args) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every change since entering visible, all at once."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted changes. A no-op after ``commit()``."""
