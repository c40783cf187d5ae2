"""In-memory fake repositories for testing.

These implement the same abstract interfaces as the JSON repositories
but keep everything in a dict. No file I/O, no side effects.
"""

from __future__ import annotations

import copy
from datetime import date, datetime, timedelta, timezone

from stockbook.domain.model.allocation import allocation_order_key
from stockbook.domain.model.booking import Booking
from stockbook.domain.model.product import Product
from stockbook.domain.model.stock_event import StockEvent
from stockbook.domain.repository.booking_repository import BookingRepository
from stockbook.domain.repository.product_repository import ProductRepository
from stockbook.domain.repository.stock_event_repository import StockEventRepository
from stockbook.domain.repository.unit_of_work import UnitOfWork


class FakeProductRepository(ProductRepository):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._store: dict[str, Product] = {}
        for p in products or []:
            self._store[p.id] = p

    def get_by_id(self, product_id: str) -> Product | None:
        return self._store.get(product_id)

    def get_by_name(self, name: str) -> Product | None:
        for p in self._store.values():
            if p.name.lower() == name.lower():
                return p
        return None

    def list_all(self) -> list[Product]:
        return list(self._store.values())

    def save(self, product: Product) -> None:
        self._store[product.id] = product


class FakeStockEventRepository(StockEventRepository):

    def __init__(self, events: list[StockEvent] | None = None) -> None:
        self._store: dict[int, StockEvent] = {}
        self._next_id = 1
        for e in events or []:
            self.save(e)

    def get_by_id(self, event_id: int) -> StockEvent | None:
        return self._store.get(event_id)

    def list_for_product(self, product_id: str) -> list[StockEvent]:
        events = [e for e in self._store.values() if e.product_id == product_id]
        events.sort(key=lambda e: (e.event_date, e.id))
        return events

    def sum_quantity(self, product_id: str, on_or_before: date | None = None) -> int:
        return sum(
            e.quantity
            for e in self._store.values()
            if e.product_id == product_id
            and (on_or_before is None or e.event_date <= on_or_before)
        )

    def list_by_reference(self, reference_type: str, reference_id: str) -> list[StockEvent]:
        events = [
            e
            for e in self._store.values()
            if e.reference_type == reference_type and e.reference_id == reference_id
        ]
        events.sort(key=lambda e: (e.event_date, e.id))
        return events

    def save(self, event: StockEvent) -> None:
        if event.id is None:
            event.id = self._next_id
            self._next_id += 1
        self._store[event.id] = event

    def delete(self, event_id: int) -> None:
        self._store.pop(event_id, None)


class FakeBookingRepository(BookingRepository):

    def __init__(self, bookings: list[Booking] | None = None) -> None:
        self._store: dict[int, Booking] = {}
        self._next_id = 1
        self._next_sequence = 1
        for b in bookings or []:
            self.save(b)

    def get_by_id(self, booking_id: int) -> Booking | None:
        return self._store.get(booking_id)

    def list_all(self) -> list[Booking]:
        return sorted(self._store.values(), key=lambda b: b.sequence)

    def list_for_allocation(
        self, product_id: str, dispatch_on_or_before: date
    ) -> list[Booking]:
        bookings = [
            b
            for b in self._store.values()
            if b.product_id == product_id and b.dispatch_date <= dispatch_on_or_before
        ]
        bookings.sort(key=allocation_order_key)
        return bookings

    def find_latest_by_order_reference(self, reference_id: str) -> Booking | None:
        matches = [b for b in self._store.values() if b.source.matches(reference_id)]
        if not matches:
            return None
        return max(matches, key=lambda b: (b.booked_on, b.sequence))

    def get_by_sale_line(self, quotation_item_id: str) -> Booking | None:
        for b in self._store.values():
            if b.source.quotation_item_id == quotation_item_id:
                return b
        return None

    def save(self, booking: Booking) -> None:
        if booking.id is None:
            booking.id = self._next_id
            booking.sequence = self._next_sequence
            self._next_id += 1
            self._next_sequence += 1
        self._store[booking.id] = booking

    def delete(self, booking_id: int) -> None:
        self._store.pop(booking_id, None)


class FakeUnitOfWork(UnitOfWork):
    """Snapshots the fakes on enter and restores them unless committed."""

    def __init__(
        self,
        products: list[Product] | None = None,
        events: list[StockEvent] | None = None,
        bookings: list[Booking] | None = None,
    ) -> None:
        self.products = FakeProductRepository(products)
        self.stock_events = FakeStockEventRepository(events)
        self.bookings = FakeBookingRepository(bookings)
        self.commits = 0
        self._snapshot: dict | None = None

    def __enter__(self) -> FakeUnitOfWork:
        self._snapshot = copy.deepcopy(self._repos())
        return self

    def commit(self) -> None:
        self.commits += 1
        self._snapshot = None

    def rollback(self) -> None:
        if self._snapshot is None:
            return
        for name, state in self._snapshot.items():
            getattr(self, name).__dict__.update(state)
        self._snapshot = None

    def _repos(self) -> dict:
        return {
            "products": self.products.__dict__,
            "stock_events": self.stock_events.__dict__,
            "bookings": self.bookings.__dict__,
        }


class FixedClock:
    """A clock that only moves when told to."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> None:
        self.now = self.now + timedelta(**delta)


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)
