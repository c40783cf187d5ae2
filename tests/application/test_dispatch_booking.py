"""Integration tests for the DispatchBooking use case."""

from datetime import date

import pytest

from stockbook.application.dispatch_booking import DispatchBookingHandler
from stockbook.domain.exceptions import EntityNotFoundError, InsufficientStockError
from stockbook.domain.model.booking import Booking
from stockbook.domain.model.product import Product
from stockbook.domain.model.stock_event import StockEvent, StockEventType
from stockbook.domain.model.value_objects import SourceReference
from tests.fakes import FakeUnitOfWork, FixedClock, utc


def _booking(qty: int, booked_hour: int = 9, item: str = "QI-1") -> Booking:
    return Booking.create(
        product_id="P1",
        required_quantity=qty,
        dispatch_date=date(2024, 1, 10),
        booked_on=utc(2024, 1, 1, booked_hour),
        source=SourceReference("Q-1", item, quote_number="QT-1"),
    )


def _setup(stock: int, bookings: list[Booking]) -> tuple[DispatchBookingHandler, FakeUnitOfWork]:
    events = [StockEvent.record("P1", stock, StockEventType.IN, date(2024, 1, 5))] if stock else []
    uow = FakeUnitOfWork(
        products=[Product(id="P1", name="Treadmill", todays_stock=stock)],
        events=events,
        bookings=bookings,
    )
    return DispatchBookingHandler(uow, clock=FixedClock(utc(2024, 1, 10, 15))), uow


class TestDispatchBooking:

    def test_records_sale_and_removes_booking(self):
        handler, uow = _setup(10, [_booking(4)])

        event = handler.handle(1)

        assert event.event_type == "SALE"
        assert event.quantity == -4
        assert event.event_date == "2024-01-10"
        assert event.reference_type == "quotation_item"
        assert event.reference_id == "QI-1"
        assert uow.bookings.get_by_id(1) is None
        assert uow.products.get_by_id("P1").todays_stock == 6

    def test_stock_not_counted_twice(self):
        handler, uow = _setup(10, [_booking(4, item="QI-1"), _booking(6, booked_hour=10, item="QI-2")])
        handler.handle(1)
        # the remaining booking still fits in what is left
        handler.handle(2)
        assert uow.products.get_by_id("P1").todays_stock == 0

    def test_early_dispatch_date(self):
        handler, uow = _setup(10, [_booking(4)])
        event = handler.handle(1, dispatch_on="2024-01-06")
        assert event.event_date == "2024-01-06"

    def test_waiting_booking_cannot_ship(self):
        handler, uow = _setup(5, [_booking(5, booked_hour=9, item="QI-1"), _booking(3, booked_hour=10, item="QI-2")])
        with pytest.raises(InsufficientStockError, match="not fully confirmed"):
            handler.handle(2)
        assert uow.bookings.get_by_id(2) is not None
        assert uow.products.get_by_id("P1").todays_stock == 5

    def test_cannot_ship_before_stock_arrives(self):
        handler, _ = _setup(10, [_booking(4)])
        with pytest.raises(InsufficientStockError, match="available 0"):
            handler.handle(1, dispatch_on=date(2024, 1, 3))

    def test_administrative_dispatch_skips_check(self):
        handler, uow = _setup(0, [_booking(4)])
        event = handler.handle(1, administrative=True)
        assert event.quantity == -4
        assert uow.products.get_by_id("P1").todays_stock == -4
        assert uow.bookings.list_all() == []

    def test_unknown_booking(self):
        handler, _ = _setup(10, [])
        with pytest.raises(EntityNotFoundError, match="Booking #3 not found"):
            handler.handle(3)

    def test_later_ledger_outflow_blocks_dispatch(self):
        handler, uow = _setup(10, [_booking(4)])
        uow.stock_events.save(StockEvent.record("P1", 8, StockEventType.OUT, date(2024, 1, 12)))

        with pytest.raises(InsufficientStockError, match="available 2, requested 4"):
            handler.handle(1)
        assert uow.bookings.get_by_id(1) is not None
