"""Unit tests for chronological booking allocation.

The pure ``allocate()`` function is exercised directly; the service is
exercised against in-memory fakes.
"""

from datetime import date

import pytest

from stockbook.domain.exceptions import EntityNotFoundError
from stockbook.domain.model.allocation import AllocationRequest, BookingStatus
from stockbook.domain.model.booking import Booking
from stockbook.domain.model.product import Product
from stockbook.domain.model.stock_event import StockEvent, StockEventType
from stockbook.domain.model.value_objects import SourceReference
from stockbook.domain.service.allocation_engine import BookingAllocationService, allocate
from stockbook.domain.service.stock_ledger import StockLedger
from tests.fakes import FakeUnitOfWork, utc

DISPATCH = date(2024, 1, 10)


def _req(booking_id, qty, dispatch=DISPATCH, booked_hour=9, sequence=None) -> AllocationRequest:
    return AllocationRequest(
        booking_id=booking_id,
        required_quantity=qty,
        dispatch_date=dispatch,
        booked_on=utc(2024, 1, 1, booked_hour),
        sequence=sequence if sequence is not None else booking_id,
    )


class TestAllocateScenarios:

    def test_no_stock_puts_booking_on_waiting_list(self):
        result = allocate("P1", DISPATCH, 0, [_req(1, 5)])
        line = result.lines[0]
        assert result.stock_on_selected_date == 0
        assert line.status == BookingStatus.WAITING_LIST
        assert line.waiting_quantity == 5
        assert line.confirmed_quantity == 0

    def test_enough_stock_confirms(self):
        result = allocate("P1", DISPATCH, 10, [_req(1, 5)])
        assert result.lines[0].status == BookingStatus.CONFIRM
        assert result.lines[0].waiting_quantity == 0
        assert result.total_confirmed_quantity == 5
        assert result.remaining_stock == 5

    def test_second_booking_partially_confirmed(self):
        result = allocate("P1", DISPATCH, 7, [_req(1, 5, booked_hour=9), _req(2, 5, booked_hour=10)])
        first, second = result.lines
        assert first.status == BookingStatus.CONFIRM
        assert second.status == BookingStatus.WAITING_LIST
        assert second.confirmed_quantity == 2
        assert second.waiting_quantity == 3
        assert second.available_stock_at_booking == 2
        assert second.is_partial
        assert result.remaining_stock == 0


class TestAllocateOrdering:

    def test_earlier_dispatch_served_first_regardless_of_booking_time(self):
        late_dispatch = _req(1, 5, dispatch=date(2024, 1, 10), booked_hour=8)
        early_dispatch = _req(2, 5, dispatch=date(2024, 1, 5), booked_hour=12)
        result = allocate("P1", DISPATCH, 5, [late_dispatch, early_dispatch])
        assert [line.booking_id for line in result.lines] == [2, 1]
        assert result.line_for(2).status == BookingStatus.CONFIRM
        assert result.line_for(1).status == BookingStatus.WAITING_LIST

    def test_smaller_booking_cannot_jump_queue(self):
        big_first = _req(1, 8, booked_hour=9)
        small_later = _req(2, 1, booked_hour=10)
        result = allocate("P1", DISPATCH, 5, [small_later, big_first])
        assert result.line_for(1).confirmed_quantity == 5
        assert result.line_for(2).confirmed_quantity == 0
        assert result.line_for(2).status == BookingStatus.WAITING_LIST

    def test_identical_timestamps_fall_back_to_sequence(self):
        a = _req(10, 5, booked_hour=9, sequence=2)
        b = _req(11, 5, booked_hour=9, sequence=1)
        result = allocate("P1", DISPATCH, 5, [a, b])
        assert result.line_for(11).status == BookingStatus.CONFIRM
        assert result.line_for(10).status == BookingStatus.WAITING_LIST

    def test_input_order_does_not_matter(self):
        requests = [_req(1, 4, booked_hour=9), _req(2, 3, booked_hour=10), _req(3, 6, booked_hour=11)]
        forward = allocate("P1", DISPATCH, 8, requests)
        backward = allocate("P1", DISPATCH, 8, list(reversed(requests)))
        assert forward == backward

    def test_bookings_dispatching_after_selected_date_ignored(self):
        result = allocate("P1", DISPATCH, 5, [_req(1, 5, dispatch=date(2024, 1, 11))])
        assert result.lines == ()
        assert result.total_waiting_quantity == 0
        assert result.remaining_stock == 5


class TestAllocateProperties:

    def test_conservation(self):
        requests = [_req(i, qty, booked_hour=i) for i, qty in enumerate([3, 7, 2, 9, 4], start=1)]
        result = allocate("P1", DISPATCH, 12, requests)
        assert result.total_confirmed_quantity == sum(line.confirmed_quantity for line in result.lines)
        assert result.total_confirmed_quantity <= 12
        for line in result.lines:
            assert line.confirmed_quantity + line.waiting_quantity == line.required_quantity
        assert result.total_confirmed_quantity + result.total_waiting_quantity == 25

    def test_only_one_partial_booking(self):
        requests = [_req(i, 4, booked_hour=i) for i in range(1, 6)]
        result = allocate("P1", DISPATCH, 10, requests)
        assert [line.status for line in result.lines] == [
            BookingStatus.CONFIRM,
            BookingStatus.CONFIRM,
            BookingStatus.WAITING_LIST,
            BookingStatus.WAITING_LIST,
            BookingStatus.WAITING_LIST,
        ]
        assert sum(1 for line in result.lines if line.is_partial) == 1

    def test_more_stock_never_confirms_less(self):
        requests = [
            _req(1, 3, dispatch=date(2024, 1, 8), booked_hour=12),
            _req(2, 7, booked_hour=1),
            _req(3, 2, dispatch=date(2024, 1, 9), booked_hour=5),
            _req(4, 4, booked_hour=3),
        ]
        previous = allocate("P1", DISPATCH, 0, requests)
        for stock in range(1, 20):
            current = allocate("P1", DISPATCH, stock, requests)
            for before, after in zip(previous.lines, current.lines):
                assert after.booking_id == before.booking_id
                assert after.confirmed_quantity >= before.confirmed_quantity
                if before.status == BookingStatus.CONFIRM:
                    assert after.status == BookingStatus.CONFIRM
            previous = current

    def test_no_later_booking_confirmed_ahead_of_a_waiting_one(self):
        requests = [
            _req(1, 5, dispatch=date(2024, 1, 9), booked_hour=14),
            _req(2, 1, dispatch=date(2024, 1, 5), booked_hour=16),
            _req(3, 2, dispatch=date(2024, 1, 9), booked_hour=8),
            _req(4, 6, dispatch=date(2024, 1, 7), booked_hour=10),
            _req(5, 1, booked_hour=2),
        ]
        for stock in range(0, 16):
            lines = allocate("P1", DISPATCH, stock, requests).lines
            for i, earlier in enumerate(lines):
                if earlier.status != BookingStatus.WAITING_LIST:
                    continue
                assert all(
                    later.status == BookingStatus.WAITING_LIST for later in lines[i + 1:]
                ), f"stock {stock}: booking #{earlier.booking_id} skipped"
                assert all(earlier.dispatch_date <= later.dispatch_date for later in lines[i + 1:])

    def test_negative_stock_confirms_nothing(self):
        result = allocate("P1", DISPATCH, -4, [_req(1, 2)])
        line = result.lines[0]
        assert line.confirmed_quantity == 0
        assert line.waiting_quantity == 2
        assert line.available_stock_at_booking == -4
        assert not line.is_partial

    def test_same_inputs_same_result(self):
        requests = [_req(1, 5), _req(2, 5, booked_hour=10)]
        assert allocate("P1", DISPATCH, 7, requests) == allocate("P1", DISPATCH, 7, requests)


# ── Service over repositories ────────────────────────────────────────────────


def _booking(qty: int, dispatch: date = DISPATCH, booked_hour: int = 9, item: str = "QI-1") -> Booking:
    return Booking.create(
        product_id="P1",
        required_quantity=qty,
        dispatch_date=dispatch,
        booked_on=utc(2024, 1, 1, booked_hour),
        source=SourceReference("Q-1", item),
    )


def _service(uow: FakeUnitOfWork) -> BookingAllocationService:
    ledger = StockLedger(uow.stock_events, uow.products)
    return BookingAllocationService(ledger, uow.bookings, uow.products)


class TestBookingAllocationService:

    def test_reads_stock_on_selected_date_only(self):
        uow = FakeUnitOfWork(
            products=[Product(id="P1", name="Treadmill")],
            events=[
                StockEvent.record("P1", 10, StockEventType.PURCHASE, date(2024, 1, 5)),
                StockEvent.record("P1", 50, StockEventType.PURCHASE, date(2024, 1, 11)),
            ],
            bookings=[_booking(12)],
        )
        result = _service(uow).allocate("P1", DISPATCH)
        assert result.stock_on_selected_date == 10
        assert result.lines[0].waiting_quantity == 2

    def test_deleting_stock_reverts_allocation(self):
        event = StockEvent.record("P1", 10, StockEventType.IN, date(2024, 1, 5))
        uow = FakeUnitOfWork(
            products=[Product(id="P1", name="Treadmill")],
            events=[event],
            bookings=[_booking(5)],
        )
        svc = _service(uow)
        assert svc.allocate("P1", DISPATCH).lines[0].status == BookingStatus.CONFIRM

        uow.stock_events.delete(event.id)

        line = svc.allocate("P1", DISPATCH).lines[0]
        assert line.status == BookingStatus.WAITING_LIST
        assert line.waiting_quantity == 5

    def test_cached_status_is_not_consulted(self):
        booking = _booking(5)
        booking.status = BookingStatus.CONFIRM
        booking.waiting_quantity = 0
        uow = FakeUnitOfWork(products=[Product(id="P1", name="Treadmill")], bookings=[booking])
        assert _service(uow).allocate("P1", DISPATCH).lines[0].status == BookingStatus.WAITING_LIST

    def test_same_timestamp_bookings_ordered_by_insertion(self):
        uow = FakeUnitOfWork(
            products=[Product(id="P1", name="Treadmill")],
            events=[StockEvent.record("P1", 5, StockEventType.IN, date(2024, 1, 1))],
            bookings=[_booking(5, item="QI-1"), _booking(5, item="QI-2")],
        )
        result = _service(uow).allocate("P1", DISPATCH)
        assert result.line_for(1).status == BookingStatus.CONFIRM
        assert result.line_for(2).status == BookingStatus.WAITING_LIST

    def test_extra_requests_are_queued_but_not_stored(self):
        uow = FakeUnitOfWork(
            products=[Product(id="P1", name="Treadmill")],
            events=[StockEvent.record("P1", 6, StockEventType.IN, date(2024, 1, 1))],
            bookings=[_booking(5)],
        )
        svc = _service(uow)
        hypothetical = AllocationRequest(None, 3, DISPATCH, utc(2024, 1, 2), svc.next_sequence("P1", DISPATCH))
        result = svc.allocate("P1", DISPATCH, extra_requests=[hypothetical])
        assert result.line_for(None).confirmed_quantity == 1
        assert len(uow.bookings.list_all()) == 1

    def test_next_sequence_follows_queue(self):
        uow = FakeUnitOfWork(
            products=[Product(id="P1", name="Treadmill")],
            bookings=[_booking(1, item="QI-1"), _booking(1, item="QI-2")],
        )
        assert _service(uow).next_sequence("P1", DISPATCH) == 3

    def test_unknown_product(self):
        uow = FakeUnitOfWork()
        with pytest.raises(EntityNotFoundError, match="not found"):
            _service(uow).allocate("NOPE", DISPATCH)
