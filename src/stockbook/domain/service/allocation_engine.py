"""Domain service: Booking Allocation.

Matches a product's stock on a selected date against its booking queue in
strict chronological priority. The queue drains a single shared stock pool
first-come-first-served: earlier dispatch dates are served first, and within
a dispatch date the first booked wins. No booking can jump the queue by
being smaller, and stock arriving after the selected date is not considered.

``allocate()`` is a pure function of its inputs, so the same ledger figure
and the same bookings always produce the same result.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date

from stockbook.domain.exceptions import EntityNotFoundError
from stockbook.domain.model.allocation import (
    AllocationRequest,
    AllocationResult,
    BookingAllocation,
    BookingStatus,
    allocation_order_key,
)
from stockbook.domain.repository.booking_repository import BookingRepository
from stockbook.domain.repository.product_repository import ProductRepository
from stockbook.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


def allocate(
    product_id: str,
    selected_date: date,
    stock_on_selected_date: int,
    requests: Iterable[AllocationRequest],
) -> AllocationResult:
    """Classify every request dispatching on or before *selected_date*.

    Requests are put in queue order here, so callers may pass them in any
    order. Negative ledger stock confirms nothing, the same as zero.
    """
    queue = sorted(
        (r for r in requests if r.dispatch_date <= selected_date),
        key=allocation_order_key,
    )

    available = stock_on_selected_date
    total_confirmed = 0
    total_waiting = 0
    lines: list[BookingAllocation] = []

    for request in queue:
        line = _allocate_one(request, available)
        available -= line.confirmed_quantity
        total_confirmed += line.confirmed_quantity
        total_waiting += line.waiting_quantity
        lines.append(line)

    return AllocationResult(
        product_id=product_id,
        selected_date=selected_date,
        stock_on_selected_date=stock_on_selected_date,
        lines=tuple(lines),
        total_confirmed_quantity=total_confirmed,
        total_waiting_quantity=total_waiting,
    )


def _allocate_one(request: AllocationRequest, available: int) -> BookingAllocation:
    required = request.required_quantity
    if available >= required:
        confirmed, status = required, BookingStatus.CONFIRM
    elif available > 0:
        # partially covered: takes what is left, waits for the rest
        confirmed, status = available, BookingStatus.WAITING_LIST
    else:
        confirmed, status = 0, BookingStatus.WAITING_LIST

    return BookingAllocation(
        booking_id=request.booking_id,
        dispatch_date=request.dispatch_date,
        booked_on=request.booked_on,
        sequence=request.sequence,
        required_quantity=required,
        available_stock_at_booking=available,
        confirmed_quantity=confirmed,
        waiting_quantity=required - confirmed,
        status=status,
    )


class BookingAllocationService:
    """Loads the ledger figure and booking queue, then runs ``allocate()``."""

    def __init__(
        self,
        ledger: StockLedger,
        booking_repo: BookingRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._ledger = ledger
        self._booking_repo = booking_repo
        self._product_repo = product_repo

    def allocate(
        self,
        product_id: str,
        selected_date: date,
        extra_requests: Iterable[AllocationRequest] = (),
    ) -> AllocationResult:
        """Allocate stock for *product_id* as of *selected_date*.

        *extra_requests* are hypothetical bookings queued alongside the
        stored ones; they are never persisted.
        """
        if self._product_repo.get_by_id(product_id) is None:
            raise EntityNotFoundError(f"Product '{product_id}' not found")

        stock = self._ledger.stock_as_of(product_id, selected_date)
        bookings = self._booking_repo.list_for_allocation(product_id, selected_date)
        requests = [b.to_request() for b in bookings]
        requests.extend(extra_requests)

        result = allocate(product_id, selected_date, stock, requests)
        logger.debug(
            "Allocated product %s on %s: stock=%d confirmed=%d waiting=%d over %d bookings",
            product_id, selected_date.isoformat(), stock,
            result.total_confirmed_quantity, result.total_waiting_quantity,
            len(result.lines),
        )
        return result

    def next_sequence(self, product_id: str, selected_date: date) -> int:
        """A sequence number that sorts after every queued booking."""
        bookings = self._booking_repo.list_for_allocation(product_id, selected_date)
        return max((b.sequence for b in bookings), default=0) + 1
