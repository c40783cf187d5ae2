"""Domain service: Stock Projection.

Answers "what will stock look like on day D once the existing bookings are
served" for order-entry screens, before a new booking is committed. It only
reads: no booking or stock event is created or changed.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, timedelta

from stockbook.domain.clock import Clock, system_clock
from stockbook.domain.model.allocation import AllocationRequest
from stockbook.domain.model.projection import (
    HorizonPoint,
    ProjectionStatus,
    StockProjection,
)
from stockbook.domain.model.value_objects import Quantity
from stockbook.domain.service.allocation_engine import BookingAllocationService
from stockbook.domain.service.stock_ledger import StockLedger

DEFAULT_HORIZON_DAYS: tuple[int, ...] = (15, 30)


class StockProjectionService:

    def __init__(
        self,
        ledger: StockLedger,
        allocation: BookingAllocationService,
        clock: Clock = system_clock,
        horizon_days: Sequence[int] = DEFAULT_HORIZON_DAYS,
    ) -> None:
        self._ledger = ledger
        self._allocation = allocation
        self._clock = clock
        self._horizon_days = tuple(horizon_days)

    def project(
        self,
        product_id: str,
        selected_date: date,
        requested_quantity: int | None = None,
    ) -> StockProjection:
        """Project stock for *product_id* on *selected_date*.

        With *requested_quantity*, a hypothetical booking dispatching on the
        selected date is queued behind every existing booking. The part of
        it that stays covered on every later ledger date is reported as
        confirmable, and the horizon and status are computed with it in the
        queue. The headline figures describe the stored queue only.
        """
        now = self._clock()
        result = self._allocation.allocate(product_id, selected_date)

        extra: tuple[AllocationRequest, ...] = ()
        confirmable = shortfall = None
        if requested_quantity is not None:
            request = AllocationRequest(
                booking_id=None,
                required_quantity=Quantity(requested_quantity).value,
                dispatch_date=selected_date,
                booked_on=now,
                sequence=self._allocation.next_sequence(product_id, selected_date),
            )
            extra = (request,)
            confirmable = self._confirmable(product_id, selected_date, request)
            shortfall = request.required_quantity - confirmable

        horizon = tuple(
            self._horizon_point(product_id, selected_date, days, extra)
            for days in self._horizon_days
        )
        nxt = self._ledger.next_replenishment(product_id, after=selected_date)
        waiting = result.total_waiting_quantity + (shortfall or 0)

        return StockProjection(
            product_id=product_id,
            selected_date=selected_date,
            current_stock=self._ledger.stock_as_of(product_id, now.date()),
            stock_on_selected_date=result.stock_on_selected_date,
            after_allocation_stock=result.remaining_stock,
            total_waiting_quantity=result.total_waiting_quantity,
            next_replenishment_date=nxt.event_date if nxt else None,
            next_replenishment_quantity=nxt.quantity if nxt else None,
            horizon=horizon,
            status=self._status(waiting, horizon),
            requested_quantity=requested_quantity,
            requested_confirmable=confirmable,
            requested_shortfall=shortfall,
        )

    def project_many(
        self, product_ids: Sequence[str], selected_date: date
    ) -> list[StockProjection]:
        return [self.project(pid, selected_date) for pid in product_ids]

    # --- Internal helpers -----------------------------------------------------

    def _confirmable(
        self, product_id: str, selected_date: date, request: AllocationRequest
    ) -> int:
        """Units of *request* still covered on every ledger date from
        *selected_date* on. A post-dated outflow can take back stock the
        request would otherwise ship with."""
        check_dates = {selected_date}
        check_dates.update(
            e.event_date
            for e in self._ledger.history(product_id, start=selected_date + timedelta(days=1))
        )
        return min(
            self._allocation.allocate(product_id, on, extra_requests=[request])
            .line_for(None)
            .confirmed_quantity
            for on in sorted(check_dates)
        )

    def _horizon_point(
        self,
        product_id: str,
        selected_date: date,
        offset: int,
        extra: Sequence[AllocationRequest] = (),
    ) -> HorizonPoint:
        on = selected_date + timedelta(days=offset)
        result = self._allocation.allocate(product_id, on, extra_requests=extra)
        return HorizonPoint(
            offset_days=offset,
            on=on,
            after_allocation_stock=result.remaining_stock,
            waiting_quantity=result.total_waiting_quantity,
        )

    @staticmethod
    def _status(waiting: int, horizon: tuple[HorizonPoint, ...]) -> ProjectionStatus:
        if waiting > 0:
            return ProjectionStatus.WAITING_LIST
        if any(point.waiting_quantity > 0 for point in horizon):
            return ProjectionStatus.AT_RISK
        return ProjectionStatus.SAFE
