"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from stockbook.domain.model.allocation import AllocationResult, BookingAllocation
from stockbook.domain.model.booking import Booking
from stockbook.domain.model.projection import StockProjection
from stockbook.domain.model.stock_event import StockEvent

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SaleLineSpec:
    """Input: one committed sale line, as handed over by the quotation side.

    Customer, gym and city are display-only; allocation never looks at them.
    """

    product_id: str
    quantity: int
    dispatch_date: date | str
    quotation_id: str
    quotation_item_id: str
    quote_number: str | None = None
    customer_name: str | None = None
    gym_name: str | None = None
    state_code: str | None = None
    city: str | None = None


@dataclass(frozen=True)
class BookingFilter:
    """Input: optional filters for listing bookings."""

    product_id: str | None = None
    status: str | None = None
    dispatch_from: date | None = None
    dispatch_to: date | None = None
    search: str | None = None


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StockEventDTO:
    id: int
    product_id: str
    event_type: str
    quantity: int  # signed
    event_date: str
    reference_type: str | None
    reference_id: str | None
    notes: str | None


@dataclass(frozen=True)
class StockLevelDTO:
    product_id: str
    product_name: str
    cached_stock: int  # Product.todays_stock as last synchronised
    ledger_stock: int  # sum of every event
    on: str
    stock_on_date: int


@dataclass(frozen=True)
class BookingDTO:
    """A booking as displayed to the user.

    ``status`` and ``waiting_quantity`` come either from a fresh allocation
    (``status_is_live``) or from the cache, in which case ``status_as_of``
    says when it was computed (None: never computed, placeholder only).
    """

    id: int
    product_id: str
    required_quantity: int
    dispatch_date: str
    booked_on: str
    quote_number: str | None
    quotation_item_id: str
    customer_name: str | None
    gym_name: str | None
    city: str | None
    status: str
    waiting_quantity: int
    status_as_of: str | None
    status_is_live: bool


@dataclass(frozen=True)
class AllocationLineDTO:
    booking_id: int | None
    dispatch_date: str
    booked_on: str
    required_quantity: int
    available_stock_at_booking: int
    confirmed_quantity: int
    waiting_quantity: int
    status: str
    is_partial: bool


@dataclass(frozen=True)
class AllocationDTO:
    product_id: str
    selected_date: str
    stock_on_selected_date: int
    total_confirmed_quantity: int
    total_waiting_quantity: int
    remaining_stock: int
    lines: list[AllocationLineDTO]


@dataclass(frozen=True)
class HorizonDTO:
    offset_days: int
    on: str
    after_allocation_stock: int
    waiting_quantity: int


@dataclass(frozen=True)
class ProjectionDTO:
    product_id: str
    selected_date: str
    current_stock: int
    stock_on_selected_date: int
    after_allocation_stock: int
    total_waiting_quantity: int
    next_replenishment_date: str | None
    next_replenishment_quantity: int | None
    horizon: list[HorizonDTO]
    status: str
    requested_quantity: int | None
    requested_confirmable: int | None
    requested_shortfall: int | None


# ---------------------------------------------------------------------------
# Mapping
# ---------------------------------------------------------------------------


def _timestamp(value: datetime) -> str:
    return value.strftime(_TIMESTAMP_FORMAT)


def event_to_dto(event: StockEvent) -> StockEventDTO:
    return StockEventDTO(
        id=event.id,  # type: ignore[arg-type]
        product_id=event.product_id,
        event_type=event.event_type.value,
        quantity=event.quantity,
        event_date=event.event_date.isoformat(),
        reference_type=event.reference_type,
        reference_id=event.reference_id,
        notes=event.notes,
    )


def booking_to_dto(
    booking: Booking,
    live: BookingAllocation | None = None,
    live_on: date | None = None,
) -> BookingDTO:
    """Map a booking, preferring a freshly computed allocation line if given.

    *live_on* is the date the line was allocated for; it defaults to the
    booking's dispatch date.
    """
    if live is not None:
        status, waiting = live.status.value, live.waiting_quantity
        as_of = (live_on or live.dispatch_date).isoformat()
    else:
        status, waiting = booking.status.value, booking.waiting_quantity
        as_of = _timestamp(booking.status_computed_at) if booking.status_computed_at else None
    return BookingDTO(
        id=booking.id,  # type: ignore[arg-type]
        product_id=booking.product_id,
        required_quantity=booking.required_quantity,
        dispatch_date=booking.dispatch_date.isoformat(),
        booked_on=_timestamp(booking.booked_on),
        quote_number=booking.source.quote_number,
        quotation_item_id=booking.source.quotation_item_id,
        customer_name=booking.customer_name,
        gym_name=booking.gym_name,
        city=booking.city,
        status=status,
        waiting_quantity=waiting,
        status_as_of=as_of,
        status_is_live=live is not None,
    )


def allocation_to_dto(result: AllocationResult) -> AllocationDTO:
    return AllocationDTO(
        product_id=result.product_id,
        selected_date=result.selected_date.isoformat(),
        stock_on_selected_date=result.stock_on_selected_date,
        total_confirmed_quantity=result.total_confirmed_quantity,
        total_waiting_quantity=result.total_waiting_quantity,
        remaining_stock=result.remaining_stock,
        lines=[
            AllocationLineDTO(
                booking_id=line.booking_id,
                dispatch_date=line.dispatch_date.isoformat(),
                booked_on=_timestamp(line.booked_on),
                required_quantity=line.required_quantity,
                available_stock_at_booking=line.available_stock_at_booking,
                confirmed_quantity=line.confirmed_quantity,
                waiting_quantity=line.waiting_quantity,
                status=line.status.value,
                is_partial=line.is_partial,
            )
            for line in result.lines
        ],
    )


def projection_to_dto(projection: StockProjection) -> ProjectionDTO:
    return ProjectionDTO(
        product_id=projection.product_id,
        selected_date=projection.selected_date.isoformat(),
        current_stock=projection.current_stock,
        stock_on_selected_date=projection.stock_on_selected_date,
        after_allocation_stock=projection.after_allocation_stock,
        total_waiting_quantity=projection.total_waiting_quantity,
        next_replenishment_date=(
            projection.next_replenishment_date.isoformat()
            if projection.next_replenishment_date
            else None
        ),
        next_replenishment_quantity=projection.next_replenishment_quantity,
        horizon=[
            HorizonDTO(
                offset_days=p.offset_days,
                on=p.on.isoformat(),
                after_allocation_stock=p.after_allocation_stock,
                waiting_quantity=p.waiting_quantity,
            )
            for p in projection.horizon
        ],
        status=projection.status.value,
        requested_quantity=projection.requested_quantity,
        requested_confirmable=projection.requested_confirmable,
        requested_shortfall=projection.requested_shortfall,
    )
