"""CLI commands for the Booking aggregate."""

from __future__ import annotations

import click

from stockbook.application.cancel_booking import CancelBookingHandler
from stockbook.application.create_booking import CreateBookingHandler
from stockbook.application.dispatch_booking import DispatchBookingHandler
from stockbook.application.dto import BookingFilter, SaleLineSpec
from stockbook.application.find_booking_for_order_line import (
    FindBookingForOrderLineHandler,
)
from stockbook.application.list_bookings import ListBookingsHandler
from stockbook.application.update_booking import UpdateBookingHandler
from stockbook.domain.exceptions import DomainException
from stockbook.infrastructure.bootstrap import unit_of_work
from stockbook.infrastructure.cli.stock_commands import DATE, _day


def _status_label(dto) -> str:
    """Cached statuses are labelled with when they were computed."""
    if dto.status_is_live:
        return f"{dto.status} (live, {dto.status_as_of})"
    if dto.status_as_of is None:
        return f"{dto.status} (not yet computed)"
    return f"{dto.status} (as of {dto.status_as_of})"


def _display_booking(dto) -> None:
    click.echo(f"Booking #{dto.id}  product={dto.product_id}")
    click.echo(f"  Sale line:  {dto.quote_number or '-'} / {dto.quotation_item_id}")
    click.echo(f"  Customer:   {dto.customer_name or '-'}  {dto.gym_name or ''} {dto.city or ''}".rstrip())
    click.echo(f"  Quantity:   {dto.required_quantity}  (waiting {dto.waiting_quantity})")
    click.echo(f"  Dispatch:   {dto.dispatch_date}")
    click.echo(f"  Booked on:  {dto.booked_on}")
    click.echo(f"  Status:     {_status_label(dto)}")


@click.command("create")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Quantity to book.")
@click.option("--dispatch", "dispatch_date", required=True, type=DATE, help="Dispatch date (YYYY-MM-DD).")
@click.option("--quotation", "quotation_id", required=True, help="Quotation ID of the sale.")
@click.option("--item", "quotation_item_id", required=True, help="Quotation item (sale line) ID.")
@click.option("--quote-number", default=None, help="Human-readable quote number.")
@click.option("--customer", default=None, help="Customer name.")
@click.option("--gym", default=None, help="Gym name.")
@click.option("--state", "state_code", default=None, help="State code.")
@click.option("--city", default=None, help="City.")
def booking_create(product_id, quantity, dispatch_date, quotation_id, quotation_item_id,
                   quote_number, customer, gym, state_code, city) -> None:
    """Book stock for a confirmed sale line."""
    spec = SaleLineSpec(
        product_id=product_id,
        quantity=quantity,
        dispatch_date=dispatch_date.date(),
        quotation_id=quotation_id,
        quotation_item_id=quotation_item_id,
        quote_number=quote_number,
        customer_name=customer,
        gym_name=gym,
        state_code=state_code,
        city=city,
    )
    handler = CreateBookingHandler(uow=unit_of_work())

    try:
        dto = handler.handle(spec)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Booking #{dto.id} created; run 'allocation show' for its standing.")


@click.command("list")
@click.option("--product", "product_id", default=None, help="Filter by product ID.")
@click.option("--status", default=None, type=click.Choice(["CONFIRM", "WAITING_LIST"], case_sensitive=False))
@click.option("--from", "dispatch_from", default=None, type=DATE, help="Dispatch on or after.")
@click.option("--to", "dispatch_to", default=None, type=DATE, help="Dispatch on or before.")
@click.option("--search", default=None, help="Match quote number, customer, gym or city.")
@click.option("--recompute-on", default=None, type=DATE, help="Show live status allocated for this date.")
def booking_list(product_id, status, dispatch_from, dispatch_to, search, recompute_on) -> None:
    """List bookings."""
    filters = BookingFilter(
        product_id=product_id,
        status=status,
        dispatch_from=_day(dispatch_from),
        dispatch_to=_day(dispatch_to),
        search=search,
    )
    handler = ListBookingsHandler(uow=unit_of_work())

    try:
        dtos = handler.handle(filters, recompute_on=_day(recompute_on))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not dtos:
        click.echo("No bookings found.")
        return

    click.echo(f"{'ID':<5} {'Product':<8} {'Qty':>5} {'Wait':>5} {'Dispatch':<11} {'Customer':<18} Status")
    click.echo("-" * 80)
    for d in dtos:
        click.echo(
            f"{d.id:<5} {d.product_id:<8} {d.required_quantity:>5} {d.waiting_quantity:>5} "
            f"{d.dispatch_date:<11} {(d.customer_name or '-')[:18]:<18} {_status_label(d)}"
        )


@click.command("update")
@click.option("--id", "booking_id", required=True, type=int, help="Booking ID.")
@click.option("--quantity", default=None, type=int, help="New required quantity.")
@click.option("--dispatch", "dispatch_date", default=None, type=DATE, help="New dispatch date.")
@click.option("--customer", default=None, help="Customer name.")
@click.option("--gym", default=None, help="Gym name.")
@click.option("--city", default=None, help="City.")
def booking_update(booking_id, quantity, dispatch_date, customer, gym, city) -> None:
    """Edit a booking (keeps its place in the queue)."""
    handler = UpdateBookingHandler(uow=unit_of_work())

    try:
        dto = handler.handle(
            booking_id,
            required_quantity=quantity,
            dispatch_date=_day(dispatch_date),
            customer_name=customer,
            gym_name=gym,
            city=city,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_booking(dto)


@click.command("cancel")
@click.option("--id", "booking_id", required=True, type=int, help="Booking ID.")
def booking_cancel(booking_id: int) -> None:
    """Cancel a booking."""
    handler = CancelBookingHandler(uow=unit_of_work())

    try:
        handler.handle(booking_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Booking #{booking_id} cancelled.")


@click.command("dispatch")
@click.option("--id", "booking_id", required=True, type=int, help="Booking ID.")
@click.option("--on", "dispatch_on", default=None, type=DATE, help="Dispatch date (default: booked date).")
@click.option("--admin", is_flag=True, default=False, help="Skip the confirmation check.")
def booking_dispatch(booking_id: int, dispatch_on, admin: bool) -> None:
    """Ship a booking (records a SALE stock-out)."""
    handler = DispatchBookingHandler(uow=unit_of_work())

    try:
        event = handler.handle(booking_id, dispatch_on=_day(dispatch_on), administrative=admin)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Booking #{booking_id} dispatched: stock event #{event.id} "
        f"({event.quantity:+d} on {event.event_date})."
    )


@click.command("find")
@click.option("--ref", "reference_id", required=True, help="Quotation item or quotation ID.")
def booking_find(reference_id: str) -> None:
    """Show the latest booking for an order line."""
    handler = FindBookingForOrderLineHandler(uow=unit_of_work())

    try:
        dto = handler.handle(reference_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if dto is None:
        click.echo(f"No booking found for '{reference_id}'.")
        return
    _display_booking(dto)
