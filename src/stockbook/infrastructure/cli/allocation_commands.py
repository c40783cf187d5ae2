"""CLI commands for booking allocation."""

from __future__ import annotations

import click

from stockbook.application.refresh_booking_status import RefreshBookingStatusHandler
from stockbook.application.show_allocation import ShowAllocationHandler
from stockbook.domain.exceptions import DomainException
from stockbook.infrastructure.bootstrap import unit_of_work
from stockbook.infrastructure.cli.stock_commands import DATE


def _display_allocation(dto) -> None:
    click.echo(f"Allocation for product {dto.product_id} on {dto.selected_date}")
    click.echo(f"Stock on date: {dto.stock_on_selected_date}")
    click.echo()

    if not dto.lines:
        click.echo("  No bookings dispatching on or before this date.")
    else:
        click.echo(
            f"  {'Booking':<8} {'Dispatch':<11} {'Req':>5} {'Avail':>6} "
            f"{'Conf':>5} {'Wait':>5}  Status"
        )
        click.echo(f"  {'-'*60}")
        for line in dto.lines:
            status = "WAITING_LIST (partial)" if line.is_partial else line.status
            click.echo(
                f"  #{line.booking_id:<7} {line.dispatch_date:<11} {line.required_quantity:>5} "
                f"{line.available_stock_at_booking:>6} {line.confirmed_quantity:>5} "
                f"{line.waiting_quantity:>5}  {status}"
            )
        click.echo(f"  {'-'*60}")

    click.echo(f"  Confirmed: {dto.total_confirmed_quantity}")
    click.echo(f"  Waiting:   {dto.total_waiting_quantity}")
    click.echo(f"  Remaining: {dto.remaining_stock}")


@click.command("show")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--date", "selected_date", required=True, type=DATE, help="Selected date (YYYY-MM-DD).")
def allocation_show(product_id: str, selected_date) -> None:
    """Allocate stock to bookings as of a date (read-only)."""
    handler = ShowAllocationHandler(uow=unit_of_work())

    try:
        dto = handler.handle(product_id, selected_date.date())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_allocation(dto)


@click.command("refresh")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--date", "selected_date", required=True, type=DATE, help="Selected date (YYYY-MM-DD).")
def allocation_refresh(product_id: str, selected_date) -> None:
    """Allocate and store the result as each booking's cached status."""
    handler = RefreshBookingStatusHandler(uow=unit_of_work())

    try:
        dto = handler.handle(product_id, selected_date.date())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_allocation(dto)
    click.echo(f"Cached status refreshed for {len(dto.lines)} booking(s).")
