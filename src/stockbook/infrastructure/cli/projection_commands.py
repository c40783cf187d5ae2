"""CLI commands for stock projection."""

from __future__ import annotations

import click

from stockbook.application.project_stock import ProjectStockHandler
from stockbook.domain.exceptions import DomainException
from stockbook.infrastructure.bootstrap import horizon_days, unit_of_work
from stockbook.infrastructure.cli.stock_commands import DATE


@click.command("show")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--date", "selected_date", required=True, type=DATE, help="Selected date (YYYY-MM-DD).")
@click.option("--quantity", default=None, type=int, help="What-if: quantity you are about to book.")
def projection_show(product_id: str, selected_date, quantity: int | None) -> None:
    """Project stock for a product on a date."""
    handler = ProjectStockHandler(uow=unit_of_work(), horizon_days=horizon_days())

    try:
        dto = handler.handle(product_id, selected_date.date(), requested_quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Projection for product {dto.product_id} on {dto.selected_date}  (status={dto.status})")
    click.echo(f"  Current stock:          {dto.current_stock}")
    click.echo(f"  Stock on date:          {dto.stock_on_selected_date}")
    click.echo(f"  After allocation:       {dto.after_allocation_stock}")
    click.echo(f"  Waiting list:           {dto.total_waiting_quantity}")
    for point in dto.horizon:
        click.echo(
            f"  After allocation +{point.offset_days}d: {point.after_allocation_stock}"
            f"  (waiting {point.waiting_quantity})"
        )
    if dto.next_replenishment_date:
        click.echo(f"  Next in:                {dto.next_replenishment_quantity} on {dto.next_replenishment_date}")
    if dto.requested_quantity is not None:
        click.echo(
            f"  Booking {dto.requested_quantity} now: {dto.requested_confirmable} confirmable, "
            f"{dto.requested_shortfall} short"
        )


@click.command("bulk")
@click.option("--products", required=True, help="Comma-separated product IDs.")
@click.option("--date", "selected_date", required=True, type=DATE, help="Selected date (YYYY-MM-DD).")
def projection_bulk(products: str, selected_date) -> None:
    """Project stock for several products at once."""
    product_ids = [p.strip() for p in products.split(",") if p.strip()]
    if not product_ids:
        raise click.BadParameter("At least one product ID is required.", param_hint="--products")

    handler = ProjectStockHandler(uow=unit_of_work(), horizon_days=horizon_days())

    try:
        dtos = handler.handle_many(product_ids, selected_date.date())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{'Product':<10} {'Current':>8} {'On date':>8} {'After':>8} {'Waiting':>8}  Status")
    click.echo("-" * 60)
    for d in dtos:
        click.echo(
            f"{d.product_id:<10} {d.current_stock:>8} {d.stock_on_selected_date:>8} "
            f"{d.after_allocation_stock:>8} {d.total_waiting_quantity:>8}  {d.status}"
        )
