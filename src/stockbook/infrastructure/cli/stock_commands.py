"""CLI commands for the stock ledger."""

from __future__ import annotations

from datetime import datetime

import click

from stockbook.application.delete_stock_event import DeleteStockEventHandler
from stockbook.application.low_stock import LowStockHandler
from stockbook.application.record_stock_event import RecordStockEventHandler
from stockbook.application.show_stock import ShowStockHandler, StockHistoryHandler
from stockbook.application.update_stock_event import UpdateStockEventHandler
from stockbook.domain.exceptions import DomainException
from stockbook.domain.model.stock_event import StockEventType
from stockbook.infrastructure.bootstrap import low_stock_threshold, unit_of_work

DATE = click.DateTime(formats=["%Y-%m-%d"])
EVENT_TYPES = click.Choice([t.value for t in StockEventType], case_sensitive=False)


def _day(value: datetime | None):
    return value.date() if value is not None else None


def _display_events(events) -> None:
    click.echo(f"{'ID':<6} {'Date':<12} {'Type':<11} {'Qty':>7}  Reference")
    click.echo("-" * 60)
    for e in events:
        ref = f"{e.reference_type}:{e.reference_id}" if e.reference_id else ""
        click.echo(f"{e.id:<6} {e.event_date:<12} {e.event_type:<11} {e.quantity:>+7}  {ref}")


@click.command("record")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Quantity (sign follows the type).")
@click.option("--type", "event_type", required=True, type=EVENT_TYPES, help="Event type.")
@click.option("--date", "event_date", required=True, type=DATE, help="Effective date (YYYY-MM-DD).")
@click.option("--ref-type", default=None, help="Reference type, e.g. quotation.")
@click.option("--ref-id", default=None, help="Reference ID.")
@click.option("--notes", default=None, help="Free-text notes.")
@click.option("--admin", is_flag=True, default=False, help="Administrative entry; skip the stock check.")
def stock_record(product_id, quantity, event_type, event_date, ref_type, ref_id, notes, admin) -> None:
    """Record a stock movement."""
    handler = RecordStockEventHandler(uow=unit_of_work())

    try:
        dto = handler.handle(
            product_id=product_id,
            quantity=quantity,
            event_type=event_type,
            event_date=event_date.date(),
            reference_type=ref_type,
            reference_id=ref_id,
            notes=notes,
            administrative=admin,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock event #{dto.id} recorded: {dto.event_type} {dto.quantity:+d} on {dto.event_date}")


@click.command("update")
@click.option("--id", "event_id", required=True, type=int, help="Stock event ID.")
@click.option("--quantity", default=None, type=int, help="New quantity.")
@click.option("--type", "event_type", default=None, type=EVENT_TYPES, help="New event type.")
@click.option("--date", "event_date", default=None, type=DATE, help="New effective date.")
@click.option("--notes", default=None, help="New notes.")
def stock_update(event_id, quantity, event_type, event_date, notes) -> None:
    """Correct a stock event."""
    handler = UpdateStockEventHandler(uow=unit_of_work())

    try:
        dto = handler.handle(
            event_id,
            quantity=quantity,
            event_type=event_type,
            event_date=_day(event_date),
            notes=notes,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock event #{dto.id} updated: {dto.event_type} {dto.quantity:+d} on {dto.event_date}")


@click.command("delete")
@click.option("--id", "event_id", required=True, type=int, help="Stock event ID.")
def stock_delete(event_id: int) -> None:
    """Delete a stock event."""
    handler = DeleteStockEventHandler(uow=unit_of_work())

    try:
        handler.handle(event_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock event #{event_id} deleted.")


@click.command("show")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--date", "on", default=None, type=DATE, help="As-of date (default: today).")
def stock_show(product_id: str, on) -> None:
    """Show stock for a product."""
    handler = ShowStockHandler(uow=unit_of_work())

    try:
        dto = handler.handle(product_id, _day(on))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {dto.product_id} '{dto.product_name}'")
    click.echo(f"  Stock on {dto.on}:  {dto.stock_on_date}")
    click.echo(f"  Ledger total:      {dto.ledger_stock}")
    click.echo(f"  Cached total:      {dto.cached_stock}")


@click.command("history")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--from", "start", default=None, type=DATE, help="Start date.")
@click.option("--to", "end", default=None, type=DATE, help="End date.")
def stock_history(product_id: str, start, end) -> None:
    """Show ledger events for a product, newest first."""
    handler = StockHistoryHandler(uow=unit_of_work())

    try:
        events = handler.handle(product_id, _day(start), _day(end))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not events:
        click.echo("No stock events found.")
        return
    _display_events(events)


@click.command("low")
@click.option("--threshold", default=None, type=int, help="Stock at or below this is low.")
def stock_low(threshold: int | None) -> None:
    """List products with low stock."""
    handler = LowStockHandler(uow=unit_of_work())

    try:
        lines = handler.handle(threshold if threshold is not None else low_stock_threshold())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not lines:
        click.echo("No products with low stock.")
        return

    click.echo(f"{'ID':<8} {'Name':<24} {'Stock':>8}")
    click.echo("-" * 42)
    for line in lines:
        click.echo(f"{line.product_id:<8} {line.product_name:<24} {line.current_stock:>8}")
