import click

from stockbook.infrastructure.cli.allocation_commands import allocation_refresh, allocation_show
from stockbook.infrastructure.cli.booking_commands import (
    booking_cancel,
    booking_create,
    booking_dispatch,
    booking_find,
    booking_list,
    booking_update,
)
from stockbook.infrastructure.cli.product_commands import product_add, product_list
from stockbook.infrastructure.cli.projection_commands import projection_bulk, projection_show
from stockbook.infrastructure.cli.stock_commands import (
    stock_delete,
    stock_history,
    stock_low,
    stock_record,
    stock_show,
    stock_update,
)
from stockbook.infrastructure.config import get_settings
from stockbook.infrastructure.logging_setup import configure_logging


@click.group()
@click.option("--log-level", default=None, help="Override STOCKBOOK_LOG_LEVEL (e.g. INFO).")
def cli(log_level: str | None) -> None:
    """Stockbook: stock ledger and booking allocation."""
    configure_logging(log_level or get_settings().log_level)


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def stock() -> None:
    """Record and inspect stock ledger events."""


@cli.group()
def booking() -> None:
    """Manage bookings (reservations against stock)."""


@cli.group()
def allocation() -> None:
    """Allocate stock to bookings."""


@cli.group()
def projection() -> None:
    """Project stock after allocation."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_list)
stock.add_command(stock_record)
stock.add_command(stock_update)
stock.add_command(stock_delete)
stock.add_command(stock_show)
stock.add_command(stock_history)
stock.add_command(stock_low)
booking.add_command(booking_create)
booking.add_command(booking_list)
booking.add_command(booking_update)
booking.add_command(booking_cancel)
booking.add_command(booking_dispatch)
booking.add_command(booking_find)
allocation.add_command(allocation_show)
allocation.add_command(allocation_refresh)
projection.add_command(projection_show)
projection.add_command(projection_bulk)
