"""CLI commands for products."""

from __future__ import annotations

import click

from stockbook.application.add_product import AddProductHandler
from stockbook.domain.exceptions import DomainException
from stockbook.infrastructure.bootstrap import unit_of_work


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--id", "product_id", default=None, help="Product ID (auto-assigned if omitted).")
@click.option("--model", "model_number", default=None, help="Model number.")
def product_add(name: str, product_id: str | None, model_number: str | None) -> None:
    """Register a stockable product."""
    handler = AddProductHandler(uow=unit_of_work())

    try:
        product = handler.handle(name=name, product_id=product_id, model_number=model_number)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' added")


@click.command("list")
def product_list() -> None:
    """List all products with their cached stock."""
    with unit_of_work() as uow:
        products = uow.products.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<8} {'Name':<24} {'Model':<12} {'Stock':>8}")
    click.echo("-" * 55)
    for p in products:
        click.echo(f"{p.id:<8} {p.name:<24} {p.model_number or '-':<12} {p.todays_stock:>8}")
