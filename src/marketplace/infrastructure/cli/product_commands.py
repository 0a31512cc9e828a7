"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from marketplace.application.add_product import AddProductHandler
from marketplace.application.restock_product import RestockProductHandler
from marketplace.application.update_product import UpdateProductHandler
from marketplace.domain.exceptions import DomainException
from marketplace.infrastructure.bootstrap import product_repository, stock_ledger
from marketplace.infrastructure.config import Settings


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--sku", required=True, help="Stock keeping unit, unique per product.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--stock", default=0, type=int, show_default=True, help="Units on hand.")
@click.pass_obj
def product_add(settings: Settings, name: str, sku: str, price: str, stock: int) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(product_repo=product_repository(settings))

    try:
        product = handler.handle(name=name, sku=sku, price=price, stock=stock)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Product #{product.id} '{product.name}' ({product.sku}) added at "
        f"{product.price}, stock {product.stock}"
    )


@click.command("list")
@click.pass_obj
def product_list(settings: Settings) -> None:
    """List all products in the catalog."""
    products = product_repository(settings).list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'SKU':<12} {'Name':<20} {'Price':>10} {'Stock':>7} {'Active':>7}")
    click.echo("-" * 67)
    for p in products:
        click.echo(
            f"{p.id:<6} {p.sku:<12} {p.name:<20} {str(p.price):>10} "
            f"{p.stock:>7} {'yes' if p.is_active else 'no':>7}"
        )


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", default=None, help="New price (e.g. 29.99).")
@click.option("--active/--inactive", "is_active", default=None, help="Availability.")
@click.pass_obj
def product_update(
    settings: Settings, product_id: str, price: str | None, is_active: bool | None
) -> None:
    """Update a product's price or availability."""
    if price is None and is_active is None:
        raise click.UsageError("Nothing to update: pass --price and/or --active/--inactive")

    handler = UpdateProductHandler(product_repo=product_repository(settings))

    try:
        product = handler.handle(product_id=product_id, new_price=price, is_active=is_active)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Product #{product.id} updated: price {product.price}, "
        f"{'active' if product.is_active else 'inactive'}"
    )


@click.command("restock")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=click.IntRange(min=1), help="Units to move.")
@click.option(
    "--direction",
    type=click.Choice(["add", "subtract"]),
    default="add",
    show_default=True,
)
@click.pass_obj
def product_restock(settings: Settings, product_id: str, quantity: int, direction: str) -> None:
    """Add or remove stock for a product."""
    handler = RestockProductHandler(stock_ledger=stock_ledger(settings))

    try:
        product = handler.handle(product_id, quantity, direction)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for '{product.name}' is now {product.stock}")
