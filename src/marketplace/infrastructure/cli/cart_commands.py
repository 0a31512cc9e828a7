"""CLI commands for shopping carts."""

from __future__ import annotations

import click

from marketplace.application.add_to_cart import AddToCartHandler
from marketplace.domain.exceptions import DomainException
from marketplace.infrastructure.bootstrap import cart_repository, product_repository
from marketplace.infrastructure.config import Settings


@click.command("add")
@click.option("--user", "user_id", required=True, help="Customer ID.")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", default=1, type=click.IntRange(min=1), show_default=True)
@click.pass_obj
def cart_add(settings: Settings, user_id: str, product_id: str, quantity: int) -> None:
    """Add a product to a customer's cart."""
    handler = AddToCartHandler(
        cart_repo=cart_repository(settings),
        product_repo=product_repository(settings),
    )

    try:
        cart = handler.handle(user_id=user_id, product_id=product_id, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Cart for {user_id}: {cart.total_items} item(s), total {cart.total_price}"
    )


@click.command("show")
@click.option("--user", "user_id", required=True, help="Customer ID.")
@click.pass_obj
def cart_show(settings: Settings, user_id: str) -> None:
    """Show a customer's cart."""
    cart = cart_repository(settings).get_by_user_id(user_id)
    if cart is None or cart.is_empty:
        click.echo(f"Cart for {user_id} is empty.")
        return

    click.echo(f"Cart for {user_id}  (status={cart.status.value})")
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in cart.items:
        click.echo(
            f"  {item.name:<20} {item.quantity:>5} {str(item.price):>10} {str(item.line_total):>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Cart Total':<27} {str(cart.total_price):>20}")
