from pathlib import Path

import click

from marketplace.infrastructure.cli.cart_commands import cart_add, cart_show
from marketplace.infrastructure.cli.order_commands import (
    order_cancel,
    order_create,
    order_list,
    order_payment,
    order_show,
    order_stats,
    order_status,
)
from marketplace.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_restock,
    product_update,
)
from marketplace.infrastructure.config import LOG_FORMATS, Settings
from marketplace.infrastructure.logging import configure_logging


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the JSON data files (env: MARKETPLACE_DATA_DIR).",
)
@click.option("--log-level", default=None, help="Log level (env: MARKETPLACE_LOG_LEVEL).")
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMATS),
    default=None,
    help="Log renderer (env: MARKETPLACE_LOG_FORMAT).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    data_dir: Path | None,
    log_level: str | None,
    log_format: str | None,
) -> None:
    """Marketplace: orders, carts and stock"""
    try:
        settings = Settings.from_env().with_overrides(
            data_dir=data_dir,
            log_level=log_level.upper() if log_level else None,
            log_format=log_format,
        )
    except ValueError as exc:
        raise click.UsageError(str(exc))

    configure_logging(settings.log_level, json_output=settings.log_format == "json")
    ctx.obj = settings


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def cart() -> None:
    """Manage shopping carts."""


# Register subcommands
order.add_command(order_cancel)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_payment)
order.add_command(order_show)
order.add_command(order_stats)
order.add_command(order_status)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_restock)
product.add_command(product_update)
cart.add_command(cart_add)
cart.add_command(cart_show)
