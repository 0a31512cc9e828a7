"""CLI commands for the Order aggregate."""

from __future__ import annotations

from datetime import datetime, time

import click

from marketplace.application.cancel_order import CancelOrderHandler
from marketplace.application.create_order import CreateOrderHandler
from marketplace.application.dto import CreateOrderData
from marketplace.application.list_orders import ListOrdersHandler
from marketplace.application.order_stats import OrderStatsHandler
from marketplace.application.show_order import ShowOrderHandler
from marketplace.application.update_order_status import UpdateOrderStatusHandler
from marketplace.application.update_payment_status import UpdatePaymentStatusHandler
from marketplace.domain.exceptions import DomainException
from marketplace.domain.model.order import Order, OrderStatus, PaymentStatus
from marketplace.domain.model.value_objects import Address
from marketplace.domain.repository.order_repository import OrderQuery, SORT_KEYS, as_utc
from marketplace.infrastructure.bootstrap import (
    cart_validator,
    order_repository,
    product_repository,
    stock_ledger,
)
from marketplace.infrastructure.config import Settings

ORDER_STATUSES = [s.value for s in OrderStatus]
PAYMENT_STATUSES = [s.value for s in PaymentStatus]
DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S"]


def _parse_address(raw: str) -> Address:
    """Parse 'street|city|province|postal code[|country]' into an Address."""
    parts = [part.strip() for part in raw.split("|")]
    if len(parts) not in (4, 5):
        raise click.BadParameter(
            f"Invalid address '{raw}'. Expected 'Street|City|Province|PostalCode[|Country]'."
        )
    try:
        return Address(*parts)
    except DomainException as exc:
        raise click.BadParameter(str(exc))


def _as_utc(value: datetime | None, end_of_day: bool = False) -> datetime | None:
    """Make a parsed CLI date timezone-aware; bare end dates cover the whole day."""
    if value is None:
        return None
    if end_of_day and value.time() == time.min:
        value = datetime.combine(value.date(), time.max)
    return as_utc(value)


def _display_order(order: Order) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {order.order_number}  (id={order.id})")
    click.echo(f"Customer: {order.user_id}")
    click.echo(f"Status:   {order.order_status.value}  payment={order.payment_status.value}")
    click.echo(f"Created:  {order.created_at.strftime('%Y-%m-%d %H:%M UTC')}")
    if order.tracking_number:
        click.echo(f"Tracking: {order.tracking_number}")
    click.echo(f"Ship to:  {order.shipping_address}")
    click.echo()

    click.echo(f"  {'Product':<20} {'SKU':<10} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*58}")
    for item in order.products:
        click.echo(
            f"  {item.name:<20} {item.sku:<10} {item.quantity.value:>5} "
            f"{str(item.price):>10} {str(item.line_total):>10}"
        )
    click.echo(f"  {'-'*58}")
    click.echo(f"  {'Subtotal':<27} {str(order.subtotal):>31}")
    click.echo(f"  {'Tax':<27} {str(order.tax):>31}")
    click.echo(f"  {'Shipping':<27} {str(order.shipping):>31}")
    click.echo(f"  {'Order Total':<27} {str(order.total_amount):>31}")


@click.command("create")
@click.option("--user", "user_id", required=True, help="Customer ID.")
@click.option("--payment-method", required=True, help="Payment method identifier.")
@click.option("--ship-to", required=True, help="Shipping address 'Street|City|Province|PostalCode[|Country]'.")
@click.option("--bill-to", default=None, help="Billing address (defaults to the shipping address).")
@click.option("--notes", default=None, help="Delivery notes (max 500 characters).")
@click.pass_obj
def order_create(
    settings: Settings,
    user_id: str,
    payment_method: str,
    ship_to: str,
    bill_to: str | None,
    notes: str | None,
) -> None:
    """Place an order from the customer's cart (reserves stock)."""
    shipping_address = _parse_address(ship_to)
    billing_address = _parse_address(bill_to) if bill_to else shipping_address

    handler = CreateOrderHandler(
        order_repo=order_repository(settings),
        product_repo=product_repository(settings),
        cart_validator=cart_validator(settings),
        stock_ledger=stock_ledger(settings),
    )

    try:
        order = handler.handle(
            user_id,
            CreateOrderData(
                payment_method=payment_method,
                shipping_address=shipping_address,
                billing_address=billing_address,
                notes=notes,
            ),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo("Order created successfully")
    _display_order(order)


@click.command("show")
@click.option("--id", "order_id", default=None, help="Order ID to display.")
@click.option("--number", "order_number", default=None, help="Order number to display.")
@click.option("--user", "user_id", default=None, help="Only show the order if this customer owns it.")
@click.pass_obj
def order_show(
    settings: Settings,
    order_id: str | None,
    order_number: str | None,
    user_id: str | None,
) -> None:
    """Show details of an existing order."""
    if (order_id is None) == (order_number is None):
        raise click.UsageError("Pass exactly one of --id or --number")

    handler = ShowOrderHandler(order_repo=order_repository(settings))
    if order_id is not None:
        order = handler.handle(order_id, user_id=user_id)
    else:
        order = handler.handle_number(order_number, user_id=user_id)

    if order is None:
        raise click.ClickException("Order not found")
    _display_order(order)


@click.command("list")
@click.option("--user", "user_id", default=None, help="Only this customer's orders.")
@click.option("--status", "order_status", type=click.Choice(ORDER_STATUSES), default=None)
@click.option("--payment", "payment_status", type=click.Choice(PAYMENT_STATUSES), default=None)
@click.option("--from", "start_date", type=click.DateTime(DATE_FORMATS), default=None)
@click.option("--to", "end_date", type=click.DateTime(DATE_FORMATS), default=None)
@click.option("--page", default=1, type=click.IntRange(min=1), show_default=True)
@click.option("--limit", default=20, type=click.IntRange(min=1), show_default=True)
@click.option("--sort-by", type=click.Choice(sorted(SORT_KEYS)), default="created_at", show_default=True)
@click.option("--sort-order", type=click.Choice(["asc", "desc"]), default="desc", show_default=True)
@click.pass_obj
def order_list(
    settings: Settings,
    user_id: str | None,
    order_status: str | None,
    payment_status: str | None,
    start_date: datetime | None,
    end_date: datetime | None,
    page: int,
    limit: int,
    sort_by: str,
    sort_order: str,
) -> None:
    """List orders with filters and paging."""
    handler = ListOrdersHandler(order_repo=order_repository(settings))

    try:
        result = handler.handle(
            OrderQuery(
                user_id=user_id,
                order_status=OrderStatus.parse(order_status) if order_status else None,
                payment_status=PaymentStatus.parse(payment_status) if payment_status else None,
                page=page,
                limit=limit,
                sort_by=sort_by,
                sort_order=sort_order,
                start_date=_as_utc(start_date),
                end_date=_as_utc(end_date, end_of_day=True),
            )
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'Order':<28} {'Customer':<12} {'Status':<11} {'Payment':<9} {'Total':>10}")
    click.echo("-" * 74)
    for o in result.orders:
        click.echo(
            f"{o.order_number:<28} {o.user_id:<12} {o.order_status.value:<11} "
            f"{o.payment_status.value:<9} {str(o.total_amount):>10}"
        )
    click.echo(f"Page {result.page} of {result.total_pages} ({result.total} orders)")


@click.command("status")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--status", "new_status", required=True, type=click.Choice(ORDER_STATUSES))
@click.option("--tracking", "tracking_number", default=None, help="Carrier tracking number.")
@click.pass_obj
def order_status(
    settings: Settings, order_id: str, new_status: str, tracking_number: str | None
) -> None:
    """Update an order's fulfilment status."""
    handler = UpdateOrderStatusHandler(
        order_repo=order_repository(settings),
        enforce_transitions=settings.strict_transitions,
    )

    try:
        order = handler.handle(order_id, new_status, tracking_number=tracking_number)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if order is None:
        raise click.ClickException("Order not found")
    click.echo(f"Order {order.order_number} is now {order.order_status.value}.")


@click.command("payment")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--status", "new_status", required=True, type=click.Choice(PAYMENT_STATUSES))
@click.option("--intent", "payment_intent_id", default=None, help="Payment intent identifier.")
@click.pass_obj
def order_payment(
    settings: Settings, order_id: str, new_status: str, payment_intent_id: str | None
) -> None:
    """Record a payment outcome (a failed payment on a pending order restores stock)."""
    handler = UpdatePaymentStatusHandler(
        order_repo=order_repository(settings),
        stock_ledger=stock_ledger(settings),
    )

    try:
        order = handler.handle(order_id, new_status, payment_intent_id=payment_intent_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if order is None:
        raise click.ClickException("Order not found")
    click.echo(f"Order {order.order_number} payment is now {order.payment_status.value}.")


@click.command("cancel")
@click.option("--id", "order_id", required=True, help="Order ID to cancel.")
@click.option("--user", "user_id", default=None, help="Only cancel if this customer owns the order.")
@click.pass_obj
def order_cancel(settings: Settings, order_id: str, user_id: str | None) -> None:
    """Cancel an order (restores stock if it was paid)."""
    handler = CancelOrderHandler(
        order_repo=order_repository(settings),
        stock_ledger=stock_ledger(settings),
    )

    try:
        order = handler.handle(order_id, user_id=user_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order.order_number} cancelled.")


@click.command("stats")
@click.option("--from", "start_date", type=click.DateTime(DATE_FORMATS), default=None)
@click.option("--to", "end_date", type=click.DateTime(DATE_FORMATS), default=None)
@click.pass_obj
def order_stats(
    settings: Settings, start_date: datetime | None, end_date: datetime | None
) -> None:
    """Show order and revenue statistics."""
    handler = OrderStatsHandler(order_repo=order_repository(settings))
    stats = handler.handle(_as_utc(start_date), _as_utc(end_date, end_of_day=True))

    click.echo(f"Total orders:        {stats.total_orders}")
    click.echo(f"Total revenue:       ${stats.total_revenue:.2f}")
    click.echo(f"Average order value: ${stats.average_order_value:.2f}")
    for label, counts in (
        ("Orders by status", stats.orders_by_status),
        ("Payments by status", stats.payments_by_status),
    ):
        click.echo(f"{label}:")
        for status, count in sorted(counts.items()):
            click.echo(f"  {status:<12} {count:>5}")
