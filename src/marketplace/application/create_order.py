"""Application service: Create Order use case.

Orchestrates the checkout: validate the cart, price it, persist the
order, reserve stock, then mark the cart converted.  The steps run in
that fixed order, so whenever stock has been taken the order record
already exists.
"""

from __future__ import annotations

import structlog

from marketplace.application.dto import CreateOrderData
from marketplace.domain.exceptions import (
    CartEmptyError,
    CartInvalidError,
    EntityNotFoundError,
)
from marketplace.domain.model.cart import Cart
from marketplace.domain.model.order import Order, OrderLineItem, OrderTotals
from marketplace.domain.model.value_objects import Quantity
from marketplace.domain.repository.order_repository import OrderRepository
from marketplace.domain.repository.product_repository import ProductRepository
from marketplace.domain.service.cart_validator import CartValidator
from marketplace.domain.service.stock_ledger import StockLedger


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        cart_validator: CartValidator,
        stock_ledger: StockLedger,
        logger=None,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._cart_validator = cart_validator
        self._stock_ledger = stock_ledger
        self._log = logger or structlog.get_logger(__name__)

    def handle(self, user_id: str, data: CreateOrderData) -> Order:
        """Turn the user's cart into a persisted order.

        Steps:
        1. Validate the cart (fail on empty or invalid carts).
        2. Compute subtotal, tax, shipping and total.
        3. Snapshot line items, attaching each product's current SKU.
        4. Persist the order (ID and order number are assigned here).
        5. Reserve stock, all-or-nothing; a refusal cancels the order.
        6. Mark the cart converted.
        """
        log = self._log.bind(user_id=user_id)
        try:
            validation = self._cart_validator.validate_cart_items(user_id)
            if validation.is_empty:
                raise CartEmptyError()
            if not validation.valid:
                raise CartInvalidError(validation.issues)

            cart = validation.cart
            order = Order.create(
                user_id=user_id,
                products=self._snapshot_items(cart),
                totals=OrderTotals.for_subtotal(cart.total_price),
                payment_method=data.payment_method,
                shipping_address=data.shipping_address,
                billing_address=data.billing_address,
                notes=data.notes,
            )
            self._order_repo.add(order)
            log = log.bind(order_number=order.order_number)

            try:
                self._stock_ledger.reserve_for_order(order)
            except Exception as exc:
                log.error("stock_reservation_failed", error=str(exc))
                # The ledger has already compensated, so no stock is held.
                order.cancel()
                order.release_stock()
                self._order_repo.save(order)
                raise

            self._cart_validator.convert_cart_to_order(user_id)
        except Exception as exc:
            log.error("order_creation_failed", error=str(exc))
            raise

        log.info("order_created", total_amount=str(order.total_amount.amount))
        return order

    def _snapshot_items(self, cart: Cart) -> list[OrderLineItem]:
        line_items: list[OrderLineItem] = []
        for item in cart.items:
            product = self._product_repo.get_by_id(item.product_id)
            if product is None:
                raise EntityNotFoundError(f"Product not found: '{item.name}'")

            line_items.append(
                OrderLineItem(
                    product_id=item.product_id,
                    name=item.name,
                    price=item.price,  # <-- price snapshot
                    quantity=Quantity(item.quantity),
                    sku=product.sku,
                )
            )
        return line_items
