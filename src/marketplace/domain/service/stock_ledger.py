"""Domain service: Product Stock Ledger.

Every change to a product's stock count goes through this service.  The
per-product atomicity comes from ``ProductRepository.adjust_stock``; the
ledger adds the multi-product semantics an order needs.

Reservation is all-or-nothing: decrements are applied one line item at a
time, and if any of them is refused the ones already applied are
compensated (added back) before the error is re-raised.
"""

from __future__ import annotations

import structlog

from marketplace.domain.exceptions import EntityNotFoundError
from marketplace.domain.model.order import Order, OrderLineItem
from marketplace.domain.model.product import Product, StockDirection
from marketplace.domain.repository.product_repository import ProductRepository


class StockLedger:

    def __init__(self, product_repo: ProductRepository, logger=None) -> None:
        self._product_repo = product_repo
        self._log = logger or structlog.get_logger(__name__)

    def adjust_stock(
        self, product_id: str, quantity: int, direction: StockDirection
    ) -> Product:
        """Add or subtract stock for a single product."""
        product = self._product_repo.adjust_stock(product_id, quantity, direction)
        if product is None:
            raise EntityNotFoundError(f"Product '{product_id}' not found")
        self._log.info(
            "stock_adjusted",
            product_id=product_id,
            sku=product.sku,
            direction=direction.value,
            quantity=quantity,
            stock=product.stock,
        )
        return product

    def reserve_for_order(self, order: Order) -> None:
        """Decrement stock for every line item, or for none of them."""
        applied: list[OrderLineItem] = []
        try:
            for line in order.products:
                self.adjust_stock(
                    line.product_id, line.quantity.value, StockDirection.SUBTRACT
                )
                applied.append(line)
        except Exception:
            self._compensate(order, applied)
            raise

    def restore_for_order(self, order: Order) -> None:
        """Give back the stock taken by every line item of *order*."""
        for line in order.products:
            self.adjust_stock(line.product_id, line.quantity.value, StockDirection.ADD)

    def _compensate(self, order: Order, applied: list[OrderLineItem]) -> None:
        for line in reversed(applied):
            self.adjust_stock(line.product_id, line.quantity.value, StockDirection.ADD)
        if applied:
            self._log.warning(
                "stock_reservation_compensated",
                order_number=order.order_number,
                lines=[line.product_id for line in applied],
            )
