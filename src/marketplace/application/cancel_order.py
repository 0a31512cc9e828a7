"""Application service: Cancel Order use case.

Pending and processing orders can be cancelled; shipped, delivered and
already-cancelled orders cannot.  Stock is restored only when the order
had been paid for.
"""

from __future__ import annotations

import structlog

from marketplace.domain.exceptions import EntityNotFoundError
from marketplace.domain.model.order import Order, PaymentStatus
from marketplace.domain.repository.order_repository import OrderRepository
from marketplace.domain.service.stock_ledger import StockLedger


class CancelOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        stock_ledger: StockLedger,
        logger=None,
    ) -> None:
        self._order_repo = order_repo
        self._stock_ledger = stock_ledger
        self._log = logger or structlog.get_logger(__name__)

    def handle(self, order_id: str, user_id: str | None = None) -> Order:
        """Cancel an order.

        ``user_id`` scopes the lookup to the order's owner; leave it out
        for privileged cancellation of any order.
        """
        released: list[bool] = []

        def apply(order: Order) -> None:
            order.cancel()
            released.append(
                order.payment_status is PaymentStatus.PAID and order.release_stock()
            )

        try:
            order = self._order_repo.update(order_id, apply, user_id=user_id)
            if order is None:
                raise EntityNotFoundError(f"Order {order_id} not found")

            if released[0]:
                self._stock_ledger.restore_for_order(order)
                self._log.info("stock_restored", order_number=order.order_number)
        except Exception as exc:
            self._log.error("order_cancel_failed", order_id=order_id, error=str(exc))
            raise

        self._log.info("order_cancelled", order_number=order.order_number)
        return order
