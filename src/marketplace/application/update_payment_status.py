"""Application service: Update Payment Status use case.

A failed payment on an order that has not entered fulfilment gives its
reserved stock back.  Once the order is processing or beyond, stock is
left alone and any reversal is an administrative act.
"""

from __future__ import annotations

import structlog

from marketplace.domain.model.order import Order, OrderStatus, PaymentStatus
from marketplace.domain.repository.order_repository import OrderRepository
from marketplace.domain.service.stock_ledger import StockLedger


class UpdatePaymentStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        stock_ledger: StockLedger,
        logger=None,
    ) -> None:
        self._order_repo = order_repo
        self._stock_ledger = stock_ledger
        self._log = logger or structlog.get_logger(__name__)

    def handle(
        self,
        order_id: str,
        new_status: PaymentStatus | str,
        payment_intent_id: str | None = None,
    ) -> Order | None:
        status = PaymentStatus.parse(new_status)
        released: list[bool] = []

        def apply(order: Order) -> None:
            order.update_payment_status(status, payment_intent_id)
            released.append(
                status is PaymentStatus.FAILED
                and order.order_status is OrderStatus.PENDING
                and order.release_stock()
            )

        order = self._order_repo.update(order_id, apply)
        if order is None:
            return None

        self._log.info(
            "payment_status_updated",
            order_number=order.order_number,
            payment_status=status.value,
        )

        if released[0]:
            self._stock_ledger.restore_for_order(order)
            self._log.info("stock_restored", order_number=order.order_number)
        return order
