"""Application service: Update Order Status use case."""

from __future__ import annotations

import structlog

from marketplace.domain.model.order import Order, OrderStatus
from marketplace.domain.repository.order_repository import OrderRepository


class UpdateOrderStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        enforce_transitions: bool = True,
        logger=None,
    ) -> None:
        self._order_repo = order_repo
        self._enforce_transitions = enforce_transitions
        self._log = logger or structlog.get_logger(__name__)

    def handle(
        self,
        order_id: str,
        new_status: OrderStatus | str,
        tracking_number: str | None = None,
    ) -> Order | None:
        """Apply a fulfilment status; returns None when the order is missing.

        No stock is moved here, not even for ``cancelled``: use the
        cancel use case for that.
        """
        status = OrderStatus.parse(new_status)
        order = self._order_repo.update(
            order_id,
            lambda o: o.update_status(
                status,
                tracking_number=tracking_number,
                enforce_transitions=self._enforce_transitions,
            ),
        )
        if order is not None:
            self._log.info(
                "order_status_updated",
                order_number=order.order_number,
                order_status=status.value,
            )
        return order
