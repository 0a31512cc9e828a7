"""Application service: Order Statistics use case (query)."""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from decimal import Decimal

from marketplace.application.dto import OrderStats
from marketplace.domain.model.order import PaymentStatus
from marketplace.domain.model.value_objects import CENTS
from marketplace.domain.repository.order_repository import OrderRepository, as_utc


class OrderStatsHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(
        self,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> OrderStats:
        """Aggregate orders created inside the (inclusive) window.

        Naive bounds are read as UTC.

        Revenue only counts paid orders, but the average divides it by
        every order in the window.
        """
        orders = self._order_repo.list_created_between(as_utc(start_date), as_utc(end_date))

        revenue = sum(
            (o.total_amount.amount for o in orders if o.payment_status is PaymentStatus.PAID),
            Decimal("0.00"),
        )
        average = (revenue / len(orders)).quantize(CENTS) if orders else Decimal("0.00")

        return OrderStats(
            total_orders=len(orders),
            total_revenue=revenue,
            average_order_value=average,
            orders_by_status=dict(Counter(o.order_status.value for o in orders)),
            payments_by_status=dict(Counter(o.payment_status.value for o in orders)),
        )
