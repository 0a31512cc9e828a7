"""Application service: Show Order use case (query)."""

from __future__ import annotations

from marketplace.domain.model.order import Order
from marketplace.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str, user_id: str | None = None) -> Order | None:
        return self._order_repo.get_by_id(order_id, user_id=user_id)

    def handle_number(self, order_number: str, user_id: str | None = None) -> Order | None:
        return self._order_repo.get_by_order_number(
            order_number.strip().upper(), user_id=user_id
        )
