"""Application service: List Orders use case (query)."""

from __future__ import annotations

from marketplace.domain.repository.order_repository import (
    OrderPage,
    OrderQuery,
    OrderRepository,
)


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, query: OrderQuery) -> OrderPage:
        return self._order_repo.find(query)
