"""Application service: Restock Product use case."""

from __future__ import annotations

from marketplace.domain.model.product import Product, StockDirection
from marketplace.domain.service.stock_ledger import StockLedger


class RestockProductHandler:

    def __init__(self, stock_ledger: StockLedger) -> None:
        self._stock_ledger = stock_ledger

    def handle(self, product_id: str, quantity: int, direction: str = "add") -> Product:
        """Move stock by hand, e.g. after a delivery or a stock count."""
        return self._stock_ledger.adjust_stock(
            product_id, quantity, StockDirection(direction)
        )
