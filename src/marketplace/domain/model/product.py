"""Product aggregate.

Products live independently of orders. They have their own lifecycle:
prices change, stock moves, products are deactivated by their vendor.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from marketplace.domain.exceptions import InsufficientStockError, ValidationError
from marketplace.domain.model.value_objects import Money


class StockDirection(Enum):
    ADD = "add"
    SUBTRACT = "subtract"


@dataclass
class Product:
    """A product in a vendor's catalog.

    ``stock`` is the authoritative on-hand count. It is only changed
    through ``adjust_stock`` so it can never go negative.
    """

    id: str
    name: str
    sku: str
    price: Money
    stock: int = 0
    is_active: bool = True

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        This does NOT affect any existing orders because orders
        capture a price snapshot at creation time.
        """
        if new_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        self.price = new_price

    def adjust_stock(self, quantity: int, direction: StockDirection) -> None:
        """Add or remove *quantity* units.

        Removal is conditional: it is refused outright when there is
        not enough stock, rather than clamping at zero.
        """
        if quantity <= 0:
            raise ValidationError("Stock adjustment quantity must be positive")
        if direction is StockDirection.ADD:
            self.stock += quantity
            return
        if quantity > self.stock:
            raise InsufficientStockError(self.id, quantity, self.stock)
        self.stock -= quantity
