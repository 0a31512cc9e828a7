"""Cart entity.

The cart belongs to the shopping side of the platform; the order core
only validates it, reads it and asks for it to be marked converted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from marketplace.domain.exceptions import ValidationError
from marketplace.domain.model.value_objects import Money

MAX_CART_LINE_QUANTITY = 100


class CartStatus(Enum):
    ACTIVE = "active"
    ABANDONED = "abandoned"
    CONVERTED = "converted"


@dataclass
class CartItem:
    product_id: str
    name: str
    price: Money
    quantity: int

    @property
    def line_total(self) -> Money:
        return self.price * self.quantity


@dataclass
class Cart:
    """One cart per user, reused after each checkout."""

    id: str
    user_id: str
    items: list[CartItem] = field(default_factory=list)
    status: CartStatus = CartStatus.ACTIVE
    last_modified: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total_price(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.line_total
        return result

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def add_item(self, product_id: str, name: str, price: Money, quantity: int) -> None:
        """Add units of a product, merging with an existing line.

        A converted or abandoned cart starts afresh.
        """
        if quantity <= 0:
            raise ValidationError("Quantity must be positive")
        if self.status is not CartStatus.ACTIVE:
            self.items = []
            self.status = CartStatus.ACTIVE

        for item in self.items:
            if item.product_id == product_id:
                new_quantity = item.quantity + quantity
                self._check_line_quantity(new_quantity)
                item.quantity = new_quantity
                item.price = price
                item.name = name
                self._touch()
                return

        self._check_line_quantity(quantity)
        self.items.append(
            CartItem(product_id=product_id, name=name, price=price, quantity=quantity)
        )
        self._touch()

    def replace_items(self, items: list[CartItem]) -> None:
        self.items = list(items)
        self._touch()

    def mark_converted(self) -> None:
        self.status = CartStatus.CONVERTED
        self._touch()

    def _touch(self) -> None:
        self.last_modified = datetime.now(timezone.utc)

    @staticmethod
    def _check_line_quantity(quantity: int) -> None:
        if quantity > MAX_CART_LINE_QUANTITY:
            raise ValidationError(
                f"Quantity cannot exceed {MAX_CART_LINE_QUANTITY} per product"
            )
