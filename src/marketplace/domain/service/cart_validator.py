"""Domain service: Cart Validator.

Checks a user's cart against the live catalog right before checkout.
The verdict is a point-in-time snapshot, not a lock: stock may still
move between validation and reservation.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from marketplace.domain.model.cart import Cart, CartItem, CartStatus
from marketplace.domain.repository.cart_repository import CartRepository
from marketplace.domain.repository.product_repository import ProductRepository


@dataclass
class CartValidation:
    cart: Cart | None
    valid: bool = True
    issues: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.cart is None or self.cart.is_empty


class CartValidator:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        logger=None,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._log = logger or structlog.get_logger(__name__)

    def validate_cart_items(self, user_id: str) -> CartValidation:
        """Validate the user's active cart against current products.

        Unavailable products are dropped, quantities are lowered to the
        available stock and stale prices are refreshed; every adjustment
        is reported as an issue and the cleaned cart is saved.
        """
        cart = self._cart_repo.get_by_user_id(user_id)
        if cart is None or cart.status is not CartStatus.ACTIVE:
            return CartValidation(cart=None)
        if cart.is_empty:
            return CartValidation(cart=cart)

        issues: list[str] = []
        valid_items: list[CartItem] = []

        for item in cart.items:
            product = self._product_repo.get_by_id(item.product_id)
            if product is None:
                issues.append(f'Product "{item.name}" is no longer available')
                continue
            if not product.is_active:
                issues.append(f'Product "{product.name}" is currently unavailable')
                continue

            if product.stock < item.quantity:
                issues.append(
                    f'Insufficient stock for "{product.name}". '
                    f"Available: {product.stock}, in cart: {item.quantity}"
                )
                item.quantity = product.stock

            if item.price != product.price:
                issues.append(
                    f'Price changed for "{product.name}". '
                    f"Old: {item.price}, New: {product.price}"
                )
                item.price = product.price

            if item.quantity > 0:
                valid_items.append(item)

        if issues:
            cart.replace_items(valid_items)
            self._cart_repo.save(cart)

        self._log.debug("cart_validated", user_id=user_id, issues=len(issues))
        return CartValidation(cart=cart, valid=not issues, issues=issues)

    def convert_cart_to_order(self, user_id: str) -> Cart | None:
        """Mark the user's cart as converted so it is no longer active."""
        cart = self._cart_repo.get_by_user_id(user_id)
        if cart is None:
            return None
        cart.mark_converted()
        self._cart_repo.save(cart)
        self._log.info("cart_converted", user_id=user_id, cart_id=cart.id)
        return cart
