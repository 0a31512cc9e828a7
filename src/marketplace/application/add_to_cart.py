"""Application service: Add To Cart use case."""

from __future__ import annotations

from uuid import uuid4

from marketplace.domain.exceptions import EntityNotFoundError, ValidationError
from marketplace.domain.model.cart import Cart, CartStatus
from marketplace.domain.repository.cart_repository import CartRepository
from marketplace.domain.repository.product_repository import ProductRepository


class AddToCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo

    def handle(self, user_id: str, product_id: str, quantity: int) -> Cart:
        """Put *quantity* units of a product in the user's cart.

        The cart line records the product's current name and price.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None or not product.is_active:
            raise EntityNotFoundError("Product not found or is not available")

        cart = self._cart_repo.get_by_user_id(user_id)
        if cart is None:
            cart = Cart(id=uuid4().hex, user_id=user_id)

        requested = quantity
        if cart.status is CartStatus.ACTIVE:
            requested += sum(
                i.quantity for i in cart.items if i.product_id == product_id
            )
        if requested > product.stock:
            raise ValidationError(
                f"Insufficient stock. Available: {product.stock}, "
                f"requested total: {requested}"
            )

        cart.add_item(product.id, product.name, product.price, quantity)
        self._cart_repo.save(cart)
        return cart
