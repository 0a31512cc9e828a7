"""Application service: Add Product use case."""

from __future__ import annotations

from marketplace.domain.exceptions import ValidationError
from marketplace.domain.model.product import Product
from marketplace.domain.model.value_objects import Money
from marketplace.domain.repository.product_repository import ProductRepository


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, name: str, sku: str, price: str, stock: int = 0) -> Product:
        """Add a new product to the catalog."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if not sku or not sku.strip():
            raise ValidationError("Product SKU is required")
        if stock < 0:
            raise ValidationError("Stock cannot be negative")

        sku = sku.strip().upper()
        if self._product_repo.get_by_sku(sku) is not None:
            raise ValidationError(f"Product with SKU '{sku}' already exists")

        # Auto-assign ID based on existing products
        all_products = self._product_repo.list_all()
        if all_products:
            next_id = str(max(int(p.id) for p in all_products) + 1)
        else:
            next_id = "1"

        product = Product(
            id=next_id,
            name=name.strip(),
            sku=sku,
            price=Money.of(price),
            stock=stock,
        )
        if product.price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        self._product_repo.save(product)
        return product
