"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, in-memory)
live in the infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from marketplace.domain.model.product import Product, StockDirection


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_by_sku(self, sku: str) -> Product | None:
        """Return a product by its SKU, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product."""

    @abstractmethod
    def adjust_stock(
        self, product_id: str, quantity: int, direction: StockDirection
    ) -> Product | None:
        """Atomically add or remove stock for one product.

        No concurrent adjustment may be lost or applied twice.  Removal
        raises InsufficientStockError instead of going negative.  Returns
        the updated product, or None when the product does not exist.
        """
