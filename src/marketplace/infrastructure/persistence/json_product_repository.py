"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from marketplace.domain.model.product import Product, StockDirection
from marketplace.domain.model.value_objects import Money
from marketplace.domain.repository.product_repository import ProductRepository
from marketplace.infrastructure.persistence.json_store import JsonDocumentStore


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonDocumentStore(file_path)

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        for raw in self._store.load():
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def get_by_sku(self, sku: str) -> Product | None:
        for raw in self._store.load():
            if raw["sku"].upper() == sku.upper():
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._store.load()]

    def save(self, product: Product) -> None:
        with self._store.transaction() as records:
            for i, raw in enumerate(records):
                if raw["id"] == product.id:
                    records[i] = self._to_raw(product)
                    break
            else:
                records.append(self._to_raw(product))

    def adjust_stock(
        self, product_id: str, quantity: int, direction: StockDirection
    ) -> Product | None:
        with self._store.transaction() as records:
            for i, raw in enumerate(records):
                if raw["id"] == product_id:
                    product = self._to_domain(raw)
                    product.adjust_stock(quantity, direction)
                    records[i] = self._to_raw(product)
                    return product
        return None

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "sku": product.sku,
            "price": str(product.price.amount),
            "currency": product.price.currency,
            "stock": product.stock,
            "is_active": product.is_active,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            name=raw["name"],
            sku=raw["sku"],
            price=Money(Decimal(raw["price"]), raw.get("currency", "USD")),
            stock=raw.get("stock", 0),
            is_active=raw.get("is_active", True),
        )
