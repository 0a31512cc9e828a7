"""JSON-file-backed implementation of CartRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from marketplace.domain.model.cart import Cart, CartItem, CartStatus
from marketplace.domain.model.value_objects import Money
from marketplace.domain.repository.cart_repository import CartRepository
from marketplace.infrastructure.persistence.json_store import JsonDocumentStore


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonDocumentStore(file_path)

    # --- CartRepository interface ---------------------------------------------

    def get_by_user_id(self, user_id: str) -> Cart | None:
        for raw in self._store.load():
            if raw["user_id"] == user_id:
                return self._to_domain(raw)
        return None

    def save(self, cart: Cart) -> None:
        with self._store.transaction() as records:
            for i, raw in enumerate(records):
                if raw["user_id"] == cart.user_id:
                    records[i] = self._to_raw(cart)
                    break
            else:
                records.append(self._to_raw(cart))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        return {
            "id": cart.id,
            "user_id": cart.user_id,
            "status": cart.status.value,
            "last_modified": cart.last_modified.isoformat(),
            "total_items": cart.total_items,
            "total_price": str(cart.total_price.amount),
            "items": [
                {
                    "product_id": item.product_id,
                    "name": item.name,
                    "price": str(item.price.amount),
                    "quantity": item.quantity,
                }
                for item in cart.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Cart:
        return Cart(
            id=raw["id"],
            user_id=raw["user_id"],
            items=[
                CartItem(
                    product_id=i["product_id"],
                    name=i["name"],
                    price=Money(Decimal(i["price"])),
                    quantity=i["quantity"],
                )
                for i in raw["items"]
            ],
            status=CartStatus(raw["status"]),
            last_modified=datetime.fromisoformat(raw["last_modified"]),
        )
