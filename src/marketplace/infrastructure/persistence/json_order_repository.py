"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from uuid import uuid4

from marketplace.domain.model.order import (
    Order,
    OrderLineItem,
    OrderStatus,
    OrderTotals,
    PaymentStatus,
    generate_order_number,
)
from marketplace.domain.model.value_objects import Address, Money, Quantity
from marketplace.domain.repository.order_repository import (
    OrderPage,
    OrderQuery,
    OrderRepository,
    created_within,
    paginate,
)
from marketplace.infrastructure.persistence.json_store import JsonDocumentStore


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonDocumentStore(file_path)

    # --- OrderRepository interface --------------------------------------------

    def add(self, order: Order) -> Order:
        with self._store.transaction() as records:
            taken = {raw["order_number"] for raw in records}
            order_number = generate_order_number()
            while order_number in taken:
                order_number = generate_order_number()

            order.assign_identity(uuid4().hex, order_number)
            order.validate()
            records.append(self._to_raw(order))
        return order

    def get_by_id(self, order_id: str, user_id: str | None = None) -> Order | None:
        return self._find_one(lambda raw: raw["id"] == order_id, user_id)

    def get_by_order_number(
        self, order_number: str, user_id: str | None = None
    ) -> Order | None:
        return self._find_one(lambda raw: raw["order_number"] == order_number, user_id)

    def find(self, query: OrderQuery) -> OrderPage:
        return paginate(self._load_all(), query)

    def list_created_between(
        self,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[Order]:
        return [o for o in self._load_all() if created_within(o, start_date, end_date)]

    def save(self, order: Order) -> None:
        order.validate()
        with self._store.transaction() as records:
            for i, raw in enumerate(records):
                if raw["id"] == order.id:
                    records[i] = self._to_raw(order)
                    break
            else:
                raise ValueError(f"Order {order.id} has not been added yet")

    def update(
        self,
        order_id: str,
        mutate: Callable[[Order], None],
        user_id: str | None = None,
    ) -> Order | None:
        with self._store.transaction() as records:
            for i, raw in enumerate(records):
                if raw["id"] != order_id:
                    continue
                order = self._to_domain(raw)
                if not order.is_owned_by(user_id):
                    return None
                mutate(order)
                order.validate()
                records[i] = self._to_raw(order)
                return order
        return None

    # --- Queries --------------------------------------------------------------

    def _find_one(self, predicate: Callable[[dict], bool], user_id: str | None) -> Order | None:
        for raw in self._store.load():
            if predicate(raw):
                order = self._to_domain(raw)
                return order if order.is_owned_by(user_id) else None
        return None

    def _load_all(self) -> list[Order]:
        return [self._to_domain(raw) for raw in self._store.load()]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "order_number": order.order_number,
            "user_id": order.user_id,
            "products": [
                {
                    "product_id": item.product_id,
                    "name": item.name,
                    "price": str(item.price.amount),
                    "currency": item.price.currency,
                    "quantity": item.quantity.value,
                    "sku": item.sku,
                }
                for item in order.products
            ],
            "subtotal": str(order.subtotal.amount),
            "tax": str(order.tax.amount),
            "shipping": str(order.shipping.amount),
            "total_amount": str(order.total_amount.amount),
            "payment_status": order.payment_status.value,
            "order_status": order.order_status.value,
            "payment_method": order.payment_method,
            "payment_intent_id": order.payment_intent_id,
            "shipping_address": _address_to_raw(order.shipping_address),
            "billing_address": _address_to_raw(order.billing_address),
            "tracking_number": order.tracking_number,
            "notes": order.notes,
            "stock_released": order.stock_released,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        products = tuple(
            OrderLineItem(
                product_id=i["product_id"],
                name=i["name"],
                price=Money(Decimal(i["price"]), i.get("currency", "USD")),
                quantity=Quantity(i["quantity"]),
                sku=i["sku"],
            )
            for i in raw["products"]
        )
        # total_amount is stored for readers of the file but always re-derived.
        totals = OrderTotals(
            subtotal=Money(Decimal(raw["subtotal"])),
            tax=Money(Decimal(raw["tax"])),
            shipping=Money(Decimal(raw["shipping"])),
        )
        return Order(
            id=raw["id"],
            order_number=raw["order_number"],
            user_id=raw["user_id"],
            products=products,
            totals=totals,
            payment_method=raw["payment_method"],
            shipping_address=Address(**raw["shipping_address"]),
            billing_address=Address(**raw["billing_address"]),
            payment_status=PaymentStatus(raw["payment_status"]),
            order_status=OrderStatus(raw["order_status"]),
            payment_intent_id=raw.get("payment_intent_id"),
            tracking_number=raw.get("tracking_number"),
            notes=raw.get("notes"),
            stock_released=raw.get("stock_released", False),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )


def _address_to_raw(address: Address) -> dict:
    return {
        "street": address.street,
        "city": address.city,
        "province": address.province,
        "postal_code": address.postal_code,
        "country": address.country,
    }
