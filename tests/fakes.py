"""In-memory fake repositories for testing.

These implement the same abstract interfaces as the JSON repositories
but keep everything in a dict. No file I/O, no side effects.  Stored
objects are deep-copied on the way in and out so that, like a real
document store, nothing changes until it is written back.
"""

from __future__ import annotations

import copy
import threading
from collections.abc import Callable
from datetime import datetime

from marketplace.domain.model.cart import Cart
from marketplace.domain.model.order import Order, generate_order_number
from marketplace.domain.model.product import Product, StockDirection
from marketplace.domain.repository.cart_repository import CartRepository
from marketplace.domain.repository.order_repository import (
    OrderPage,
    OrderQuery,
    OrderRepository,
    created_within,
    paginate,
)
from marketplace.domain.repository.product_repository import ProductRepository


class FakeOrderRepository(OrderRepository):

    def __init__(self) -> None:
        self._store: dict[str, Order] = {}
        self._next_id = 1
        self.writes = 0

    def add(self, order: Order) -> Order:
        taken = {o.order_number for o in self._store.values()}
        order_number = generate_order_number()
        while order_number in taken:
            order_number = generate_order_number()
        order.assign_identity(str(self._next_id), order_number)
        self._next_id += 1
        order.validate()
        self._store[order.id] = copy.deepcopy(order)
        self.writes += 1
        return order

    def get_by_id(self, order_id: str, user_id: str | None = None) -> Order | None:
        order = self._store.get(order_id)
        if order is None or not order.is_owned_by(user_id):
            return None
        return copy.deepcopy(order)

    def get_by_order_number(
        self, order_number: str, user_id: str | None = None
    ) -> Order | None:
        for order in self._store.values():
            if order.order_number == order_number and order.is_owned_by(user_id):
                return copy.deepcopy(order)
        return None

    def find(self, query: OrderQuery) -> OrderPage:
        return paginate(copy.deepcopy(list(self._store.values())), query)

    def list_created_between(
        self,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[Order]:
        return [
            copy.deepcopy(o)
            for o in self._store.values()
            if created_within(o, start_date, end_date)
        ]

    def save(self, order: Order) -> None:
        order.validate()
        self._store[order.id] = copy.deepcopy(order)
        self.writes += 1

    def update(
        self,
        order_id: str,
        mutate: Callable[[Order], None],
        user_id: str | None = None,
    ) -> Order | None:
        order = self.get_by_id(order_id, user_id=user_id)
        if order is None:
            return None
        mutate(order)
        self.save(order)
        return order

    def all(self) -> list[Order]:
        return list(self._store.values())


class FakeProductRepository(ProductRepository):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._store: dict[str, Product] = {}
        self._lock = threading.Lock()
        self.fail_on: set[str] = set()
        for p in products or []:
            self._store[p.id] = p

    def get_by_id(self, product_id: str) -> Product | None:
        return self._store.get(product_id)

    def get_by_sku(self, sku: str) -> Product | None:
        for p in self._store.values():
            if p.sku.upper() == sku.upper():
                return p
        return None

    def list_all(self) -> list[Product]:
        return list(self._store.values())

    def save(self, product: Product) -> None:
        self._store[product.id] = product

    def adjust_stock(
        self, product_id: str, quantity: int, direction: StockDirection
    ) -> Product | None:
        if product_id in self.fail_on:
            raise OSError(f"storage unavailable for product {product_id}")
        with self._lock:
            product = self._store.get(product_id)
            if product is None:
                return None
            product.adjust_stock(quantity, direction)
            return product


class FakeCartRepository(CartRepository):

    def __init__(self, carts: list[Cart] | None = None) -> None:
        self._store: dict[str, Cart] = {}
        for cart in carts or []:
            self._store[cart.user_id] = cart

    def get_by_user_id(self, user_id: str) -> Cart | None:
        return self._store.get(user_id)

    def save(self, cart: Cart) -> None:
        self._store[cart.user_id] = cart


class RecordingLogger:
    """Stand-in for a structlog logger that remembers every event."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str, dict]] = []

    def bind(self, **_context) -> RecordingLogger:
        return self

    def debug(self, event: str, **kw) -> None:
        self.events.append(("debug", event, kw))

    def info(self, event: str, **kw) -> None:
        self.events.append(("info", event, kw))

    def warning(self, event: str, **kw) -> None:
        self.events.append(("warning", event, kw))

    def error(self, event: str, **kw) -> None:
        self.events.append(("error", event, kw))

    def names(self) -> list[str]:
        return [event for _, event, _ in self.events]
