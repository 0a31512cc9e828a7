"""Abstract repository for Order aggregate, plus its query objects."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from marketplace.domain.exceptions import ValidationError
from marketplace.domain.model.order import Order, OrderStatus, PaymentStatus

DEFAULT_PAGE_SIZE = 20

# Scalar order fields a listing may be sorted by.
SORT_KEYS: dict[str, Callable[[Order], object]] = {
    "created_at": lambda o: o.created_at,
    "updated_at": lambda o: o.updated_at,
    "order_number": lambda o: o.order_number or "",
    "user_id": lambda o: o.user_id,
    "order_status": lambda o: o.order_status.value,
    "payment_status": lambda o: o.payment_status.value,
    "payment_method": lambda o: o.payment_method,
    "subtotal": lambda o: o.subtotal.amount,
    "tax": lambda o: o.tax.amount,
    "shipping": lambda o: o.shipping.amount,
    "total_amount": lambda o: o.total_amount.amount,
}


@dataclass(frozen=True)
class OrderQuery:
    """Filter, sort and page parameters for listing orders."""

    user_id: str | None = None
    order_status: OrderStatus | None = None
    payment_status: PaymentStatus | None = None
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    sort_by: str = "created_at"
    sort_order: str = "desc"
    start_date: datetime | None = None
    end_date: datetime | None = None

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValidationError("Page must be at least 1")
        if self.limit < 1:
            raise ValidationError("Limit must be at least 1")
        if self.sort_by not in SORT_KEYS:
            raise ValidationError(f"Cannot sort orders by '{self.sort_by}'")
        if self.sort_order not in ("asc", "desc"):
            raise ValidationError("Sort order must be 'asc' or 'desc'")
        object.__setattr__(self, "start_date", as_utc(self.start_date))
        object.__setattr__(self, "end_date", as_utc(self.end_date))

    def matches(self, order: Order) -> bool:
        if self.user_id is not None and order.user_id != self.user_id:
            return False
        if self.order_status is not None and order.order_status is not self.order_status:
            return False
        if self.payment_status is not None and order.payment_status is not self.payment_status:
            return False
        return created_within(order, self.start_date, self.end_date)


@dataclass(frozen=True)
class OrderPage:
    orders: list[Order] = field(default_factory=list)
    total: int = 0
    page: int = 1
    total_pages: int = 0


def as_utc(value: datetime | None) -> datetime | None:
    """Read a naive datetime as UTC; aware ones are converted to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def created_within(
    order: Order,
    start_date: datetime | None,
    end_date: datetime | None,
) -> bool:
    """Inclusive ``created_at`` window check; open ends are unbounded."""
    start_date, end_date = as_utc(start_date), as_utc(end_date)
    if start_date is not None and order.created_at < start_date:
        return False
    if end_date is not None and order.created_at > end_date:
        return False
    return True


def paginate(orders: Iterable[Order], query: OrderQuery) -> OrderPage:
    """Filter, sort and slice *orders* according to *query*.

    Shared by every repository implementation so listings behave the
    same regardless of the storage backend.
    """
    matching = [o for o in orders if query.matches(o)]
    matching.sort(key=SORT_KEYS[query.sort_by], reverse=query.sort_order == "desc")

    total = len(matching)
    start = (query.page - 1) * query.limit
    return OrderPage(
        orders=matching[start:start + query.limit],
        total=total,
        page=query.page,
        total_pages=math.ceil(total / query.limit),
    )


class OrderRepository(ABC):

    @abstractmethod
    def add(self, order: Order) -> Order:
        """Store a new order, assigning its ID and unique order number."""

    @abstractmethod
    def get_by_id(self, order_id: str, user_id: str | None = None) -> Order | None:
        """Return an order by its ID (optionally scoped to its owner), or None."""

    @abstractmethod
    def get_by_order_number(
        self, order_number: str, user_id: str | None = None
    ) -> Order | None:
        """Return an order by its order number (optionally scoped), or None."""

    @abstractmethod
    def find(self, query: OrderQuery) -> OrderPage:
        """Return one page of orders matching *query*. Never mutates."""

    @abstractmethod
    def list_created_between(
        self,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[Order]:
        """Return every order created inside the inclusive window."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Validate and persist an existing order."""

    @abstractmethod
    def update(
        self,
        order_id: str,
        mutate: Callable[[Order], None],
        user_id: str | None = None,
    ) -> Order | None:
        """Atomically load, mutate, validate and persist one order.

        Returns the post-update order, or None when no order matches.
        Exceptions raised by *mutate* abort the write.
        """
