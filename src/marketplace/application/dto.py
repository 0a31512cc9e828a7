"""Data Transfer Objects — plain containers that cross layer boundaries."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from marketplace.domain.model.value_objects import Address


@dataclass(frozen=True)
class CreateOrderData:
    """Input: checkout details supplied alongside the user's cart."""

    payment_method: str
    shipping_address: Address
    billing_address: Address
    notes: str | None = None


@dataclass(frozen=True)
class OrderStats:
    """Output: aggregate figures over a window of orders."""

    total_orders: int
    total_revenue: Decimal
    average_order_value: Decimal
    orders_by_status: dict[str, int] = field(default_factory=dict)
    payments_by_status: dict[str, int] = field(default_factory=dict)
