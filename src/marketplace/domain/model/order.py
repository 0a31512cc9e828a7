"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items.
All business invariants are enforced here.
"""

from __future__ import annotations

import re
import secrets
import string
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from marketplace.domain.exceptions import (
    AlreadyCancelledError,
    InvalidTransitionError,
    ValidationError,
)
from marketplace.domain.model.value_objects import Address, Money, Quantity


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: str | OrderStatus) -> OrderStatus:
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(s.value for s in cls)
            raise ValidationError(
                f"Invalid order status '{value}' (expected one of: {allowed})"
            ) from None


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"

    @classmethod
    def parse(cls, value: str | PaymentStatus) -> PaymentStatus:
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(s.value for s in cls)
            raise ValidationError(
                f"Invalid payment status '{value}' (expected one of: {allowed})"
            ) from None


ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
TAX_RATE = Decimal("0.08")
FREE_SHIPPING_THRESHOLD = Money(Decimal("50.00"))
FLAT_SHIPPING_FEE = Money(Decimal("10.00"))
MAX_NOTES_LENGTH = 500

ORDER_NUMBER_PATTERN = re.compile(r"^ORD-\d+-[A-Z0-9]{6}$")
_BASE36 = string.digits + string.ascii_uppercase


def generate_order_number() -> str:
    """Return ``ORD-<epoch millis>-<6 random base36 chars>``."""
    timestamp = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(_BASE36) for _ in range(6))
    return f"ORD-{timestamp}-{suffix}"


@dataclass(frozen=True)
class OrderLineItem:
    """What the customer actually bought, frozen at order-creation time.

    Never re-derived from the live product: later price, name or SKU
    changes on the product leave existing orders untouched.
    """

    product_id: str
    name: str
    price: Money  # locked at order-creation time
    quantity: Quantity
    sku: str

    @property
    def line_total(self) -> Money:
        return self.price * self.quantity.value


@dataclass(frozen=True)
class OrderTotals:
    """Money breakdown of an order; ``total_amount`` is always derived."""

    subtotal: Money
    tax: Money
    shipping: Money

    @property
    def total_amount(self) -> Money:
        return self.subtotal + self.tax + self.shipping

    @staticmethod
    def for_subtotal(subtotal: Money) -> OrderTotals:
        """Apply the flat tax rate and the free-shipping threshold."""
        subtotal = subtotal.rounded()
        tax = (subtotal * TAX_RATE).rounded()
        if subtotal >= FREE_SHIPPING_THRESHOLD:
            shipping = Money.zero()
        else:
            shipping = FLAT_SHIPPING_FEE
        return OrderTotals(subtotal=subtotal, tax=tax, shipping=shipping)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    ``id`` and ``order_number`` stay ``None`` until the repository adds
    the order.
    """

    id: str | None
    order_number: str | None
    user_id: str
    products: tuple[OrderLineItem, ...]
    totals: OrderTotals
    payment_method: str
    shipping_address: Address
    billing_address: Address
    payment_status: PaymentStatus = PaymentStatus.PENDING
    order_status: OrderStatus = OrderStatus.PENDING
    payment_intent_id: str | None = None
    tracking_number: str | None = None
    notes: str | None = None
    stock_released: bool = False
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        user_id: str,
        products: list[OrderLineItem],
        totals: OrderTotals,
        payment_method: str,
        shipping_address: Address,
        billing_address: Address,
        notes: str | None = None,
    ) -> Order:
        """Create a new order, enforcing all invariants."""
        if not user_id:
            raise ValidationError("User ID is required")
        if not payment_method or not payment_method.strip():
            raise ValidationError("Payment method is required")

        order = Order(
            id=None,
            order_number=None,
            user_id=user_id,
            products=tuple(products),
            totals=totals,
            payment_method=payment_method.strip(),
            shipping_address=shipping_address,
            billing_address=billing_address,
            notes=notes,
        )
        order.validate()
        return order

    # --- Identity -------------------------------------------------------------

    def assign_identity(self, order_id: str, order_number: str) -> None:
        """Called once by the repository when the order is first stored."""
        if self.id is not None or self.order_number is not None:
            raise ValidationError("Order identity has already been assigned")
        if not ORDER_NUMBER_PATTERN.match(order_number):
            raise ValidationError(f"Malformed order number '{order_number}'")
        self.id = order_id
        self.order_number = order_number

    # --- State transitions ----------------------------------------------------

    def update_status(
        self,
        new_status: OrderStatus,
        tracking_number: str | None = None,
        enforce_transitions: bool = True,
    ) -> None:
        """Move to *new_status*, optionally recording a tracking number.

        With ``enforce_transitions`` the edge must be in
        ``ALLOWED_TRANSITIONS``; staying on the current status is always
        allowed so a tracking number can be attached later.
        """
        if (
            enforce_transitions
            and new_status is not self.order_status
            and new_status not in ALLOWED_TRANSITIONS[self.order_status]
        ):
            raise InvalidTransitionError(
                f"Cannot move order from {self.order_status.value} "
                f"to {new_status.value}"
            )
        self.order_status = new_status
        if tracking_number:
            self.tracking_number = tracking_number
        self._touch()

    def update_payment_status(
        self,
        new_status: PaymentStatus,
        payment_intent_id: str | None = None,
    ) -> PaymentStatus:
        """Record a payment outcome and return the previous status."""
        previous = self.payment_status
        self.payment_status = new_status
        if payment_intent_id:
            self.payment_intent_id = payment_intent_id
        self._touch()
        return previous

    def cancel(self) -> None:
        """Transition pending|processing -> cancelled.

        Stock restoration is coordinated by the application handler.
        """
        if self.order_status in (OrderStatus.SHIPPED, OrderStatus.DELIVERED):
            raise InvalidTransitionError("Cannot cancel shipped or delivered orders")
        if self.order_status is OrderStatus.CANCELLED:
            raise AlreadyCancelledError()
        self.order_status = OrderStatus.CANCELLED
        self._touch()

    def release_stock(self) -> bool:
        """Mark the reserved stock as given back.

        Returns False when it was already released, so callers restore
        stock at most once per order.
        """
        if self.stock_released:
            return False
        self.stock_released = True
        self._touch()
        return True

    # --- Invariants -----------------------------------------------------------

    def validate(self) -> None:
        """Re-check every invariant; repositories call this on each write."""
        if not self.products:
            raise ValidationError("Order must contain at least one item")
        for item in self.products:
            if not item.sku:
                raise ValidationError(f"SKU is required for '{item.name}'")
        if self.notes is not None and len(self.notes) > MAX_NOTES_LENGTH:
            raise ValidationError(
                f"Notes cannot exceed {MAX_NOTES_LENGTH} characters"
            )
        if self.order_number is not None and not ORDER_NUMBER_PATTERN.match(
            self.order_number
        ):
            raise ValidationError(f"Malformed order number '{self.order_number}'")

    # --- Computed properties --------------------------------------------------

    @property
    def subtotal(self) -> Money:
        return self.totals.subtotal

    @property
    def tax(self) -> Money:
        return self.totals.tax

    @property
    def shipping(self) -> Money:
        return self.totals.shipping

    @property
    def total_amount(self) -> Money:
        return self.totals.total_amount

    def is_owned_by(self, user_id: str | None) -> bool:
        """True when *user_id* is absent (privileged access) or matches."""
        return user_id is None or self.user_id == user_id

    # --- Internal helpers -----------------------------------------------------

    def _touch(self) -> None:
        self.updated_at = _utcnow()
