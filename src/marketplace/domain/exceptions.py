"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Lookups that simply miss return ``None`` instead of raising.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class CartEmptyError(DomainException):
    """Checkout was attempted without a cart or with an empty cart."""

    def __init__(self, message: str = "Cart is empty or invalid") -> None:
        super().__init__(message)


class CartInvalidError(DomainException):
    """The cart failed validation; ``issues`` says what must change."""

    def __init__(self, issues: list[str]) -> None:
        self.issues = list(issues)
        super().__init__(f"Cart validation failed: {', '.join(self.issues)}")


class InvalidTransitionError(DomainException):
    """An order status change is not allowed from the current status."""


class AlreadyCancelledError(InvalidTransitionError):
    """The order is already cancelled."""

    def __init__(self, message: str = "Order is already cancelled") -> None:
        super().__init__(message)


class InsufficientStockError(DomainException):
    """A stock decrement would take a product below zero."""

    def __init__(self, product_id: str, requested: int, available: int) -> None:
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for product '{product_id}' "
            f"(need {requested}, have {available} available)"
        )
