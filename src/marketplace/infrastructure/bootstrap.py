"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from marketplace.domain.service.cart_validator import CartValidator
from marketplace.domain.service.stock_ledger import StockLedger
from marketplace.infrastructure.config import Settings
from marketplace.infrastructure.logging import get_logger
from marketplace.infrastructure.persistence.json_cart_repository import (
    JsonCartRepository,
)
from marketplace.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from marketplace.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)


def product_repository(settings: Settings) -> JsonProductRepository:
    return JsonProductRepository(settings.data_dir / "products.json")


def order_repository(settings: Settings) -> JsonOrderRepository:
    return JsonOrderRepository(settings.data_dir / "orders.json")


def cart_repository(settings: Settings) -> JsonCartRepository:
    return JsonCartRepository(settings.data_dir / "carts.json")


def stock_ledger(settings: Settings) -> StockLedger:
    return StockLedger(
        product_repository(settings),
        logger=get_logger("marketplace.stock_ledger"),
    )


def cart_validator(settings: Settings) -> CartValidator:
    return CartValidator(
        cart_repository(settings),
        product_repository(settings),
        logger=get_logger("marketplace.cart_validator"),
    )
