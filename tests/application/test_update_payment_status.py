"""Tests for the UpdatePaymentStatus use case."""

import pytest

from marketplace.application.cancel_order import CancelOrderHandler
from marketplace.application.update_order_status import UpdateOrderStatusHandler
from marketplace.application.update_payment_status import UpdatePaymentStatusHandler
from marketplace.domain.exceptions import ValidationError
from marketplace.domain.model.order import PaymentStatus
from tests.factories import Marketplace, make_cart, make_checkout, make_product


def _setup():
    p1 = make_product("P1", price="25.00", stock=10)
    market = Marketplace([p1], [make_cart(lines=[(p1, 2)])])
    order = market.create_handler().handle("user-1", make_checkout())
    handler = UpdatePaymentStatusHandler(market.orders, market.ledger, logger=market.logger)
    return market, order, handler


class TestUpdatePaymentStatus:

    def test_paid_records_intent(self):
        market, order, handler = _setup()

        updated = handler.handle(order.id, "paid", payment_intent_id="pi_42")

        assert updated.payment_status is PaymentStatus.PAID
        saved = market.orders.get_by_id(order.id)
        assert saved.payment_intent_id == "pi_42"
        assert market.stock("P1") == 8

    def test_failed_on_pending_order_restores_stock(self):
        market, order, handler = _setup()

        handler.handle(order.id, PaymentStatus.FAILED)

        assert market.stock("P1") == 10
        assert "stock_restored" in market.logger.names()

    def test_repeated_failure_restores_once(self):
        market, order, handler = _setup()

        handler.handle(order.id, "failed")
        handler.handle(order.id, "failed")

        assert market.stock("P1") == 10

    def test_failed_again_after_retry_restores_once(self):
        market, order, handler = _setup()

        handler.handle(order.id, "failed")
        handler.handle(order.id, "pending")
        handler.handle(order.id, "failed")

        assert market.stock("P1") == 10
        assert market.orders.get_by_id(order.id).stock_released is True

    def test_cancel_after_released_payment_keeps_stock(self):
        market, order, handler = _setup()
        handler.handle(order.id, "failed")
        handler.handle(order.id, "paid")

        CancelOrderHandler(market.orders, market.ledger).handle(order.id)

        assert market.stock("P1") == 10

    def test_failed_on_processing_order_keeps_stock(self):
        market, order, handler = _setup()
        UpdateOrderStatusHandler(market.orders).handle(order.id, "processing")

        handler.handle(order.id, "failed")

        assert market.stock("P1") == 8

    def test_refunded_keeps_stock(self):
        market, order, handler = _setup()
        handler.handle(order.id, "paid")

        handler.handle(order.id, "refunded")

        assert market.stock("P1") == 8

    def test_missing_order_returns_none(self):
        _, _, handler = _setup()
        assert handler.handle("999", "paid") is None

    def test_unknown_status_rejected(self):
        market, order, handler = _setup()
        with pytest.raises(ValidationError):
            handler.handle(order.id, "maybe")
        assert market.orders.get_by_id(order.id).payment_status is PaymentStatus.PENDING
