"""Tests for the OrderStats query."""

from datetime import datetime
from decimal import Decimal

from marketplace.application.order_stats import OrderStatsHandler
from marketplace.domain.model.order import OrderStatus, PaymentStatus
from tests.factories import make_order, utc
from tests.fakes import FakeOrderRepository


class TestOrderStats:

    def test_no_orders(self):
        stats = OrderStatsHandler(FakeOrderRepository()).handle()

        assert stats.total_orders == 0
        assert stats.total_revenue == Decimal("0")
        assert stats.average_order_value == Decimal("0.00")
        assert stats.orders_by_status == {}
        assert stats.payments_by_status == {}

    def test_revenue_counts_paid_orders_only(self):
        repo = FakeOrderRepository()
        # 25 x 2 = 50.00 subtotal -> 54.00 total
        repo.add(make_order(payment_status=PaymentStatus.PAID))
        repo.add(make_order(payment_status=PaymentStatus.PAID))
        repo.add(make_order())

        stats = OrderStatsHandler(repo).handle()

        assert stats.total_orders == 3
        assert stats.total_revenue == Decimal("108.00")
        assert stats.average_order_value == Decimal("36.00")
        assert stats.payments_by_status == {"paid": 2, "pending": 1}

    def test_status_breakdown(self):
        repo = FakeOrderRepository()
        repo.add(make_order())
        repo.add(make_order(order_status=OrderStatus.SHIPPED))
        repo.add(make_order(order_status=OrderStatus.SHIPPED))

        stats = OrderStatsHandler(repo).handle()

        assert stats.orders_by_status == {"pending": 1, "shipped": 2}

    def test_date_window(self):
        repo = FakeOrderRepository()
        for day in (1, 10, 20):
            repo.add(
                make_order(created_at=utc(2024, 3, day), payment_status=PaymentStatus.PAID)
            )

        stats = OrderStatsHandler(repo).handle(utc(2024, 3, 10), utc(2024, 3, 31))

        assert stats.total_orders == 2
        assert stats.total_revenue == Decimal("108.00")

    def test_naive_window_is_read_as_utc(self):
        repo = FakeOrderRepository()
        repo.add(make_order(created_at=utc(2024, 3, 10, 12)))
        repo.add(make_order(created_at=utc(2024, 4, 1)))

        stats = OrderStatsHandler(repo).handle(datetime(2024, 3, 1), datetime(2024, 3, 31))

        assert stats.total_orders == 1
