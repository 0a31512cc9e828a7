"""Tests for the ListOrders and ShowOrder queries."""

from datetime import datetime

import pytest

from marketplace.application.list_orders import ListOrdersHandler
from marketplace.application.show_order import ShowOrderHandler
from marketplace.domain.exceptions import ValidationError
from marketplace.domain.model.order import OrderStatus, PaymentStatus
from marketplace.domain.repository.order_repository import OrderQuery
from tests.factories import make_order, utc
from tests.fakes import FakeOrderRepository


def _repo_with(count: int, **overrides) -> FakeOrderRepository:
    repo = FakeOrderRepository()
    for day in range(1, count + 1):
        repo.add(make_order(created_at=utc(2024, 1, day, 12), **overrides))
    return repo


class TestListOrders:

    def test_pagination(self):
        handler = ListOrdersHandler(_repo_with(25))

        page = handler.handle(OrderQuery(page=2, limit=10))

        assert len(page.orders) == 10
        assert page.total == 25
        assert page.total_pages == 3
        assert page.page == 2

    def test_last_page_is_partial(self):
        page = ListOrdersHandler(_repo_with(25)).handle(OrderQuery(page=3, limit=10))
        assert len(page.orders) == 5

    def test_page_past_the_end_is_empty(self):
        page = ListOrdersHandler(_repo_with(3)).handle(OrderQuery(page=5, limit=10))
        assert page.orders == []
        assert page.total == 3

    def test_default_sort_is_newest_first(self):
        page = ListOrdersHandler(_repo_with(5)).handle(OrderQuery())
        assert [o.created_at.day for o in page.orders] == [5, 4, 3, 2, 1]

    def test_ascending_sort_by_total(self):
        repo = FakeOrderRepository()
        for price in ("30.00", "10.00", "20.00"):
            repo.add(make_order(price=price, quantity=1))

        page = ListOrdersHandler(repo).handle(
            OrderQuery(sort_by="total_amount", sort_order="asc")
        )

        assert [str(o.subtotal) for o in page.orders] == ["$10.00", "$20.00", "$30.00"]

    def test_filters(self):
        repo = _repo_with(3)
        repo.add(make_order(user_id="user-2", order_status=OrderStatus.PROCESSING))
        repo.add(make_order(user_id="user-2", payment_status=PaymentStatus.PAID))
        handler = ListOrdersHandler(repo)

        assert handler.handle(OrderQuery(user_id="user-2")).total == 2
        assert handler.handle(OrderQuery(order_status=OrderStatus.PROCESSING)).total == 1
        assert handler.handle(OrderQuery(payment_status=PaymentStatus.PAID)).total == 1

    def test_date_range_is_inclusive(self):
        handler = ListOrdersHandler(_repo_with(10))

        page = handler.handle(
            OrderQuery(start_date=utc(2024, 1, 3, 12), end_date=utc(2024, 1, 5, 12))
        )

        assert page.total == 3

    def test_naive_dates_are_read_as_utc(self):
        handler = ListOrdersHandler(_repo_with(10))

        query = OrderQuery(start_date=datetime(2024, 1, 3), end_date=datetime(2024, 1, 5, 23))
        page = handler.handle(query)

        assert query.start_date == utc(2024, 1, 3)
        assert page.total == 3

    def test_listing_does_not_write(self):
        repo = _repo_with(3)
        writes = repo.writes
        ListOrdersHandler(repo).handle(OrderQuery())
        assert repo.writes == writes

    @pytest.mark.parametrize(
        "params",
        [{"page": 0}, {"limit": 0}, {"sort_by": "colour"}, {"sort_order": "sideways"}],
    )
    def test_bad_query_rejected(self, params):
        with pytest.raises(ValidationError):
            OrderQuery(**params)


class TestShowOrder:

    def test_by_id_and_number(self):
        repo = FakeOrderRepository()
        order = repo.add(make_order())
        handler = ShowOrderHandler(repo)

        assert handler.handle(order.id).order_number == order.order_number
        assert handler.handle_number(order.order_number.lower()).id == order.id

    def test_owner_scope(self):
        repo = FakeOrderRepository()
        order = repo.add(make_order(user_id="user-1"))
        handler = ShowOrderHandler(repo)

        assert handler.handle(order.id, user_id="user-2") is None
        assert handler.handle_number(order.order_number, user_id="user-2") is None
        assert handler.handle(order.id, user_id="user-1") is not None

    def test_missing(self):
        handler = ShowOrderHandler(FakeOrderRepository())
        assert handler.handle("1") is None
        assert handler.handle_number("ORD-1-ABCDEF") is None
