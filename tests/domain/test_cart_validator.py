"""Tests for the CartValidator domain service."""

from marketplace.domain.model.cart import CartStatus
from marketplace.domain.model.value_objects import Money
from marketplace.domain.service.cart_validator import CartValidator
from tests.factories import make_cart, make_product
from tests.fakes import FakeCartRepository, FakeProductRepository


def _setup(products, carts):
    cart_repo = FakeCartRepository(carts)
    product_repo = FakeProductRepository(products)
    return CartValidator(cart_repo, product_repo), cart_repo, product_repo


class TestValidateCartItems:

    def test_valid_cart(self):
        p1 = make_product("P1", stock=10)
        validator, _, _ = _setup([p1], [make_cart(lines=[(p1, 2)])])

        result = validator.validate_cart_items("user-1")

        assert result.valid is True
        assert result.issues == []
        assert result.cart.total_price == Money.of("50.00")

    def test_no_cart_is_empty(self):
        validator, _, _ = _setup([], [])
        result = validator.validate_cart_items("user-1")
        assert result.is_empty
        assert result.valid is True

    def test_converted_cart_is_empty(self):
        p1 = make_product("P1")
        cart = make_cart(lines=[(p1, 1)])
        cart.mark_converted()
        validator, _, _ = _setup([p1], [cart])

        assert validator.validate_cart_items("user-1").is_empty

    def test_missing_product_dropped(self):
        p1 = make_product("P1")
        p2 = make_product("P2")
        validator, cart_repo, _ = _setup([p1], [make_cart(lines=[(p1, 1), (p2, 1)])])

        result = validator.validate_cart_items("user-1")

        assert result.valid is False
        assert result.issues == ['Product "Product P2" is no longer available']
        assert [i.product_id for i in cart_repo.get_by_user_id("user-1").items] == ["P1"]

    def test_inactive_product_dropped(self):
        p1 = make_product("P1", is_active=False)
        validator, _, _ = _setup([p1], [make_cart(lines=[(p1, 1)])])

        result = validator.validate_cart_items("user-1")

        assert result.issues == ['Product "Product P1" is currently unavailable']
        assert result.cart.is_empty

    def test_insufficient_stock_lowers_quantity(self):
        p1 = make_product("P1", stock=10)
        cart = make_cart(lines=[(p1, 5)])
        p1.stock = 3
        validator, _, _ = _setup([p1], [cart])

        result = validator.validate_cart_items("user-1")

        assert result.valid is False
        assert "Available: 3, in cart: 5" in result.issues[0]
        assert result.cart.items[0].quantity == 3

    def test_out_of_stock_line_removed(self):
        p1 = make_product("P1", stock=10)
        cart = make_cart(lines=[(p1, 5)])
        p1.stock = 0
        validator, _, _ = _setup([p1], [cart])

        result = validator.validate_cart_items("user-1")

        assert result.valid is False
        assert result.cart.is_empty

    def test_price_change_refreshed(self):
        p1 = make_product("P1", price="25.00")
        cart = make_cart(lines=[(p1, 1)])
        p1.price = Money.of("30.00")
        validator, _, _ = _setup([p1], [cart])

        result = validator.validate_cart_items("user-1")

        assert result.issues == ['Price changed for "Product P1". Old: $25.00, New: $30.00']
        assert result.cart.items[0].price == Money.of("30.00")


class TestConvertCartToOrder:

    def test_marks_converted(self):
        p1 = make_product("P1")
        validator, cart_repo, _ = _setup([p1], [make_cart(lines=[(p1, 1)])])

        cart = validator.convert_cart_to_order("user-1")

        assert cart.status is CartStatus.CONVERTED
        assert cart_repo.get_by_user_id("user-1").status is CartStatus.CONVERTED

    def test_no_cart(self):
        validator, _, _ = _setup([], [])
        assert validator.convert_cart_to_order("user-1") is None
