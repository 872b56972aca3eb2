"""Unit tests for the session cart."""
from datetime import datetime, timedelta
from decimal import Decimal

from quickbite.services.cart import session_cart
from quickbite.services.cart.session_cart import SessionCart, new_cart_id, prune_abandoned_carts
from quickbite.services.menu.base import MenuItem

BURGER = MenuItem(id=1, name="Classic Burger", price=Decimal("12.99"))
COLA = MenuItem(id=5, name="Coca-Cola", price=Decimal("3.50"))


class TestSessionCart:
    """Test cart line handling and totals."""

    def test_add_new_line(self):
        cart = SessionCart("cart-a")
        line = cart.add_to_cart(BURGER, 2)

        assert line.quantity == 2
        assert line.unit_price == Decimal("12.99")
        assert cart.item_count() == 2

    def test_same_item_merges(self):
        cart = SessionCart("cart-a")
        cart.add_to_cart(BURGER, 1)
        cart.add_to_cart(BURGER, 3)

        assert len(cart.items()) == 1
        assert cart.items()[0].quantity == 4

    def test_personalization_keeps_lines_apart(self):
        cart = SessionCart("cart-a")
        cart.add_to_cart(BURGER, 1)
        cart.add_to_cart(BURGER, 1, "no onions")

        assert [line.personalization for line in cart.items()] == ["", "no onions"]

    def test_quantity_below_one_counts_as_one(self):
        cart = SessionCart("cart-a")
        assert cart.add_to_cart(COLA, 0).quantity == 1

    def test_large_quantities_are_kept(self):
        cart = SessionCart("cart-a")
        assert cart.add_to_cart(BURGER, 150).quantity == 150

        cart.add_to_cart(COLA, 90)
        assert cart.add_to_cart(COLA, 20).quantity == 110
        assert cart.item_count() == 260

    def test_total(self):
        cart = SessionCart("cart-a")
        cart.add_to_cart(BURGER, 2)
        cart.add_to_cart(COLA, 1)

        assert cart.total() == Decimal("29.48")

    def test_update_and_remove(self):
        cart = SessionCart("cart-a")
        cart.add_to_cart(BURGER, 2)
        cart.add_to_cart(COLA, 1)

        assert cart.update_quantity(1, 5).quantity == 5
        assert cart.update_quantity(5, 0) is None
        assert [line.name for line in cart.items()] == ["Classic Burger"]

        assert cart.remove_from_cart(1) is True
        assert cart.remove_from_cart(1) is False
        assert cart.items() == []

    def test_carts_are_isolated(self):
        first = SessionCart("cart-a")
        second = SessionCart("cart-b")
        first.add_to_cart(BURGER, 1)

        assert second.items() == []
        assert SessionCart("cart-a").item_count() == 1

    def test_clear(self):
        cart = SessionCart("cart-a")
        cart.add_to_cart(BURGER, 1)
        cart.clear_cart()

        assert cart.items() == []
        assert cart.total() == Decimal("0.00")

    def test_new_cart_ids_are_unique(self):
        assert new_cart_id() != new_cart_id()


class TestPruneAbandonedCarts:
    """Test expiry of carts nobody has touched."""

    def test_stale_cart_is_dropped(self):
        SessionCart("cart-old").add_to_cart(BURGER, 1)
        SessionCart("cart-new").add_to_cart(COLA, 1)
        session_cart._carts["cart-old"]["touched_at"] = datetime.utcnow() - timedelta(days=30)

        assert prune_abandoned_carts() == 1
        assert "cart-old" not in session_cart._carts
        assert SessionCart("cart-new").item_count() == 1

    def test_opening_a_cart_prunes_others(self):
        SessionCart("cart-old").add_to_cart(BURGER, 2)
        session_cart._carts["cart-old"]["touched_at"] = datetime.utcnow() - timedelta(days=30)

        SessionCart("cart-b")

        assert "cart-old" not in session_cart._carts

    def test_recent_carts_survive(self):
        SessionCart("cart-a").add_to_cart(BURGER, 1)

        assert prune_abandoned_carts() == 0
        assert SessionCart("cart-a").item_count() == 1
