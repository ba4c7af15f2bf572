"""Tests for the client-side cart mirror."""

from datetime import UTC, datetime

import pytest

from storefront.cart.mirror import CartMirror
from storefront.cart.summary import CartLine, CartSummary
from storefront.exceptions import NotFound


def _server_line(item_id, product_id, quantity, price=10.0):
    return CartLine(
        item_id=item_id,
        product_id=product_id,
        name=f"Product {product_id}",
        slug=f"product-{product_id}",
        price=price,
        stock=50,
        quantity=quantity,
        image_url=None,
        category_name=None,
        category_slug=None,
        added_at=datetime.now(UTC),
    )


class TestOptimisticChanges:
    def test_add_uses_temporary_id(self):
        mirror = CartMirror()
        line = mirror.add("p1", "Mouse", 20.0, 2)

        assert line.is_pending
        assert mirror.subtotal == 40.0
        assert mirror.total_items == 2
        assert [change.action for change in mirror.pending] == ["add"]

    def test_add_same_product_grows_line(self):
        mirror = CartMirror()
        mirror.add("p1", "Mouse", 20.0, 2)
        mirror.add("p1", "Mouse", 20.0, 3)

        assert mirror.item_count == 1
        assert mirror.lines[0].quantity == 5

    def test_update_to_zero_removes(self):
        mirror = CartMirror()
        line = mirror.add("p1", "Mouse", 20.0, 2)

        assert mirror.update(line.item_id, 0) is None
        assert mirror.lines == []
        assert [change.action for change in mirror.pending] == ["add", "remove"]

    def test_update_unknown_line(self):
        with pytest.raises(NotFound):
            CartMirror().update("missing", 2)

    def test_clear(self):
        mirror = CartMirror()
        mirror.add("p1", "Mouse", 20.0, 2)
        mirror.clear()
        assert mirror.item_count == 0
        assert mirror.pending[-1].action == "clear"


class TestReconcile:
    def test_server_state_wins(self):
        mirror = CartMirror()
        mirror.add("p1", "Mouse", 20.0, 7)

        mirror.reconcile(CartSummary(lines=[_server_line("item-1", "p1", 3, price=19.0)]))

        assert [(line.item_id, line.quantity) for line in mirror.lines] == [("item-1", 3)]
        assert mirror.subtotal == 57.0
        assert mirror.pending == []
        assert not mirror.lines[0].is_pending

    def test_rollback_restores_last_confirmed_state(self):
        mirror = CartMirror()
        mirror.reconcile(CartSummary(lines=[_server_line("item-1", "p1", 1)]))

        mirror.update("item-1", 9)
        mirror.add("p2", "Keyboard", 45.0, 1)
        mirror.rollback()

        assert [(line.item_id, line.quantity) for line in mirror.lines] == [("item-1", 1)]
        assert mirror.pending == []

    def test_rollback_before_any_server_state_empties(self):
        mirror = CartMirror()
        mirror.add("p1", "Mouse", 20.0, 1)
        mirror.rollback()
        assert mirror.lines == []
