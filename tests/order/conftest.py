import json

import pytest
from protean import current_domain

from storefront.cart.items import AddToCart
from storefront.order.placement import PlaceOrder


@pytest.fixture()
def fill_cart():
    """Put ``quantity`` of each product in the user's cart."""

    def _fill(user, *entries):
        for product, quantity in entries:
            current_domain.process(
                AddToCart(user_id=str(user.id), product_id=str(product.id), quantity=quantity),
                asynchronous=False,
            )

    return _fill


@pytest.fixture()
def placement(address):
    """Build a PlaceOrder command for ``(product, quantity)`` lines at catalogue prices."""

    def _build(user, *entries, **overrides):
        items = [
            {"product_id": str(product.id), "quantity": quantity, "price": product.price} for product, quantity in entries
        ]
        subtotal = round(sum(item["price"] * item["quantity"] for item in items), 2)
        values = {
            "user_id": str(user.id),
            "items": json.dumps(items),
            "shipping_address": json.dumps(address),
            "payment_method": "card",
            "subtotal": subtotal,
            "tax_amount": 0.0,
            "shipping_amount": 0.0,
            "total": subtotal,
        }
        values.update(overrides)
        return PlaceOrder(**values)

    return _build
