"""Shared BDD fixtures and step definitions for the cart."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers

from storefront.cart.items import AddToCart


@pytest.fixture()
def products():
    """Products created by the scenario, keyed by name."""
    return {}


@pytest.fixture()
def outcome():
    """Container for the error raised by the last When step."""
    return {"exc": None}


@given("a signed-in shopper", target_fixture="shopper")
def signed_in_shopper(customer):
    return customer


@given(parsers.cfparse('a product "{name}" priced {price:f} with {stock:d} in stock'))
def product_in_catalogue(create_product, products, name, price, stock):
    products[name] = create_product(name=name, price=price, stock=stock)


@given(parsers.cfparse('the shopper has {quantity:d} "{name}" in the cart'))
def product_in_cart(shopper, products, quantity, name):
    current_domain.process(
        AddToCart(user_id=str(shopper.id), product_id=str(products[name].id), quantity=quantity),
        asynchronous=False,
    )
