"""BDD tests for the low-stock report."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

from storefront.catalogue.management import UpdateProduct
from storefront.catalogue.product import Product
from storefront.projections.low_stock import low_stock_report

scenarios("features/low_stock.feature")


@pytest.fixture()
def products():
    return {}


def _entry(name):
    return next(entry for entry in low_stock_report() if entry.name == name)


@given(parsers.cfparse('a product "{name}" with {stock:d} in stock and a threshold of {threshold:d}'))
def product_with_threshold(create_product, products, name, stock, threshold):
    products[name] = create_product(name=name, stock=stock, low_stock=threshold)


@when(parsers.cfparse('{quantity:d} "{name}" are sold'))
def sold(products, quantity, name):
    repo = current_domain.repository_for(Product)
    product = repo.get(str(products[name].id))
    product.decrement_stock(quantity)
    repo.add(product)


@when(parsers.cfparse('"{name}" is restocked to {stock:d}'))
def restocked(products, name, stock):
    current_domain.process(UpdateProduct(product_id=str(products[name].id), stock=stock), asynchronous=False)


@then(parsers.cfparse('the low-stock report lists "{name}" with {stock:d} left'))
def reported(name, stock):
    assert _entry(name).stock == stock


@then(parsers.cfparse('"{name}" is no longer out of stock'))
def not_out_of_stock(name):
    assert _entry(name).is_out_of_stock is False


@then("the low-stock report is empty")
def report_empty():
    assert low_stock_report() == []
