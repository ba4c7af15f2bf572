"""BDD tests for atomic order placement."""

from protean import current_domain
from pytest_bdd import parsers, scenarios, then, when

from storefront.cart.summary import cart_summary
from storefront.catalogue.product import Product
from storefront.exceptions import InsufficientStock
from storefront.order.order import Order
from storefront.order.placement import place_order

scenarios("features/order_placement.feature")


def _place(shopper, products, placement, outcome, *lines):
    command = placement(shopper, *((products[name], quantity) for quantity, name in lines))
    try:
        outcome["order"] = place_order(command)
        outcome["exc"] = None
    except InsufficientStock as exc:
        outcome["exc"] = exc


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.re(r'the shopper orders (?P<quantity>\d+) "(?P<name>[^"]+)"'), converters={"quantity": int})
def order_one(shopper, products, placement, outcome, quantity, name):
    _place(shopper, products, placement, outcome, (quantity, name))


@when(parsers.cfparse('the shopper orders {first_qty:d} "{first}" and {second_qty:d} "{second}"'))
def order_two(shopper, products, placement, outcome, first_qty, first, second_qty, second):
    _place(shopper, products, placement, outcome, (first_qty, first), (second_qty, second))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the order is pending with payment pending")
def order_pending(outcome):
    assert outcome["exc"] is None
    assert outcome["order"].status == "pending"
    assert outcome["order"].payment_status == "pending"


@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def product_stock(products, name, stock):
    assert current_domain.repository_for(Product).get(str(products[name].id)).stock == stock


@then("the shopper's cart is empty")
def cart_empty(shopper):
    assert cart_summary(str(shopper.id)).item_count == 0


@then(parsers.cfparse("the shopper's cart still has {count:d} lines"))
def cart_unchanged(shopper, count):
    assert cart_summary(str(shopper.id)).item_count == count


@then(parsers.cfparse('the order is refused because "{name}" has only {available:d} available'))
def refused(outcome, name, available):
    exc = outcome["exc"]
    assert isinstance(exc, InsufficientStock)
    assert exc.product_name == name
    assert exc.available == available


@then("no order was recorded")
def no_order():
    assert current_domain.repository_for(Order)._dao.query.all().total == 0
