"""Order placement: convert a cart snapshot into an order in one unit of work.

The handler reads and validates everything it needs before the first write,
then decrements stock, records the order and empties the cart. The command
handler's unit of work commits those writes together or not at all.
Placements are serialised within the process so a stock check and the
matching decrement are never interleaved with another placement.
"""

import json
import re
import threading

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.exceptions import Conflict, InsufficientStock, NotFound
from storefront.identity.registration import find_user
from storefront.order import numbering
from storefront.order.order import AddressSnapshot, Order, PaymentMethod
from storefront.order.pricing import quote
from storefront.settings import get_settings
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ADDRESS_FIELDS = ("first_name", "last_name", "email", "phone", "address", "city", "state", "zip_code", "country")
MIN_LENGTHS = {"phone": 10, "zip_code": 5}
MAX_NOTES_LENGTH = 1000
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

_placement_lock = threading.Lock()


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: [{"product_id": ..., "quantity": ..., "price": ...}]
    shipping_address = Text(required=True)  # JSON: address dict
    billing_address = Text()  # JSON: address dict; shipping address when omitted
    payment_method = String(required=True, max_length=30)
    subtotal = Float(required=True)
    tax_amount = Float(default=0.0)
    shipping_amount = Float(default=0.0)
    total = Float(required=True)
    notes = Text()


def _address_errors(data, prefix):
    if not isinstance(data, dict):
        return {prefix: ["Address is required"]}

    errors = {}
    for field in ADDRESS_FIELDS:
        value = str(data.get(field) or "").strip()
        key = f"{prefix}.{field}"
        if not value:
            errors[key] = ["This field is required"]
        elif len(value) < MIN_LENGTHS.get(field, 1):
            errors[key] = [f"Must be at least {MIN_LENGTHS[field]} characters"]
        elif field == "email" and not _EMAIL_PATTERN.match(value):
            errors[key] = ["Must be a valid email address"]
    return errors


def _item_errors(items):
    if not isinstance(items, list) or not items:
        return {"items": ["At least one item is required"]}

    errors = {}
    for index, item in enumerate(items):
        if not isinstance(item, dict) or not item.get("product_id"):
            errors[f"items.{index}.product_id"] = ["This field is required"]
            continue
        quantity = item.get("quantity")
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            errors[f"items.{index}.quantity"] = ["Must be a whole number of at least 1"]
        price = item.get("price")
        if not isinstance(price, int | float) or price <= 0:
            errors[f"items.{index}.price"] = ["Must be greater than 0"]
    return errors


def validate_placement(command):
    """Return the decoded request or raise ``ValidationError`` listing every problem."""
    try:
        items = json.loads(command.items)
        shipping = json.loads(command.shipping_address)
        billing = json.loads(command.billing_address) if command.billing_address else shipping
    except (json.JSONDecodeError, TypeError):
        raise ValidationError({"request": ["Items and addresses must be valid JSON"]}) from None

    errors = {}
    errors.update(_item_errors(items))
    errors.update(_address_errors(shipping, "shipping_address"))
    errors.update(_address_errors(billing, "billing_address"))

    if command.payment_method not in {method.value for method in PaymentMethod}:
        errors["payment_method"] = [f"Must be one of: {', '.join(m.value for m in PaymentMethod)}"]
    if command.subtotal is None or command.subtotal <= 0:
        errors["subtotal"] = ["Must be greater than 0"]
    if (command.tax_amount or 0) < 0:
        errors["tax_amount"] = ["Must not be negative"]
    if (command.shipping_amount or 0) < 0:
        errors["shipping_amount"] = ["Must not be negative"]
    if command.total is None or command.total <= 0:
        errors["total"] = ["Must be greater than 0"]
    if command.notes and len(command.notes) > MAX_NOTES_LENGTH:
        errors["notes"] = [f"Must be at most {MAX_NOTES_LENGTH} characters"]

    if errors:
        raise ValidationError(errors)
    return items, shipping, billing


def merge_lines(items):
    """Total requested quantity per product, in first-seen order."""
    merged = {}
    for item in items:
        product_id = str(item["product_id"])
        merged[product_id] = merged.get(product_id, 0) + item["quantity"]
    return merged


def _snapshot(data):
    return AddressSnapshot(**{field: str(data[field]).strip() for field in ADDRESS_FIELDS})


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        settings = get_settings()
        items, shipping, billing = validate_placement(command)
        requested = merge_lines(items)

        product_repo = current_domain.repository_for(Product)
        products = {}
        for product_id, quantity in requested.items():
            try:
                product = product_repo.get(product_id)
            except ObjectNotFoundError:
                raise NotFound(f"Product {product_id} not found", {"product_id": product_id}) from None
            if quantity > product.stock:
                logger.info(
                    "order_rejected_insufficient_stock",
                    user_id=command.user_id,
                    product_id=product_id,
                    available=product.stock,
                    requested=quantity,
                )
                raise InsufficientStock(
                    product_id=product_id,
                    product_name=product.name,
                    available=product.stock,
                    requested=quantity,
                )
            products[product_id] = product

        order_repo = current_domain.repository_for(Order)
        order_number = numbering.order_numbers.next()
        if order_repo.number_exists(order_number):
            logger.warning("order_number_conflict", order_number=order_number)
            raise Conflict(
                f"Order number {order_number} is already in use, please retry",
                {"order_number": order_number},
            )

        lines = []
        for item in items:
            product = products[str(item["product_id"])]
            if item["price"] != product.price:
                logger.warning(
                    "client_price_drift",
                    product_id=str(product.id),
                    client_price=item["price"],
                    catalogue_price=product.price,
                    trusted=settings.trust_client_prices,
                )
            lines.append(
                {
                    "product_id": str(product.id),
                    "product_name": product.name,
                    "quantity": item["quantity"],
                    "unit_price": item["price"] if settings.trust_client_prices else product.price,
                }
            )

        if settings.trust_client_prices:
            totals = {
                "subtotal": command.subtotal,
                "tax_amount": command.tax_amount or 0.0,
                "shipping_amount": command.shipping_amount or 0.0,
                "total": command.total,
            }
        else:
            totals = quote(sum(line["unit_price"] * line["quantity"] for line in lines), settings).to_dict()

        for product_id, quantity in requested.items():
            product = products[product_id]
            product.decrement_stock(quantity)
            product_repo.add(product)

        user = find_user(user_id=command.user_id)
        order = Order.place(
            order_number=order_number,
            user_id=command.user_id,
            lines=lines,
            shipping_address=_snapshot(shipping),
            billing_address=_snapshot(billing),
            payment_method=command.payment_method,
            notes=command.notes,
            customer_name=user.display_name if user else None,
            customer_email=user.email if user else None,
            **totals,
        )
        order_repo.add(order)

        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.for_user(command.user_id)
        if cart is not None and cart.items:
            cart.clear()
            cart_repo.add(cart)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            order_number=order_number,
            user_id=command.user_id,
            total=order.total,
            items=order.item_count,
        )
        return str(order.id)


def place_order(command: PlaceOrder) -> Order:
    """Run a placement and return the stored order.

    Only one placement runs at a time in this process.
    """
    with _placement_lock:
        order_id = current_domain.process(command, asynchronous=False)
    return current_domain.repository_for(Order).get(order_id)
