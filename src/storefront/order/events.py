"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A cart was converted into an order and stock was taken."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: [{product_id, product_name, quantity, unit_price}]
    item_count = Integer(required=True)
    total = Float(required=True)
    payment_method = String(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderUpdated:
    """Status, payment status or tracking number changed."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String()
    status = String()
    previous_payment_status = String()
    payment_status = String()
    tracking_number = String()
    updated_by = Identifier()
    updated_at = DateTime(required=True)
