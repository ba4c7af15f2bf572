"""Order aggregate: the immutable record of a placement plus its fulfilment status.

Addresses and line prices are snapshots taken at placement time; later edits
to products or to a user's details never reach an existing order.

Status transitions are permissive unless enforcement is requested:

    pending → processing → shipped → delivered
    pending | processing → cancelled

Payment status only moves out of ``pending`` (to ``paid`` or ``failed``).
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from storefront.domain import storefront
from storefront.order.events import OrderPlaced, OrderUpdated


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class PaymentMethod(Enum):
    CARD = "card"
    PAYPAL = "paypal"
    CASH_ON_DELIVERY = "cash_on_delivery"


_STATUS_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

_PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.PAID: set(),
    PaymentStatus.FAILED: set(),
}


def _enum_value(enum_cls, value, field_name):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError({field_name: [f"Must be one of: {allowed}"]}) from None


@storefront.value_object(part_of="Order")
class AddressSnapshot:
    first_name = String(required=True, max_length=100)
    last_name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    phone = String(required=True, max_length=30)
    address = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    zip_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"


@storefront.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)

    @property
    def line_total(self):
        return round(self.unit_price * self.quantity, 2)


@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=40, unique=True)
    user_id = Identifier(required=True)
    customer_name = String(max_length=255)
    customer_email = String(max_length=254)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_method = String(required=True, choices=PaymentMethod)
    subtotal = Float(required=True, min_value=0.0)
    tax_amount = Float(default=0.0, min_value=0.0)
    shipping_amount = Float(default=0.0, min_value=0.0)
    total = Float(required=True, min_value=0.0)
    notes = Text()
    tracking_number = String(max_length=255)
    shipping_address = ValueObject(AddressSnapshot, required=True)
    billing_address = ValueObject(AddressSnapshot, required=True)
    items = HasMany(OrderItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def order_must_have_items(self):
        if not self.items:
            raise ValidationError({"items": ["An order must contain at least one item"]})

    @classmethod
    def place(
        cls,
        order_number,
        user_id,
        lines,
        shipping_address,
        billing_address,
        payment_method,
        subtotal,
        tax_amount,
        shipping_amount,
        total,
        notes=None,
        customer_name=None,
        customer_email=None,
    ):
        """Build a pending order.

        ``lines`` is a list of dicts with product_id, product_name, quantity
        and unit_price.
        """
        now = datetime.now(UTC)
        order = cls(
            order_number=order_number,
            user_id=user_id,
            customer_name=customer_name or shipping_address.full_name,
            customer_email=customer_email or shipping_address.email,
            payment_method=payment_method,
            subtotal=subtotal,
            tax_amount=tax_amount,
            shipping_amount=shipping_amount,
            total=total,
            notes=notes,
            shipping_address=shipping_address,
            billing_address=billing_address,
            items=[OrderItem(**line) for line in lines],
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                user_id=str(user_id),
                items=json.dumps([{**line, "product_id": str(line["product_id"])} for line in lines]),
                item_count=sum(line["quantity"] for line in lines),
                total=total,
                payment_method=payment_method,
                placed_at=now,
            )
        )
        return order

    def update(self, status=None, payment_status=None, tracking_number=None, updated_by=None, enforce_transitions=False):
        """Apply a partial status update; ``None`` leaves a field unchanged."""
        if status is None and payment_status is None and tracking_number is None:
            raise ValidationError({"order": ["At least one of status, payment_status or tracking_number is required"]})

        previous_status = self.status
        previous_payment_status = self.payment_status

        if status is not None:
            new_status = _enum_value(OrderStatus, status, "status")
            if enforce_transitions and new_status.value != self.status:
                if new_status not in _STATUS_TRANSITIONS[OrderStatus(self.status)]:
                    raise ValidationError(
                        {"status": [f"Cannot change status from {self.status} to {new_status.value}"]}
                    )
            self.status = new_status.value

        if payment_status is not None:
            new_payment = _enum_value(PaymentStatus, payment_status, "payment_status")
            if enforce_transitions and new_payment.value != self.payment_status:
                if new_payment not in _PAYMENT_TRANSITIONS[PaymentStatus(self.payment_status)]:
                    raise ValidationError(
                        {
                            "payment_status": [
                                f"Cannot change payment status from {self.payment_status} to {new_payment.value}"
                            ]
                        }
                    )
            self.payment_status = new_payment.value

        if tracking_number is not None:
            self.tracking_number = tracking_number

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            OrderUpdated(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous_status,
                status=self.status,
                previous_payment_status=previous_payment_status,
                payment_status=self.payment_status,
                tracking_number=self.tracking_number,
                updated_by=updated_by,
                updated_at=now,
            )
        )

    @property
    def item_count(self):
        return sum(item.quantity for item in self.items)


@storefront.repository(part_of=Order)
class OrderRepository:
    def number_exists(self, order_number):
        return bool(self._dao.query.filter(order_number=order_number).all().items)
