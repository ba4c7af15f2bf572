"""Cart aggregate: one per user, holding at most one line per product.

Stock is consulted here only to validate requested quantities; the cart never
reserves or decrements inventory.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from storefront.cart.events import CartCleared, CartItemAdded, CartItemQuantityUpdated, CartItemRemoved
from storefront.domain import storefront
from storefront.exceptions import InsufficientStock, NotFound

MAX_QUANTITY = 99


@storefront.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1, max_value=MAX_QUANTITY)
    added_at = DateTime()


@storefront.aggregate
class Cart:
    user_id = Identifier(required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_line_per_product(self):
        product_ids = [str(item.product_id) for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["A product may appear only once in a cart"]})

    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(user_id=user_id, created_at=now, updated_at=now)

    def item_for_product(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def _owned_item(self, item_id):
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise NotFound("Cart item not found", {"item_id": str(item_id)})
        return item

    @staticmethod
    def _check_stock(product, quantity):
        if quantity > product.stock:
            raise InsufficientStock(
                product_id=str(product.id),
                product_name=product.name,
                available=product.stock,
                requested=quantity,
            )

    def add_item(self, product, quantity):
        """Add ``quantity`` of ``product``; an existing line grows to the sum."""
        existing = self.item_for_product(product.id)
        new_quantity = quantity + (existing.quantity if existing else 0)
        self._check_stock(product, new_quantity)

        now = datetime.now(UTC)
        if existing:
            existing.quantity = new_quantity
            item = existing
        else:
            item = CartItem(product_id=product.id, quantity=quantity, added_at=now)
            self.add_items(item)
        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                item_id=str(item.id),
                product_id=str(product.id),
                quantity=quantity,
            )
        )
        return item

    def update_item(self, item_id, quantity, product):
        """Set a line's quantity; zero removes the line."""
        item = self._owned_item(item_id)
        if quantity == 0:
            self.remove_item(item_id)
            return None

        self._check_stock(product, quantity)
        previous_quantity = item.quantity
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item.id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )
        return item

    def remove_item(self, item_id):
        item = self._owned_item(item_id)
        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                item_id=str(item_id),
                product_id=str(item.product_id),
            )
        )

    def clear(self):
        removed = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                items_removed=removed,
            )
        )
        return removed


@storefront.repository(part_of=Cart)
class CartRepository:
    def for_user(self, user_id):
        carts = self._dao.query.filter(user_id=user_id).all().items
        return carts[0] if carts else None
