"""Cart item management: commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import MAX_QUANTITY, Cart
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.exceptions import NotFound
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1, max_value=MAX_QUANTITY)


@storefront.command(part_of="Cart")
class UpdateCartItem:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=0, max_value=MAX_QUANTITY)


@storefront.command(part_of="Cart")
class RemoveCartItem:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)


@storefront.command(part_of="Cart")
class ClearCart:
    user_id = Identifier(required=True)


def _available_product(product_id):
    try:
        product = current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        product = None
    if product is None or not product.is_active:
        raise NotFound("Product not found", {"product_id": str(product_id)})
    return product


@storefront.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = _available_product(command.product_id)

        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id) or Cart.create(user_id=command.user_id)
        item = cart.add_item(product, command.quantity)
        repo.add(cart)
        logger.debug("cart_item_added", user_id=command.user_id, product_id=command.product_id, quantity=item.quantity)
        return str(item.id)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id)
        if cart is None:
            raise NotFound("Cart item not found", {"item_id": command.item_id})

        item = next((i for i in cart.items if str(i.id) == str(command.item_id)), None)
        product = None
        if item is not None and command.quantity > 0:
            product = _available_product(item.product_id)

        updated = cart.update_item(command.item_id, command.quantity, product)
        repo.add(cart)
        logger.debug("cart_item_updated", user_id=command.user_id, item_id=command.item_id, quantity=command.quantity)
        return str(updated.id) if updated else None

    @handle(RemoveCartItem)
    def remove_cart_item(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id)
        if cart is None:
            raise NotFound("Cart item not found", {"item_id": command.item_id})

        cart.remove_item(command.item_id)
        repo.add(cart)
        logger.debug("cart_item_removed", user_id=command.user_id, item_id=command.item_id)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_user(command.user_id)
        if cart is None or not cart.items:
            return 0

        removed = cart.clear()
        repo.add(cart)
        logger.debug("cart_cleared", user_id=command.user_id, items_removed=removed)
        return removed
