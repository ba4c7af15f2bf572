"""Wishlist: products a shopper saved for later."""

from datetime import datetime

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.exceptions import NotFound


@storefront.aggregate
class WishlistItem:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    added_at = DateTime(default=datetime.now)


@storefront.command(part_of="WishlistItem")
class AddToWishlist:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command(part_of="WishlistItem")
class RemoveFromWishlist:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


def _entries(user_id, product_id=None):
    query = current_domain.repository_for(WishlistItem)._dao.query.filter(user_id=user_id)
    if product_id is not None:
        query = query.filter(product_id=product_id)
    return query.order_by("-added_at").limit(None).all().items


@storefront.command_handler(part_of=WishlistItem)
class ManageWishlistHandler:
    @handle(AddToWishlist)
    def add_to_wishlist(self, command):
        from storefront.catalogue.product import Product

        try:
            current_domain.repository_for(Product).get(command.product_id)
        except ObjectNotFoundError:
            raise NotFound(f"Product {command.product_id} not found", {"product_id": command.product_id}) from None

        existing = _entries(command.user_id, command.product_id)
        if existing:
            return str(existing[0].id)

        entry = WishlistItem(user_id=command.user_id, product_id=command.product_id, added_at=datetime.now())
        current_domain.repository_for(WishlistItem).add(entry)
        return str(entry.id)

    @handle(RemoveFromWishlist)
    def remove_from_wishlist(self, command):
        existing = _entries(command.user_id, command.product_id)
        if not existing:
            raise NotFound("Product is not in your wishlist", {"product_id": command.product_id})

        repo = current_domain.repository_for(WishlistItem)
        for entry in existing:
            repo._dao.delete(entry)


def wishlist_for(user_id):
    """Saved products for ``user_id``, most recently added first; deleted products are skipped."""
    from storefront.catalogue.product import Product

    entries = _entries(user_id)
    if not entries:
        return []
    product_ids = [str(entry.product_id) for entry in entries]
    products = current_domain.repository_for(Product)._dao.query.filter(id__in=product_ids).limit(None).all().items
    by_id = {str(p.id): p for p in products}
    return [(entry, by_id[str(entry.product_id)]) for entry in entries if str(entry.product_id) in by_id]
