"""Cart read model: lines joined with catalogue data and totals computed at read time."""

from dataclasses import dataclass, field
from datetime import datetime

from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalogue.category import Category
from storefront.catalogue.product import Product


@dataclass(frozen=True)
class CartLine:
    item_id: str
    product_id: str
    name: str
    slug: str
    price: float
    stock: int
    quantity: int
    image_url: str | None
    category_name: str | None
    category_slug: str | None
    added_at: datetime | None

    @property
    def line_total(self) -> float:
        return round(self.price * self.quantity, 2)


@dataclass(frozen=True)
class CartSummary:
    lines: list[CartLine] = field(default_factory=list)

    @property
    def subtotal(self) -> float:
        return round(sum(line.price * line.quantity for line in self.lines), 2)

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def item_count(self) -> int:
        return len(self.lines)


def cart_summary(user_id) -> CartSummary:
    """Lines newest first; lines whose product has since been deleted are left out."""
    cart = current_domain.repository_for(Cart).for_user(user_id)
    if cart is None or not cart.items:
        return CartSummary()

    product_ids = [str(item.product_id) for item in cart.items]
    products = current_domain.repository_for(Product)._dao.query.filter(id__in=product_ids).limit(None).all().items
    products = {str(p.id): p for p in products}

    category_ids = [str(p.category_id) for p in products.values() if p.category_id]
    categories = {}
    if category_ids:
        found = current_domain.repository_for(Category)._dao.query.filter(id__in=category_ids).limit(None).all().items
        categories = {str(c.id): c for c in found}

    lines = []
    for item in cart.items:
        product = products.get(str(item.product_id))
        if product is None:
            continue
        category = categories.get(str(product.category_id)) if product.category_id else None
        image = product.primary_image
        lines.append(
            CartLine(
                item_id=str(item.id),
                product_id=str(product.id),
                name=product.name,
                slug=product.slug,
                price=product.price,
                stock=product.stock,
                quantity=item.quantity,
                image_url=image.url if image else None,
                category_name=category.name if category else None,
                category_slug=category.slug if category else None,
                added_at=item.added_at,
            )
        )

    lines.sort(key=lambda line: (line.added_at is not None, line.added_at), reverse=True)
    return CartSummary(lines=lines)
