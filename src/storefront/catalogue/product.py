"""Product aggregate root with Image and Variant entities."""

import json
from datetime import datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
)

from storefront.catalogue.slugs import validate_slug
from storefront.domain import storefront
from storefront.exceptions import InsufficientStock

DEFAULT_LOW_STOCK = 10

EDITABLE_FIELDS = (
    "name",
    "slug",
    "description",
    "price",
    "compare_price",
    "sku",
    "low_stock",
    "is_active",
    "is_featured",
    "category_id",
)


@storefront.entity(part_of="Product")
class ProductImage:
    url: String(required=True, max_length=500)
    alt_text: String(max_length=255)
    display_order: Integer(default=0)


@storefront.entity(part_of="Product")
class ProductVariant:
    """A purchasable option such as ``Color: Black``."""

    name: String(required=True, max_length=100)
    value: String(required=True, max_length=100)
    price: Float(min_value=0.0)
    stock: Integer(default=0, min_value=0)
    sku: String(max_length=50)


@storefront.aggregate
class Product:
    """Product aggregate root.

    ``stock`` is the only inventory figure the storefront keeps; it is
    decremented exclusively by order placement and reset by administrators.
    """

    name: String(required=True, max_length=255)
    slug: String(required=True, max_length=200)
    description: Text(default="")
    price: Float(required=True, min_value=0.01)
    compare_price: Float(min_value=0.0)
    sku: String(max_length=50)
    stock: Integer(default=0, min_value=0)
    low_stock: Integer(default=DEFAULT_LOW_STOCK, min_value=0)
    is_active: Boolean(default=True)
    is_featured: Boolean(default=False)
    category_id: Identifier()
    images: HasMany(ProductImage)
    variants: HasMany(ProductVariant)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def slug_must_be_url_safe(self):
        validate_slug(self.slug)

    @invariant.post
    def images_cannot_exceed_maximum(self):
        if len(self.images) > 10:
            raise ValidationError({"images": ["Cannot have more than 10 images"]})

    @classmethod
    def create(
        cls,
        name,
        slug,
        price,
        description=None,
        compare_price=None,
        sku=None,
        stock=0,
        low_stock=None,
        is_active=True,
        is_featured=False,
        category_id=None,
    ):
        from storefront.catalogue.events import ProductCreated

        now = datetime.now()
        product = cls(
            name=name,
            slug=slug,
            description=description or "",
            price=price,
            compare_price=compare_price,
            sku=sku,
            stock=stock,
            low_stock=DEFAULT_LOW_STOCK if low_stock is None else low_stock,
            is_active=is_active,
            is_featured=is_featured,
            category_id=category_id,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=name,
                slug=slug,
                price=price,
                stock=stock,
                category_id=category_id,
                created_at=now,
            )
        )
        if product.is_low_stock:
            product._raise_low_stock()
        return product

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------
    @property
    def in_stock(self):
        return self.stock > 0

    @property
    def is_low_stock(self):
        return self.stock <= self.low_stock

    @property
    def discount_percent(self):
        """Whole-number discount against ``compare_price``; 0 when not on sale."""
        if not self.compare_price or self.compare_price <= self.price:
            return 0
        return round((self.compare_price - self.price) / self.compare_price * 100)

    @property
    def primary_image(self):
        if not self.images:
            return None
        return min(self.images, key=lambda image: image.display_order or 0)

    # ------------------------------------------------------------------
    # Behaviour
    # ------------------------------------------------------------------
    def update_details(self, **changes):
        """Apply a partial update; keys whose value is ``None`` are ignored.

        ``stock`` is routed through :meth:`restock` so the low-stock report
        follows administrator corrections.
        """
        from storefront.catalogue.events import ProductUpdated

        stock = changes.pop("stock", None)
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError({field: ["Unknown product field"] for field in sorted(unknown)})

        applied = [field for field, value in changes.items() if value is not None]
        with atomic_change(self):
            for field in applied:
                setattr(self, field, changes[field])

        if stock is not None:
            self.restock(stock)
            applied.append("stock")

        if applied:
            self.updated_at = datetime.now()
            self.raise_(
                ProductUpdated(
                    product_id=self.id,
                    changed_fields=json.dumps(applied),
                )
            )
        return applied

    def restock(self, stock):
        from storefront.catalogue.events import ProductRestocked

        if stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

        previous = self.stock
        self.stock = stock
        self.updated_at = datetime.now()

        self.raise_(
            ProductRestocked(
                product_id=self.id,
                previous_stock=previous,
                stock=stock,
                low_stock=self.low_stock,
            )
        )
        if self.is_low_stock:
            self._raise_low_stock()

    def decrement_stock(self, quantity):
        """Take ``quantity`` units out of stock for an order.

        Raises :class:`InsufficientStock` without touching the count when
        fewer than ``quantity`` units are available.
        """
        from storefront.catalogue.events import ProductStockDecremented

        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if quantity > self.stock:
            raise InsufficientStock(
                product_id=str(self.id),
                product_name=self.name,
                available=self.stock,
                requested=quantity,
            )

        previous = self.stock
        self.stock = previous - quantity
        self.updated_at = datetime.now()

        self.raise_(
            ProductStockDecremented(
                product_id=self.id,
                quantity=quantity,
                previous_stock=previous,
                remaining_stock=self.stock,
            )
        )
        if self.is_low_stock:
            self._raise_low_stock()

    def _raise_low_stock(self):
        from storefront.catalogue.events import LowStockDetected

        self.raise_(
            LowStockDetected(
                product_id=self.id,
                name=self.name,
                sku=self.sku,
                stock=self.stock,
                low_stock=self.low_stock,
                detected_at=datetime.now(),
            )
        )

    def add_image(self, url, alt_text=None, display_order=None):
        image = ProductImage(
            url=url,
            alt_text=alt_text or self.name,
            display_order=len(self.images) if display_order is None else display_order,
        )
        self.add_images(image)
        self.updated_at = datetime.now()
        return image

    def add_variant(self, name, value, price=None, stock=0, sku=None):
        variant = ProductVariant(name=name, value=value, price=price, stock=stock, sku=sku)
        self.add_variants(variant)
        self.updated_at = datetime.now()
        return variant
