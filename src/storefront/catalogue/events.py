"""Domain events for the Product and Category aggregates."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    slug = String(required=True)
    price = Float(required=True)
    stock = Integer(required=True)
    category_id = Identifier()
    created_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductUpdated:
    """Catalogue fields of a product were changed by an administrator."""

    __version__ = 1

    product_id = Identifier(required=True)
    changed_fields = Text(required=True)  # JSON: list of field names


@storefront.event(part_of="Product")
class ProductStockDecremented:
    """Units were taken out of stock by an order placement."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    remaining_stock = Integer(required=True)


@storefront.event(part_of="Product")
class LowStockDetected:
    """Stock fell to or below the product's low-stock threshold."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    sku = String()
    stock = Integer(required=True)
    low_stock = Integer(required=True)
    detected_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductRestocked:
    """An administrator set a new stock count for a product."""

    __version__ = 1

    product_id = Identifier(required=True)
    previous_stock = Integer(required=True)
    stock = Integer(required=True)
    low_stock = Integer(required=True)


@storefront.event(part_of="Category")
class CategoryCreated:
    """A new category was added to the catalogue tree."""

    __version__ = 1

    category_id = Identifier(required=True)
    name = String(required=True)
    slug = String(required=True)
    parent_id = Identifier()
