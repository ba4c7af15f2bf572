"""Catalogue administration: commands and handlers for categories and products."""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.exceptions import Conflict, NotFound
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=100)
    slug: String(required=True, max_length=120)
    description: Text()
    image: String(max_length=500)
    parent_id: Identifier()


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    slug: String(required=True, max_length=200)
    description: Text()
    price: Float(required=True, min_value=0.01)
    compare_price: Float(min_value=0.0)
    sku: String(max_length=50)
    stock: Integer(default=0, min_value=0)
    low_stock: Integer(min_value=0)
    is_active: Boolean(default=True)
    is_featured: Boolean(default=False)
    category_id: Identifier()
    images: Text()  # JSON: [{"url": ..., "alt_text": ...}]
    variants: Text()  # JSON: [{"name": ..., "value": ..., "price": ..., "stock": ...}]


@storefront.command(part_of="Product")
class UpdateProduct:
    """Partial update; omitted fields keep their current value."""

    product_id: Identifier(required=True)
    name: String(max_length=255)
    slug: String(max_length=200)
    description: Text()
    price: Float(min_value=0.01)
    compare_price: Float(min_value=0.0)
    sku: String(max_length=50)
    stock: Integer(min_value=0)
    low_stock: Integer(min_value=0)
    is_active: Boolean()
    is_featured: Boolean()
    category_id: Identifier()


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)


def _category_must_exist(category_id):
    if not category_id:
        return
    try:
        current_domain.repository_for(Category).get(category_id)
    except ObjectNotFoundError:
        raise NotFound(f"Category {category_id} not found", {"category_id": category_id}) from None


def _load_product(product_id):
    try:
        return current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise NotFound(f"Product {product_id} not found", {"product_id": product_id}) from None


def _slug_taken(aggregate_cls, slug, exclude_id=None):
    matches = current_domain.repository_for(aggregate_cls)._dao.query.filter(slug=slug).all().items
    return any(str(match.id) != str(exclude_id) for match in matches)


@storefront.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        if _slug_taken(Category, command.slug):
            raise Conflict(f"Category slug '{command.slug}' is already in use", {"slug": command.slug})
        _category_must_exist(command.parent_id)

        category = Category.create(
            name=command.name,
            slug=command.slug,
            description=command.description,
            image=command.image,
            parent_id=command.parent_id,
        )
        current_domain.repository_for(Category).add(category)
        return str(category.id)


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        if _slug_taken(Product, command.slug):
            raise Conflict(f"Product slug '{command.slug}' is already in use", {"slug": command.slug})
        _category_must_exist(command.category_id)

        product = Product.create(
            name=command.name,
            slug=command.slug,
            description=command.description,
            price=command.price,
            compare_price=command.compare_price,
            sku=command.sku,
            stock=command.stock,
            low_stock=command.low_stock,
            is_active=command.is_active,
            is_featured=command.is_featured,
            category_id=command.category_id,
        )
        for image in json.loads(command.images) if command.images else []:
            product.add_image(url=image["url"], alt_text=image.get("alt_text"))
        for variant in json.loads(command.variants) if command.variants else []:
            product.add_variant(
                name=variant["name"],
                value=variant["value"],
                price=variant.get("price"),
                stock=variant.get("stock", 0),
                sku=variant.get("sku"),
            )

        current_domain.repository_for(Product).add(product)
        logger.info("product_created", product_id=str(product.id), slug=product.slug)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        product = _load_product(command.product_id)

        if command.slug and command.slug != product.slug and _slug_taken(Product, command.slug, product.id):
            raise Conflict(f"Product slug '{command.slug}' is already in use", {"slug": command.slug})
        _category_must_exist(command.category_id)

        applied = product.update_details(
            name=command.name,
            slug=command.slug,
            description=command.description,
            price=command.price,
            compare_price=command.compare_price,
            sku=command.sku,
            stock=command.stock,
            low_stock=command.low_stock,
            is_active=command.is_active,
            is_featured=command.is_featured,
            category_id=command.category_id,
        )
        current_domain.repository_for(Product).add(product)
        logger.info("product_updated", product_id=str(product.id), fields=applied)
        return str(product.id)

    @handle(DeleteProduct)
    def delete_product(self, command):
        from storefront.projections.low_stock import LowStockReport

        product = _load_product(command.product_id)
        current_domain.repository_for(Product)._dao.delete(product)

        report_repo = current_domain.repository_for(LowStockReport)
        try:
            report_repo._dao.delete(report_repo.get(command.product_id))
        except ObjectNotFoundError:
            pass

        logger.info("product_deleted", product_id=command.product_id)
