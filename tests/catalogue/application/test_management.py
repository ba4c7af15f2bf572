"""Application tests for catalogue administration commands."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.catalogue.category import Category
from storefront.catalogue.management import CreateCategory, CreateProduct, DeleteProduct, UpdateProduct
from storefront.catalogue.product import Product
from storefront.exceptions import Conflict, NotFound
from storefront.projections.low_stock import LowStockReport, low_stock_report


def _update(product_id, **changes):
    current_domain.process(UpdateProduct(product_id=product_id, **changes), asynchronous=False)
    return current_domain.repository_for(Product).get(product_id)


class TestCreateCategory:
    def test_category_persists(self, create_category):
        category_id = create_category(description="Gadgets")
        category = current_domain.repository_for(Category).get(category_id)
        assert category.slug == "electronics"
        assert category.description == "Gadgets"

    def test_child_category(self, create_category):
        parent_id = create_category()
        child_id = create_category(name="Laptops", slug="laptops", parent_id=parent_id)
        assert str(current_domain.repository_for(Category).get(child_id).parent_id) == parent_id

    def test_duplicate_slug_conflicts(self, create_category):
        create_category()
        with pytest.raises(Conflict):
            create_category(name="Electronics Again")

    def test_unknown_parent_not_found(self):
        with pytest.raises(NotFound):
            current_domain.process(
                CreateCategory(name="Laptops", slug="laptops", parent_id="missing"),
                asynchronous=False,
            )

    def test_invalid_slug_rejected(self, create_category):
        with pytest.raises(ValidationError):
            create_category(name="Home", slug="Home & Garden")


class TestCreateProduct:
    def test_product_with_images_and_variants(self, create_category):
        category_id = create_category()
        product_id = current_domain.process(
            CreateProduct(
                name="iPhone 15 Pro",
                slug="iphone-15-pro",
                price=999.99,
                compare_price=1099.99,
                sku="IPHONE15PRO",
                stock=50,
                is_featured=True,
                category_id=category_id,
                images=json.dumps([{"url": "https://cdn.example.com/iphone.jpg", "alt_text": "Front"}]),
                variants=json.dumps([{"name": "Storage", "value": "256GB", "price": 1099.99, "stock": 15}]),
            ),
            asynchronous=False,
        )

        product = current_domain.repository_for(Product).get(product_id)
        assert product.primary_image.alt_text == "Front"
        assert product.variants[0].value == "256GB"
        assert product.discount_percent == 9

    def test_duplicate_slug_conflicts(self, create_product):
        create_product(name="Mouse")
        with pytest.raises(Conflict) as exc:
            create_product(name="Other Mouse", slug="mouse")
        assert exc.value.details == {"slug": "mouse"}

    def test_unknown_category_not_found(self, create_product):
        with pytest.raises(NotFound):
            create_product(category_id="missing")

    def test_low_stock_product_enters_report(self, create_product):
        product = create_product(stock=4)
        entry = current_domain.repository_for(LowStockReport).get(str(product.id))
        assert entry.stock == 4
        assert entry.is_out_of_stock is False


class TestUpdateProduct:
    def test_partial_update(self, create_product):
        product = create_product(name="Mouse", price=20.0)
        updated = _update(str(product.id), price=18.5, is_featured=True)
        assert updated.price == 18.5
        assert updated.is_featured is True
        assert updated.name == "Mouse"

    def test_slug_taken_by_another_product(self, create_product):
        create_product(name="Mouse")
        keyboard = create_product(name="Keyboard")
        with pytest.raises(Conflict):
            _update(str(keyboard.id), slug="mouse")

    def test_keeping_own_slug_is_allowed(self, create_product):
        product = create_product(name="Mouse")
        assert _update(str(product.id), slug="mouse", name="Mouse v2").name == "Mouse v2"

    def test_unknown_product(self):
        with pytest.raises(NotFound):
            _update("missing", name="Ghost")

    def test_restock_clears_low_stock_entry(self, create_product):
        product = create_product(stock=2)
        assert len(low_stock_report()) == 1

        _update(str(product.id), stock=40)
        assert low_stock_report() == []

    def test_restock_to_zero_marks_out_of_stock(self, create_product):
        product = create_product(stock=30)
        _update(str(product.id), stock=0)

        entry = current_domain.repository_for(LowStockReport).get(str(product.id))
        assert entry.is_out_of_stock is True


class TestDeleteProduct:
    def test_delete(self, create_product):
        product = create_product(stock=2)
        current_domain.process(DeleteProduct(product_id=str(product.id)), asynchronous=False)

        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Product).get(str(product.id))
        assert low_stock_report() == []

    def test_delete_unknown_product(self):
        with pytest.raises(NotFound):
            current_domain.process(DeleteProduct(product_id="missing"), asynchronous=False)
