"""Application tests for the wishlist."""

import pytest
from protean import current_domain

from storefront.catalogue.management import DeleteProduct
from storefront.exceptions import NotFound
from storefront.reviews.wishlist import AddToWishlist, RemoveFromWishlist, wishlist_for


def _add(user, product_id):
    return current_domain.process(AddToWishlist(user_id=str(user.id), product_id=product_id), asynchronous=False)


def test_add(customer, create_product):
    mouse = create_product(name="Mouse")
    _add(customer, str(mouse.id))
    assert [product.name for _, product in wishlist_for(str(customer.id))] == ["Mouse"]


def test_adding_twice_keeps_one_entry(customer, create_product):
    mouse = create_product(name="Mouse")
    first = _add(customer, str(mouse.id))
    assert _add(customer, str(mouse.id)) == first
    assert len(wishlist_for(str(customer.id))) == 1


def test_unknown_product(customer):
    with pytest.raises(NotFound):
        _add(customer, "missing")


def test_remove(customer, create_product):
    mouse = create_product(name="Mouse")
    _add(customer, str(mouse.id))
    current_domain.process(RemoveFromWishlist(user_id=str(customer.id), product_id=str(mouse.id)), asynchronous=False)
    assert wishlist_for(str(customer.id)) == []


def test_remove_missing_entry(customer, create_product):
    mouse = create_product(name="Mouse")
    with pytest.raises(NotFound):
        current_domain.process(
            RemoveFromWishlist(user_id=str(customer.id), product_id=str(mouse.id)), asynchronous=False
        )


def test_wishlists_are_per_user(customer, register_user, create_product):
    mouse = create_product(name="Mouse")
    _add(customer, str(mouse.id))
    grace = register_user(email="grace@example.com", name="Grace Hopper")
    assert wishlist_for(str(grace.id)) == []


def test_deleted_products_are_skipped(customer, create_product):
    mouse = create_product(name="Mouse")
    keyboard = create_product(name="Keyboard")
    _add(customer, str(mouse.id))
    _add(customer, str(keyboard.id))

    current_domain.process(DeleteProduct(product_id=str(mouse.id)), asynchronous=False)

    assert [product.name for _, product in wishlist_for(str(customer.id))] == ["Keyboard"]
