"""Storefront HTTP API package."""

from storefront.api.admin import router as admin_router
from storefront.api.auth import router as auth_router
from storefront.api.cart import router as cart_router
from storefront.api.catalogue import category_router, product_router
from storefront.api.dashboard import router as dashboard_router
from storefront.api.orders import router as order_router
from storefront.api.reviews import review_router, wishlist_router

__all__ = [
    "admin_router",
    "auth_router",
    "cart_router",
    "category_router",
    "dashboard_router",
    "order_router",
    "product_router",
    "review_router",
    "wishlist_router",
]
