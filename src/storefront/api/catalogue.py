"""Public catalogue endpoints: product listing, product detail and categories."""

from typing import Literal

from fastapi import APIRouter, Query

from storefront.api.schemas import (
    CategoryResponse,
    PaginationSchema,
    ProductCard,
    ProductDetailResponse,
    ProductListResponse,
)
from storefront.catalogue.browsing import get_product_by_slug, list_categories, list_products
from storefront.reviews.review import reviews_for_product
from storefront.utils.pagination import MAX_LIMIT

product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])


@product_router.get("", response_model=ProductListResponse)
async def browse_products(
    category: str | None = None,
    search: str | None = None,
    sort_by: Literal["created_at", "price", "name"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=12, ge=1, le=MAX_LIMIT),
    featured: bool | None = None,
) -> ProductListResponse:
    result = list_products(
        category_slug=category,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
        featured=featured,
    )
    return ProductListResponse(
        products=[ProductCard.from_listing(listing) for listing in result.items],
        pagination=PaginationSchema.from_page(result),
    )


@product_router.get("/{slug}", response_model=ProductDetailResponse)
async def product_detail(slug: str) -> ProductDetailResponse:
    listing = get_product_by_slug(slug)
    return ProductDetailResponse.from_listing(listing, reviews_for_product(str(listing.product.id)))


@category_router.get("", response_model=list[CategoryResponse])
async def categories() -> list[CategoryResponse]:
    return [
        CategoryResponse(
            id=str(category.id),
            name=category.name,
            slug=category.slug,
            description=category.description,
            image=category.image,
            parent_id=str(category.parent_id) if category.parent_id else None,
            product_count=count,
        )
        for category, count in list_categories()
    ]
