"""Review and wishlist endpoints."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.access.context import Actor
from storefront.api.deps import require_actor
from storefront.api.schemas import (
    AddToWishlistRequest,
    ReviewIdResponse,
    ReviewResponse,
    StatusResponse,
    SubmitReviewRequest,
    WishlistEntryResponse,
)
from storefront.catalogue.browsing import get_product_by_slug
from storefront.reviews.review import SubmitReview, reviews_for_product
from storefront.reviews.wishlist import AddToWishlist, RemoveFromWishlist, wishlist_for

review_router = APIRouter(prefix="/products", tags=["reviews"])
wishlist_router = APIRouter(prefix="/wishlist", tags=["wishlist"])


@review_router.get("/{slug}/reviews", response_model=list[ReviewResponse])
async def product_reviews(slug: str) -> list[ReviewResponse]:
    listing = get_product_by_slug(slug)
    return [ReviewResponse.from_review(review) for review in reviews_for_product(str(listing.product.id))]


@review_router.post("/{slug}/reviews", status_code=201, response_model=ReviewIdResponse)
async def submit_review(
    slug: str, body: SubmitReviewRequest, actor: Actor = Depends(require_actor)
) -> ReviewIdResponse:
    listing = get_product_by_slug(slug)
    command = SubmitReview(
        product_id=str(listing.product.id),
        user_id=actor.user_id,
        rating=body.rating,
        title=body.title,
        comment=body.comment,
    )
    result = current_domain.process(command, asynchronous=False)
    return ReviewIdResponse(review_id=result)


def _wishlist(user_id):
    return [
        WishlistEntryResponse(
            product_id=str(product.id),
            name=product.name,
            slug=product.slug,
            price=product.price,
            in_stock=product.in_stock,
            added_at=entry.added_at,
        )
        for entry, product in wishlist_for(user_id)
    ]


@wishlist_router.get("", response_model=list[WishlistEntryResponse])
async def get_wishlist(actor: Actor = Depends(require_actor)) -> list[WishlistEntryResponse]:
    return _wishlist(actor.user_id)


@wishlist_router.post("", status_code=201, response_model=list[WishlistEntryResponse])
async def add_to_wishlist(
    body: AddToWishlistRequest, actor: Actor = Depends(require_actor)
) -> list[WishlistEntryResponse]:
    current_domain.process(AddToWishlist(user_id=actor.user_id, product_id=body.product_id), asynchronous=False)
    return _wishlist(actor.user_id)


@wishlist_router.delete("/{product_id}", response_model=StatusResponse)
async def remove_from_wishlist(product_id: str, actor: Actor = Depends(require_actor)) -> StatusResponse:
    current_domain.process(RemoveFromWishlist(user_id=actor.user_id, product_id=product_id), asynchronous=False)
    return StatusResponse()
