"""Product reviews: aggregate, submission command and read helpers."""

from datetime import datetime

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.exceptions import Conflict, NotFound


@storefront.event(part_of="Review")
class ReviewSubmitted:
    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True)
    submitted_at = DateTime(required=True)


@storefront.aggregate
class Review:
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True, min_value=1, max_value=5)
    title = String(max_length=200)
    comment = Text()
    is_verified = Boolean(default=False)
    created_at = DateTime()

    @classmethod
    def submit(cls, product_id, user_id, rating, title=None, comment=None, is_verified=False):
        now = datetime.now()
        review = cls(
            product_id=product_id,
            user_id=user_id,
            rating=rating,
            title=title,
            comment=comment,
            is_verified=is_verified,
            created_at=now,
        )
        review.raise_(
            ReviewSubmitted(
                review_id=review.id,
                product_id=product_id,
                user_id=user_id,
                rating=rating,
                submitted_at=now,
            )
        )
        return review


@storefront.command(part_of="Review")
class SubmitReview:
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True, min_value=1, max_value=5)
    title = String(max_length=200)
    comment = String(max_length=2000)


def _has_purchased(user_id, product_id):
    from storefront.order.order import Order

    orders = current_domain.repository_for(Order)._dao.query.filter(user_id=user_id).limit(None).all().items
    return any(str(item.product_id) == str(product_id) for order in orders for item in order.items)


@storefront.command_handler(part_of=Review)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        from storefront.catalogue.product import Product

        try:
            current_domain.repository_for(Product).get(command.product_id)
        except ObjectNotFoundError:
            raise NotFound(f"Product {command.product_id} not found", {"product_id": command.product_id}) from None

        repo = current_domain.repository_for(Review)
        existing = repo._dao.query.filter(product_id=command.product_id, user_id=command.user_id).all().items
        if existing:
            raise Conflict("You have already reviewed this product", {"review_id": str(existing[0].id)})

        review = Review.submit(
            product_id=command.product_id,
            user_id=command.user_id,
            rating=command.rating,
            title=command.title,
            comment=command.comment,
            is_verified=_has_purchased(command.user_id, command.product_id),
        )
        repo.add(review)
        return str(review.id)


def reviews_for_product(product_id):
    """Reviews of a product, newest first."""
    return (
        current_domain.repository_for(Review)
        ._dao.query.filter(product_id=product_id)
        .order_by("-created_at")
        .limit(None)
        .all()
        .items
    )


def rating_summaries(product_ids):
    """Map each product id to ``(average_rating, review_count)``; unreviewed products are omitted."""
    if not product_ids:
        return {}
    reviews = current_domain.repository_for(Review)._dao.query.filter(product_id__in=list(product_ids)).limit(None).all().items

    ratings = {}
    for review in reviews:
        ratings.setdefault(str(review.product_id), []).append(review.rating)
    return {product_id: (round(sum(values) / len(values), 1), len(values)) for product_id, values in ratings.items()}
