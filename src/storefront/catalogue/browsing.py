"""Catalogue read side: product listing, product detail and the category tree."""

from dataclasses import dataclass

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain
from protean.utils.query import Q

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.exceptions import NotFound
from storefront.utils.pagination import Page, clamp, paginate

SORT_FIELDS = ("created_at", "price", "name")
SORT_ORDERS = ("asc", "desc")


@dataclass(frozen=True)
class ProductListing:
    product: Product
    category: Category | None
    average_rating: float
    review_count: int


def _descendant_ids(root):
    categories = current_domain.repository_for(Category)._dao.query.limit(None).all().items
    children = {}
    for category in categories:
        children.setdefault(str(category.parent_id) if category.parent_id else None, []).append(category)

    ids, frontier = [], [root]
    while frontier:
        node = frontier.pop()
        ids.append(str(node.id))
        frontier.extend(children.get(str(node.id), []))
    return ids


def category_by_slug(slug):
    matches = current_domain.repository_for(Category)._dao.query.filter(slug=slug).all().items
    return matches[0] if matches else None


def _categories_by_id(products):
    ids = {str(p.category_id) for p in products if p.category_id}
    if not ids:
        return {}
    categories = current_domain.repository_for(Category)._dao.query.filter(id__in=list(ids)).limit(None).all().items
    return {str(c.id): c for c in categories}


def _listings(products):
    from storefront.reviews.review import rating_summaries

    categories = _categories_by_id(products)
    ratings = rating_summaries([str(p.id) for p in products])
    listings = []
    for product in products:
        average, count = ratings.get(str(product.id), (0.0, 0))
        listings.append(
            ProductListing(
                product=product,
                category=categories.get(str(product.category_id)) if product.category_id else None,
                average_rating=average,
                review_count=count,
            )
        )
    return listings


def list_products(
    category_slug=None,
    search=None,
    sort_by="created_at",
    sort_order="desc",
    page=1,
    limit=None,
    featured=None,
    include_inactive=False,
) -> Page:
    """Filter, sort and page the catalogue.

    Inactive products are hidden unless ``include_inactive`` is set (the
    administration listing). An unknown category slug yields an empty page.
    """
    if sort_by not in SORT_FIELDS:
        raise ValidationError({"sort_by": [f"Must be one of: {', '.join(SORT_FIELDS)}"]})
    if sort_order not in SORT_ORDERS:
        raise ValidationError({"sort_order": [f"Must be one of: {', '.join(SORT_ORDERS)}"]})
    page, limit = clamp(page, limit)

    query = current_domain.repository_for(Product)._dao.query
    if not include_inactive:
        query = query.filter(is_active=True)
    if featured is not None:
        query = query.filter(is_featured=featured)
    if category_slug:
        category = category_by_slug(category_slug)
        if category is None:
            return Page(items=[], page=page, limit=limit, total=0)
        query = query.filter(category_id__in=_descendant_ids(category))
    if search:
        query = query.filter(Q(name__icontains=search) | Q(description__icontains=search))

    query = query.order_by(sort_by if sort_order == "asc" else f"-{sort_by}")
    result = paginate(query, page, limit)
    return Page(items=_listings(result.items), page=result.page, limit=result.limit, total=result.total)


def get_product_by_slug(slug) -> ProductListing:
    matches = current_domain.repository_for(Product)._dao.query.filter(slug=slug, is_active=True).all().items
    if not matches:
        raise NotFound(f"Product '{slug}' not found", {"slug": slug})
    return _listings(matches)[0]


def list_categories():
    """Categories in name order, each paired with its count of active products."""
    categories = current_domain.repository_for(Category)._dao.query.order_by("name").limit(None).all().items
    products = current_domain.repository_for(Product)._dao.query.filter(is_active=True).limit(None).all().items

    counts = {}
    for product in products:
        if product.category_id:
            counts[str(product.category_id)] = counts.get(str(product.category_id), 0) + 1
    return [(category, counts.get(str(category.id), 0)) for category in categories]
