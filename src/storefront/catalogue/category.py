"""Category aggregate: a node in the catalogue tree used for browsing."""

from datetime import datetime

from protean import invariant
from protean.fields import DateTime, Identifier, String, Text

from storefront.catalogue.slugs import validate_slug
from storefront.domain import storefront


@storefront.aggregate
class Category:
    name: String(required=True, max_length=100)
    slug: String(required=True, max_length=120)
    description: Text()
    image: String(max_length=500)
    parent_id: Identifier()
    created_at: DateTime(default=datetime.now)

    @invariant.post
    def slug_must_be_url_safe(self):
        validate_slug(self.slug)

    @classmethod
    def create(cls, name, slug, description=None, image=None, parent_id=None):
        from storefront.catalogue.events import CategoryCreated

        category = cls(
            name=name,
            slug=slug,
            description=description,
            image=image,
            parent_id=parent_id,
            created_at=datetime.now(),
        )
        category.raise_(
            CategoryCreated(
                category_id=category.id,
                name=name,
                slug=slug,
                parent_id=parent_id,
            )
        )
        return category
