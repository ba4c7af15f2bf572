"""Page slicing over Protean query sets."""

import math
from dataclasses import dataclass, field

DEFAULT_LIMIT = 12
MAX_LIMIT = 100


@dataclass(frozen=True)
class Page:
    items: list = field(default_factory=list)
    page: int = 1
    limit: int = DEFAULT_LIMIT
    total: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    def to_dict(self) -> dict:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "total_pages": self.total_pages,
            "has_next": self.has_next,
            "has_previous": self.has_previous,
        }


def clamp(page, limit, default_limit=DEFAULT_LIMIT):
    """Normalise user-supplied paging: page ≥ 1, 1 ≤ limit ≤ ``MAX_LIMIT``."""
    page = max(int(page or 1), 1)
    limit = int(limit or default_limit)
    return page, min(max(limit, 1), MAX_LIMIT)


def paginate(queryset, page=1, limit=DEFAULT_LIMIT) -> Page:
    page, limit = clamp(page, limit, limit)
    results = queryset.offset((page - 1) * limit).limit(limit).all()
    return Page(items=list(results.items), page=page, limit=limit, total=results.total)
