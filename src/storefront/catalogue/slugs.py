"""URL slug rules shared by products and categories."""

import re

from protean.exceptions import ValidationError

_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def validate_slug(slug, field_name="slug"):
    if not slug:
        return
    if not _SLUG_PATTERN.match(slug):
        raise ValidationError(
            {
                field_name: [
                    "Slug must contain only lowercase alphanumeric characters separated by single hyphens"
                ]
            }
        )
