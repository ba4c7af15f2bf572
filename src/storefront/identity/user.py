"""User aggregate — a shopper or an administrator known to the storefront.

Credentials are held by the external identity provider; the storefront only
keeps the provider subject (``external_id``), contact details and the role
used by the access gate.
"""

from datetime import datetime
from enum import Enum

from protean.fields import DateTime, String

from storefront.domain import storefront


class UserRole(Enum):
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


ADMIN_ROLES = frozenset({UserRole.ADMIN.value, UserRole.SUPER_ADMIN.value})


@storefront.aggregate
class User:
    external_id = String(required=True, max_length=255)
    email = String(required=True, max_length=254)
    name = String(max_length=255)
    role = String(choices=UserRole, default=UserRole.CUSTOMER.value)
    created_at = DateTime()

    @classmethod
    def register(cls, external_id, email, name=None, role=None):
        return cls(
            external_id=external_id,
            email=email.strip().lower(),
            name=name,
            role=role or UserRole.CUSTOMER.value,
            created_at=datetime.now(),
        )

    @property
    def is_admin(self):
        return self.role in ADMIN_ROLES

    @property
    def display_name(self):
        return self.name or self.email
