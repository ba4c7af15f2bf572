"""Tests for the User aggregate."""

import pytest
from protean.exceptions import ValidationError

from storefront.identity.user import ADMIN_ROLES, User, UserRole


class TestRegister:
    def test_register_normalises_email(self):
        user = User.register(external_id="idp|1", email="  Jane.Doe@Example.COM ", name="Jane Doe")
        assert user.email == "jane.doe@example.com"

    def test_role_defaults_to_customer(self):
        user = User.register(external_id="idp|1", email="jane@example.com")
        assert user.role == UserRole.CUSTOMER.value
        assert user.created_at is not None

    def test_unknown_role_is_rejected(self):
        with pytest.raises(ValidationError):
            User.register(external_id="idp|1", email="jane@example.com", role="OWNER")


class TestRoles:
    @pytest.mark.parametrize("role", ["ADMIN", "SUPER_ADMIN"])
    def test_admin_roles(self, role):
        user = User.register(external_id="idp|1", email="a@example.com", role=role)
        assert user.is_admin
        assert role in ADMIN_ROLES

    def test_customer_is_not_admin(self):
        user = User.register(external_id="idp|1", email="c@example.com")
        assert not user.is_admin


class TestDisplayName:
    def test_uses_name_when_present(self):
        assert User.register(external_id="idp|1", email="j@example.com", name="Jane").display_name == "Jane"

    def test_falls_back_to_email(self):
        assert User.register(external_id="idp|1", email="j@example.com").display_name == "j@example.com"
