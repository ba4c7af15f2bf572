"""Application tests for user registration."""

import pytest
from protean import current_domain

from storefront.exceptions import Conflict
from storefront.identity.registration import RegisterUser, find_user
from storefront.identity.user import User


def _register(**overrides):
    defaults = {"external_id": "idp|jane", "email": "jane@example.com", "name": "Jane Smith"}
    defaults.update(overrides)
    return current_domain.process(RegisterUser(**defaults), asynchronous=False)


class TestRegisterUser:
    def test_user_is_persisted(self):
        user_id = _register()
        user = current_domain.repository_for(User).get(user_id)
        assert user.email == "jane@example.com"
        assert user.role == "CUSTOMER"

    def test_duplicate_email_conflicts(self):
        _register()
        with pytest.raises(Conflict) as exc:
            _register(external_id="idp|other", email="JANE@example.com")
        assert exc.value.details == {"email": "jane@example.com"}

    def test_duplicate_external_id_conflicts(self):
        _register()
        with pytest.raises(Conflict):
            _register(email="someone.else@example.com")


class TestFindUser:
    def test_by_id(self):
        user_id = _register()
        assert find_user(user_id=user_id).email == "jane@example.com"

    def test_by_external_id(self):
        _register()
        assert find_user(external_id="idp|jane").name == "Jane Smith"

    def test_by_email_is_case_insensitive(self):
        _register()
        assert find_user(email="Jane@Example.com") is not None

    def test_missing_user_is_none(self):
        assert find_user(user_id="does-not-exist") is None
        assert find_user(email="nobody@example.com") is None
        assert find_user() is None
