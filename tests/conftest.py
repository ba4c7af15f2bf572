import json
import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Fetch and activate the domain by pushing the associated domain_context. The activated domain can then be referred to elsewhere as `current_domain`
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from storefront.domain import init_domain

    init_domain().domain_context().push()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session", autouse=True)
def setup_db(request):
    from storefront.domain import storefront
    from storefront.utils.db import drop_db, setup_db

    setup_db(storefront)

    yield

    drop_db(storefront)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from protean import current_domain

    # Clear all databases
    for _, provider in current_domain.providers.items():
        provider._data_reset()

    # Drain event stores
    current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def register_user():
    """Register a user through the command and return the stored aggregate."""
    from protean import current_domain

    from storefront.identity.registration import RegisterUser
    from storefront.identity.user import User

    def _register(email="shopper@example.com", name="Sam Shopper", role="CUSTOMER", external_id=None):
        user_id = current_domain.process(
            RegisterUser(external_id=external_id or f"idp|{email}", email=email, name=name, role=role),
            asynchronous=False,
        )
        return current_domain.repository_for(User).get(user_id)

    return _register


@pytest.fixture()
def customer(register_user):
    return register_user()


@pytest.fixture()
def admin(register_user):
    return register_user(email="admin@example.com", name="Ada Admin", role="ADMIN")


@pytest.fixture()
def create_category():
    from protean import current_domain

    from storefront.catalogue.management import CreateCategory

    def _create(name="Electronics", slug="electronics", parent_id=None, **extra):
        return current_domain.process(
            CreateCategory(name=name, slug=slug, parent_id=parent_id, **extra),
            asynchronous=False,
        )

    return _create


@pytest.fixture()
def create_product():
    """Create a product through the command and return the stored aggregate."""
    from protean import current_domain

    from storefront.catalogue.management import CreateProduct
    from storefront.catalogue.product import Product

    counter = {"n": 0}

    def _create(name=None, price=25.0, stock=20, images=None, variants=None, **extra):
        counter["n"] += 1
        name = name or f"Product {counter['n']}"
        slug = extra.pop("slug", None) or name.lower().replace(" ", "-")
        product_id = current_domain.process(
            CreateProduct(
                name=name,
                slug=slug,
                price=price,
                stock=stock,
                images=json.dumps(images or []),
                variants=json.dumps(variants or []),
                **extra,
            ),
            asynchronous=False,
        )
        return current_domain.repository_for(Product).get(product_id)

    return _create


@pytest.fixture()
def address():
    return {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "phone": "5550100100",
        "address": "12 Analytical Way",
        "city": "London",
        "state": "LDN",
        "zip_code": "10001",
        "country": "UK",
    }


@pytest.fixture()
def app_client():
    """A TestClient over the full application, with its own cookie jar."""
    from fastapi.testclient import TestClient

    from storefront.app import create_app

    return TestClient(create_app())


@pytest.fixture()
def login():
    """Sign ``client`` in as ``user`` through the development sign-in endpoint."""

    def _login(client, user):
        response = client.post("/auth/session", json={"email": user.email})
        assert response.status_code == 200
        return response

    return _login
