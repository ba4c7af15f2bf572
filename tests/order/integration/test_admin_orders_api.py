"""Integration tests for order administration."""

import pytest

from storefront.order.placement import place_order


@pytest.fixture()
def admin_client(app_client, admin, login):
    login(app_client, admin)
    return app_client


@pytest.fixture()
def orders(customer, register_user, create_product, placement):
    mouse = create_product(name="Mouse", price=20.0, stock=50)
    grace = register_user(email="grace@example.com", name="Grace Hopper")
    return [
        place_order(placement(customer, (mouse, 1))),
        place_order(placement(grace, (mouse, 2))),
    ]


def test_lists_every_order_newest_first(admin_client, orders):
    body = admin_client.get("/admin/orders").json()
    assert [order["id"] for order in body["orders"]] == [str(orders[1].id), str(orders[0].id)]
    assert body["pagination"]["limit"] == 20


def test_search(admin_client, orders):
    body = admin_client.get("/admin/orders", params={"search": "GRACE"}).json()
    assert [order["customer_name"] for order in body["orders"]] == ["Grace Hopper"]


def test_detail_of_any_order(admin_client, orders):
    response = admin_client.get(f"/admin/orders/{orders[0].id}")
    assert response.status_code == 200
    assert response.json()["order_number"] == orders[0].order_number


def test_unknown_order(admin_client):
    assert admin_client.get("/admin/orders/missing").status_code == 404


def test_admin_updates_a_customers_order(admin_client, orders):
    response = admin_client.patch(f"/orders/{orders[0].id}", json={"payment_status": "paid", "status": "processing"})
    assert response.status_code == 200

    overview = admin_client.get("/admin").json()
    assert overview["total_orders"] == 2
    assert overview["orders_by_status"]["processing"] == 1
    assert overview["paid_revenue"] == 20.0


def test_customer_cannot_update_anothers_order(app_client, login, register_user, orders):
    login(app_client, register_user(email="eve@example.com", name="Eve"))
    response = app_client.patch(f"/orders/{orders[0].id}", json={"status": "cancelled"})
    assert response.status_code == 403
    assert response.json()["error"] == "Forbidden"
