"""Integration tests for the shopper order endpoints."""

import pytest


@pytest.fixture()
def client(app_client, customer, login):
    login(app_client, customer)
    return app_client


@pytest.fixture()
def order_body(address):
    def _build(*entries, **overrides):
        items = [{"product_id": str(product.id), "quantity": quantity, "price": product.price} for product, quantity in entries]
        subtotal = round(sum(item["price"] * item["quantity"] for item in items), 2)
        body = {
            "items": items,
            "shipping_address": address,
            "payment_method": "card",
            "subtotal": subtotal,
            "tax_amount": 0.0,
            "shipping_amount": 0.0,
            "total": subtotal,
        }
        body.update(overrides)
        return body

    return _build


class TestPlaceOrder:
    def test_requires_session(self, app_client, create_product, order_body):
        mouse = create_product(name="Mouse", stock=5)
        response = app_client.post("/orders", json=order_body((mouse, 1)))
        assert response.status_code == 401

    def test_created(self, client, create_product, order_body):
        mouse = create_product(name="Mouse", price=20.0, stock=5)
        client.post("/cart", json={"product_id": str(mouse.id), "quantity": 2})

        response = client.post("/orders", json=order_body((mouse, 2)))
        assert response.status_code == 201

        body = response.json()
        assert body["status"] == "pending"
        assert body["payment_status"] == "pending"
        assert body["items"][0]["line_total"] == 40.0
        assert body["billing_address"] == body["shipping_address"]
        assert client.get("/cart").json()["items"] == []
        assert client.get(f"/products/{mouse.slug}").json()["stock"] == 3

    def test_insufficient_stock(self, client, create_product, order_body):
        lamp = create_product(name="Desk Lamp", stock=5)
        chair = create_product(name="Desk Chair", stock=2)

        response = client.post("/orders", json=order_body((lamp, 3), (chair, 10)))
        assert response.status_code == 409

        body = response.json()
        assert body["error"] == "InsufficientStock"
        assert body["details"] == {
            "product_id": str(chair.id),
            "product_name": "Desk Chair",
            "available": 2,
            "requested": 10,
        }
        assert client.get(f"/products/{lamp.slug}").json()["stock"] == 5

    def test_invalid_address(self, client, create_product, order_body, address):
        mouse = create_product(name="Mouse", stock=5)
        body = order_body((mouse, 1), shipping_address={**address, "phone": "555", "email": "nope"})

        response = client.post("/orders", json=body)
        assert response.status_code == 400

        details = response.json()["details"]
        assert "shipping_address.phone" in details
        assert "shipping_address.email" in details

    def test_empty_items(self, client, order_body):
        response = client.post("/orders", json=order_body())
        assert response.status_code == 400
        assert "items" in response.json()["details"]

    def test_unknown_payment_method(self, client, create_product, order_body):
        mouse = create_product(name="Mouse", stock=5)
        response = client.post("/orders", json=order_body((mouse, 1), payment_method="bitcoin"))
        assert response.status_code == 400
        assert "payment_method" in response.json()["details"]


class TestReadOrders:
    def test_list_and_detail(self, client, create_product, order_body):
        mouse = create_product(name="Mouse", stock=10)
        order_id = client.post("/orders", json=order_body((mouse, 1))).json()["id"]

        listing = client.get("/orders").json()
        assert [order["id"] for order in listing["orders"]] == [order_id]
        assert listing["pagination"]["total"] == 1

        assert client.get(f"/orders/{order_id}").json()["id"] == order_id

    def test_someone_elses_order_is_hidden(self, client, create_product, order_body, register_user, login):
        from fastapi.testclient import TestClient

        from storefront.app import create_app

        mouse = create_product(name="Mouse", stock=10)
        order_id = client.post("/orders", json=order_body((mouse, 1))).json()["id"]

        other = TestClient(create_app())
        login(other, register_user(email="eve@example.com", name="Eve"))
        response = other.get(f"/orders/{order_id}")
        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"

    def test_status_filter_validated(self, client):
        response = client.get("/orders", params={"status": "lost"})
        assert response.status_code == 400
        assert "query.status" in response.json()["details"]


class TestUpdateOrder:
    def test_owner_updates_status(self, client, create_product, order_body):
        mouse = create_product(name="Mouse", stock=10)
        order_id = client.post("/orders", json=order_body((mouse, 1))).json()["id"]

        response = client.patch(f"/orders/{order_id}", json={"status": "cancelled", "tracking_number": "TRK-1"})
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert response.json()["tracking_number"] == "TRK-1"

    def test_empty_update(self, client, create_product, order_body):
        mouse = create_product(name="Mouse", stock=10)
        order_id = client.post("/orders", json=order_body((mouse, 1))).json()["id"]

        response = client.patch(f"/orders/{order_id}", json={})
        assert response.status_code == 400

    def test_unknown_order(self, client):
        response = client.patch("/orders/missing", json={"status": "shipped"})
        assert response.status_code == 404
