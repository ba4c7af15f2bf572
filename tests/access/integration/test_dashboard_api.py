"""Integration tests for the shopper dashboard and request plumbing."""

from fastapi.testclient import TestClient

from storefront.app import create_app


def test_anonymous_sent_to_login(app_client):
    response = app_client.get("/dashboard", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/auth/login?next=%2Fdashboard"


def test_redirect_lands_on_login_info(app_client):
    response = app_client.get("/dashboard")
    assert response.status_code == 200
    assert response.json()["next"] == "/dashboard"


def test_dashboard(app_client, customer, login, create_product):
    login(app_client, customer)
    mouse = create_product(name="Mouse", price=20.0, stock=5)
    app_client.post("/cart", json={"product_id": str(mouse.id), "quantity": 2})

    body = app_client.get("/dashboard").json()
    assert body["user"]["email"] == customer.email
    assert body["cart"] == {"subtotal": 40.0, "total_items": 2, "item_count": 1}
    assert body["recent_orders"] == []


def test_admin_may_open_dashboard(app_client, admin, login):
    login(app_client, admin)
    assert app_client.get("/dashboard").status_code == 200


def test_logout_closes_the_dashboard(app_client, customer, login):
    login(app_client, customer)
    app_client.post("/auth/logout")
    assert app_client.get("/dashboard", follow_redirects=False).status_code == 303


def test_health(app_client):
    assert app_client.get("/health").json() == {"status": "ok", "domain": "storefront"}


def test_unexpected_errors_are_opaque():
    app = create_app()

    @app.get("/boom")
    async def boom():
        raise RuntimeError("database password is hunter2")

    response = TestClient(app, raise_server_exceptions=False).get("/boom")
    assert response.status_code == 500
    assert response.json() == {
        "error": "InternalFailure",
        "message": "An unexpected error occurred",
        "details": {},
    }
