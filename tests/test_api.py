"""Tests for the FastAPI API."""

import pytest
from fastapi.testclient import TestClient

from partner_cart.database import product_db

CART = "/api/companies/comp-001/cart"
DELIVERY = {
    "contact_name": "Ana Horvat",
    "address": "Ilica 1",
    "city": "Zagreb",
    "postal_code": "10000",
}


@pytest.fixture
def client():
    from partner_cart.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def panels_in_cart(client):
    response = client.post(f"{CART}/items", json={"product_id": "prod-001", "quantity": 10})
    assert response.status_code == 200
    return response.json()


class TestHealthCheck:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "partner-cart"}

    def test_home(self, client):
        data = client.get("/").json()
        assert data["endpoints"]["cart"] == "/api/companies/{company_id}/cart"


class TestProducts:
    def test_search(self, client):
        data = client.get("/api/products").json()
        assert data["total"] == 7

    def test_search_filters(self, client):
        data = client.get("/api/products", params={"category": "panels"}).json()
        assert [p["id"] for p in data["products"]] == ["prod-001"]

        data = client.get("/api/products", params={"in_stock_only": True}).json()
        assert "prod-007" not in [p["id"] for p in data["products"]]

        data = client.get("/api/products", params={"query": "inverter"}).json()
        assert data["total"] == 1

    def test_get_product(self, client):
        assert client.get("/api/products/prod-002").json()["sku"] == "INV-HYB-10K"
        assert client.get("/api/products/prod-999").status_code == 404

    def test_company_pricing(self, client):
        response = client.get("/api/products/prod-001/pricing", params={"company_id": "comp-001"})
        assert response.status_code == 200
        data = response.json()
        assert data["base_price"] == 160.0
        assert [(t["quantity"], t["price"]) for t in data["tiers"]] == [(1, 160.0), (10, 150.0), (50, 140.0)]

    def test_pricing_without_price_list(self, client):
        data = client.get("/api/products/prod-005/pricing", params={"company_id": "comp-001"}).json()
        assert data["base_price"] == 129.0
        assert data["tiers"] == []


class TestCart:
    def test_load_empty_cart(self, client):
        response = client.get(CART)
        assert response.status_code == 200
        data = response.json()
        assert data["cart"]["items"] == {}
        assert data["cart"]["company_name"] == "Adriatic Solar Installations"
        assert data["summary"]["estimated_shipping"] == 50.0

    def test_add_item(self, client, panels_in_cart):
        assert panels_in_cart["message"] == "Added 10x Monocrystalline Panel 450W to cart"
        item = panels_in_cart["cart"]["items"]["prod-001"]
        assert item["unit_price"] == 150.0
        assert item["applied_tier"] == 2
        assert panels_in_cart["summary"]["subtotal"] == 1500.0

    def test_tier_hint(self, client):
        data = client.post(f"{CART}/items", json={"product_id": "prod-001", "quantity": 7}).json()
        assert data["tier_hints"] == {"prod-001": "Add 3 more to get 150.00 per unit (save 100.00)"}

    def test_add_errors(self, client):
        response = client.post(f"{CART}/items", json={"product_id": "prod-999", "quantity": 1})
        assert response.status_code == 404
        assert response.json()["detail"] == "Product not found"

        response = client.post(f"{CART}/items", json={"product_id": "prod-004", "quantity": 1})
        assert response.status_code == 400

        response = client.post(f"{CART}/items", json={"product_id": "prod-001", "quantity": 0})
        assert response.status_code == 422

    def test_update_and_remove(self, client, panels_in_cart):
        data = client.put(f"{CART}/items/prod-001", json={"quantity": 50}).json()
        assert data["cart"]["items"]["prod-001"]["unit_price"] == 140.0

        assert client.put(f"{CART}/items/prod-002", json={"quantity": 1}).status_code == 404

        data = client.delete(f"{CART}/items/prod-001").json()
        assert data["cart"]["items"] == {}

    def test_add_offer(self, client):
        response = client.post(f"{CART}/offers/offer-001")
        assert response.status_code == 200
        assert set(response.json()["cart"]["items"]) == {"prod-001", "prod-004"}
        assert client.post(f"{CART}/offers/offer-404").status_code == 404

    def test_carts_are_per_company(self, client, panels_in_cart):
        data = client.get("/api/companies/comp-002/cart").json()
        assert data["cart"]["items"] == {}

        data = client.post(
            "/api/companies/comp-002/cart/items", json={"product_id": "prod-001", "quantity": 1}
        ).json()
        assert data["cart"]["items"]["prod-001"]["unit_price"] == 165.0

    def test_summary_and_sync(self, client, panels_in_cart):
        summary = client.get(f"{CART}/summary").json()
        assert summary["total"] == 1875.0

        response = client.post(f"{CART}/sync")
        assert response.status_code == 200
        assert response.json()["cart"]["items"]["prod-001"]["quantity"] == 10

    def test_clear(self, client, panels_in_cart):
        data = client.delete(CART).json()
        assert data["cart"]["items"] == {}
        assert data["message"] == "Cart cleared"


class TestCoupons:
    def test_apply_and_remove(self, client, panels_in_cart):
        response = client.post(f"{CART}/coupons", json={"code": "SPRING10"})
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Coupon SPRING10 applied"
        assert data["summary"]["coupon_discount"] == 150.0
        # The displayed total does not subtract coupon discounts
        assert data["summary"]["total"] == 1875.0

        data = client.delete(f"{CART}/coupons/cpn-001").json()
        assert data["summary"]["coupon_discount"] == 0.0

    def test_rejected_coupons(self, client, panels_in_cart):
        response = client.post(f"{CART}/coupons", json={"code": "NOPE"})
        assert response.status_code == 404

        response = client.post(f"{CART}/coupons", json={"code": "WINTER5"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Coupon has expired"

        assert client.delete(f"{CART}/coupons/cpn-001").status_code == 404

    def test_available(self, client, panels_in_cart):
        codes = [c["code"] for c in client.get(f"{CART}/coupons/available").json()]
        assert codes[0] == "SPRING10"
        assert "PANELS15" in codes
        assert "BIG100" not in codes


class TestCheckout:
    def test_empty_cart(self, client):
        response = client.post("/api/companies/comp-001/checkout", json={"delivery": DELIVERY})
        assert response.status_code == 400
        assert response.json()["detail"] == "Cart is empty"

    def test_place_order(self, client, panels_in_cart):
        client.post(f"{CART}/coupons", json={"code": "SPRING10"})

        response = client.post("/api/companies/comp-001/checkout", json={"delivery": DELIVERY})
        assert response.status_code == 200
        order = response.json()["order"]
        assert order["status"] == "pending"
        assert order["subtotal"] == 1500.0
        assert order["coupon_codes"] == ["SPRING10"]
        assert order["total"] == 1875.0
        assert order["currency"] == "EUR"

        assert product_db.get_product("prod-001").stock_quantity == 490
        assert client.get(CART).json()["cart"]["items"] == {}

        orders = client.get("/api/companies/comp-001/checkout/orders").json()
        assert [o["order_id"] for o in orders] == [order["order_id"]]

        path = f"/api/companies/comp-001/checkout/orders/{order['order_id']}"
        assert client.get(path).status_code == 200
        assert client.get(path.replace("comp-001", "comp-002")).status_code == 404

    def test_failed_cart_reset_rolls_back_order(self, client, panels_in_cart, monkeypatch):
        from partner_cart.database import cart_db

        def unavailable(company_id):
            raise RuntimeError("storage unavailable")

        monkeypatch.setattr(cart_db, "clear", unavailable)

        response = client.post("/api/companies/comp-001/checkout", json={"delivery": DELIVERY})
        assert response.status_code == 502
        assert response.json()["detail"] == "Failed to clear cart: storage unavailable"

        assert client.get("/api/companies/comp-001/checkout/orders").json() == []
        assert product_db.get_product("prod-001").stock_quantity == 500
        assert client.get(CART).json()["cart"]["items"]["prod-001"]["quantity"] == 10
