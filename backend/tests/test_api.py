"""
HTTP API tests.

Verifies:
- Catalog, cart, sale, stock and report endpoints return the documented payloads
- Domain errors map to 400/404/409 with their error code
"""

import pytest

from conftest import COFFEE_ID, MILK_ID, RICE_ID


def _add(client, product_id, quantity=1):
    return client.post("/api/cart/lines", json={"product_id": product_id, "quantity": quantity})


@pytest.mark.smoke
def test_health(client, seeded):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.get_json()
    assert body["status"] == "healthy"
    assert body["store_name"] == "ORION PDV"
    assert body["checks"]["database"]["details"]["products"] == 3


class TestCatalogApi:
    def test_list_products(self, client, seeded):
        body = client.get("/api/products").get_json()

        assert body["count"] == 3
        assert body["groups"] == ["Beverages", "Dairy", "Grains"]
        milk = next(p for p in body["products"] if p["id"] == MILK_ID)
        assert milk["unit_price"] == "5.99"
        assert milk["stock_quantity"] == 50

    def test_filter_by_group(self, client, seeded):
        body = client.get("/api/products?group=Dairy").get_json()
        assert [p["id"] for p in body["products"]] == [MILK_ID]

    def test_scan(self, client, seeded):
        response = client.get(f"/api/products/scan/{RICE_ID}")
        assert response.status_code == 200
        assert response.get_json()["product"]["name"] == "Rice"

    def test_scan_unknown(self, client, seeded):
        response = client.get("/api/products/scan/0000")
        assert response.status_code == 404
        assert response.get_json()["code"] == "UNKNOWN_PRODUCT"

    def test_get_unknown_product(self, client, seeded):
        assert client.get("/api/products/nope").status_code == 404

    def test_create_product(self, client, seeded):
        response = client.post(
            "/api/products",
            json={"name": "Black Beans", "unit_price": "8.49", "scan_code": "7896006711117", "initial_stock": 12},
        )

        assert response.status_code == 201
        product = response.get_json()["product"]
        assert product["id"] == "7896006711117"
        assert product["stock_quantity"] == 12

        movements = client.get("/api/stock/movements?product_id=7896006711117").get_json()
        assert [m["reason"] for m in movements["movements"]] == ["initial-stock"]

    def test_duplicate_scan_code_conflicts(self, client, seeded):
        response = client.post("/api/products", json={"name": "Milk again", "unit_price": "5.00", "scan_code": MILK_ID})
        assert response.status_code == 409
        assert response.get_json()["code"] == "DUPLICATE_SCAN_CODE"

    def test_create_product_requires_price(self, client, seeded):
        response = client.post("/api/products", json={"name": "No price"})
        assert response.status_code == 400
        assert response.get_json()["code"] == "VALIDATION_ERROR"

    def test_update_price(self, client, seeded):
        response = client.patch(f"/api/products/{MILK_ID}", json={"unit_price": "6.29"})
        assert response.status_code == 200
        assert response.get_json()["product"]["unit_price"] == "6.29"

    def test_clients(self, client, seeded):
        created = client.post("/api/clients", json={"name": "Joao Souza", "city": "Santos"})
        assert created.status_code == 201

        body = client.get("/api/clients").get_json()
        assert body["count"] == 3
        assert client.get("/api/clients/2").get_json()["client"]["name"] == "Maria Silva"
        assert client.get("/api/clients/404").status_code == 404


@pytest.mark.smoke
@pytest.mark.sales
class TestCheckoutFlow:
    def test_cart_to_sale(self, client, seeded):
        assert _add(client, MILK_ID, 2).status_code == 201
        scanned = client.post("/api/cart/scan", json={"code": f" {RICE_ID} "})
        assert scanned.status_code == 201

        totals = client.get("/api/cart/totals?discount=10").get_json()
        assert totals["totals"]["total"] == "31.392"
        assert totals["display_totals"]["total"] == "31.39"

        response = client.post("/api/sales", json={"payment_method": "cash", "discount_percent": 10, "cashier_id": "c1"})

        assert response.status_code == 201
        body = response.get_json()
        assert body["sale"]["id"] == "S-000001"
        assert body["sale"]["client_id"] == "1"
        assert body["sale"]["total"] == "31.392"
        assert body["receipt"]["total"] == "31.39"
        assert body["receipt"]["store"]["name"] == "ORION PDV"

        cart = client.get("/api/cart").get_json()
        assert cart["is_empty"] is True

        detail = client.get("/api/sales/S-000001").get_json()
        assert [(m["product_id"], m["quantity"], m["kind"]) for m in detail["movements"]] == [
            (MILK_ID, 2, "outbound"),
            (RICE_ID, 1, "outbound"),
        ]
        assert client.get(f"/api/products/{MILK_ID}").get_json()["product"]["stock_quantity"] == 48

        listed = client.get("/api/sales").get_json()
        assert listed["count"] == 1
        receipt = client.get("/api/sales/S-000001/receipt")
        assert receipt.status_code == 200

    def test_cart_edits(self, client, seeded):
        _add(client, MILK_ID, 1)
        _add(client, MILK_ID, 2)
        _add(client, COFFEE_ID, 1)

        cart = client.get("/api/cart").get_json()
        assert [(line["product_id"], line["quantity"]) for line in cart["lines"]] == [(MILK_ID, 3), (COFFEE_ID, 1)]
        assert cart["item_count"] == 4

        updated = client.patch(f"/api/cart/lines/{MILK_ID}", json={"quantity": 0}).get_json()
        assert updated["line"] is None
        assert [line["product_id"] for line in updated["cart"]["lines"]] == [COFFEE_ID]

        removed = client.delete(f"/api/cart/lines/{COFFEE_ID}").get_json()
        assert removed["removed"] is True
        assert removed["cart"]["is_empty"] is True

    def test_clear_cart(self, client, seeded):
        _add(client, MILK_ID, 1)
        assert client.delete("/api/cart").get_json()["is_empty"] is True

    def test_add_over_stock(self, client, seeded):
        response = _add(client, COFFEE_ID, 29)

        assert response.status_code == 400
        body = response.get_json()
        assert body["code"] == "OUT_OF_STOCK"
        assert body["details"]["available"] == 28

    def test_scan_unknown_code(self, client, seeded):
        response = client.post("/api/cart/scan", json={"code": "000"})
        assert response.status_code == 400
        assert response.get_json()["code"] == "UNKNOWN_PRODUCT"

    def test_invalid_discount(self, client, seeded):
        _add(client, MILK_ID, 1)
        response = client.get("/api/cart/totals?discount=120")
        assert response.status_code == 400
        assert response.get_json()["code"] == "INVALID_DISCOUNT"

    def test_commit_empty_cart(self, client, seeded):
        response = client.post("/api/sales", json={"payment_method": "cash"})
        assert response.status_code == 400
        assert response.get_json()["code"] == "EMPTY_CART"

    def test_commit_invalid_payment_method(self, client, seeded):
        _add(client, MILK_ID, 1)
        response = client.post("/api/sales", json={"payment_method": "bitcoin"})
        assert response.status_code == 400
        assert response.get_json()["code"] == "INVALID_PAYMENT_METHOD"
        assert client.get("/api/cart").get_json()["item_count"] == 1

    def test_commit_unknown_client(self, client, seeded):
        _add(client, MILK_ID, 1)
        response = client.post("/api/sales", json={"payment_method": "cash", "client_id": "404"})
        assert response.status_code == 400
        assert response.get_json()["code"] == "UNKNOWN_CLIENT"

    def test_commit_after_stock_drop(self, client, seeded):
        _add(client, RICE_ID, 3)
        client.post("/api/stock/adjust", json={"product_id": RICE_ID, "delta": -33})

        response = client.post("/api/sales", json={"payment_method": "cash"})

        assert response.status_code == 400
        assert response.get_json()["code"] == "OUT_OF_STOCK"
        assert client.get("/api/sales").get_json()["count"] == 0

    def test_unknown_sale(self, client, seeded):
        assert client.get("/api/sales/S-999999").status_code == 404
        assert client.get("/api/sales/S-999999/receipt").status_code == 404


class TestStockApi:
    def test_adjust(self, client, seeded):
        response = client.post(
            "/api/stock/adjust",
            json={"product_id": MILK_ID, "delta": 12, "reason": "restock", "note": "Delivery", "actor_id": "mgr"},
        )

        assert response.status_code == 201
        body = response.get_json()
        assert body["product"]["stock_quantity"] == 62
        assert body["movement"]["kind"] == "inbound"
        assert body["movement"]["reason"] == "restock"

    @pytest.mark.parametrize("delta", [0, 1.5, "x"])
    def test_invalid_delta(self, client, seeded, delta):
        response = client.post("/api/stock/adjust", json={"product_id": MILK_ID, "delta": delta})
        assert response.status_code == 400
        assert response.get_json()["code"] in ("INVALID_ADJUSTMENT", "VALIDATION_ERROR")

    def test_sale_reason_is_reserved(self, client, seeded):
        response = client.post("/api/stock/adjust", json={"product_id": MILK_ID, "delta": -1, "reason": "sale"})
        assert response.status_code == 400
        assert response.get_json()["code"] == "INVALID_ADJUSTMENT"

    def test_negative_result(self, client, seeded):
        response = client.post("/api/stock/adjust", json={"product_id": COFFEE_ID, "delta": -29})
        assert response.status_code == 400
        assert response.get_json()["code"] == "NEGATIVE_STOCK_RESULT"

    def test_unknown_product(self, client, seeded):
        response = client.post("/api/stock/adjust", json={"product_id": "nope", "delta": 1})
        assert response.status_code == 400
        assert response.get_json()["code"] == "UNKNOWN_PRODUCT"

    def test_recent_movements(self, client, seeded):
        client.post("/api/stock/adjust", json={"product_id": MILK_ID, "delta": -2})

        body = client.get("/api/stock/movements?limit=2").get_json()

        assert body["count"] == 2
        assert body["movements"][0]["reason"] == "manual-adjustment"
        assert body["movements"][0]["quantity"] == 2

    def test_movements_for_unknown_product(self, client, seeded):
        response = client.get("/api/stock/movements?product_id=nope")
        assert response.status_code == 400


class TestReportsApi:
    def test_sales_report(self, client, seeded):
        _add(client, COFFEE_ID, 2)
        client.post("/api/sales", json={"payment_method": "pix", "client_id": "2"})

        report = client.get("/api/reports/sales?top=1").get_json()

        assert report["totals"]["sales"] == 1
        assert report["totals"]["total"] == "31.50"
        assert report["by_payment_method"] == {"pix": {"count": 1, "total": "31.50"}}
        assert report["best_sellers"][0]["product_id"] == COFFEE_ID

    def test_sales_report_bad_range(self, client, seeded):
        response = client.get("/api/reports/sales?start=2026-10-19&end=2026-10-01")
        assert response.status_code == 400

    def test_stock_report(self, client, seeded):
        report = client.get("/api/reports/stock").get_json()
        assert report["stock_value"] == "1542.00"
        assert report["product_count"] == 3
