"""Integration tests for cost components, the HPP calculator and products."""

import io

import pandas as pd
from fastapi.testclient import TestClient


def _create_product(client: TestClient, **overrides) -> dict:
    payload = {"name": "Ayam Potong", "unit": "kg", "price": 38000, "cost_price": 30000, "stock": 20}
    payload.update(overrides)
    response = client.post("/api/v1/products", json=payload)
    assert response.status_code == 201
    return response.json()


class TestCostComponents:

    def test_add_and_list(self, api_client: TestClient):
        response = api_client.post("/api/v1/cost-components", json={"name": "Plastik", "cost": 500})
        assert response.status_code == 201
        component = response.json()

        listed = api_client.get("/api/v1/cost-components").json()
        assert [c["id"] for c in listed] == [component["id"]]

    def test_invalid_component_uses_error_envelope(self, api_client: TestClient):
        response = api_client.post("/api/v1/cost-components", json={"name": "Plastik", "cost": 0})

        assert response.status_code == 400
        data = response.json()
        assert data["error"]["code"] == "VALIDATION_ERROR"
        assert "request_id" in data
        assert "timestamp" in data

    def test_delete_unknown(self, api_client: TestClient):
        response = api_client.delete("/api/v1/cost-components/cc_missing")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"


class TestHPP:

    def test_calculate(self, api_client: TestClient):
        response = api_client.post("/api/v1/hpp/calculate", json={
            "base_material_cost": 100000,
            "shrinkage_percent": 10,
            "components": [{"name": "Plastik", "cost": 500, "qty": 4}],
            "margin_percent": 30,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["result"]["total_hpp"] == 112000
        assert data["result"]["rounded_price"] == 146000
        assert data["rounded_price_label"] == "Rp 146.000"

    def test_shrinkage_over_100_rejected(self, api_client: TestClient):
        response = api_client.post("/api/v1/hpp/calculate", json={
            "base_material_cost": 1000,
            "shrinkage_percent": 150,
        })

        assert response.status_code == 400

    def test_save_to_catalog(self, api_client: TestClient):
        response = api_client.post("/api/v1/hpp/save", json={
            "product_name": "Rendang 500g",
            "calculation": {"base_material_cost": 60000, "margin_percent": 25},
        })

        assert response.status_code == 201
        product = response.json()
        assert product["cost_price"] == 60000
        assert product["price"] == 75000
        assert product["stock"] == 0

    def test_save_blank_name_rejected(self, api_client: TestClient):
        response = api_client.post("/api/v1/hpp/save", json={
            "product_name": "  ",
            "calculation": {"base_material_cost": 60000},
        })

        assert response.status_code == 400
        assert api_client.get("/api/v1/products").json() == []


class TestProducts:

    def test_crud(self, api_client: TestClient):
        product = _create_product(api_client)

        response = api_client.patch(f"/api/v1/products/{product['id']}", json={"price": 40000})
        assert response.status_code == 200
        assert response.json()["price"] == 40000
        assert response.json()["cost_price"] == 30000

        assert api_client.get(f"/api/v1/products/{product['id']}").status_code == 200
        assert api_client.delete(f"/api/v1/products/{product['id']}").status_code == 200
        assert api_client.get(f"/api/v1/products/{product['id']}").status_code == 404

    def test_restock_with_cost(self, api_client: TestClient):
        product = _create_product(api_client)

        response = api_client.post(
            f"/api/v1/products/{product['id']}/restock",
            json={"qty_to_add": 5, "total_cost": 50000},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["product"]["stock"] == 25
        assert data["transaction"]["category"] == "Belanja Pasar (HPP)"

        transactions = api_client.get("/api/v1/transactions").json()
        assert len(transactions) == 1
        assert transactions[0]["amount"] == 50000

    def test_restock_free_stock(self, api_client: TestClient):
        product = _create_product(api_client)

        response = api_client.post(f"/api/v1/products/{product['id']}/restock", json={"qty_to_add": 5})

        assert response.json()["transaction"] is None
        assert api_client.get("/api/v1/transactions").json() == []

    def test_restock_invalid_qty(self, api_client: TestClient):
        product = _create_product(api_client)

        response = api_client.post(f"/api/v1/products/{product['id']}/restock", json={"qty_to_add": 0})

        assert response.status_code == 400
        assert api_client.get(f"/api/v1/products/{product['id']}").json()["stock"] == 20

    def test_restock_unknown_product(self, api_client: TestClient):
        response = api_client.post("/api/v1/products/prd_missing/restock", json={"qty_to_add": 1})
        assert response.status_code == 404

    def test_export_csv(self, api_client: TestClient):
        _create_product(api_client)

        response = api_client.get("/api/v1/products/export", params={"format": "csv"})

        assert response.status_code == 200
        df = pd.read_csv(io.BytesIO(response.content))
        assert df["Nama Produk"].tolist() == ["Ayam Potong"]

    def test_import_csv(self, api_client: TestClient):
        content = "Nama Produk,Satuan,Harga Jual,Harga Modal (HPP)\nTahu,pack,5000,3500\n"

        response = api_client.post(
            "/api/v1/products/import",
            files={"file": ("katalog.csv", content.encode(), "text/csv")},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["filename"] == "katalog.csv"
        assert data["added_count"] == 1
        assert [p["name"] for p in api_client.get("/api/v1/products").json()] == ["Tahu"]

    def test_import_unsupported_type(self, api_client: TestClient):
        response = api_client.post(
            "/api/v1/products/import",
            files={"file": ("katalog.pdf", b"%PDF", "application/pdf")},
        )

        assert response.status_code == 400

    def test_import_missing_columns(self, api_client: TestClient):
        response = api_client.post(
            "/api/v1/products/import",
            files={"file": ("katalog.csv", b"Produk,Stok\nTahu,3\n", "text/csv")},
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "PROCESSING_ERROR"
