"""Integration tests for health endpoints."""

from fastapi.testclient import TestClient


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_returns_ok(self, api_client: TestClient):
        response = api_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "timestamp" in data

    def test_ready_checks_database(self, api_client: TestClient):
        response = api_client.get("/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ready"
        assert data["checks"]["database"]["status"] == "ok"
        assert data["checks"]["file_storage"]["status"] == "ok"

    def test_info_returns_service_info(self, api_client: TestClient):
        response = api_client.get("/health/info")

        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "Pasarantar Admin API"
        assert data["environment"] == "development"

    def test_request_id_header(self, api_client: TestClient):
        response = api_client.get("/health")

        assert len(response.headers["X-Request-ID"]) == 8
        assert "X-Response-Time-Ms" in response.headers


class TestApiKeyAuth:
    """X-API-Key checks once keys are configured."""

    def test_missing_key_rejected(self, api_client: TestClient, monkeypatch):
        from api.config import Settings
        from api.middleware import auth

        monkeypatch.setattr(auth, "get_settings", lambda: Settings(debug=False, api_keys="rahasia"))

        response = api_client.get("/api/v1/products")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_REQUIRED"

    def test_wrong_key_rejected(self, api_client: TestClient, monkeypatch):
        from api.config import Settings
        from api.middleware import auth

        monkeypatch.setattr(auth, "get_settings", lambda: Settings(debug=False, api_keys="rahasia"))

        response = api_client.get("/api/v1/products", headers={"X-API-Key": "salah"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_API_KEY"

    def test_valid_key_accepted(self, api_client: TestClient, monkeypatch):
        from api.config import Settings
        from api.middleware import auth

        monkeypatch.setattr(
            auth, "get_settings", lambda: Settings(debug=False, api_keys="lain, rahasia")
        )

        response = api_client.get("/api/v1/products", headers={"X-API-Key": "rahasia"})

        assert response.status_code == 200
