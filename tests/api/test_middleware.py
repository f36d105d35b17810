"""Tests for API middleware and error envelopes."""

from fastapi.testclient import TestClient


class TestRequestIdMiddleware:
    """Tests for request ID correlation middleware."""

    def test_generates_request_id_if_not_provided(self, client: TestClient) -> None:
        """Should generate request ID if not in request headers."""
        response = client.get("/health")
        assert response.status_code == 200
        assert "X-Request-ID" in response.headers
        # UUID format
        assert len(response.headers["X-Request-ID"]) == 36

    def test_uses_provided_request_id(self, client: TestClient) -> None:
        """Should use request ID from request headers."""
        custom_id = "custom-request-id-12345"
        response = client.get("/health", headers={"X-Request-ID": custom_id})
        assert response.status_code == 200
        assert response.headers["X-Request-ID"] == custom_id


class TestErrorEnvelope:
    """Domain errors are rendered in the standard envelope."""

    def test_not_found_envelope(self, client: TestClient) -> None:
        response = client.get("/admin/categories/missing", headers={"X-Request-ID": "req-1"})
        assert response.status_code == 404
        data = response.json()
        assert data["error_code"] == "CATEGORY_NOT_FOUND"
        assert data["message"] == "Category not found: missing"
        assert data["details"] == {"category_id": "missing"}
        assert data["request_id"] == "req-1"

    def test_validation_envelope(self, client: TestClient) -> None:
        response = client.post("/admin/categories", json={"name": "  "})
        assert response.status_code == 400
        assert response.json()["error_code"] == "MISSING_FIELD"
