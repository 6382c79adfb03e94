"""
API tests - health and availability
"""


class TestHealthAPI:
    """Tests for the health endpoints"""

    def test_health_ready_returns_200(self, client):
        """GET /health/ready returns 200"""
        r = client.get("/health/ready")
        assert r.status_code == 200

    def test_health_ready_response_body(self, client):
        """GET /health/ready returns status ok"""
        r = client.get("/health/ready")
        assert r.json().get("status") == "ok"

    def test_security_headers(self, client):
        r = client.get("/health/ready")
        assert r.headers["X-Content-Type-Options"] == "nosniff"
        assert r.headers["X-Frame-Options"] == "DENY"
