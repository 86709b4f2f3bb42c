"""Tests for the health endpoint."""


def test_health_returns_ok(client):
    """GET /health should return HTTP 200 with status ok."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["database"] == "connected"


def test_root_points_to_docs(client):
    response = client.get("/")
    assert response.json()["docs"] == "/docs"
