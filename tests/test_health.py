"""Health, landing page, and unknown routes."""
from fastapi.testclient import TestClient


def test_health_returns_ok(client: TestClient):
    r = client.get("/health")
    assert r.status_code == 200
    j = r.json()
    assert j.get("status") == "ok"
    assert j.get("database") == "ok"
    assert r.headers.get("X-Request-ID")


def test_landing_links_to_register_and_login(client: TestClient):
    r = client.get("/")
    assert r.status_code == 200
    j = r.json()
    assert j["servis"] == "SmartCare Mitra"
    assert j["links"] == {"register": "/register", "login": "/login"}


def test_unknown_path_returns_not_found_message(client: TestClient):
    r = client.get("/tidak-ada")
    assert r.status_code == 404
    j = r.json()
    assert j["error"] == "Halaman tidak ditemukan."
    assert j["status_code"] == 404
    assert "request_id" in j
