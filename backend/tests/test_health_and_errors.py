from fastapi.testclient import TestClient

from school_api import services
from school_api.main import app

client = TestClient(app)


def test_health_endpoints():
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "Healthy"
    assert {c["name"] for c in body["checks"]} == {"self", "database"}
    assert client.get("/health/live").json() == {"status": "Healthy"}
    assert client.get("/health/ready").status_code == 200


def test_request_id_is_echoed():
    r = client.get("/api/v1/students", headers={"X-Request-ID": "abc123"})
    assert r.headers["X-Request-ID"] == "abc123"
    assert client.get("/api/v1/students").headers["X-Request-ID"]


def test_unexpected_fault_returns_generic_500(monkeypatch):
    def boom(self):
        raise RuntimeError("database is on fire")

    monkeypatch.setattr(services.StudentService, "list_students", boom)
    quiet = TestClient(app, raise_server_exceptions=False)
    r = quiet.get("/api/v1/students")
    assert r.status_code == 500
    body = r.json()
    assert body["message"] == "An unexpected error occurred while processing your request."
    assert "fire" not in body["message"]


def test_500_body_carries_request_id(monkeypatch):
    def boom(self):
        raise RuntimeError("database is on fire")

    monkeypatch.setattr(services.StudentService, "list_students", boom)
    quiet = TestClient(app, raise_server_exceptions=False)
    r = quiet.get("/api/v1/students", headers={"X-Request-ID": "trace-42"})
    assert r.status_code == 500
    assert r.json()["request_id"] == "trace-42"
