from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient


def test_preserves_incoming_request_id_header(client: TestClient):
    incoming_id = "test-request-id-123"
    resp = client.get("/health", headers={"X-Request-ID": incoming_id})

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == incoming_id


def test_generates_request_id_when_missing(client: TestClient):
    resp = client.get("/health")

    assert resp.status_code == 200
    generated = resp.headers.get("X-Request-ID")
    assert generated
    assert resp.headers.get("X-Request-Duration-ms") is not None


def test_request_id_present_on_error_responses(client: TestClient):
    resp = client.post("/api/contact", json={})

    assert resp.status_code == 400
    assert resp.headers.get("X-Request-ID")


def test_request_id_present_on_unhandled_errors(app: FastAPI):
    async def explode():
        raise RuntimeError("unexpected")

    app.add_api_route("/explode", explode)
    client = TestClient(app, raise_server_exceptions=False)

    resp = client.get("/explode", headers={"X-Request-ID": "req-500"})

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Internal server error"}
    assert resp.headers.get("X-Request-ID") == "req-500"
    assert resp.headers.get("X-Request-Duration-ms") is not None
