"""
Tests for the greeting proxy routes and the relay error boundary.

Tests cover:
- Pass-through of upstream status and body (2xx and error statuses)
- DELETE 204 returns an empty body
- Forwarding exhaustion maps to the fixed 502 contract without leaking details
- Upstream URL built from api.backend.url + configured greetings path
- End-to-end scenarios with a scripted upstream and fake parameter store

No upstream API or AWS access required.
"""

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from structlog.testing import capture_logs

from webui_bff.api.routes.config import router as config_router
from webui_bff.api.routes.greetings import router as greetings_router
from webui_bff.forwarder import ResilientForwarder
from webui_bff.runtime_config import RuntimeConfig

from conftest import NAMESPACE, FakeParameterStore, ScriptedUpstream

GREETING_ID = '550e8400-e29b-41d4-a716-446655440000'
UNAVAILABLE = {"message": "Service temporarily unavailable"}


def _make_app(store: FakeParameterStore, steps: list) -> tuple[FastAPI, ScriptedUpstream]:
    upstream = ScriptedUpstream(steps)
    runtime_config = RuntimeConfig(store, namespace=NAMESPACE)

    app = FastAPI()
    app.include_router(greetings_router)
    app.include_router(config_router)
    app.state.runtime_config = runtime_config
    app.state.forwarder = ResilientForwarder(
        runtime_config,
        client=httpx.AsyncClient(transport=httpx.MockTransport(upstream)),
    )
    app.state.greetings_path = "/api/v1/greetings"
    return app, upstream


def _store(**leaves: str) -> FakeParameterStore:
    store = FakeParameterStore()
    store.set("api.backend.url", "http://mock-backend:8080")
    store.set("api.retry.count", "0")
    for leaf, value in leaves.items():
        store.set(leaf.replace("_", "."), value)
    return store


class TestGetGreeting:
    def test_proxies_get_with_id(self):
        body = '{"id":"%s","name":"Hello","fullMessage":"Hello World"}' % GREETING_ID
        app, upstream = _make_app(_store(), [httpx.Response(200, text=body)])

        response = TestClient(app).get(f"/api/greetings/{GREETING_ID}")

        assert response.status_code == 200
        assert response.text == body
        assert response.headers["content-type"] == "application/json"
        assert str(upstream.requests[0].url) == f"http://mock-backend:8080/api/v1/greetings/{GREETING_ID}"
        assert upstream.requests[0].method == "GET"

    def test_forwards_404(self):
        app, _ = _make_app(_store(), [httpx.Response(404, text='{"message":"Not found"}')])

        response = TestClient(app).get(f"/api/greetings/{GREETING_ID}")

        assert response.status_code == 404
        assert response.json() == {"message": "Not found"}

    def test_returns_502_when_backend_unreachable(self):
        app, _ = _make_app(_store(), [httpx.ConnectError("fetch failed")])

        with capture_logs() as logs:
            response = TestClient(app).get(f"/api/greetings/{GREETING_ID}")

        assert response.status_code == 502
        assert response.json() == UNAVAILABLE
        assert response.headers["content-type"] == "application/json"

        boundary = [entry for entry in logs if entry["event"] == "proxy.upstream_unavailable"]
        assert len(boundary) == 1
        assert boundary[0]["resource_id"] == GREETING_ID
        assert boundary[0]["error"] == "fetch failed"

    def test_502_body_does_not_leak_details(self):
        app, _ = _make_app(_store(), [httpx.ConnectError("connect to http://mock-backend:8080 refused")])

        response = TestClient(app).get(f"/api/greetings/{GREETING_ID}")

        assert response.status_code == 502
        assert "mock-backend" not in response.text
        assert "refused" not in response.text


class TestDeleteGreeting:
    def test_delete_204_has_empty_body(self):
        app, upstream = _make_app(_store(), [httpx.Response(204)])

        response = TestClient(app).delete(f"/api/greetings/{GREETING_ID}")

        assert response.status_code == 204
        assert response.content == b""
        assert upstream.requests[0].method == "DELETE"
        assert str(upstream.requests[0].url).endswith(f"/api/v1/greetings/{GREETING_ID}")

    def test_delete_404_passes_body_through(self):
        app, _ = _make_app(_store(), [httpx.Response(404, text='{"message":"Not found"}')])

        response = TestClient(app).delete(f"/api/greetings/{GREETING_ID}")

        assert response.status_code == 404
        assert response.json() == {"message": "Not found"}

    def test_delete_returns_502_when_backend_unreachable(self):
        app, _ = _make_app(_store(), [httpx.ConnectError("fetch failed")])

        response = TestClient(app).delete(f"/api/greetings/{GREETING_ID}")

        assert response.status_code == 502
        assert response.json() == UNAVAILABLE


class TestCollection:
    def test_list_greetings(self):
        app, upstream = _make_app(_store(), [httpx.Response(200, text="[]")])

        response = TestClient(app).get("/api/greetings")

        assert response.status_code == 200
        assert response.text == "[]"
        assert str(upstream.requests[0].url) == "http://mock-backend:8080/api/v1/greetings"

    def test_create_greeting_forwards_body_verbatim(self):
        created = '{"id":"1","name":"Hello"}'
        app, upstream = _make_app(_store(), [httpx.Response(201, text=created)])

        payload = '{"name":  "Hello"}'
        response = TestClient(app).post(
            "/api/greetings",
            content=payload,
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 201
        assert response.text == created
        request = upstream.requests[0]
        assert request.method == "POST"
        assert request.content == payload.encode()
        assert request.headers["content-type"] == "application/json"

    def test_create_greeting_validation_error_passes_through(self):
        app, _ = _make_app(_store(), [httpx.Response(400, text='{"message":"name is required"}')])

        response = TestClient(app).post("/api/greetings", content="{}")

        assert response.status_code == 400
        assert response.json() == {"message": "name is required"}


class TestConfigRoute:
    def test_returns_resolved_values(self):
        app, _ = _make_app(_store(app_description="Greeting UI"), [httpx.Response(200)])

        response = TestClient(app).get("/api/config")

        assert response.status_code == 200
        assert response.json() == {
            "description": "Greeting UI",
            "apiBackendUrl": "http://mock-backend:8080",
        }

    def test_fallbacks_when_store_unreachable(self):
        app, _ = _make_app(FakeParameterStore(unreachable=True), [httpx.Response(200)])

        response = TestClient(app).get("/api/config")

        assert response.json()["apiBackendUrl"] == "http://localhost:8080"
        assert "greeting service" in response.json()["description"]


class TestEndToEndScenarios:
    def test_recovers_on_third_attempt(self):
        """timeout=5000, retry=2; two failures then 200 "[]"."""
        store = _store(api_timeout_ms="5000", api_retry_count="2")
        app, upstream = _make_app(
            store,
            [
                httpx.ConnectError("refused"),
                httpx.ReadTimeout("timed out"),
                httpx.Response(200, text="[]"),
            ],
        )

        with capture_logs() as logs:
            response = TestClient(app).get("/api/greetings")

        assert response.status_code == 200
        assert response.text == "[]"
        assert upstream.attempts == 3
        assert len([e for e in logs if e["log_level"] == "warning"]) == 2
        assert len([e for e in logs if e["event"] == "forward.recovered"]) == 1

    def test_upstream_always_times_out(self):
        """retry=3 and an upstream that always times out: 4 attempts, then 502."""
        store = _store(api_retry_count="3")
        app, upstream = _make_app(store, [httpx.ConnectTimeout("timed out")])

        response = TestClient(app).get(f"/api/greetings/{GREETING_ID}")

        assert upstream.attempts == 4
        assert response.status_code == 502
        assert response.json() == UNAVAILABLE

    def test_conflict_is_not_retried(self):
        """409 on the first attempt: one attempt, 409 with the exact body."""
        store = _store(api_retry_count="3")
        conflict = '{"message":"Duplicate name"}'
        app, upstream = _make_app(store, [httpx.Response(409, text=conflict)])

        response = TestClient(app).post("/api/greetings", content='{"name":"Hello"}')

        assert upstream.attempts == 1
        assert response.status_code == 409
        assert response.text == conflict

    def test_store_unreachable_uses_fallback_backend(self):
        store = FakeParameterStore(unreachable=True)
        app, upstream = _make_app(store, [httpx.Response(200, text="[]")])

        response = TestClient(app).get("/api/greetings")

        assert response.status_code == 200
        assert str(upstream.requests[0].url) == "http://localhost:8080/api/v1/greetings"
