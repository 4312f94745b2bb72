"""Tests for the demo application the CORS filter is composed onto.

The app:
- Serves GET /health without touching CORS when no Origin is sent
- Enforces the policy passed to create_app (or built from settings)
"""

from fastapi.testclient import TestClient

from corsgate.app import create_app
from corsgate.policy import CORSPolicy
from tests.helpers import ORIGIN, OTHER_ORIGIN, origin_headers, preflight_headers


class TestHealthEndpoint:
    """Tests for GET /health"""

    def test_health_returns_200(self):
        client = TestClient(create_app())
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"data": {"status": "ok"}}
        assert "access-control-allow-origin" not in response.headers

    def test_health_with_origin_gets_cors_headers(self):
        client = TestClient(create_app())
        response = client.get("/health", headers=origin_headers())

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"


class TestCreateApp:
    """create_app wires the CORS middleware outermost."""

    def test_explicit_policy(self):
        client = TestClient(create_app(CORSPolicy(allowed_origins=[ORIGIN, OTHER_ORIGIN])))
        response = client.get("/health", headers=origin_headers())

        assert response.headers["access-control-allow-origin"] == ORIGIN
        assert response.headers["vary"] == "Origin"

    def test_preflight_answered_before_routing(self):
        """OPTIONS on a GET-only route is answered by the filter, not with 405."""
        client = TestClient(create_app(CORSPolicy(allowed_methods=["GET"])))
        response = client.options("/health", headers=preflight_headers("GET"))

        assert response.status_code == 200
        assert response.headers["access-control-allow-methods"] == "GET"

    def test_policy_from_settings(self, monkeypatch):
        monkeypatch.setenv("CORS_ALLOWED_ORIGINS", OTHER_ORIGIN)
        monkeypatch.setenv("LOG_JSON", "false")
        client = TestClient(create_app())
        response = client.options("/health", headers=preflight_headers("GET"))

        assert response.status_code == 403

    def test_ignore_options_reaches_router(self, monkeypatch):
        monkeypatch.setenv("CORS_IGNORE_OPTIONS", "true")
        client = TestClient(create_app())
        response = client.options("/health", headers=preflight_headers("GET"))

        assert response.status_code == 405


class TestLauncher:
    """apps/api/main.py exposes a ready-to-serve app."""

    def test_launcher_app(self):
        from apps.api.main import app

        response = TestClient(app).get("/health", headers=origin_headers())
        assert response.status_code == 200
        assert "access-control-allow-origin" in response.headers
