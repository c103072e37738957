"""
Integration tests for liveness and readiness checks.
"""

import pytest

from core import views


@pytest.mark.django_db
@pytest.mark.integration
class TestHealthEndpoints:
    """Tests for /health/ and /ready/."""

    def test_liveness(self, api_client):
        response = api_client.get("/health/")

        assert response.json() == {"status": "healthy", "service": "control-plane-service"}

    @pytest.mark.parametrize(
        "path,component", [("/health/db/", "database"), ("/health/cache/", "cache")]
    )
    def test_component_health(self, api_client, path, component):
        response = api_client.get(path)

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", component: "connected"}

    def test_ready(self, api_client):
        response = api_client.get("/ready/")

        assert response.status_code == 200
        assert response.json()["checks"] == {"database": True, "cache": True}

    def test_failing_cache_is_not_ready(self, api_client, monkeypatch):
        def broken():
            raise ConnectionError("cache down")

        monkeypatch.setitem(views.CHECKS, "cache", broken)

        ready = api_client.get("/ready/")
        cache_health = api_client.get("/health/cache/")

        assert ready.status_code == 503
        assert ready.json()["status"] == "not_ready"
        assert ready.json()["checks"] == {"database": True, "cache": False}
        assert cache_health.status_code == 503
        assert cache_health.json()["error"] == "cache down"
