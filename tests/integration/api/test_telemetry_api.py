"""
Integration tests for telemetry ingestion and dashboard endpoints.
"""

import pytest

from ControlPlaneService.container import get_container
from core.domain.exceptions import StorageError


@pytest.mark.django_db
@pytest.mark.integration
class TestReceiveTelemetry:
    """Tests for POST /api/v1/telemetry/receive."""

    def test_unknown_license_is_recorded(self, api_client, db):
        response = api_client.post(
            "/api/v1/telemetry/receive",
            {"license_id": "lic-123", "hardware_id": "hw-1", "events_processed": 10},
            format="json",
        )

        assert response.status_code == 200
        assert response.json() == {"status": "recorded"}

    def test_malformed_body(self, api_client, db):
        response = api_client.post(
            "/api/v1/telemetry/receive",
            "{not json",
            content_type="application/json",
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "BAD_REQUEST"

    def test_negative_counter(self, api_client, db):
        response = api_client.post(
            "/api/v1/telemetry/receive",
            {"license_id": "lic-123", "hardware_id": "hw-1", "error_count": -1},
            format="json",
        )

        assert response.status_code == 400

    def test_storage_failure(self, api_client, db, monkeypatch):
        async def failing_upsert(record):
            raise StorageError()

        monkeypatch.setattr(get_container().telemetry_repository, "upsert", failing_upsert)

        response = api_client.post(
            "/api/v1/telemetry/receive",
            {"license_id": "lic-123", "hardware_id": "hw-1"},
            format="json",
        )

        assert response.status_code == 500
        assert response.json()["error"] == {
            "code": "INTERNAL_ERROR",
            "message": "Internal server error",
        }


@pytest.mark.django_db
@pytest.mark.integration
class TestUsageEndpoints:
    """Tests for the owner's usage endpoints."""

    def _report(self, api_client, license, hardware_id, events, errors):
        return api_client.post(
            "/api/v1/telemetry/receive",
            {
                "license_id": str(license.id),
                "hardware_id": hardware_id,
                "events_processed": events,
                "error_count": errors,
            },
            format="json",
        )

    def test_stats(self, api_client, bearer, db_user, db_license):
        reports = (("hw-1", 5000, 5), ("hw-2", 3000, 3), ("hw-3", 2000, 2))
        for hardware_id, events, errors in reports:
            self._report(api_client, db_license, hardware_id, events, errors)

        response = api_client.get("/api/v1/telemetry/stats", **bearer(db_user))

        assert response.status_code == 200
        data = response.json()
        assert data["total_events_processed"] == 10000
        assert data["total_errors"] == 10
        assert data["active_instances"] == 3

    def test_stats_requires_token(self, api_client, db):
        response = api_client.get("/api/v1/telemetry/stats")

        assert response.status_code == 401

    def test_usage_with_bad_days(self, api_client, bearer, db_user, db_license):
        self._report(api_client, db_license, "hw-1", 1, 0)

        response = api_client.get("/api/v1/telemetry/usage?days=abc", **bearer(db_user))

        assert response.status_code == 200
        assert len(response.json()) == 1

    def test_instances(self, api_client, bearer, db_user, db_license):
        api_client.post(
            "/api/v1/license/activate",
            {"license_key": db_license.license_key, "hardware_id": "hw-1", "hostname": "node-1"},
            format="json",
        )

        response = api_client.get("/api/v1/telemetry/instances", **bearer(db_user))

        assert response.status_code == 200
        [instance] = response.json()
        assert instance["hardware_id"] == "hw-1"
        assert instance["status"] == "online"
