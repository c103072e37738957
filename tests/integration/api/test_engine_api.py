"""
Integration tests for engine-facing license endpoints.
"""

from datetime import datetime, timedelta, timezone

import pytest
from asgiref.sync import async_to_sync

from core.domain.value_objects import LicenseTier
from licenses.domain.license import License


@pytest.mark.django_db
@pytest.mark.integration
class TestValidateEndpoint:
    """Tests for POST /api/v1/license/validate."""

    def test_validate_binds_hardware(self, api_client, db_license):
        response = api_client.post(
            "/api/v1/license/validate",
            {"license_id": str(db_license.id), "hardware_id": "hw-1"},
            format="json",
        )

        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is True
        assert data["license"]["hardware_id"] == "hw-1"

    def test_validate_mismatch(self, api_client, db_user, make_license):
        license = make_license(db_user, hardware_id="hw-1")

        response = api_client.post(
            "/api/v1/license/validate",
            {"license_id": license.license_key, "hardware_id": "hw-2"},
            format="json",
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "HARDWARE_MISMATCH"

    def test_validate_bound_license_without_hardware(self, api_client, db_user, make_license):
        license = make_license(db_user, hardware_id="hw-1")

        response = api_client.post(
            "/api/v1/license/validate", {"license_id": str(license.id)}, format="json"
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "HARDWARE_MISMATCH"

    def test_validate_unknown(self, api_client, db):
        response = api_client.post(
            "/api/v1/license/validate", {"license_id": "lic-123"}, format="json"
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "LICENSE_NOT_FOUND"

    def test_validate_expired(self, api_client, db_user, license_repository):
        past = datetime.now(timezone.utc) - timedelta(days=30)
        license = async_to_sync(license_repository.save)(
            License.create(user_id=db_user.id, tier=LicenseTier.TRIAL, valid_days=14, now=past)
        )

        response = api_client.post(
            "/api/v1/license/validate", {"license_id": str(license.id)}, format="json"
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "LICENSE_EXPIRED"

    def test_validate_missing_license_id(self, api_client, db):
        response = api_client.post("/api/v1/license/validate", {}, format="json")

        assert response.status_code == 400


@pytest.mark.django_db
@pytest.mark.integration
class TestActivateEndpoints:
    """Tests for POST /api/v1/license/activate and /deactivate."""

    def _activate(self, api_client, license, hardware_id, **headers):
        return api_client.post(
            "/api/v1/license/activate",
            {
                "license_key": license.license_key,
                "hardware_id": hardware_id,
                "hostname": "node-1",
                "platform": "linux",
                "version": "2.4.0",
            },
            format="json",
            **headers,
        )

    def test_activate(self, api_client, db_license):
        response = self._activate(
            api_client, db_license, "hw-1", HTTP_X_FORWARDED_FOR="203.0.113.7, 10.0.0.1"
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["created"] is True
        assert data["slots_remaining"] == 0
        assert data["activation"]["ip_address"] == "203.0.113.7"

    def test_activation_limit(self, api_client, db_license):
        self._activate(api_client, db_license, "hw-1")

        response = self._activate(api_client, db_license, "hw-2")

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "QUOTA_EXCEEDED"

    def test_deactivate_then_activate_elsewhere(self, api_client, db_license):
        self._activate(api_client, db_license, "hw-1")

        first = api_client.post(
            "/api/v1/license/deactivate",
            {"license_id": str(db_license.id), "hardware_id": "hw-1"},
            format="json",
        )
        again = api_client.post(
            "/api/v1/license/deactivate",
            {"license_id": str(db_license.id), "hardware_id": "hw-1"},
            format="json",
        )
        moved = self._activate(api_client, db_license, "hw-2")

        assert first.json() == {"success": True, "deactivated": True}
        assert again.json() == {"success": True, "deactivated": False}
        assert moved.status_code == 200
