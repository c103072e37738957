"""
Integration tests for owner license management endpoints.
"""

import uuid

import pytest

from core.domain.value_objects import LicenseTier


@pytest.mark.django_db
@pytest.mark.integration
class TestLicensesAPI:
    """Tests for /api/v1/licenses/ endpoints."""

    def test_list_own_licenses(self, api_client, bearer, db_user, db_other_user, make_license):
        mine = make_license(db_user)
        make_license(db_other_user)

        response = api_client.get("/api/v1/licenses/", **bearer(db_user))

        assert response.status_code == 200
        assert [item["id"] for item in response.json()] == [str(mine.id)]

    def test_issue_license(self, api_client, bearer, db_user):
        response = api_client.post(
            "/api/v1/licenses/", {"tier": "pro"}, format="json", **bearer(db_user)
        )

        assert response.status_code == 201
        data = response.json()
        assert data["tier"] == "pro"
        assert data["max_sources"] == 10
        assert data["user_id"] == str(db_user.id)

    def test_issue_unknown_tier(self, api_client, bearer, db_user):
        response = api_client.post(
            "/api/v1/licenses/", {"tier": "gold"}, format="json", **bearer(db_user)
        )

        assert response.status_code == 400

    def test_get_license(self, api_client, bearer, db_user, db_license):
        response = api_client.get(f"/api/v1/licenses/{db_license.id}", **bearer(db_user))

        assert response.status_code == 200
        assert response.json()["license_key"] == db_license.license_key

    def test_get_foreign_license(self, api_client, bearer, db_other_user, db_license):
        response = api_client.get(f"/api/v1/licenses/{db_license.id}", **bearer(db_other_user))

        assert response.status_code == 403

    def test_get_missing_license(self, api_client, bearer, db_user):
        response = api_client.get(f"/api/v1/licenses/{uuid.uuid4()}", **bearer(db_user))

        assert response.status_code == 404

    def test_revoke_twice(self, api_client, bearer, db_user, db_license):
        first = api_client.delete(f"/api/v1/licenses/{db_license.id}", **bearer(db_user))
        second = api_client.delete(f"/api/v1/licenses/{db_license.id}", **bearer(db_user))

        assert first.status_code == 200
        assert second.status_code == 200
        assert first.json()["status"] == "revoked"
        assert second.json()["revoked_at"] == first.json()["revoked_at"]

    def test_list_and_release_activations(self, api_client, bearer, db_user, make_license):
        license = make_license(db_user, tier=LicenseTier.PRO)
        api_client.post(
            "/api/v1/license/activate",
            {"license_key": license.license_key, "hardware_id": "hw-1"},
            format="json",
        )

        listed = api_client.get(
            f"/api/v1/licenses/{license.id}/activations", **bearer(db_user)
        )
        activation_id = listed.json()[0]["id"]
        released = api_client.delete(
            f"/api/v1/licenses/activations/{activation_id}", **bearer(db_user)
        )

        assert listed.status_code == 200
        assert len(listed.json()) == 1
        assert released.status_code == 200
        assert released.json()["is_active"] is False
