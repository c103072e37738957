"""
Integration tests for administrative license endpoints.
"""

import pytest

from core.domain.value_objects import LicenseTier


@pytest.mark.django_db
@pytest.mark.integration
class TestAdminLicensesAPI:
    """Tests for /api/v1/admin/ endpoints."""

    def test_list_all_with_filters(self, api_client, bearer, db_admin, db_user, make_license):
        make_license(db_user, tier=LicenseTier.PRO)
        make_license(db_user, tier=LicenseTier.PRO)
        make_license(db_user)

        response = api_client.get(
            "/api/v1/admin/licenses?tier=pro&limit=1", **bearer(db_admin)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["limit"] == 1
        assert len(data["licenses"]) == 1

    def test_list_rejects_bad_status(self, api_client, bearer, db_admin):
        response = api_client.get("/api/v1/admin/licenses?status=paused", **bearer(db_admin))

        assert response.status_code == 400

    def test_generate_for_user(self, api_client, bearer, db_admin, db_user):
        response = api_client.post(
            "/api/v1/admin/licenses/generate",
            {"user_id": str(db_user.id), "tier": "enterprise", "valid_days": 30},
            format="json",
            **bearer(db_admin),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["user_id"] == str(db_user.id)
        assert data["max_sources"] == 0

    def test_generate_for_missing_user(self, api_client, bearer, db_admin):
        response = api_client.post(
            "/api/v1/admin/licenses/generate",
            {"user_id": "00000000-0000-0000-0000-000000000001", "tier": "pro"},
            format="json",
            **bearer(db_admin),
        )

        assert response.status_code == 404

    def test_generate_forbidden_for_users(self, api_client, bearer, db_user):
        response = api_client.post(
            "/api/v1/admin/licenses/generate",
            {"user_id": str(db_user.id), "tier": "pro"},
            format="json",
            **bearer(db_user),
        )

        assert response.status_code == 403
