"""
Unit tests for the admin role gate on its own.
"""

import json

import pytest
from django.http import HttpResponse
from django.test import RequestFactory

from core.middleware.auth import AdminRoleMiddleware


@pytest.fixture
def calls():
    return []


@pytest.fixture
def middleware(calls):
    def get_response(request):
        calls.append(request.path)
        return HttpResponse("ok")

    return AdminRoleMiddleware(get_response)


class TestAdminRoleMiddleware:
    """Tests for AdminRoleMiddleware without bearer authentication in front."""

    def test_admin_route_without_auth_context_is_unauthorized(self, middleware, calls):
        request = RequestFactory().get("/api/v1/admin/licenses")

        response = middleware.process_request(request)

        assert response.status_code == 401
        assert json.loads(response.content)["error"]["code"] == "UNAUTHORIZED"
        assert calls == []

    def test_full_call_stops_before_view(self, middleware, calls):
        request = RequestFactory().post("/api/v1/admin/licenses/generate")

        response = middleware(request)

        assert response.status_code == 401
        assert calls == []

    def test_other_routes_pass_through(self, middleware, calls):
        request = RequestFactory().get("/api/v1/licenses/")

        assert middleware.process_request(request) is None
        assert middleware(request).status_code == 200
        assert calls == ["/api/v1/licenses/"]
