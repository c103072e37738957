"""
Unit tests for capabilities and bearer header parsing.
"""

import pytest

from core.domain.authorization import Capability, has_capability
from core.domain.exceptions import UnauthorizedError
from core.domain.value_objects import UserRole
from core.middleware.auth import parse_bearer


class TestHasCapability:
    """Tests for has_capability."""

    @pytest.mark.parametrize("capability", list(Capability))
    def test_admin_holds_every_capability(self, capability):
        assert has_capability(UserRole.ADMIN, capability)

    def test_user_manages_own_licenses_only(self):
        assert has_capability("user", Capability.MANAGE_OWN_LICENSES)
        assert has_capability("user", Capability.VIEW_OWN_USAGE)
        assert not has_capability("user", Capability.MANAGE_ANY_LICENSE)
        assert not has_capability("user", Capability.GENERATE_LICENSES)

    @pytest.mark.parametrize("role", [None, "", "superuser", "ADMIN"])
    def test_unknown_roles_grant_nothing(self, role):
        assert not has_capability(role, Capability.LIST_ALL_LICENSES)


class TestParseBearer:
    """Tests for parse_bearer."""

    def test_extracts_token(self):
        assert parse_bearer("Bearer abc.def.ghi") == "abc.def.ghi"

    def test_scheme_is_case_insensitive(self):
        assert parse_bearer("bearer token") == "token"

    def test_missing_header(self):
        with pytest.raises(UnauthorizedError, match="Missing authorization header"):
            parse_bearer(None)

    @pytest.mark.parametrize("header", ["Bearer", "Basic abc", "Bearer a b", "token"])
    def test_malformed_header(self, header):
        with pytest.raises(UnauthorizedError, match="Invalid authorization header format"):
            parse_bearer(header)
