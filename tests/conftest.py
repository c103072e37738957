"""
Pytest configuration and shared fixtures.

Repositories are async; fixtures and tests drive them through
async_to_sync so ORM work runs on the test's own database connection.
"""

from datetime import timedelta

import pytest
from asgiref.sync import async_to_sync
from django.contrib.auth.hashers import make_password
from django.core.cache import cache

from accounts.application.services.token_service import TokenService, TokenSettings
from accounts.domain.user import User
from accounts.infrastructure.repositories.django_refresh_token_repository import (
    DjangoRefreshTokenRepository,
)
from accounts.infrastructure.repositories.django_user_repository import DjangoUserRepository
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from core.domain.value_objects import LicenseTier, UserRole
from licenses.domain.license import License
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from telemetry.infrastructure.repositories.django_telemetry_repository import (
    DjangoTelemetryRepository,
)

TEST_SECRET = "unit-test-signing-key-0123456789-abcdefghij"
TEST_PASSWORD = "correct-horse-battery"


@pytest.fixture(autouse=True)
def clear_cache():
    """Dashboard stats are cached; start every test cold."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def user_password():
    """Plain-text password of every saved test user."""
    return TEST_PASSWORD


@pytest.fixture
def user_repository():
    """Fixture for UserRepository."""
    return DjangoUserRepository()


@pytest.fixture
def refresh_token_repository():
    """Fixture for RefreshTokenRepository."""
    return DjangoRefreshTokenRepository()


@pytest.fixture
def license_repository():
    """Fixture for LicenseRepository."""
    return DjangoLicenseRepository()


@pytest.fixture
def activation_repository():
    """Fixture for ActivationRepository."""
    return DjangoActivationRepository()


@pytest.fixture
def telemetry_repository():
    """Fixture for TelemetryRepository."""
    return DjangoTelemetryRepository()


@pytest.fixture
def token_settings():
    return TokenSettings(
        secret_key=TEST_SECRET,
        issuer="control-plane-test",
        access_token_lifetime=timedelta(minutes=15),
        refresh_token_lifetime=timedelta(days=7),
    )


@pytest.fixture
def token_service(token_settings, refresh_token_repository):
    """Fixture for TokenService."""
    return TokenService(token_settings, refresh_token_repository)


def _save_user(user_repository, email, role=UserRole.USER):
    user = User.create(
        email=email,
        password_hash=make_password(TEST_PASSWORD),
        name="Test User",
        company="Acme",
        role=role,
    )
    return async_to_sync(user_repository.save)(user)


@pytest.fixture
def db_user(db, user_repository):
    """Fixture for a regular User saved in database."""
    return _save_user(user_repository, "owner@example.com")


@pytest.fixture
def db_other_user(db, user_repository):
    """Fixture for a second regular User."""
    return _save_user(user_repository, "other@example.com")


@pytest.fixture
def db_admin(db, user_repository):
    """Fixture for an admin User saved in database."""
    return _save_user(user_repository, "admin@example.com", role=UserRole.ADMIN)


@pytest.fixture
def make_license(db, license_repository):
    """Factory fixture saving a License for a user."""

    def _make(user, tier=LicenseTier.COMMUNITY, valid_days=365, hardware_id=None):
        license = License.create(
            user_id=user.id, tier=tier, valid_days=valid_days, hardware_id=hardware_id
        )
        return async_to_sync(license_repository.save)(license)

    return _make


@pytest.fixture
def db_license(db_user, make_license):
    """Fixture for a community License (one activation slot) owned by db_user."""
    return make_license(db_user)


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def bearer():
    """Build Authorization headers signed with the running container's key."""
    from ControlPlaneService.container import get_container

    def _bearer(user):
        token, _ = get_container().token_service.issue_access_token(
            user.id, str(user.email), user.role
        )
        return {"HTTP_AUTHORIZATION": f"Bearer {token}"}

    return _bearer
