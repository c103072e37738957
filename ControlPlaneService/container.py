"""
Service container.

Repositories and the token service are built once in
ControlPlaneServiceConfig.ready() and shared by views, middleware and tasks.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings

from accounts.application.services.token_service import TokenService, TokenSettings
from accounts.infrastructure.repositories.django_refresh_token_repository import (
    DjangoRefreshTokenRepository,
)
from accounts.infrastructure.repositories.django_user_repository import DjangoUserRepository
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from licenses.infrastructure.repositories.django_license_repository import (
    DjangoLicenseRepository,
)
from telemetry.infrastructure.repositories.django_telemetry_repository import (
    DjangoTelemetryRepository,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceContainer:
    """Shared, immutable dependencies of the request path."""

    token_service: TokenService
    user_repository: DjangoUserRepository
    refresh_token_repository: DjangoRefreshTokenRepository
    license_repository: DjangoLicenseRepository
    activation_repository: DjangoActivationRepository
    telemetry_repository: DjangoTelemetryRepository

    @classmethod
    def build(cls, django_settings=None) -> "ServiceContainer":
        """
        Wire the container from Django settings.

        Raises:
            ImproperlyConfigured: If the token signing configuration is invalid
        """
        token_settings = TokenSettings.from_django_settings(django_settings or settings)
        refresh_token_repository = DjangoRefreshTokenRepository()
        return cls(
            token_service=TokenService(token_settings, refresh_token_repository),
            user_repository=DjangoUserRepository(),
            refresh_token_repository=refresh_token_repository,
            license_repository=DjangoLicenseRepository(),
            activation_repository=DjangoActivationRepository(),
            telemetry_repository=DjangoTelemetryRepository(),
        )


_container: Optional[ServiceContainer] = None


def set_container(container: Optional[ServiceContainer]) -> None:
    """Install the process-wide container (None clears it)."""
    global _container
    _container = container


def get_container() -> ServiceContainer:
    """
    Return the process-wide container, building it on first use.

    Worker processes that never ran ready() still get a container.
    """
    global _container
    if _container is None:
        _container = ServiceContainer.build()
        logger.info("Service container built")
    return _container
