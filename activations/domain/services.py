"""
Activation domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""

import uuid
from datetime import datetime
from typing import Optional, Tuple

from activations.domain.activation import Activation
from activations.ports.activation_repository import ActivationRepository
from licenses.domain.license import License
from licenses.domain.services import LicenseValidator, QuotaPolicy


class ActivationManager:
    """Domain service for recording and releasing activations."""

    @staticmethod
    def ensure_activatable(
        license: License, hardware_id: str, current_time: Optional[datetime] = None
    ) -> None:
        """
        Check that a license may take an activation from hardware_id.

        Activation never binds a license; a bound license only accepts
        its own hardware.

        Raises:
            LicenseRevokedError: If revoked
            LicenseExpiredError: If expired
            HardwareMismatchError: If bound to different hardware
        """
        LicenseValidator.ensure_valid(license, current_time)
        LicenseValidator.ensure_hardware(license, hardware_id)

    @staticmethod
    async def record_activation(
        license: License,
        hardware_id: str,
        hostname: str = "",
        platform: str = "",
        version: str = "",
        ip_address: Optional[str] = None,
        repository: ActivationRepository = None,
    ) -> Tuple[Activation, bool]:
        """
        Create or refresh the active activation for (license, hardware_id).

        Args:
            license: License entity, already checked by ensure_activatable
            hardware_id: Hardware fingerprint
            hostname: Reported hostname
            platform: Reported platform
            version: Reported engine version
            ip_address: Client address
            repository: Activation repository

        Returns:
            Tuple of (activation, created)

        Raises:
            QuotaExceededError: If a new hardware exceeds max_sources
        """
        candidate = Activation.create(
            license_id=license.id,
            hardware_id=hardware_id,
            hostname=hostname,
            platform=platform,
            version=version,
            ip_address=ip_address,
        )
        return await repository.upsert_active(
            candidate,
            admit=lambda active_count, already_active: QuotaPolicy.ensure_can_activate(
                license, active_count, already_active
            ),
        )

    @staticmethod
    async def count_active(license_id: uuid.UUID, repository: ActivationRepository) -> int:
        """Number of active activations holding a slot on the license."""
        activations = await repository.find_active_by_license(license_id)
        return len(activations)

    @staticmethod
    def slots_remaining(license: License, active_count: int) -> Optional[int]:
        """Free activation slots, or None when the tier is unlimited."""
        if license.max_sources == 0:
            return None
        return max(0, license.max_sources - active_count)
