"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from core.domain.authorization import Capability, has_capability
from core.domain.exceptions import (
    ForbiddenError,
    HardwareMismatchError,
    LicenseExpiredError,
    LicenseRevokedError,
    QuotaExceededError,
)
from licenses.domain.license import License
from licenses.domain.tiers import UNLIMITED


class LicenseValidator:
    """Domain service for license validation."""

    @staticmethod
    def ensure_valid(license: License, current_time: Optional[datetime] = None) -> None:
        """
        Raise the typed error for an unusable license.

        Raises:
            LicenseRevokedError: If revoked
            LicenseExpiredError: If expired
        """
        if license.is_revoked:
            raise LicenseRevokedError()
        if license.is_expired(current_time):
            raise LicenseExpiredError()

    @staticmethod
    def ensure_hardware(license: License, hardware_id: Optional[str]) -> None:
        """
        Reject hardware other than the one a bound license is tied to.

        Unbound licenses pass. A bound license treats a missing hardware
        id as foreign hardware.

        Raises:
            HardwareMismatchError: If bound to different hardware
        """
        if not license.is_bound:
            return
        if not license.is_bound_to((hardware_id or "").strip()):
            raise HardwareMismatchError()


@dataclass(frozen=True)
class QuotaViolation:
    """One limit a usage report exceeds."""

    resource: str
    limit: int
    current: int


class QuotaPolicy:
    """
    Domain service for quota checks.

    A limit of zero means unlimited and always allows.
    """

    @staticmethod
    def allows(limit: int, current: int) -> bool:
        """
        Check whether one more unit fits under a limit.

        Args:
            limit: Configured limit (0 = unlimited)
            current: Units already in use

        Returns:
            True if another unit may be added
        """
        if limit == UNLIMITED:
            return True
        return current < limit

    @staticmethod
    def within(limit: int, value: int) -> bool:
        """Check whether an observed value stays within a limit."""
        if limit == UNLIMITED:
            return True
        return value <= limit

    @staticmethod
    def ensure_can_activate(license: License, active_count: int, already_active: bool) -> None:
        """
        Check the activation ceiling for a hardware id.

        Refreshing an already active hardware never consumes a slot.

        Raises:
            QuotaExceededError: If a new hardware would exceed max_sources
        """
        if already_active:
            return
        if not QuotaPolicy.allows(license.max_sources, active_count):
            raise QuotaExceededError(
                f"Activation limit reached ({active_count}/{license.max_sources})"
            )

    @staticmethod
    def check_usage(
        license: License, sources: int = 0, tables: int = 0, throughput: int = 0
    ) -> List[QuotaViolation]:
        """
        Compare reported usage against every license limit.

        Args:
            license: License entity
            sources: Active sources reported
            tables: Tables tracked
            throughput: Events per second

        Returns:
            List of violations (empty when usage is within limits)
        """
        checks = (
            ("sources", license.max_sources, sources),
            ("tables", license.max_tables, tables),
            ("throughput", license.max_throughput, throughput),
        )
        return [
            QuotaViolation(resource=name, limit=limit, current=value)
            for name, limit, value in checks
            if not QuotaPolicy.within(limit, value)
        ]


class LicenseAccessPolicy:
    """Domain service deciding who may read or change a license."""

    @staticmethod
    def ensure_can_manage(license: License, user_id: uuid.UUID, role: str) -> None:
        """
        Allow the owner, or any principal holding MANAGE_ANY_LICENSE.

        Raises:
            ForbiddenError: Otherwise
        """
        if license.user_id == user_id:
            return
        if has_capability(role, Capability.MANAGE_ANY_LICENSE):
            return
        raise ForbiddenError()
