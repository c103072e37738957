"""
License domain entity.

This is the core domain entity representing a license.
It contains business logic and is independent of infrastructure.
"""
import hashlib
import secrets
import string
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from core.domain.value_objects import LicenseStatus, LicenseTier
from licenses.domain.tiers import limits_for

DEFAULT_VALID_DAYS = 365


def generate_license_key(prefix: str) -> str:
    """
    Generate a license key in format: PREFIX-XXXX-XXXX-XXXX-XXXX.

    Args:
        prefix: Key prefix (the tier's short code)

    Returns:
        Generated license key string
    """
    chars = string.ascii_uppercase + string.digits
    parts = ["".join(secrets.choice(chars) for _ in range(4)) for _ in range(4)]
    return f"{prefix}-{'-'.join(parts)}"


def hash_license_key(key: str) -> str:
    """Return the lookup hash stored next to a license key."""
    return hashlib.sha256(key.strip().encode()).hexdigest()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    A tier grant for one user with quota limits, a feature set and an
    optional one-way hardware binding. Revocation is terminal; expiry
    takes effect as soon as expires_at has passed.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    license_key: str
    tier: LicenseTier
    status: LicenseStatus
    max_sources: int
    max_tables: int
    max_throughput: int
    features: Tuple[str, ...]
    hardware_id: Optional[str]
    issued_at: datetime
    expires_at: datetime
    revoked_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate license entity."""
        if not self.user_id:
            raise ValueError("User ID is required")
        if not self.license_key:
            raise ValueError("License key is required")
        if min(self.max_sources, self.max_tables, self.max_throughput) < 0:
            raise ValueError("Limits cannot be negative")
        if self.expires_at <= self.issued_at:
            raise ValueError("Expiration must be after issue time")

    @classmethod
    def create(
        cls,
        user_id: uuid.UUID,
        tier: LicenseTier,
        valid_days: int = DEFAULT_VALID_DAYS,
        hardware_id: Optional[str] = None,
        license_id: Optional[uuid.UUID] = None,
        now: Optional[datetime] = None,
    ) -> "License":
        """
        Create a new License from the tier catalog.

        Args:
            user_id: Owner UUID
            tier: License tier
            valid_days: Days until expiry
            hardware_id: Optional hardware to bind at issue time
            license_id: Optional UUID (generated if not provided)
            now: Issue time (defaults to now)

        Returns:
            License entity instance
        """
        if valid_days < 1:
            raise ValueError("valid_days must be at least 1")
        limits = limits_for(tier)
        issued_at = now or _utcnow()
        return cls(
            id=license_id or uuid.uuid4(),
            user_id=user_id,
            license_key=generate_license_key(limits.key_prefix),
            tier=tier,
            status=LicenseStatus.ACTIVE,
            max_sources=limits.max_sources,
            max_tables=limits.max_tables,
            max_throughput=limits.max_throughput,
            features=tuple(limits.features),
            hardware_id=hardware_id or None,
            issued_at=issued_at,
            expires_at=issued_at + timedelta(days=valid_days),
        )

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None or self.status == LicenseStatus.REVOKED

    def is_expired(self, current_time: Optional[datetime] = None) -> bool:
        """
        Check whether the license is past its expiry.

        Args:
            current_time: Current time (defaults to now)
        """
        if self.status == LicenseStatus.EXPIRED:
            return True
        return self.expires_at <= (current_time or _utcnow())

    def effective_status(self, current_time: Optional[datetime] = None) -> LicenseStatus:
        """Status as of current_time, whether or not it has been persisted yet."""
        if self.is_revoked:
            return LicenseStatus.REVOKED
        if self.is_expired(current_time):
            return LicenseStatus.EXPIRED
        return LicenseStatus.ACTIVE

    def is_valid(self, current_time: Optional[datetime] = None) -> bool:
        return self.effective_status(current_time) == LicenseStatus.ACTIVE

    @property
    def is_bound(self) -> bool:
        return self.hardware_id is not None

    def is_bound_to(self, hardware_id: str) -> bool:
        return self.hardware_id is not None and self.hardware_id == hardware_id

    def has_feature(self, feature: str) -> bool:
        return feature in self.features

    def bind_hardware(self, hardware_id: str) -> "License":
        """
        Return a copy bound to hardware_id.

        Raises:
            ValueError: If the license is already bound to other hardware
        """
        if self.hardware_id == hardware_id:
            return self
        if self.hardware_id is not None:
            raise ValueError("License is already bound to different hardware")
        return replace(self, hardware_id=hardware_id, updated_at=_utcnow())

    def mark_expired(self) -> "License":
        """Return a copy with expired status; revoked licenses stay revoked."""
        if self.is_revoked or self.status == LicenseStatus.EXPIRED:
            return self
        return replace(self, status=LicenseStatus.EXPIRED, updated_at=_utcnow())

    def revoke(self, at: Optional[datetime] = None) -> "License":
        """Return a revoked copy; revoking again keeps the first timestamp."""
        if self.revoked_at is not None:
            return replace(self, status=LicenseStatus.REVOKED)
        at = at or _utcnow()
        return replace(self, status=LicenseStatus.REVOKED, revoked_at=at, updated_at=at)
