"""
Activation domain entity.

This is the core domain entity representing a license activation.
It contains business logic and is independent of infrastructure.
"""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from core.domain.value_objects import HardwareId


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Activation:
    """
    Activation domain entity.

    One running instance of a license, identified by its hardware id.
    At most one active activation exists per (license, hardware_id).
    """

    id: uuid.UUID
    license_id: uuid.UUID
    hardware_id: str
    hostname: str
    platform: str
    version: str
    ip_address: Optional[str]
    activated_at: datetime
    last_seen_at: datetime
    deactivated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate activation entity."""
        if not self.license_id:
            raise ValueError("License ID is required")
        HardwareId(self.hardware_id)

    @classmethod
    def create(
        cls,
        license_id: uuid.UUID,
        hardware_id: str,
        hostname: str = "",
        platform: str = "",
        version: str = "",
        ip_address: Optional[str] = None,
        activation_id: Optional[uuid.UUID] = None,
        now: Optional[datetime] = None,
    ) -> "Activation":
        """
        Create a new Activation entity.

        Args:
            license_id: License UUID
            hardware_id: Hardware fingerprint of the instance
            hostname: Reported hostname
            platform: Reported OS/platform
            version: Reported engine version
            ip_address: Client address, if known
            activation_id: Optional UUID (generated if not provided)
            now: Activation time (defaults to now)

        Returns:
            Activation entity instance
        """
        now = now or _utcnow()
        return cls(
            id=activation_id or uuid.uuid4(),
            license_id=license_id,
            hardware_id=hardware_id,
            hostname=hostname or "",
            platform=platform or "",
            version=version or "",
            ip_address=ip_address,
            activated_at=now,
            last_seen_at=now,
        )

    @property
    def is_active(self) -> bool:
        return self.deactivated_at is None

    def touch(
        self,
        seen_at: Optional[datetime] = None,
        hostname: Optional[str] = None,
        platform: Optional[str] = None,
        version: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> "Activation":
        """
        Return a copy with refreshed metadata.

        last_seen_at never moves backwards. Empty metadata values keep
        what was reported before.
        """
        seen_at = seen_at or _utcnow()
        return replace(
            self,
            last_seen_at=max(self.last_seen_at, seen_at),
            hostname=hostname or self.hostname,
            platform=platform or self.platform,
            version=version or self.version,
            ip_address=ip_address or self.ip_address,
        )

    def deactivate(self, at: Optional[datetime] = None) -> "Activation":
        """Return a deactivated copy; already deactivated activations are unchanged."""
        if not self.is_active:
            return self
        return replace(self, deactivated_at=at or _utcnow())
