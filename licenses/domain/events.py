"""
License domain events.

Domain events represent something that happened in the license domain.
"""
import uuid
from dataclasses import dataclass
from typing import Optional

from core.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class LicenseIssued(DomainEvent):
    """Event raised when a license is created."""

    license_id: uuid.UUID
    user_id: uuid.UUID
    tier: str
    issued_by: Optional[uuid.UUID] = None

    @property
    def aggregate_id(self) -> str:
        return str(self.license_id)


@dataclass(frozen=True, kw_only=True)
class HardwareBound(DomainEvent):
    """Event raised when a license is bound to its first hardware id."""

    license_id: uuid.UUID
    user_id: uuid.UUID
    hardware_id: str

    @property
    def aggregate_id(self) -> str:
        return str(self.license_id)


@dataclass(frozen=True, kw_only=True)
class LicenseExpired(DomainEvent):
    """Event raised when a license transitions from active to expired."""

    license_id: uuid.UUID
    user_id: uuid.UUID

    @property
    def aggregate_id(self) -> str:
        return str(self.license_id)


@dataclass(frozen=True, kw_only=True)
class LicenseRevoked(DomainEvent):
    """Event raised the first time a license is revoked."""

    license_id: uuid.UUID
    user_id: uuid.UUID

    @property
    def aggregate_id(self) -> str:
        return str(self.license_id)
