"""
Activation DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from activations.domain.activation import Activation


@dataclass
class ActivationDTO:
    """DTO for activation information."""

    id: uuid.UUID
    license_id: uuid.UUID
    hardware_id: str
    hostname: str
    platform: str
    version: str
    ip_address: Optional[str]
    activated_at: datetime
    last_seen_at: datetime
    deactivated_at: Optional[datetime]
    is_active: bool

    @classmethod
    def from_entity(cls, activation: Activation) -> "ActivationDTO":
        return cls(
            id=activation.id,
            license_id=activation.license_id,
            hardware_id=activation.hardware_id,
            hostname=activation.hostname,
            platform=activation.platform,
            version=activation.version,
            ip_address=activation.ip_address,
            activated_at=activation.activated_at,
            last_seen_at=activation.last_seen_at,
            deactivated_at=activation.deactivated_at,
            is_active=activation.is_active,
        )


@dataclass
class RecordActivationResultDTO:
    """DTO for an activation request."""

    activation: ActivationDTO
    created: bool
    slots_remaining: Optional[int]
