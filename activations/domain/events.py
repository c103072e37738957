"""
Activation domain events.

Domain events represent something that happened in the activation domain.
"""
import uuid
from dataclasses import dataclass

from core.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class LicenseActivated(DomainEvent):
    """Event raised when a new hardware takes an activation slot."""

    activation_id: uuid.UUID
    license_id: uuid.UUID
    hardware_id: str

    @property
    def aggregate_id(self) -> str:
        return str(self.activation_id)


@dataclass(frozen=True, kw_only=True)
class ActivationDeactivated(DomainEvent):
    """Event raised when an activation releases its slot."""

    activation_id: uuid.UUID
    license_id: uuid.UUID
    hardware_id: str

    @property
    def aggregate_id(self) -> str:
        return str(self.activation_id)
