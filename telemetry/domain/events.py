"""
Telemetry domain events.
"""
from dataclasses import dataclass
from datetime import datetime

from core.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class TelemetryRecorded(DomainEvent):
    """Event raised when a usage snapshot is stored."""

    license_id: str
    hardware_id: str
    hour_bucket: datetime
    license_valid: bool

    @property
    def aggregate_id(self) -> str:
        return f"{self.license_id}:{self.hardware_id}"
