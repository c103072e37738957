"""
Telemetry record domain entity.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


def truncate_to_hour(moment: datetime) -> datetime:
    """Return the start of the UTC hour containing moment."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).replace(minute=0, second=0, microsecond=0)


@dataclass(frozen=True)
class TelemetryRecord:
    """
    One usage snapshot from a running engine instance.

    license_id is whatever the engine reported; it is not required to
    name an existing license. At most one record exists per
    (license_id, hardware_id, hour_bucket); a later report in the same
    hour replaces the counters.
    """

    id: uuid.UUID
    license_id: str
    hardware_id: str
    timestamp: datetime
    hour_bucket: datetime
    events_processed: int = 0
    bytes_processed: int = 0
    tables_tracked: int = 0
    sources_active: int = 0
    avg_latency_ms: float = 0.0
    error_count: int = 0
    uptime_hours: float = 0.0
    version: str = ""
    source_type: str = ""

    def __post_init__(self):
        """Validate telemetry record."""
        if not self.license_id or not self.license_id.strip():
            raise ValueError("license_id is required")
        if not self.hardware_id or not self.hardware_id.strip():
            raise ValueError("hardware_id is required")
        counters = (
            self.events_processed,
            self.bytes_processed,
            self.tables_tracked,
            self.sources_active,
            self.avg_latency_ms,
            self.error_count,
            self.uptime_hours,
        )
        if any(value < 0 for value in counters):
            raise ValueError("Counters cannot be negative")

    @classmethod
    def create(
        cls,
        license_id: str,
        hardware_id: str,
        timestamp: Optional[datetime] = None,
        record_id: Optional[uuid.UUID] = None,
        **counters,
    ) -> "TelemetryRecord":
        """
        Create a record, deriving its hour bucket.

        Args:
            license_id: Reported license reference
            hardware_id: Reporting instance
            timestamp: Report time (defaults to now)
            record_id: Optional UUID (generated if not provided)
            **counters: Counter and metadata fields

        Returns:
            TelemetryRecord entity instance
        """
        timestamp = timestamp or datetime.now(timezone.utc)
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return cls(
            id=record_id or uuid.uuid4(),
            license_id=license_id.strip(),
            hardware_id=hardware_id.strip(),
            timestamp=timestamp,
            hour_bucket=truncate_to_hour(timestamp),
            **counters,
        )
