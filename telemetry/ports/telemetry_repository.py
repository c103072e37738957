"""
Telemetry repository port (interface).

This defines the contract for telemetry persistence and aggregation.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Iterable, List, Tuple

from telemetry.domain.telemetry_record import TelemetryRecord
from telemetry.domain.usage import UsagePoint, UsageTotals


class TelemetryRepository(ABC):
    """
    Abstract repository for TelemetryRecord entities.

    Aggregations take the license references (ids and keys) an owner's
    telemetry may be reported under.
    """

    @abstractmethod
    async def upsert(self, record: TelemetryRecord) -> TelemetryRecord:
        """
        Insert a record or replace the counters of the record with the
        same (license_id, hardware_id, hour_bucket).

        Args:
            record: TelemetryRecord to store

        Returns:
            Stored record

        Raises:
            StorageError: If the datastore rejects the write
        """
        pass

    @abstractmethod
    async def find_for_hour(
        self, license_id: str, hardware_id: str, hour_bucket: datetime
    ) -> List[TelemetryRecord]:
        """Return the records stored for one upsert key."""
        pass

    @abstractmethod
    async def totals_since(self, license_refs: Iterable[str], since: datetime) -> UsageTotals:
        """Sum counters of records newer than since."""
        pass

    @abstractmethod
    async def hourly_since(self, license_refs: Iterable[str], since: datetime) -> List[UsagePoint]:
        """Per-hour usage newer than since, ordered by hour."""
        pass

    @abstractmethod
    async def latest_by_instance(
        self, license_refs: Iterable[str], since: datetime
    ) -> Dict[Tuple[str, str], TelemetryRecord]:
        """Most recent record newer than since per (license_id, hardware_id)."""
        pass
