"""
Django implementation of TelemetryRepository port.

The upsert is a single INSERT ... ON CONFLICT DO UPDATE on the
(license_id, hardware_id, hour_bucket) constraint, so concurrent
reports for the same hour converge on one row.
"""
from datetime import datetime
from typing import Dict, Iterable, List, Tuple

from asgiref.sync import sync_to_async
from django.db.models import Avg, Count, Sum

from core.infrastructure.database import storage_errors
from telemetry.domain.telemetry_record import TelemetryRecord
from telemetry.domain.usage import UsagePoint, UsageTotals
from telemetry.infrastructure.models import TelemetryRecord as TelemetryRecordModel
from telemetry.ports.telemetry_repository import TelemetryRepository

UPSERT_KEY = ["license_id", "hardware_id", "hour_bucket"]
REPLACED_FIELDS = [
    "timestamp",
    "events_processed",
    "bytes_processed",
    "tables_tracked",
    "sources_active",
    "avg_latency_ms",
    "error_count",
    "uptime_hours",
    "version",
    "source_type",
]


class DjangoTelemetryRepository(TelemetryRepository):
    """Django ORM implementation of TelemetryRepository."""

    def _to_domain(self, model: TelemetryRecordModel) -> TelemetryRecord:
        """
        Convert Django model to domain entity.

        Args:
            model: Django TelemetryRecord model

        Returns:
            TelemetryRecord domain entity
        """
        return TelemetryRecord(
            id=model.id,
            license_id=model.license_id,
            hardware_id=model.hardware_id,
            timestamp=model.timestamp,
            hour_bucket=model.hour_bucket,
            events_processed=model.events_processed,
            bytes_processed=model.bytes_processed,
            tables_tracked=model.tables_tracked,
            sources_active=model.sources_active,
            avg_latency_ms=model.avg_latency_ms,
            error_count=model.error_count,
            uptime_hours=model.uptime_hours,
            version=model.version,
            source_type=model.source_type,
        )

    def _to_model(self, record: TelemetryRecord) -> TelemetryRecordModel:
        return TelemetryRecordModel(
            id=record.id,
            license_id=record.license_id,
            hardware_id=record.hardware_id,
            timestamp=record.timestamp,
            hour_bucket=record.hour_bucket,
            events_processed=record.events_processed,
            bytes_processed=record.bytes_processed,
            tables_tracked=record.tables_tracked,
            sources_active=record.sources_active,
            avg_latency_ms=record.avg_latency_ms,
            error_count=record.error_count,
            uptime_hours=record.uptime_hours,
            version=record.version,
            source_type=record.source_type,
        )

    def _scoped(self, license_refs: Iterable[str]):
        return TelemetryRecordModel.objects.filter(  # pylint: disable=no-member
            license_id__in=list(license_refs)
        )

    @sync_to_async
    def upsert(self, record: TelemetryRecord) -> TelemetryRecord:
        with storage_errors("record telemetry"):
            TelemetryRecordModel.objects.bulk_create(  # pylint: disable=no-member
                [self._to_model(record)],
                update_conflicts=True,
                unique_fields=UPSERT_KEY,
                update_fields=REPLACED_FIELDS,
            )
            stored = TelemetryRecordModel.objects.get(  # pylint: disable=no-member
                license_id=record.license_id,
                hardware_id=record.hardware_id,
                hour_bucket=record.hour_bucket,
            )
            return self._to_domain(stored)

    @sync_to_async
    def find_for_hour(
        self, license_id: str, hardware_id: str, hour_bucket: datetime
    ) -> List[TelemetryRecord]:
        with storage_errors("find telemetry"):
            return [
                self._to_domain(model)
                for model in TelemetryRecordModel.objects.filter(  # pylint: disable=no-member
                    license_id=license_id, hardware_id=hardware_id, hour_bucket=hour_bucket
                )
            ]

    @sync_to_async
    def totals_since(self, license_refs: Iterable[str], since: datetime) -> UsageTotals:
        with storage_errors("aggregate telemetry"):
            row = self._scoped(license_refs).filter(timestamp__gt=since).aggregate(
                events=Sum("events_processed"),
                bytes=Sum("bytes_processed"),
                hardware=Count("hardware_id", distinct=True),
                latency=Avg("avg_latency_ms"),
                errors=Sum("error_count"),
                uptime=Sum("uptime_hours"),
            )
            return UsageTotals(
                events_processed=row["events"] or 0,
                bytes_processed=row["bytes"] or 0,
                distinct_hardware=row["hardware"] or 0,
                avg_latency_ms=float(row["latency"] or 0.0),
                error_count=row["errors"] or 0,
                uptime_hours=float(row["uptime"] or 0.0),
            )

    @sync_to_async
    def hourly_since(self, license_refs: Iterable[str], since: datetime) -> List[UsagePoint]:
        with storage_errors("aggregate telemetry"):
            rows = (
                self._scoped(license_refs)
                .filter(timestamp__gt=since)
                .values("hour_bucket")
                .annotate(
                    events=Sum("events_processed"),
                    bytes=Sum("bytes_processed"),
                    latency=Avg("avg_latency_ms"),
                    errors=Sum("error_count"),
                )
                .order_by("hour_bucket")
            )
            return [
                UsagePoint(
                    timestamp=row["hour_bucket"],
                    events_processed=row["events"] or 0,
                    bytes_processed=row["bytes"] or 0,
                    avg_latency_ms=float(row["latency"] or 0.0),
                    error_count=row["errors"] or 0,
                )
                for row in rows
            ]

    @sync_to_async
    def latest_by_instance(
        self, license_refs: Iterable[str], since: datetime
    ) -> Dict[Tuple[str, str], TelemetryRecord]:
        with storage_errors("find telemetry"):
            latest: Dict[Tuple[str, str], TelemetryRecord] = {}
            for model in self._scoped(license_refs).filter(timestamp__gt=since).order_by(
                "-timestamp"
            ):
                key = (model.license_id, model.hardware_id)
                if key not in latest:
                    latest[key] = self._to_domain(model)
            return latest
