"""
RecordTelemetryHandler.

Stores a usage snapshot. The license cross-check never blocks the
write: telemetry is kept for expired, revoked and unknown licenses.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Tuple

from activations.ports.activation_repository import ActivationRepository
from core.domain.exceptions import BadRequestError, DomainException
from core.infrastructure.events import event_bus
from core.metrics import telemetry_records_total
from licenses.application.commands.license_commands import ValidateLicenseCommand
from licenses.application.handlers.license_handlers import ValidateLicenseHandler
from licenses.domain.license import License
from licenses.domain.services import QuotaPolicy
from licenses.ports.license_repository import LicenseRepository
from telemetry.application.commands.telemetry_commands import RecordTelemetryCommand
from telemetry.application.dto.telemetry_dto import IngestionResult, ValidationOutcome
from telemetry.application.services.dashboard_cache_service import DashboardCacheService
from telemetry.domain.events import TelemetryRecorded
from telemetry.domain.telemetry_record import TelemetryRecord
from telemetry.ports.telemetry_repository import TelemetryRepository

logger = logging.getLogger(__name__)


def _canonical_ref(license_ref: Optional[str]) -> str:
    """UUID-shaped references are stored in their canonical lower-case form."""
    ref = (license_ref or "").strip()
    try:
        return str(uuid.UUID(ref))
    except ValueError:
        return ref


def _report_time(timestamp: Optional[int]) -> datetime:
    if not timestamp:
        return datetime.now(timezone.utc)
    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise BadRequestError("timestamp out of range") from e


class RecordTelemetryHandler:
    """Handler for RecordTelemetryCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        activation_repository: ActivationRepository,
        telemetry_repository: TelemetryRepository,
    ):
        """Initialize handler with repositories."""
        self.validate_license = ValidateLicenseHandler(license_repository)
        self.activation_repository = activation_repository
        self.telemetry_repository = telemetry_repository

    def _build_record(self, command: RecordTelemetryCommand) -> TelemetryRecord:
        try:
            return TelemetryRecord.create(
                license_id=_canonical_ref(command.license_id),
                hardware_id=command.hardware_id or "",
                timestamp=_report_time(command.timestamp),
                events_processed=command.events_processed,
                bytes_processed=command.bytes_processed,
                tables_tracked=command.tables_tracked,
                sources_active=command.sources_active,
                avg_latency_ms=command.avg_latency_ms,
                error_count=command.error_count,
                uptime_hours=command.uptime_hours,
                version=command.version or "",
                source_type=command.source_type or "",
            )
        except ValueError as e:
            raise BadRequestError(str(e)) from e

    async def _cross_check(
        self, record: TelemetryRecord
    ) -> Tuple[ValidationOutcome, Optional[License]]:
        """Validate the reported license; failures are logged, never raised."""
        try:
            license = await self.validate_license.handle(
                ValidateLicenseCommand(license_ref=record.license_id, hardware_id=record.hardware_id)
            )
        except DomainException as e:
            logger.warning(
                "Telemetry from unvalidated license",
                extra={
                    "license_id": record.license_id,
                    "hardware_id": record.hardware_id,
                    "reason": e.code,
                },
            )
            return ValidationOutcome(valid=False, code=e.code, message=e.message), None

        try:
            await self.activation_repository.touch(license.id, record.hardware_id, record.timestamp)
        except DomainException as e:
            logger.warning("Could not refresh activation: %s", e.message)

        violations = QuotaPolicy.check_usage(
            license,
            sources=record.sources_active,
            tables=record.tables_tracked,
        )
        if violations:
            logger.warning(
                "Reported usage exceeds license limits",
                extra={
                    "license_id": str(license.id),
                    "violations": [v.resource for v in violations],
                },
            )
        return ValidationOutcome(valid=True, quota_violations=violations), license

    async def handle(self, command: RecordTelemetryCommand) -> IngestionResult:
        """
        Handle record telemetry command.

        Args:
            command: RecordTelemetryCommand

        Returns:
            IngestionResult

        Raises:
            BadRequestError: If the report cannot form a record
            StorageError: If the record cannot be stored
        """
        record = self._build_record(command)
        validation, license = await self._cross_check(record)

        try:
            stored = await self.telemetry_repository.upsert(record)
        except DomainException:
            telemetry_records_total.labels(outcome="failed").inc()
            raise

        telemetry_records_total.labels(
            outcome="recorded" if validation.valid else "recorded_unvalidated"
        ).inc()

        if license is not None:
            await DashboardCacheService.invalidate_stats(license.user_id)

        await event_bus.publish(
            TelemetryRecorded(
                license_id=stored.license_id,
                hardware_id=stored.hardware_id,
                hour_bucket=stored.hour_bucket,
                license_valid=validation.valid,
            )
        )
        return IngestionResult(validation=validation, recorded=stored)
