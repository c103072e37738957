"""
Usage aggregation handlers.

Read-side views over telemetry for one authenticated owner.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from django.conf import settings

from activations.ports.activation_repository import ActivationRepository
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository
from telemetry.application.queries.usage_queries import (
    GetActiveInstancesQuery,
    GetDashboardStatsQuery,
    GetUsageHistoryQuery,
)
from telemetry.application.services.dashboard_cache_service import DashboardCacheService
from telemetry.domain.services import DEFAULT_ONLINE_THRESHOLD, InstanceLiveness, UsageWindow
from telemetry.domain.usage import DashboardStats, Instance, UsagePoint
from telemetry.ports.telemetry_repository import TelemetryRepository

logger = logging.getLogger(__name__)

STATS_WINDOW = timedelta(hours=24)


def license_refs(licenses: List[License]) -> List[str]:
    """Every reference telemetry for these licenses may be filed under."""
    refs = []
    for license in licenses:
        refs.append(str(license.id))
        refs.append(license.license_key)
    return refs


def _online_threshold() -> timedelta:
    seconds = getattr(settings, "INSTANCE_ONLINE_THRESHOLD", None)
    if seconds is None:
        return DEFAULT_ONLINE_THRESHOLD
    return timedelta(seconds=seconds)


class GetDashboardStatsHandler:
    """Handler for GetDashboardStatsQuery."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        telemetry_repository: TelemetryRepository,
    ):
        self.license_repository = license_repository
        self.telemetry_repository = telemetry_repository

    async def handle(self, query: GetDashboardStatsQuery) -> DashboardStats:
        """
        Aggregate the last 24 hours of telemetry across the owner's licenses.

        Results are cached briefly; a missing cache only costs latency.
        """
        cached = await DashboardCacheService.get_stats(query.user_id)
        if cached is not None:
            return cached

        now = datetime.now(timezone.utc)
        licenses = await self.license_repository.find_by_user(query.user_id)
        totals = await self.telemetry_repository.totals_since(
            license_refs(licenses), now - STATS_WINDOW
        )
        stats = DashboardStats(
            total_licenses=len(licenses),
            active_licenses=sum(1 for license in licenses if license.is_valid(now)),
            active_instances=totals.distinct_hardware,
            total_events_processed=totals.events_processed,
            total_bytes_processed=totals.bytes_processed,
            avg_latency_ms=totals.avg_latency_ms,
            total_errors=totals.error_count,
            total_uptime_hours=totals.uptime_hours,
        )
        await DashboardCacheService.set_stats(query.user_id, stats)
        return stats


class GetUsageHistoryHandler:
    """Handler for GetUsageHistoryQuery."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        telemetry_repository: TelemetryRepository,
    ):
        self.license_repository = license_repository
        self.telemetry_repository = telemetry_repository

    async def handle(self, query: GetUsageHistoryQuery) -> List[UsagePoint]:
        """
        Hourly usage points ordered by hour.

        The window is bounded by days; unusable values mean 7.
        """
        days = UsageWindow.parse_days(query.days)
        since = UsageWindow.since(datetime.now(timezone.utc), days)
        licenses = await self.license_repository.find_by_user(query.user_id)
        if not licenses:
            return []
        return await self.telemetry_repository.hourly_since(license_refs(licenses), since)


class GetActiveInstancesHandler:
    """Handler for GetActiveInstancesQuery."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        activation_repository: ActivationRepository,
        telemetry_repository: TelemetryRepository,
    ):
        self.license_repository = license_repository
        self.activation_repository = activation_repository
        self.telemetry_repository = telemetry_repository

    async def handle(
        self, query: GetActiveInstancesQuery, now: Optional[datetime] = None
    ) -> List[Instance]:
        """
        Active activations of the owner's licenses, one per hardware id,
        with the latest telemetry and an online/offline status.
        """
        now = now or datetime.now(timezone.utc)
        owned = await self.license_repository.find_by_user(query.user_id)
        licenses = {license.id: license for license in owned}
        if not licenses:
            return []

        activations = await self.activation_repository.find_active_by_user(query.user_id)
        latest = await self.telemetry_repository.latest_by_instance(
            license_refs(owned),
            UsageWindow.since(now, UsageWindow.parse_days(None)),
        )
        threshold = _online_threshold()

        instances: List[Instance] = []
        seen = set()
        # Newest activation wins when one hardware id serves several licenses.
        for activation in sorted(activations, key=lambda a: a.last_seen_at, reverse=True):
            if activation.hardware_id in seen:
                continue
            seen.add(activation.hardware_id)
            license = licenses.get(activation.license_id)
            if license is None:
                continue
            record = latest.get((str(license.id), activation.hardware_id)) or latest.get(
                (license.license_key, activation.hardware_id)
            )
            instances.append(
                Instance(
                    hardware_id=activation.hardware_id,
                    hostname=activation.hostname,
                    license_id=str(license.id),
                    license_tier=license.tier.value,
                    version=activation.version or (record.version if record else ""),
                    source_type=record.source_type if record else "",
                    last_seen_at=activation.last_seen_at,
                    events_processed=record.events_processed if record else 0,
                    status=InstanceLiveness.status(activation.last_seen_at, now, threshold).value,
                    ip_address=activation.ip_address,
                )
            )
        return instances
