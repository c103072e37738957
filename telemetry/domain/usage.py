"""
Read-side usage views.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class UsageTotals:
    """Telemetry sums over a time window."""

    events_processed: int = 0
    bytes_processed: int = 0
    distinct_hardware: int = 0
    avg_latency_ms: float = 0.0
    error_count: int = 0
    uptime_hours: float = 0.0


@dataclass(frozen=True)
class DashboardStats:
    total_licenses: int
    active_licenses: int
    active_instances: int
    total_events_processed: int
    total_bytes_processed: int
    avg_latency_ms: float
    total_errors: int
    total_uptime_hours: float


@dataclass(frozen=True)
class UsagePoint:
    """Usage for one hour."""

    timestamp: datetime
    events_processed: int
    bytes_processed: int
    avg_latency_ms: float
    error_count: int


@dataclass(frozen=True)
class Instance:
    """An active activation with its latest telemetry."""

    hardware_id: str
    hostname: str
    license_id: str
    license_tier: str
    version: str
    source_type: str
    last_seen_at: datetime
    events_processed: int
    status: str
    ip_address: Optional[str] = None
