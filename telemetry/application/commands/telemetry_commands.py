"""
Telemetry commands.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class RecordTelemetryCommand:
    """
    Command carrying one usage report from an engine instance.

    timestamp is unix seconds; absent or zero means now.
    """

    license_id: str
    hardware_id: str
    timestamp: Optional[int] = None
    events_processed: int = 0
    bytes_processed: int = 0
    tables_tracked: int = 0
    sources_active: int = 0
    avg_latency_ms: float = 0.0
    error_count: int = 0
    uptime_hours: float = 0.0
    version: str = ""
    source_type: str = ""
