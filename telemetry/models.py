"""
Model registration for the telemetry app.
"""
from telemetry.infrastructure.models import TelemetryRecord  # noqa: F401
