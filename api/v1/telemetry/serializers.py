"""
Serializers for telemetry endpoints.
"""

from rest_framework import serializers


class TelemetryReportSerializer(serializers.Serializer):
    """One usage report from an engine instance."""

    license_id = serializers.CharField(max_length=100)
    hardware_id = serializers.CharField(max_length=255)
    timestamp = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    events_processed = serializers.IntegerField(required=False, default=0, min_value=0)
    bytes_processed = serializers.IntegerField(required=False, default=0, min_value=0)
    tables_tracked = serializers.IntegerField(required=False, default=0, min_value=0)
    sources_active = serializers.IntegerField(required=False, default=0, min_value=0)
    avg_latency_ms = serializers.FloatField(required=False, default=0.0, min_value=0)
    error_count = serializers.IntegerField(required=False, default=0, min_value=0)
    uptime_hours = serializers.FloatField(required=False, default=0.0, min_value=0)
    version = serializers.CharField(required=False, allow_blank=True, default="", max_length=50)
    source_type = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=50
    )


class TelemetryReceiptSerializer(serializers.Serializer):
    status = serializers.CharField()


class DashboardStatsSerializer(serializers.Serializer):
    """Serializer for DashboardStats."""

    total_licenses = serializers.IntegerField()
    active_licenses = serializers.IntegerField()
    active_instances = serializers.IntegerField()
    total_events_processed = serializers.IntegerField()
    total_bytes_processed = serializers.IntegerField()
    avg_latency_ms = serializers.FloatField()
    total_errors = serializers.IntegerField()
    total_uptime_hours = serializers.FloatField()


class UsagePointSerializer(serializers.Serializer):
    """Serializer for UsagePoint."""

    timestamp = serializers.DateTimeField()
    events_processed = serializers.IntegerField()
    bytes_processed = serializers.IntegerField()
    avg_latency_ms = serializers.FloatField()
    error_count = serializers.IntegerField()


class InstanceSerializer(serializers.Serializer):
    """Serializer for Instance."""

    hardware_id = serializers.CharField()
    hostname = serializers.CharField()
    license_id = serializers.CharField()
    license_tier = serializers.CharField()
    version = serializers.CharField()
    source_type = serializers.CharField()
    last_seen_at = serializers.DateTimeField()
    events_processed = serializers.IntegerField()
    status = serializers.CharField()
    ip_address = serializers.CharField(allow_null=True)
