"""
Telemetry Django ORM model.

Domain entities are in telemetry.domain.telemetry_record.
"""
import uuid

from django.db import models


class TelemetryRecord(models.Model):
    """
    Hourly usage snapshot from an engine instance.

    license_id is kept as reported, without a foreign key, so telemetry
    for unknown or deleted licenses is retained.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    license_id = models.CharField(max_length=100)
    hardware_id = models.CharField(max_length=255)
    timestamp = models.DateTimeField()
    hour_bucket = models.DateTimeField(help_text="timestamp truncated to the hour (UTC)")
    events_processed = models.BigIntegerField(default=0)
    bytes_processed = models.BigIntegerField(default=0)
    tables_tracked = models.IntegerField(default=0)
    sources_active = models.IntegerField(default=0)
    avg_latency_ms = models.FloatField(default=0.0)
    error_count = models.BigIntegerField(default=0)
    uptime_hours = models.FloatField(default=0.0)
    version = models.CharField(max_length=50, blank=True, default="")
    source_type = models.CharField(max_length=50, blank=True, default="")

    class Meta:
        db_table = "telemetry"
        ordering = ["-timestamp"]
        constraints = [
            models.UniqueConstraint(
                fields=["license_id", "hardware_id", "hour_bucket"],
                name="telemetry_one_row_per_hour",
            ),
        ]
        indexes = [
            models.Index(fields=["license_id", "timestamp"]),
            models.Index(fields=["hour_bucket"]),
        ]

    def __str__(self):
        return f"{self.license_id}/{self.hardware_id} @ {self.hour_bucket:%Y-%m-%d %H:00}"
