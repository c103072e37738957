"""
Unit tests for telemetry domain rules.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from core.domain.value_objects import InstanceStatus
from telemetry.domain.services import (
    DEFAULT_HISTORY_DAYS,
    MAX_HISTORY_DAYS,
    InstanceLiveness,
    UsageWindow,
)
from telemetry.domain.telemetry_record import TelemetryRecord, truncate_to_hour


class TestTruncateToHour:
    """Tests for hour bucketing."""

    def test_truncates_minutes_and_seconds(self):
        moment = datetime(2026, 5, 4, 13, 59, 59, 999, tzinfo=timezone.utc)

        assert truncate_to_hour(moment) == datetime(2026, 5, 4, 13, tzinfo=timezone.utc)

    def test_converts_to_utc(self):
        cest = timezone(timedelta(hours=2))
        moment = datetime(2026, 5, 4, 15, 30, tzinfo=cest)

        assert truncate_to_hour(moment) == datetime(2026, 5, 4, 13, tzinfo=timezone.utc)


class TestTelemetryRecord:
    """Tests for TelemetryRecord."""

    def test_create_sets_hour_bucket(self):
        at = datetime(2026, 5, 4, 13, 25, tzinfo=timezone.utc)

        record = TelemetryRecord.create("lic-123", "hw-1", timestamp=at, events_processed=5)

        assert record.hour_bucket == datetime(2026, 5, 4, 13, tzinfo=timezone.utc)
        assert record.events_processed == 5
        assert isinstance(record.id, uuid.UUID)

    @pytest.mark.parametrize("license_id,hardware_id", [("", "hw-1"), ("lic-1", "")])
    def test_requires_keys(self, license_id, hardware_id):
        with pytest.raises(ValueError):
            TelemetryRecord.create(license_id, hardware_id)

    def test_rejects_negative_counters(self):
        with pytest.raises(ValueError):
            TelemetryRecord.create("lic-1", "hw-1", error_count=-1)


class TestUsageWindow:
    """Tests for UsageWindow.parse_days."""

    @pytest.mark.parametrize(
        "value", [None, "", "abc", "1.5", 0, "0", -3, "-1", True, False, []]
    )
    def test_unusable_values_fall_back(self, value):
        assert UsageWindow.parse_days(value) == DEFAULT_HISTORY_DAYS

    @pytest.mark.parametrize("value,expected", [(1, 1), ("30", 30), (" 90 ", 90)])
    def test_positive_values_are_used(self, value, expected):
        assert UsageWindow.parse_days(value) == expected

    def test_huge_values_are_capped(self):
        assert UsageWindow.parse_days("999999999999") == MAX_HISTORY_DAYS


class TestInstanceLiveness:
    """Tests for InstanceLiveness."""

    def test_online_within_threshold(self):
        now = datetime.now(timezone.utc)

        assert InstanceLiveness.status(now - timedelta(minutes=4), now) == InstanceStatus.ONLINE

    def test_offline_at_threshold(self):
        now = datetime.now(timezone.utc)

        assert InstanceLiveness.status(now - timedelta(minutes=5), now) == InstanceStatus.OFFLINE

    def test_custom_threshold(self):
        now = datetime.now(timezone.utc)

        status = InstanceLiveness.status(now - timedelta(seconds=30), now, timedelta(seconds=10))

        assert status == InstanceStatus.OFFLINE
