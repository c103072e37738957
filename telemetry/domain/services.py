"""
Telemetry domain services.
"""
from datetime import datetime, timedelta
from typing import Any

from core.domain.value_objects import InstanceStatus

DEFAULT_HISTORY_DAYS = 7
MAX_HISTORY_DAYS = 3650
DEFAULT_ONLINE_THRESHOLD = timedelta(minutes=5)


class UsageWindow:
    """Domain service bounding usage queries."""

    @staticmethod
    def parse_days(value: Any) -> int:
        """
        Interpret a requested history length.

        Absent, non-numeric and non-positive values fall back to the
        default so a bad input never widens the query.

        Args:
            value: Raw value, usually a query string parameter

        Returns:
            Number of days, always positive and at most MAX_HISTORY_DAYS
        """
        if value is None or isinstance(value, bool):
            return DEFAULT_HISTORY_DAYS
        try:
            days = int(str(value).strip())
        except ValueError:
            return DEFAULT_HISTORY_DAYS
        if days <= 0:
            return DEFAULT_HISTORY_DAYS
        return min(days, MAX_HISTORY_DAYS)

    @staticmethod
    def since(now: datetime, days: int) -> datetime:
        return now - timedelta(days=days)


class InstanceLiveness:
    """Domain service deriving instance status from last_seen_at."""

    @staticmethod
    def status(
        last_seen_at: datetime,
        now: datetime,
        threshold: timedelta = DEFAULT_ONLINE_THRESHOLD,
    ) -> InstanceStatus:
        """
        Online if seen within the threshold, otherwise offline.

        Args:
            last_seen_at: Last report or activation refresh
            now: Current time
            threshold: Freshness window

        Returns:
            InstanceStatus
        """
        if now - last_seen_at < threshold:
            return InstanceStatus.ONLINE
        return InstanceStatus.OFFLINE
