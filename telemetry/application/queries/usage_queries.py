"""
Usage queries.
"""
import uuid
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class GetDashboardStatsQuery:
    user_id: uuid.UUID


@dataclass
class GetUsageHistoryQuery:
    """days is taken as sent; the handler falls back to 7 when it is unusable."""

    user_id: uuid.UUID
    days: Optional[Any] = None


@dataclass
class GetActiveInstancesQuery:
    user_id: uuid.UUID
