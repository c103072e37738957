"""
Dashboard cache service.

Provides caching for per-user dashboard statistics.
"""
import hashlib
import logging
import uuid
from dataclasses import asdict
from typing import Optional

from django.conf import settings

from core.infrastructure.cache_adapters import cache_adapter
from telemetry.domain.usage import DashboardStats

logger = logging.getLogger(__name__)

# Cache TTLs (in seconds)
CACHE_TTL_DASHBOARD_STATS = 60


class DashboardCacheService:
    """Service for caching dashboard aggregates."""

    @staticmethod
    def _stats_key(user_id: uuid.UUID) -> str:
        """Generate cache key for a user's dashboard stats."""
        key_hash = hashlib.sha256(str(user_id).encode()).hexdigest()[:16]
        return f"dashboard:stats:{key_hash}"

    @staticmethod
    async def get_stats(user_id: uuid.UUID) -> Optional[DashboardStats]:
        """
        Get cached dashboard stats.

        Args:
            user_id: Owner UUID

        Returns:
            Cached DashboardStats or None
        """
        cached = await cache_adapter.get(DashboardCacheService._stats_key(user_id))
        if not cached:
            return None
        try:
            return DashboardStats(**cached)
        except TypeError as e:
            logger.warning("Error deserializing cached dashboard stats: %s", e)
            return None

    @staticmethod
    async def set_stats(
        user_id: uuid.UUID, stats: DashboardStats, ttl: Optional[int] = None
    ) -> None:
        """
        Cache dashboard stats.

        Args:
            user_id: Owner UUID
            stats: DashboardStats to cache
            ttl: Time to live in seconds
        """
        timeout = ttl or getattr(settings, "DASHBOARD_CACHE_TTL", CACHE_TTL_DASHBOARD_STATS)
        await cache_adapter.set(
            DashboardCacheService._stats_key(user_id), asdict(stats), timeout=timeout
        )

    @staticmethod
    async def invalidate_stats(user_id: uuid.UUID) -> None:
        """
        Invalidate cached dashboard stats.

        Args:
            user_id: Owner UUID
        """
        await cache_adapter.delete(DashboardCacheService._stats_key(user_id))
        logger.debug("Invalidated dashboard stats cache for user %s", user_id)
