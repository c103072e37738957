"""
License repository port (interface).

This defines the contract for license persistence operations.
Implementations are in the infrastructure layer.
"""
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple

from licenses.domain.license import License


class LicenseRepository(ABC):
    """
    Abstract repository for License entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def save(self, license: License) -> License:
        """
        Save a license entity.

        Args:
            license: License entity to save

        Returns:
            Saved license entity
        """

    @abstractmethod
    async def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License UUID

        Returns:
            License entity or None if not found
        """

    @abstractmethod
    async def find_by_key(self, license_key: str) -> Optional[License]:
        """
        Find a license by its key.

        Args:
            license_key: License key string

        Returns:
            License entity or None if not found
        """

    @abstractmethod
    async def find_by_user(self, user_id: uuid.UUID) -> List[License]:
        """Find all licenses owned by a user, newest first."""

    @abstractmethod
    async def list_all(
        self,
        page: int,
        limit: int,
        tier: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Tuple[List[License], int]:
        """
        List licenses across all users.

        Args:
            page: 1-based page number
            limit: Page size
            tier: Optional tier filter
            status: Optional status filter

        Returns:
            Tuple of (page of licenses, total matching count)
        """

    @abstractmethod
    async def bind_hardware(self, license_id: uuid.UUID, hardware_id: str) -> License:
        """
        Bind an unbound license to hardware_id.

        The write only applies while hardware_id is still null, so the
        first of several concurrent binders wins. The stored license is
        returned either way; callers compare its hardware_id.
        """

    @abstractmethod
    async def mark_expired(self, license_id: uuid.UUID) -> bool:
        """
        Move an active license to expired.

        Returns:
            True if this call performed the transition
        """

    @abstractmethod
    async def revoke(self, license_id: uuid.UUID, revoked_at: datetime) -> Tuple[License, bool]:
        """
        Set revoked_at once.

        Returns:
            Tuple of (stored license, whether this call revoked it)
        """

    @abstractmethod
    async def expire_overdue(self, now: datetime) -> List[License]:
        """Mark every active license past its expiry as expired and return them."""
