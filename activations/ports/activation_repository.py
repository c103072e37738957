"""
Activation repository port (interface).

This defines the contract for activation persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, List, Optional, Tuple
import uuid

from activations.domain.activation import Activation

AdmitActivation = Callable[[int, bool], None]


class ActivationRepository(ABC):
    """
    Abstract repository for Activation entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def upsert_active(
        self, candidate: Activation, admit: AdmitActivation
    ) -> Tuple[Activation, bool]:
        """
        Refresh the active activation for the candidate's (license, hardware)
        or insert the candidate.

        Runs serialized per license. admit(active_count, already_active) is
        called before writing and may raise to reject the activation.

        Args:
            candidate: Activation carrying the reported metadata
            admit: Quota gate

        Returns:
            Tuple of (stored activation, created)
        """
        pass

    @abstractmethod
    async def find_by_id(self, activation_id: uuid.UUID) -> Optional[Activation]:
        """
        Find an activation by ID.

        Args:
            activation_id: Activation UUID

        Returns:
            Activation entity or None if not found
        """
        pass

    @abstractmethod
    async def find_active_by_license(self, license_id: uuid.UUID) -> List[Activation]:
        """
        Find all active activations for a license.

        Args:
            license_id: License UUID

        Returns:
            List of active Activation entities
        """
        pass

    @abstractmethod
    async def find_all_by_license(self, license_id: uuid.UUID) -> List[Activation]:
        """
        Find all activations for a license (active and inactive).

        Args:
            license_id: License UUID

        Returns:
            List of Activation entities, newest first
        """
        pass

    @abstractmethod
    async def find_active_by_user(self, user_id: uuid.UUID) -> List[Activation]:
        """Find active activations across every license a user owns."""
        pass

    @abstractmethod
    async def touch(
        self, license_id: uuid.UUID, hardware_id: str, seen_at: datetime
    ) -> bool:
        """
        Move last_seen_at forward on the active activation, if any.

        Returns:
            True if an active activation was updated
        """
        pass

    @abstractmethod
    async def deactivate(
        self, activation_id: uuid.UUID, deactivated_at: datetime
    ) -> Tuple[Activation, bool]:
        """
        Deactivate an activation. Idempotent.

        Returns:
            Tuple of (activation, changed)

        Raises:
            ActivationNotFoundError: If the activation does not exist
        """
        pass

    @abstractmethod
    async def deactivate_by_hardware(
        self, license_id: uuid.UUID, hardware_id: str, deactivated_at: datetime
    ) -> Optional[Activation]:
        """
        Deactivate the active activation for (license, hardware_id).

        Returns:
            The deactivated activation, or None if none was active
        """
        pass
