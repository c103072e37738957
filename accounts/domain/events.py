"""
Account domain events.
"""
import uuid
from dataclasses import dataclass

from core.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class UserRegistered(DomainEvent):
    """Event raised when a user account is created."""

    user_id: uuid.UUID
    email: str

    @property
    def aggregate_id(self) -> str:
        return str(self.user_id)


@dataclass(frozen=True, kw_only=True)
class UserLoggedIn(DomainEvent):
    """Event raised after a successful password login."""

    user_id: uuid.UUID

    @property
    def aggregate_id(self) -> str:
        return str(self.user_id)
