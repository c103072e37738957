"""
User repository port (interface).

This is the credential store the token and authorization layers
depend on. Implementations are in the infrastructure layer.
"""
import uuid
from abc import ABC, abstractmethod
from typing import Optional

from accounts.domain.user import User


class UserRepository(ABC):
    """Abstract repository for User entities."""

    @abstractmethod
    async def save(self, user: User) -> User:
        """
        Save a user entity.

        Raises:
            UserExistsError: If another user already holds the email
        """

    @abstractmethod
    async def find_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """
        Find a user by ID.

        Args:
            user_id: User UUID

        Returns:
            User entity or None if not found
        """

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """
        Find a user by email, case-insensitively.

        Args:
            email: Email address

        Returns:
            User entity or None if not found
        """

    @abstractmethod
    async def exists(self, user_id: uuid.UUID) -> bool:
        """Check if a user exists."""
