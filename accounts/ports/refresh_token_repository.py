"""
Refresh token repository port (interface).
"""
from abc import ABC, abstractmethod
from typing import Optional

from accounts.domain.refresh_token import RefreshToken


class RefreshTokenRepository(ABC):
    """Abstract repository for RefreshToken entities."""

    @abstractmethod
    async def save(self, token: RefreshToken) -> RefreshToken:
        """Persist a new refresh token."""

    @abstractmethod
    async def consume(self, token: str) -> Optional[RefreshToken]:
        """
        Atomically revoke a usable token.

        Only one concurrent caller can consume a given token.

        Args:
            token: Opaque token value

        Returns:
            The token as it was before revocation, or None if it was
            unknown, expired or already revoked
        """

    @abstractmethod
    async def revoke(self, token: str) -> bool:
        """
        Revoke a token; idempotent.

        Returns:
            True if the token exists
        """
