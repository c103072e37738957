"""
RefreshToken domain entity.
"""
import secrets
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Optional


def generate_refresh_token() -> str:
    """Generate an opaque, URL-safe refresh token."""
    return secrets.token_urlsafe(48)


@dataclass(frozen=True)
class RefreshToken:
    """
    Long-lived opaque credential exchanged for new access tokens.

    A token is usable once: rotation revokes it, and revocation is
    terminal.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    token: str
    expires_at: datetime
    created_at: datetime
    revoked_at: Optional[datetime] = None

    @classmethod
    def create(cls, user_id: uuid.UUID, lifetime: timedelta) -> "RefreshToken":
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid.uuid4(),
            user_id=user_id,
            token=generate_refresh_token(),
            expires_at=now + lifetime,
            created_at=now,
        )

    def is_usable(self, current_time: Optional[datetime] = None) -> bool:
        """
        Check whether the token can still be exchanged.

        Args:
            current_time: Current time (defaults to now)

        Returns:
            True if not revoked and not expired
        """
        if self.revoked_at is not None:
            return False
        return self.expires_at > (current_time or datetime.now(timezone.utc))

    def revoke(self) -> "RefreshToken":
        """Return a revoked copy; revoking twice keeps the first timestamp."""
        if self.revoked_at is not None:
            return self
        return replace(self, revoked_at=datetime.now(timezone.utc))
