"""
Account DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from accounts.domain.user import User


@dataclass
class UserDTO:
    """DTO for user information."""

    id: uuid.UUID
    email: str
    name: str
    company: str
    role: str
    email_verified: bool
    created_at: datetime
    last_login_at: Optional[datetime]

    @classmethod
    def from_entity(cls, user: User) -> "UserDTO":
        return cls(
            id=user.id,
            email=str(user.email),
            name=user.name,
            company=user.company,
            role=user.role.value,
            email_verified=user.email_verified,
            created_at=user.created_at,
            last_login_at=user.last_login_at,
        )


@dataclass
class TokenPairDTO:
    """DTO for an access/refresh token pair."""

    access_token: str
    refresh_token: str
    expires_at: datetime
    token_type: str = "Bearer"


@dataclass
class AuthResultDTO:
    """DTO for register and login responses."""

    user: UserDTO
    tokens: TokenPairDTO
