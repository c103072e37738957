"""
User domain entity.
"""
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from core.domain.value_objects import Email, UserRole


@dataclass(frozen=True)
class User:
    """
    User domain entity.

    Owns licenses and refresh tokens. The password hash is opaque to
    the domain; hashing and verification live in the handlers.
    """

    id: uuid.UUID
    email: Email
    password_hash: str
    name: str
    company: str
    role: UserRole
    email_verified: bool
    created_at: datetime
    updated_at: datetime
    last_login_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate user entity."""
        if not self.name or not self.name.strip():
            raise ValueError("Name is required")
        if not self.password_hash:
            raise ValueError("Password hash is required")

    @classmethod
    def create(
        cls,
        email: str,
        password_hash: str,
        name: str,
        company: str = "",
        role: UserRole = UserRole.USER,
        user_id: Optional[uuid.UUID] = None,
    ) -> "User":
        """
        Create a new User entity.

        Args:
            email: Email address (normalised to lower case)
            password_hash: Already-hashed password
            name: Display name
            company: Optional company name
            role: Role (defaults to user)
            user_id: Optional UUID (generated if not provided)

        Returns:
            User entity instance
        """
        now = datetime.now(timezone.utc)
        return cls(
            id=user_id or uuid.uuid4(),
            email=Email(email),
            password_hash=password_hash,
            name=name.strip(),
            company=company or "",
            role=role,
            email_verified=False,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def record_login(self, at: Optional[datetime] = None) -> "User":
        """Return a copy with last_login_at set."""
        at = at or datetime.now(timezone.utc)
        return replace(self, last_login_at=at, updated_at=at)
