"""
Access token claims.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict

from core.domain.exceptions import MalformedClaimsError


@dataclass(frozen=True)
class Claims:
    """
    Decoded and verified access token payload.

    Only TokenService.validate_token builds these from untrusted input,
    so every instance has passed signature, issuer and expiry checks.
    """

    subject: str
    email: str
    role: str
    issued_at: datetime
    expires_at: datetime
    issuer: str

    def user_id(self) -> uuid.UUID:
        """
        Parse the subject as a user id.

        Raises:
            MalformedClaimsError: If the subject is not a UUID
        """
        try:
            return uuid.UUID(str(self.subject))
        except (TypeError, ValueError) as e:
            raise MalformedClaimsError() from e

    def to_payload(self) -> Dict[str, Any]:
        """Registered and private claim names as they appear in the JWT."""
        return {
            "sub": self.subject,
            "email": self.email,
            "role": self.role,
            "iat": int(self.issued_at.timestamp()),
            "exp": int(self.expires_at.timestamp()),
            "iss": self.issuer,
        }

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Claims":
        return cls(
            subject=str(payload["sub"]),
            email=str(payload.get("email", "")),
            role=str(payload.get("role", "")),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            issuer=str(payload["iss"]),
        )
