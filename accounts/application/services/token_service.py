"""
Token service.

Issues HS256-signed access tokens (PyJWT) and opaque refresh tokens,
and validates access tokens without touching the datastore.
"""
import logging
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import jwt
from django.core.exceptions import ImproperlyConfigured

from accounts.domain.claims import Claims
from accounts.domain.refresh_token import RefreshToken
from accounts.ports.refresh_token_repository import RefreshTokenRepository
from core.domain.exceptions import InvalidTokenError
from core.domain.value_objects import UserRole

logger = logging.getLogger(__name__)

MIN_SECRET_LENGTH = 32
SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")
REQUIRED_CLAIMS = ["sub", "exp", "iat", "iss"]


@dataclass(frozen=True)
class TokenSettings:
    """Signing configuration, built once at startup and never mutated."""

    secret_key: str
    algorithm: str = "HS256"
    issuer: str = "control-plane"
    access_token_lifetime: timedelta = timedelta(minutes=15)
    refresh_token_lifetime: timedelta = timedelta(days=7)
    leeway: timedelta = timedelta(seconds=0)

    def __post_init__(self):
        """Reject signing configuration the service cannot run with."""
        if not self.secret_key or len(self.secret_key) < MIN_SECRET_LENGTH:
            raise ImproperlyConfigured(
                f"JWT_SECRET_KEY must be set to at least {MIN_SECRET_LENGTH} characters"
            )
        if self.algorithm not in SUPPORTED_ALGORITHMS:
            raise ImproperlyConfigured(f"Unsupported JWT_ALGORITHM: {self.algorithm}")
        if self.access_token_lifetime <= timedelta(0):
            raise ImproperlyConfigured("ACCESS_TOKEN_LIFETIME must be positive")
        if self.refresh_token_lifetime <= timedelta(0):
            raise ImproperlyConfigured("REFRESH_TOKEN_LIFETIME must be positive")

    @classmethod
    def from_django_settings(cls, settings) -> "TokenSettings":
        """
        Build token settings from Django settings.

        Raises:
            ImproperlyConfigured: If the signing key is missing or weak
        """
        return cls(
            secret_key=getattr(settings, "JWT_SECRET_KEY", "") or "",
            algorithm=getattr(settings, "JWT_ALGORITHM", "HS256"),
            issuer=getattr(settings, "JWT_ISSUER", "control-plane"),
            access_token_lifetime=getattr(
                settings, "ACCESS_TOKEN_LIFETIME", timedelta(minutes=15)
            ),
            refresh_token_lifetime=getattr(
                settings, "REFRESH_TOKEN_LIFETIME", timedelta(days=7)
            ),
            leeway=getattr(settings, "JWT_LEEWAY", timedelta(seconds=0)),
        )


class TokenService:
    """
    Issues and validates bearer credentials.

    Access tokens are self-contained; refresh tokens are opaque and
    persisted so they can be rotated and revoked.
    """

    def __init__(
        self,
        settings: TokenSettings,
        refresh_token_repository: Optional[RefreshTokenRepository] = None,
    ):
        self.settings = settings
        self.refresh_token_repository = refresh_token_repository

    def issue_access_token(
        self,
        user_id: uuid.UUID,
        email: str,
        role: UserRole,
        now: Optional[datetime] = None,
    ) -> Tuple[str, datetime]:
        """
        Sign an access token for a user.

        Args:
            user_id: Subject
            email: User email
            role: User role
            now: Issue time (defaults to now)

        Returns:
            Tuple of (encoded token, expiry)
        """
        issued_at = (now or datetime.now(timezone.utc)).replace(microsecond=0)
        claims = Claims(
            subject=str(user_id),
            email=email,
            role=role.value if isinstance(role, UserRole) else str(role),
            issued_at=issued_at,
            expires_at=issued_at + self.settings.access_token_lifetime,
            issuer=self.settings.issuer,
        )
        payload = claims.to_payload()
        payload["jti"] = secrets.token_urlsafe(16)
        token = jwt.encode(payload, self.settings.secret_key, algorithm=self.settings.algorithm)
        return token, claims.expires_at

    async def issue_refresh_token(self, user_id: uuid.UUID) -> Tuple[str, datetime]:
        """
        Create and persist a refresh token.

        Args:
            user_id: Owner of the token

        Returns:
            Tuple of (opaque token, expiry)

        Raises:
            StorageError: If the token cannot be persisted
        """
        if self.refresh_token_repository is None:
            raise RuntimeError("TokenService was built without a refresh token repository")
        refresh = RefreshToken.create(user_id, self.settings.refresh_token_lifetime)
        saved = await self.refresh_token_repository.save(refresh)
        return saved.token, saved.expires_at

    def validate_token(self, token: str) -> Claims:
        """
        Verify an access token and return its claims.

        Pure: no datastore access.

        Raises:
            InvalidTokenError: If the token is malformed, badly signed,
                expired, from another issuer or missing required claims
        """
        if not token:
            raise InvalidTokenError()
        try:
            payload = jwt.decode(
                token,
                self.settings.secret_key,
                algorithms=[self.settings.algorithm],
                issuer=self.settings.issuer,
                leeway=self.settings.leeway,
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as e:
            logger.debug("Rejected expired access token")
            raise InvalidTokenError() from e
        except jwt.PyJWTError as e:
            logger.debug("Rejected access token: %s", e)
            raise InvalidTokenError() from e

        try:
            return Claims.from_payload(payload)
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            raise InvalidTokenError() from e
