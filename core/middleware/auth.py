"""
Bearer token authentication middleware.

This middleware validates access tokens for account, license,
telemetry and admin APIs, and gates admin APIs on the caller's role.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from asgiref.sync import async_to_sync
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

from accounts.domain.claims import Claims
from accounts.domain.user import User
from core.domain.authorization import Capability, has_capability
from core.domain.exceptions import (
    ForbiddenError,
    InvalidTokenError,
    StorageError,
    UnauthorizedError,
)
from core.metrics import auth_rejections_total

logger = logging.getLogger(__name__)

PROTECTED_PREFIXES = (
    "/api/v1/account/",
    "/api/v1/licenses/",
    "/api/v1/telemetry/",
    "/api/v1/admin/",
)

# Engine-facing endpoints under a protected prefix.
PUBLIC_PATHS = ("/api/v1/telemetry/receive",)

ADMIN_PREFIX = "/api/v1/admin/"

# Most specific prefix first.
ADMIN_CAPABILITIES = (
    ("/api/v1/admin/licenses/generate", Capability.GENERATE_LICENSES),
    (ADMIN_PREFIX, Capability.LIST_ALL_LICENSES),
)


@dataclass(frozen=True)
class AuthContext:
    """Identity resolved for one request."""

    user: User
    claims: Claims

    @property
    def user_id(self):
        return self.user.id

    @property
    def role(self) -> str:
        return self.user.role.value


def require_auth_context(request: HttpRequest) -> AuthContext:
    """
    Return the request's AuthContext.

    Raises:
        UnauthorizedError: If the request was not authenticated
    """
    context = getattr(request, "auth_context", None)
    if not isinstance(context, AuthContext):
        raise UnauthorizedError()
    return context


def _error_response(code: str, message: str, status: int) -> JsonResponse:
    return JsonResponse({"error": {"code": code, "message": message}}, status=status)


def _requires_auth(path: str) -> bool:
    if any(path.rstrip("/") == public for public in PUBLIC_PATHS):
        return False
    return any(path.startswith(prefix) for prefix in PROTECTED_PREFIXES)


def parse_bearer(header: Optional[str]) -> str:
    """
    Extract the token from an Authorization header.

    The header must be exactly "Bearer <token>"; the scheme is
    case-insensitive.

    Raises:
        UnauthorizedError: If the header is missing or malformed
    """
    if not header:
        raise UnauthorizedError("Missing authorization header")
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise UnauthorizedError("Invalid authorization header format")
    return parts[1]


class BearerTokenAuthenticationMiddleware(MiddlewareMixin):
    """
    Middleware for bearer token authentication.

    This middleware:
    1. Skips paths outside the protected prefixes
    2. Verifies the access token and resolves its subject to a user
    3. Attaches AuthContext(user, claims) as request.auth_context
    4. Returns 401 Unauthorized if any step fails
    """

    def _services(self):
        # Imported lazily; the container is built once the app registry is ready.
        from ControlPlaneService.container import get_container

        container = get_container()
        return container.token_service, container.user_repository

    def _authenticate(self, request: HttpRequest) -> Tuple[User, Claims]:
        token = parse_bearer(request.headers.get("Authorization"))
        token_service, user_repository = self._services()

        claims = token_service.validate_token(token)
        user_id = claims.user_id()

        user = async_to_sync(user_repository.find_by_id)(user_id)
        if user is None:
            raise UnauthorizedError("User not found")
        return user, claims

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and validate authentication.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 401 if authentication fails, None otherwise
        """
        if not _requires_auth(request.path):
            return None

        try:
            user, claims = self._authenticate(request)
        except InvalidTokenError as e:
            auth_rejections_total.labels(reason=e.code.lower()).inc()
            logger.info("Rejected access token", extra={"path": request.path})
            return _error_response(e.code, e.message, 401)
        except UnauthorizedError as e:
            auth_rejections_total.labels(reason=e.code.lower()).inc()
            return _error_response(e.code, e.message, 401)
        except StorageError:
            return _error_response("INTERNAL_ERROR", "Internal server error", 500)

        request.auth_context = AuthContext(user=user, claims=claims)  # type: ignore
        return None


class AdminRoleMiddleware(MiddlewareMixin):
    """
    Middleware gating admin APIs on the caller's capabilities.

    Must run after BearerTokenAuthenticationMiddleware. A missing
    AuthContext fails closed with 401.
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        if not request.path.startswith(ADMIN_PREFIX):
            return None

        try:
            context = require_auth_context(request)
        except UnauthorizedError as e:
            auth_rejections_total.labels(reason="no_auth_context").inc()
            return _error_response(e.code, e.message, 401)

        capability = next(
            cap for prefix, cap in ADMIN_CAPABILITIES if request.path.startswith(prefix)
        )
        if not has_capability(context.role, capability):
            error = ForbiddenError("Admin access required")
            auth_rejections_total.labels(reason="forbidden").inc()
            logger.warning(
                "Admin route denied",
                extra={"path": request.path, "user_id": str(context.user_id)},
            )
            return _error_response(error.code, error.message, 403)
        return None
