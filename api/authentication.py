"""
DRF authentication backed by the bearer middleware.

The middleware has already verified the token; this class only exposes
the resolved identity to DRF as (request.user, request.auth).
"""

from rest_framework.authentication import BaseAuthentication


class AuthContextAuthentication(BaseAuthentication):
    """Expose request.auth_context to DRF views."""

    def authenticate(self, request):
        context = getattr(request._request, "auth_context", None)
        if context is None:
            return None
        return context.user, context.claims

    def authenticate_header(self, request):
        return 'Bearer realm="api"'
