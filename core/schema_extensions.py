"""
Custom schema extensions for drf-spectacular to document bearer authentication.
"""

from drf_spectacular.extensions import OpenApiAuthenticationExtension
from drf_spectacular.plumbing import build_bearer_security_scheme_object


class BearerTokenAuthenticationExtension(OpenApiAuthenticationExtension):
    """Extension to add bearer token authentication to OpenAPI schema."""

    target_class = "api.authentication.AuthContextAuthentication"
    name = "BearerAuth"

    def get_security_definition(self, auto_schema):
        """Return security scheme definition."""
        return build_bearer_security_scheme_object(
            header_name="AUTHORIZATION",
            token_prefix="Bearer",
            bearer_format="JWT",
        )
