"""
Account API views.
"""

from drf_spectacular.utils import extend_schema
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.application.dto.auth_dto import UserDTO
from api.v1.auth.serializers import UserSerializer
from core.middleware.auth import require_auth_context


class MeView(APIView):
    """View for the caller's own account."""

    @extend_schema(
        operation_id="get_me",
        summary="Current Account",
        description="Return the account the bearer token belongs to.",
        tags=["Auth"],
        responses={
            200: UserSerializer,
            401: {"description": "Unauthorized"},
        },
    )
    def get(self, request: Request) -> Response:
        context = require_auth_context(request._request)
        return Response(UserSerializer(UserDTO.from_entity(context.user)).data)
