"""
Account API views.

Public endpoints that create accounts and issue, rotate and revoke
token pairs.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.application.commands.auth_commands import (
    LoginCommand,
    LogoutCommand,
    RefreshTokensCommand,
    RegisterUserCommand,
)
from accounts.application.handlers.auth_handlers import (
    LoginHandler,
    LogoutHandler,
    RefreshTokensHandler,
    RegisterUserHandler,
)
from api.v1.auth.serializers import (
    AuthResultSerializer,
    LoginRequestSerializer,
    RefreshTokenRequestSerializer,
    RegisterRequestSerializer,
    TokenPairSerializer,
)
from api.v1.validation import validated_data
from ControlPlaneService.container import get_container
from core.infrastructure.database import run_with_deadline
from core.instrumentation import Status, StatusCode, get_tracer
from core.metrics import tokens_issued_total

tracer = get_tracer(__name__)


class RegisterView(APIView):
    """View for creating an account."""

    @extend_schema(
        operation_id="register",
        summary="Register",
        description="Create an account and return its first token pair.",
        tags=["Auth"],
        request=RegisterRequestSerializer,
        responses={
            201: AuthResultSerializer,
            400: {"description": "Bad Request"},
            409: {"description": "Email already registered"},
        },
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_register)(request)

    async def _handle_register(self, request: Request) -> Response:
        with tracer.start_as_current_span("register") as span:
            span.set_attribute("operation", "register")
            data = validated_data(RegisterRequestSerializer, request.data, span)

            container = get_container()
            handler = RegisterUserHandler(container.user_repository, container.token_service)
            result = await run_with_deadline(
                handler.handle(
                    RegisterUserCommand(
                        email=data["email"],
                        password=data["password"],
                        name=data["name"],
                        company=data.get("company", ""),
                    )
                )
            )

            tokens_issued_total.labels(flow="register").inc()
            span.set_attribute("user.id", str(result.user.id))
            span.set_status(Status(StatusCode.OK))
            return Response(AuthResultSerializer(result).data, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """View for exchanging credentials for tokens."""

    @extend_schema(
        operation_id="login",
        summary="Login",
        description="Verify email and password and return a token pair.",
        tags=["Auth"],
        request=LoginRequestSerializer,
        responses={
            200: AuthResultSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Invalid email or password"},
        },
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_login)(request)

    async def _handle_login(self, request: Request) -> Response:
        with tracer.start_as_current_span("login") as span:
            span.set_attribute("operation", "login")
            data = validated_data(LoginRequestSerializer, request.data, span)

            container = get_container()
            handler = LoginHandler(container.user_repository, container.token_service)
            result = await run_with_deadline(
                handler.handle(LoginCommand(email=data["email"], password=data["password"]))
            )

            tokens_issued_total.labels(flow="login").inc()
            span.set_attribute("user.id", str(result.user.id))
            span.set_status(Status(StatusCode.OK))
            return Response(AuthResultSerializer(result).data)


class RefreshView(APIView):
    """View for rotating a refresh token."""

    @extend_schema(
        operation_id="refresh_tokens",
        summary="Refresh Tokens",
        description=(
            "Exchange a refresh token for a new token pair. "
            "The presented refresh token cannot be used again."
        ),
        tags=["Auth"],
        request=RefreshTokenRequestSerializer,
        responses={
            200: TokenPairSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Invalid or expired refresh token"},
        },
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_refresh)(request)

    async def _handle_refresh(self, request: Request) -> Response:
        with tracer.start_as_current_span("refresh_tokens") as span:
            data = validated_data(RefreshTokenRequestSerializer, request.data, span)

            container = get_container()
            handler = RefreshTokensHandler(
                container.user_repository,
                container.refresh_token_repository,
                container.token_service,
            )
            tokens = await run_with_deadline(
                handler.handle(RefreshTokensCommand(refresh_token=data["refresh_token"]))
            )

            tokens_issued_total.labels(flow="refresh").inc()
            span.set_status(Status(StatusCode.OK))
            return Response(TokenPairSerializer(tokens).data)


class LogoutView(APIView):
    """View for revoking a refresh token."""

    @extend_schema(
        operation_id="logout",
        summary="Logout",
        description="Revoke a refresh token. Unknown tokens are accepted silently.",
        tags=["Auth"],
        request=RefreshTokenRequestSerializer,
        responses={
            204: None,
            400: {"description": "Bad Request"},
        },
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_logout)(request)

    async def _handle_logout(self, request: Request) -> Response:
        with tracer.start_as_current_span("logout") as span:
            data = validated_data(RefreshTokenRequestSerializer, request.data, span)

            handler = LogoutHandler(get_container().refresh_token_repository)
            await run_with_deadline(
                handler.handle(LogoutCommand(refresh_token=data["refresh_token"]))
            )

            span.set_status(Status(StatusCode.OK))
            return Response(status=status.HTTP_204_NO_CONTENT)
