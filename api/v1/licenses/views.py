"""
License API views.

Endpoints used by account owners to manage their licenses and the
activations holding their slots.
"""

import uuid

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activations.application.commands.activation_commands import DeactivateActivationCommand
from activations.application.handlers.activation_handlers import (
    DeactivateActivationHandler,
    ListActivationsHandler,
)
from activations.application.queries.activation_queries import ListActivationsQuery
from api.v1.licenses.serializers import (
    ActivationSerializer,
    IssueLicenseRequestSerializer,
    LicenseSerializer,
)
from api.v1.validation import validated_data
from ControlPlaneService.container import get_container
from core.infrastructure.database import run_with_deadline
from core.instrumentation import Status, StatusCode, get_tracer
from core.middleware.auth import require_auth_context
from licenses.application.commands.license_commands import (
    IssueLicenseCommand,
    RevokeLicenseCommand,
)
from licenses.application.handlers.license_handlers import (
    IssueLicenseHandler,
    RevokeLicenseHandler,
)
from licenses.application.handlers.license_query_handlers import (
    GetLicenseHandler,
    ListUserLicensesHandler,
)
from licenses.application.queries.license_queries import GetLicenseQuery, ListUserLicensesQuery

tracer = get_tracer(__name__)


class LicenseListView(APIView):
    """View for listing and issuing the caller's licenses."""

    @extend_schema(
        operation_id="list_licenses",
        summary="List Licenses",
        description="List every license the caller owns, with its current status.",
        tags=["Licenses"],
        responses={
            200: LicenseSerializer(many=True),
            401: {"description": "Unauthorized"},
        },
    )
    def get(self, request: Request) -> Response:
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        context = require_auth_context(request._request)
        with tracer.start_as_current_span("list_licenses") as span:
            span.set_attribute("user.id", str(context.user_id))

            handler = ListUserLicensesHandler(get_container().license_repository)
            licenses = await run_with_deadline(
                handler.handle(ListUserLicensesQuery(user_id=context.user_id))
            )

            span.set_attribute("licenses.count", len(licenses))
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseSerializer(licenses, many=True).data)

    @extend_schema(
        operation_id="issue_license",
        summary="Issue License",
        description=(
            "Issue a license to the caller. Limits and features come from the tier; "
            "valid_days defaults to 365."
        ),
        tags=["Licenses"],
        request=IssueLicenseRequestSerializer,
        responses={
            201: LicenseSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Unauthorized"},
        },
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_issue)(request)

    async def _handle_issue(self, request: Request) -> Response:
        context = require_auth_context(request._request)
        with tracer.start_as_current_span("issue_license") as span:
            span.set_attribute("user.id", str(context.user_id))
            data = validated_data(IssueLicenseRequestSerializer, request.data, span)
            span.set_attribute("license.tier", data["tier"])

            container = get_container()
            handler = IssueLicenseHandler(container.license_repository, container.user_repository)
            license = await run_with_deadline(
                handler.handle(
                    IssueLicenseCommand(
                        user_id=context.user_id,
                        tier=data["tier"],
                        valid_days=data["valid_days"],
                        hardware_id=data.get("hardware_id") or None,
                        issued_by=context.user_id,
                    )
                )
            )

            span.set_attribute("license.id", str(license.id))
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseSerializer(license).data, status=status.HTTP_201_CREATED)


class LicenseDetailView(APIView):
    """View for reading and revoking one license."""

    @extend_schema(
        operation_id="get_license",
        summary="Get License",
        description="Return one license owned by the caller.",
        tags=["Licenses"],
        responses={
            200: LicenseSerializer,
            401: {"description": "Unauthorized"},
            403: {"description": "Not the owner"},
            404: {"description": "License not found"},
        },
    )
    def get(self, request: Request, license_id: uuid.UUID) -> Response:
        return async_to_sync(self._handle_get)(request, license_id)

    async def _handle_get(self, request: Request, license_id: uuid.UUID) -> Response:
        context = require_auth_context(request._request)
        with tracer.start_as_current_span("get_license") as span:
            span.set_attribute("license.id", str(license_id))

            handler = GetLicenseHandler(get_container().license_repository)
            license = await run_with_deadline(
                handler.handle(
                    GetLicenseQuery(
                        license_id=license_id,
                        requested_by=context.user_id,
                        requester_role=context.role,
                    )
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(LicenseSerializer(license).data)

    @extend_schema(
        operation_id="revoke_license",
        summary="Revoke License",
        description=(
            "Revoke a license. Revocation is permanent and idempotent; "
            "recorded telemetry is kept."
        ),
        tags=["Licenses"],
        responses={
            200: LicenseSerializer,
            401: {"description": "Unauthorized"},
            403: {"description": "Not the owner"},
            404: {"description": "License not found"},
        },
    )
    def delete(self, request: Request, license_id: uuid.UUID) -> Response:
        return async_to_sync(self._handle_revoke)(request, license_id)

    async def _handle_revoke(self, request: Request, license_id: uuid.UUID) -> Response:
        context = require_auth_context(request._request)
        with tracer.start_as_current_span("revoke_license") as span:
            span.set_attribute("license.id", str(license_id))
            span.set_attribute("user.id", str(context.user_id))

            handler = RevokeLicenseHandler(get_container().license_repository)
            license = await run_with_deadline(
                handler.handle(
                    RevokeLicenseCommand(
                        license_id=license_id,
                        requested_by=context.user_id,
                        requester_role=context.role,
                    )
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(LicenseSerializer(license).data)


class LicenseActivationsView(APIView):
    """View for listing the activations of a license."""

    @extend_schema(
        operation_id="list_license_activations",
        summary="List Activations",
        description="List active and released activations of a license.",
        tags=["Licenses"],
        responses={
            200: ActivationSerializer(many=True),
            401: {"description": "Unauthorized"},
            403: {"description": "Not the owner"},
            404: {"description": "License not found"},
        },
    )
    def get(self, request: Request, license_id: uuid.UUID) -> Response:
        return async_to_sync(self._handle_list)(request, license_id)

    async def _handle_list(self, request: Request, license_id: uuid.UUID) -> Response:
        context = require_auth_context(request._request)
        with tracer.start_as_current_span("list_license_activations") as span:
            span.set_attribute("license.id", str(license_id))

            container = get_container()
            handler = ListActivationsHandler(
                container.license_repository, container.activation_repository
            )
            activations = await run_with_deadline(
                handler.handle(
                    ListActivationsQuery(
                        license_id=license_id,
                        requested_by=context.user_id,
                        requester_role=context.role,
                    )
                )
            )

            span.set_attribute("activations.count", len(activations))
            span.set_status(Status(StatusCode.OK))
            return Response(ActivationSerializer(activations, many=True).data)


class ActivationDetailView(APIView):
    """View for releasing an activation."""

    @extend_schema(
        operation_id="deactivate_activation",
        summary="Deactivate",
        description="Release an activation and free its slot. Idempotent.",
        tags=["Licenses"],
        responses={
            200: ActivationSerializer,
            401: {"description": "Unauthorized"},
            403: {"description": "Not the owner"},
            404: {"description": "Activation not found"},
        },
    )
    def delete(self, request: Request, activation_id: uuid.UUID) -> Response:
        return async_to_sync(self._handle_deactivate)(request, activation_id)

    async def _handle_deactivate(self, request: Request, activation_id: uuid.UUID) -> Response:
        context = require_auth_context(request._request)
        with tracer.start_as_current_span("deactivate_activation") as span:
            span.set_attribute("activation.id", str(activation_id))

            container = get_container()
            handler = DeactivateActivationHandler(
                container.license_repository, container.activation_repository
            )
            activation = await run_with_deadline(
                handler.handle(
                    DeactivateActivationCommand(
                        activation_id=activation_id,
                        requested_by=context.user_id,
                        requester_role=context.role,
                    )
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(ActivationSerializer(activation).data)
