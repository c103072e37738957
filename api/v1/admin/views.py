"""
Admin API views.

Reachable only through AdminRoleMiddleware; the views themselves
never check the role.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.admin.serializers import (
    GenerateLicenseRequestSerializer,
    LicenseListParamsSerializer,
    LicensePageSerializer,
)
from api.v1.licenses.serializers import LicenseSerializer
from api.v1.validation import validated_data
from ControlPlaneService.container import get_container
from core.infrastructure.database import run_with_deadline
from core.instrumentation import Status, StatusCode, get_tracer
from core.middleware.auth import require_auth_context
from licenses.application.commands.license_commands import IssueLicenseCommand
from licenses.application.handlers.license_handlers import IssueLicenseHandler
from licenses.application.handlers.license_query_handlers import ListAllLicensesHandler
from licenses.application.queries.license_queries import ListAllLicensesQuery

tracer = get_tracer(__name__)


class AdminLicenseListView(APIView):
    """View for listing every license."""

    @extend_schema(
        operation_id="admin_list_licenses",
        summary="List All Licenses",
        description="Paginated listing across all users, filterable by tier and status.",
        tags=["Admin"],
        parameters=[
            OpenApiParameter(name="page", type=int, location=OpenApiParameter.QUERY),
            OpenApiParameter(name="limit", type=int, location=OpenApiParameter.QUERY),
            OpenApiParameter(name="tier", type=str, location=OpenApiParameter.QUERY),
            OpenApiParameter(name="status", type=str, location=OpenApiParameter.QUERY),
        ],
        responses={
            200: LicensePageSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Unauthorized"},
            403: {"description": "Admin access required"},
        },
    )
    def get(self, request: Request) -> Response:
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        with tracer.start_as_current_span("admin_list_licenses") as span:
            params = validated_data(LicenseListParamsSerializer, request.query_params, span)

            handler = ListAllLicensesHandler(get_container().license_repository)
            page = await run_with_deadline(
                handler.handle(
                    ListAllLicensesQuery(
                        page=params["page"],
                        limit=params["limit"],
                        tier=params.get("tier"),
                        status=params.get("status"),
                    )
                )
            )

            span.set_attribute("licenses.total", page.total)
            span.set_status(Status(StatusCode.OK))
            return Response(LicensePageSerializer(page).data)


class AdminGenerateLicenseView(APIView):
    """View for issuing a license to any user."""

    @extend_schema(
        operation_id="admin_generate_license",
        summary="Generate License",
        description="Issue a license to the given user.",
        tags=["Admin"],
        request=GenerateLicenseRequestSerializer,
        responses={
            201: LicenseSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Unauthorized"},
            403: {"description": "Admin access required"},
            404: {"description": "User not found"},
        },
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_generate)(request)

    async def _handle_generate(self, request: Request) -> Response:
        context = require_auth_context(request._request)
        with tracer.start_as_current_span("admin_generate_license") as span:
            data = validated_data(GenerateLicenseRequestSerializer, request.data, span)
            span.set_attribute("user.id", str(data["user_id"]))
            span.set_attribute("license.tier", data["tier"])

            container = get_container()
            handler = IssueLicenseHandler(container.license_repository, container.user_repository)
            license = await run_with_deadline(
                handler.handle(
                    IssueLicenseCommand(
                        user_id=data["user_id"],
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
