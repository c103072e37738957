"""
Telemetry API views.

Ingestion is public and engine-facing; the dashboard endpoints are
scoped to the authenticated owner.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.telemetry.serializers import (
    DashboardStatsSerializer,
    InstanceSerializer,
    TelemetryReceiptSerializer,
    TelemetryReportSerializer,
    UsagePointSerializer,
)
from api.v1.validation import validated_data
from ControlPlaneService.container import get_container
from core.infrastructure.database import run_with_deadline
from core.instrumentation import Status, StatusCode, get_tracer
from core.middleware.auth import require_auth_context
from telemetry.application.commands.telemetry_commands import RecordTelemetryCommand
from telemetry.application.handlers.record_telemetry_handler import RecordTelemetryHandler
from telemetry.application.handlers.usage_handlers import (
    GetActiveInstancesHandler,
    GetDashboardStatsHandler,
    GetUsageHistoryHandler,
)
from telemetry.application.queries.usage_queries import (
    GetActiveInstancesQuery,
    GetDashboardStatsQuery,
    GetUsageHistoryQuery,
)

tracer = get_tracer(__name__)


class ReceiveTelemetryView(APIView):
    """View for ingesting engine telemetry."""

    authentication_classes = []

    @extend_schema(
        operation_id="receive_telemetry",
        summary="Receive Telemetry",
        description=(
            "Store one usage report. Reports for the same license, hardware and hour "
            "replace each other. The report is stored even when the license is "
            "unknown, expired or revoked."
        ),
        tags=["Telemetry"],
        request=TelemetryReportSerializer,
        responses={
            200: TelemetryReceiptSerializer,
            400: {"description": "Malformed report"},
            500: {"description": "Report could not be stored"},
        },
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_receive)(request)

    async def _handle_receive(self, request: Request) -> Response:
        with tracer.start_as_current_span("receive_telemetry") as span:
            data = validated_data(TelemetryReportSerializer, request.data, span)
            span.set_attribute("license.ref", data["license_id"])
            span.set_attribute("hardware_id", data["hardware_id"])

            container = get_container()
            handler = RecordTelemetryHandler(
                container.license_repository,
                container.activation_repository,
                container.telemetry_repository,
            )
            result = await run_with_deadline(handler.handle(RecordTelemetryCommand(**data)))

            span.set_attribute("license.valid", result.validation.valid)
            span.set_status(Status(StatusCode.OK))
            return Response({"status": "recorded"})


class DashboardStatsView(APIView):
    """View for the owner's 24 hour dashboard figures."""

    @extend_schema(
        operation_id="get_dashboard_stats",
        summary="Dashboard Stats",
        description="License counts and telemetry totals over the last 24 hours.",
        tags=["Telemetry"],
        responses={
            200: DashboardStatsSerializer,
            401: {"description": "Unauthorized"},
        },
    )
    def get(self, request: Request) -> Response:
        return async_to_sync(self._handle_stats)(request)

    async def _handle_stats(self, request: Request) -> Response:
        context = require_auth_context(request._request)
        with tracer.start_as_current_span("get_dashboard_stats") as span:
            span.set_attribute("user.id", str(context.user_id))

            container = get_container()
            handler = GetDashboardStatsHandler(
                container.license_repository, container.telemetry_repository
            )
            stats = await run_with_deadline(
                handler.handle(GetDashboardStatsQuery(user_id=context.user_id))
            )

            span.set_status(Status(StatusCode.OK))
            return Response(DashboardStatsSerializer(stats).data)


class UsageHistoryView(APIView):
    """View for hourly usage history."""

    @extend_schema(
        operation_id="get_usage_history",
        summary="Usage History",
        description="Hourly usage ordered by hour. Invalid or missing days means 7.",
        tags=["Telemetry"],
        parameters=[
            OpenApiParameter(
                name="days",
                type=int,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Days of history (default 7)",
            ),
        ],
        responses={
            200: UsagePointSerializer(many=True),
            401: {"description": "Unauthorized"},
        },
    )
    def get(self, request: Request) -> Response:
        return async_to_sync(self._handle_usage)(request)

    async def _handle_usage(self, request: Request) -> Response:
        context = require_auth_context(request._request)
        with tracer.start_as_current_span("get_usage_history") as span:
            span.set_attribute("user.id", str(context.user_id))

            container = get_container()
            handler = GetUsageHistoryHandler(
                container.license_repository, container.telemetry_repository
            )
            points = await run_with_deadline(
                handler.handle(
                    GetUsageHistoryQuery(
                        user_id=context.user_id, days=request.query_params.get("days")
                    )
                )
            )

            span.set_attribute("points.count", len(points))
            span.set_status(Status(StatusCode.OK))
            return Response(UsagePointSerializer(points, many=True).data)


class ActiveInstancesView(APIView):
    """View for the owner's running engine instances."""

    @extend_schema(
        operation_id="get_active_instances",
        summary="Active Instances",
        description=(
            "Active activations with their latest telemetry. An instance is online "
            "when it was seen within the last five minutes."
        ),
        tags=["Telemetry"],
        responses={
            200: InstanceSerializer(many=True),
            401: {"description": "Unauthorized"},
        },
    )
    def get(self, request: Request) -> Response:
        return async_to_sync(self._handle_instances)(request)

    async def _handle_instances(self, request: Request) -> Response:
        context = require_auth_context(request._request)
        with tracer.start_as_current_span("get_active_instances") as span:
            span.set_attribute("user.id", str(context.user_id))

            container = get_container()
            handler = GetActiveInstancesHandler(
                container.license_repository,
                container.activation_repository,
                container.telemetry_repository,
            )
            instances = await run_with_deadline(
                handler.handle(GetActiveInstancesQuery(user_id=context.user_id))
            )

            span.set_attribute("instances.count", len(instances))
            span.set_status(Status(StatusCode.OK))
            return Response(InstanceSerializer(instances, many=True).data)
