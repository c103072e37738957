"""
Engine API views.

Public endpoints called by self-hosted engines: license validation
with hardware binding, activation and release of activation slots.
"""

from typing import Optional

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activations.application.commands.activation_commands import (
    DeactivateByHardwareCommand,
    RecordActivationCommand,
)
from activations.application.handlers.activation_handlers import (
    DeactivateByHardwareHandler,
    RecordActivationHandler,
)
from api.v1.engine.serializers import (
    ActivateRequestSerializer,
    ActivateResponseSerializer,
    DeactivateRequestSerializer,
    DeactivateResponseSerializer,
    ValidateLicenseRequestSerializer,
    ValidateLicenseResponseSerializer,
)
from api.v1.licenses.serializers import ActivationSerializer, LicenseSerializer
from api.v1.validation import validated_data
from ControlPlaneService.container import get_container
from core.infrastructure.database import run_with_deadline
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.license_commands import ValidateLicenseCommand
from licenses.application.dto.license_dto import LicenseDTO
from licenses.application.handlers.license_handlers import ValidateLicenseHandler

tracer = get_tracer(__name__)


def client_ip(request: Request) -> Optional[str]:
    """First X-Forwarded-For hop, else the peer address."""
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    if forwarded:
        return forwarded.split(",")[0].strip() or None
    return request.META.get("REMOTE_ADDR") or None


class ValidateLicenseView(APIView):
    """View for validating a license from an engine."""

    authentication_classes = []

    @extend_schema(
        operation_id="validate_license",
        summary="Validate License",
        description=(
            "Check that a license is usable on a hardware id. The first validation "
            "with a hardware id binds an unbound license to it permanently."
        ),
        tags=["Engine"],
        request=ValidateLicenseRequestSerializer,
        responses={
            200: ValidateLicenseResponseSerializer,
            400: {"description": "Bad Request"},
            403: {"description": "License expired or revoked"},
            404: {"description": "License not found"},
            409: {"description": "License bound to different hardware"},
        },
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_validate)(request)

    async def _handle_validate(self, request: Request) -> Response:
        with tracer.start_as_current_span("validate_license") as span:
            span.set_attribute("operation", "validate_license")
            data = validated_data(ValidateLicenseRequestSerializer, request.data, span)
            span.set_attribute("hardware_id", data["hardware_id"])

            handler = ValidateLicenseHandler(get_container().license_repository)
            license = await run_with_deadline(
                handler.handle(
                    ValidateLicenseCommand(
                        license_ref=data["license_id"], hardware_id=data["hardware_id"]
                    )
                )
            )

            span.set_attribute("license.id", str(license.id))
            span.set_status(Status(StatusCode.OK))
            return Response(
                {"valid": True, "license": LicenseSerializer(LicenseDTO.from_entity(license)).data}
            )


class ActivateView(APIView):
    """View for activating a license on an engine instance."""

    authentication_classes = []

    @extend_schema(
        operation_id="activate_license",
        summary="Activate License",
        description=(
            "Take an activation slot for a hardware id, or refresh the existing "
            "activation of that hardware. New hardware is refused once the tier's "
            "source limit is reached."
        ),
        tags=["Engine"],
        request=ActivateRequestSerializer,
        responses={
            200: ActivateResponseSerializer,
            400: {"description": "Bad Request"},
            403: {"description": "License expired or revoked"},
            404: {"description": "License not found"},
            409: {"description": "Activation limit reached or hardware mismatch"},
        },
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_activate)(request)

    async def _handle_activate(self, request: Request) -> Response:
        with tracer.start_as_current_span("activate_license") as span:
            span.set_attribute("operation", "activate_license")
            data = validated_data(ActivateRequestSerializer, request.data, span)
            span.set_attribute("hardware_id", data["hardware_id"])

            container = get_container()
            handler = RecordActivationHandler(
                container.license_repository, container.activation_repository
            )
            result = await run_with_deadline(
                handler.handle(
                    RecordActivationCommand(
                        license_ref=data["license_key"],
                        hardware_id=data["hardware_id"],
                        hostname=data["hostname"],
                        platform=data["platform"],
                        version=data["version"],
                        ip_address=client_ip(request),
                    )
                )
            )

            span.set_attribute("activation.id", str(result.activation.id))
            span.set_attribute("activation.created", result.created)
            span.set_status(Status(StatusCode.OK))
            return Response(
                {
                    "success": True,
                    "created": result.created,
                    "slots_remaining": result.slots_remaining,
                    "activation": ActivationSerializer(result.activation).data,
                }
            )


class DeactivateView(APIView):
    """View for releasing an engine's activation on shutdown."""

    authentication_classes = []

    @extend_schema(
        operation_id="deactivate_license",
        summary="Deactivate License",
        description="Release the activation held by a hardware id. Idempotent.",
        tags=["Engine"],
        request=DeactivateRequestSerializer,
        responses={
            200: DeactivateResponseSerializer,
            400: {"description": "Bad Request"},
            404: {"description": "License not found"},
        },
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_deactivate)(request)

    async def _handle_deactivate(self, request: Request) -> Response:
        with tracer.start_as_current_span("deactivate_license") as span:
            data = validated_data(DeactivateRequestSerializer, request.data, span)
            span.set_attribute("hardware_id", data["hardware_id"])

            container = get_container()
            handler = DeactivateByHardwareHandler(
                container.license_repository, container.activation_repository
            )
            activation = await run_with_deadline(
                handler.handle(
                    DeactivateByHardwareCommand(
                        license_ref=data["license_id"], hardware_id=data["hardware_id"]
                    )
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response({"success": True, "deactivated": activation is not None})
