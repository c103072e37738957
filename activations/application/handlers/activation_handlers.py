"""
Activation handlers.

Record, release and list the activations that hold license slots.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from activations.application.commands.activation_commands import (
    DeactivateActivationCommand,
    DeactivateByHardwareCommand,
    RecordActivationCommand,
)
from activations.application.dto.activation_dto import ActivationDTO, RecordActivationResultDTO
from activations.application.queries.activation_queries import ListActivationsQuery
from activations.domain.events import ActivationDeactivated, LicenseActivated
from activations.domain.services import ActivationManager
from activations.ports.activation_repository import ActivationRepository
from core.domain.exceptions import (
    ActivationNotFoundError,
    BadRequestError,
    DomainException,
    LicenseNotFoundError,
)
from core.infrastructure.events import event_bus
from core.metrics import activations_total
from licenses.application.handlers.license_handlers import resolve_license
from licenses.domain.services import LicenseAccessPolicy
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


def _require_hardware_id(hardware_id: Optional[str]) -> str:
    hardware_id = (hardware_id or "").strip()
    if not hardware_id:
        raise BadRequestError("hardware_id is required")
    if len(hardware_id) > 255:
        raise BadRequestError("hardware_id too long")
    return hardware_id


class RecordActivationHandler:
    """Handler for RecordActivationCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        activation_repository: ActivationRepository,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.activation_repository = activation_repository

    async def handle(self, command: RecordActivationCommand) -> RecordActivationResultDTO:
        """
        Handle record activation command.

        Idempotent per (license, hardware_id): a repeat refreshes the
        existing activation and never counts against the quota.

        Args:
            command: RecordActivationCommand

        Returns:
            RecordActivationResultDTO

        Raises:
            LicenseNotFoundError: If license not found
            LicenseRevokedError / LicenseExpiredError: If license unusable
            HardwareMismatchError: If bound to different hardware
            QuotaExceededError: If max_sources active activations exist
        """
        hardware_id = _require_hardware_id(command.hardware_id)

        license = await resolve_license(self.license_repository, command.license_ref)
        if license is None:
            activations_total.labels(outcome="license_not_found").inc()
            raise LicenseNotFoundError()

        try:
            ActivationManager.ensure_activatable(license, hardware_id)
            activation, created = await ActivationManager.record_activation(
                license=license,
                hardware_id=hardware_id,
                hostname=command.hostname,
                platform=command.platform,
                version=command.version,
                ip_address=command.ip_address,
                repository=self.activation_repository,
            )
        except DomainException as e:
            activations_total.labels(outcome=e.code.lower()).inc()
            raise

        activations_total.labels(outcome="created" if created else "refreshed").inc()
        if created:
            await event_bus.publish(
                LicenseActivated(
                    activation_id=activation.id,
                    license_id=license.id,
                    hardware_id=hardware_id,
                )
            )
            logger.info(
                "License activated",
                extra={"license_id": str(license.id), "hardware_id": hardware_id},
            )

        active_count = await ActivationManager.count_active(license.id, self.activation_repository)
        return RecordActivationResultDTO(
            activation=ActivationDTO.from_entity(activation),
            created=created,
            slots_remaining=ActivationManager.slots_remaining(license, active_count),
        )


class DeactivateActivationHandler:
    """Handler for DeactivateActivationCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        activation_repository: ActivationRepository,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.activation_repository = activation_repository

    async def handle(self, command: DeactivateActivationCommand) -> ActivationDTO:
        """
        Release an activation's slot. Idempotent.

        Raises:
            ActivationNotFoundError: If the activation does not exist
            ForbiddenError: If the requester may not manage the license
        """
        activation = await self.activation_repository.find_by_id(command.activation_id)
        if activation is None:
            raise ActivationNotFoundError()

        if command.requested_by is not None:
            license = await self.license_repository.find_by_id(activation.license_id)
            if license is None:
                raise LicenseNotFoundError()
            LicenseAccessPolicy.ensure_can_manage(
                license, command.requested_by, command.requester_role or ""
            )

        activation, changed = await self.activation_repository.deactivate(
            activation.id, datetime.now(timezone.utc)
        )
        if changed:
            await event_bus.publish(
                ActivationDeactivated(
                    activation_id=activation.id,
                    license_id=activation.license_id,
                    hardware_id=activation.hardware_id,
                )
            )
        return ActivationDTO.from_entity(activation)


class DeactivateByHardwareHandler:
    """Handler for DeactivateByHardwareCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        activation_repository: ActivationRepository,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.activation_repository = activation_repository

    async def handle(self, command: DeactivateByHardwareCommand) -> Optional[ActivationDTO]:
        """
        Release the active activation of a hardware id, if there is one.

        Returns:
            The released activation, or None when nothing was active

        Raises:
            LicenseNotFoundError: If the license does not exist
        """
        hardware_id = _require_hardware_id(command.hardware_id)
        license = await resolve_license(self.license_repository, command.license_ref)
        if license is None:
            raise LicenseNotFoundError()

        activation = await self.activation_repository.deactivate_by_hardware(
            license.id, hardware_id, datetime.now(timezone.utc)
        )
        if activation is None:
            return None

        await event_bus.publish(
            ActivationDeactivated(
                activation_id=activation.id,
                license_id=license.id,
                hardware_id=hardware_id,
            )
        )
        return ActivationDTO.from_entity(activation)


class ListActivationsHandler:
    """Handler for ListActivationsQuery."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        activation_repository: ActivationRepository,
    ):
        self.license_repository = license_repository
        self.activation_repository = activation_repository

    async def handle(self, query: ListActivationsQuery) -> List[ActivationDTO]:
        license = await self.license_repository.find_by_id(query.license_id)
        if license is None:
            raise LicenseNotFoundError()
        LicenseAccessPolicy.ensure_can_manage(license, query.requested_by, query.requester_role)
        activations = await self.activation_repository.find_all_by_license(license.id)
        return [ActivationDTO.from_entity(activation) for activation in activations]
