"""
License Registry handlers: issue, validate and revoke.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from accounts.ports.user_repository import UserRepository
from core.domain.exceptions import (
    BadRequestError,
    HardwareMismatchError,
    LicenseExpiredError,
    LicenseNotFoundError,
    LicenseRevokedError,
    UserNotFoundError,
)
from core.domain.value_objects import LicenseStatus
from core.infrastructure.events import event_bus
from core.metrics import (
    license_validations_total,
    licenses_expired_total,
    licenses_issued_total,
    licenses_revoked_total,
)
from licenses.application.commands.license_commands import (
    IssueLicenseCommand,
    RevokeLicenseCommand,
    ValidateLicenseCommand,
)
from licenses.application.dto.license_dto import LicenseDTO
from licenses.domain.events import HardwareBound, LicenseExpired, LicenseIssued, LicenseRevoked
from licenses.domain.license import License
from licenses.domain.services import LicenseAccessPolicy, LicenseValidator
from licenses.domain.tiers import parse_tier
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


async def resolve_license(
    repository: LicenseRepository, license_ref: str
) -> Optional[License]:
    """
    Look a license up by id or by key.

    Args:
        repository: License repository
        license_ref: UUID string or license key

    Returns:
        License entity or None
    """
    ref = (license_ref or "").strip()
    if not ref:
        return None
    try:
        license_id = uuid.UUID(ref)
    except ValueError:
        return await repository.find_by_key(ref)
    return await repository.find_by_id(license_id)


async def expire_if_due(repository: LicenseRepository, license: License) -> None:
    """Persist the active to expired transition once and announce it."""
    if license.status != LicenseStatus.ACTIVE or license.is_revoked:
        return
    if await repository.mark_expired(license.id):
        licenses_expired_total.inc()
        await event_bus.publish(LicenseExpired(license_id=license.id, user_id=license.user_id))


class IssueLicenseHandler:
    """Handler for IssueLicenseCommand."""

    def __init__(self, license_repository: LicenseRepository, user_repository: UserRepository):
        self.license_repository = license_repository
        self.user_repository = user_repository

    async def handle(self, command: IssueLicenseCommand) -> LicenseDTO:
        """
        Create a license with the tier's limits and features.

        Raises:
            BadRequestError: If the tier or validity is invalid
            UserNotFoundError: If the owner does not exist
        """
        try:
            tier = parse_tier(command.tier)
        except ValueError as e:
            raise BadRequestError(f"Unknown tier: {command.tier}") from e

        if not await self.user_repository.exists(command.user_id):
            raise UserNotFoundError()

        try:
            license = License.create(
                user_id=command.user_id,
                tier=tier,
                valid_days=command.valid_days,
                hardware_id=command.hardware_id,
            )
        except ValueError as e:
            raise BadRequestError(str(e)) from e

        license = await self.license_repository.save(license)
        licenses_issued_total.labels(tier=tier.value).inc()

        await event_bus.publish(
            LicenseIssued(
                license_id=license.id,
                user_id=license.user_id,
                tier=tier.value,
                issued_by=command.issued_by,
            )
        )
        logger.info(
            "License issued",
            extra={"license_id": str(license.id), "user_id": str(license.user_id), "tier": tier.value},
        )
        return LicenseDTO.from_entity(license)


class ValidateLicenseHandler:
    """Handler for ValidateLicenseCommand."""

    def __init__(self, license_repository: LicenseRepository):
        self.license_repository = license_repository

    async def handle(self, command: ValidateLicenseCommand) -> License:
        """
        Validate a license and bind it to hardware on first use.

        Checks run in order: existence, revocation, expiry, hardware.
        An unbound license is bound to the presented hardware id; the
        binding is one-way.

        Raises:
            LicenseNotFoundError: If no license matches the reference
            LicenseRevokedError: If the license is revoked
            LicenseExpiredError: If the license is past its expiry
            HardwareMismatchError: If bound and the hardware id differs or is missing
        """
        try:
            license = await self._validate(command)
        except (
            LicenseNotFoundError,
            LicenseRevokedError,
            LicenseExpiredError,
            HardwareMismatchError,
        ) as e:
            license_validations_total.labels(outcome=e.code.lower()).inc()
            raise
        license_validations_total.labels(outcome="valid").inc()
        return license

    async def _validate(self, command: ValidateLicenseCommand) -> License:
        license = await resolve_license(self.license_repository, command.license_ref)
        if license is None:
            raise LicenseNotFoundError()

        try:
            LicenseValidator.ensure_valid(license, datetime.now(timezone.utc))
        except LicenseExpiredError:
            await expire_if_due(self.license_repository, license)
            raise

        hardware_id = (command.hardware_id or "").strip()
        if not hardware_id and not license.is_bound:
            return license

        if not license.is_bound:
            license = await self.license_repository.bind_hardware(license.id, hardware_id)
            if license.is_bound_to(hardware_id):
                await event_bus.publish(
                    HardwareBound(
                        license_id=license.id,
                        user_id=license.user_id,
                        hardware_id=hardware_id,
                    )
                )
                logger.info(
                    "License bound to hardware",
                    extra={"license_id": str(license.id), "hardware_id": hardware_id},
                )

        LicenseValidator.ensure_hardware(license, hardware_id)
        return license


class RevokeLicenseHandler:
    """Handler for RevokeLicenseCommand."""

    def __init__(self, license_repository: LicenseRepository):
        self.license_repository = license_repository

    async def handle(self, command: RevokeLicenseCommand) -> LicenseDTO:
        """
        Revoke a license. Idempotent; revocation is never undone.

        Activations and telemetry are left in place.

        Raises:
            LicenseNotFoundError: If the license does not exist
            ForbiddenError: If the requester may not manage the license
        """
        license = await self.license_repository.find_by_id(command.license_id)
        if license is None:
            raise LicenseNotFoundError()

        if command.requested_by is not None:
            LicenseAccessPolicy.ensure_can_manage(
                license, command.requested_by, command.requester_role or ""
            )

        license, changed = await self.license_repository.revoke(
            license.id, datetime.now(timezone.utc)
        )
        if changed:
            licenses_revoked_total.labels(tier=license.tier.value).inc()
            await event_bus.publish(LicenseRevoked(license_id=license.id, user_id=license.user_id))
            logger.info("License revoked", extra={"license_id": str(license.id)})
        return LicenseDTO.from_entity(license)
