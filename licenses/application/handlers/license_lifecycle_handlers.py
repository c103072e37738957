"""
License lifecycle handlers.

Handler for the periodic expiry sweep.
"""
import logging
from datetime import datetime, timezone
from typing import List

from core.infrastructure.events import event_bus
from core.metrics import licenses_expired_total
from licenses.application.commands.license_commands import ExpireLicensesCommand
from licenses.domain.events import LicenseExpired
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class ExpireLicensesHandler:
    """Handler for ExpireLicensesCommand."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repository."""
        self.license_repository = license_repository

    async def handle(self, command: ExpireLicensesCommand) -> List[License]:
        """
        Move overdue active licenses to expired.

        Validation already refuses an overdue license on its own; the
        sweep keeps stored status and listings in line with it.

        Args:
            command: ExpireLicensesCommand

        Returns:
            Licenses expired by this run
        """
        now = command.as_of or datetime.now(timezone.utc)
        expired = await self.license_repository.expire_overdue(now)

        for license in expired:
            licenses_expired_total.inc()
            await event_bus.publish(LicenseExpired(license_id=license.id, user_id=license.user_id))

        if expired:
            logger.info("Expired overdue licenses", extra={"count": len(expired)})
        return expired
