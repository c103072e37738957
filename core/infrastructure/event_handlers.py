"""
Event handlers for domain events.

These handlers process domain events for side effects
like audit logging and cache invalidation.
"""

import logging

from accounts.domain.events import UserLoggedIn, UserRegistered
from activations.domain.events import ActivationDeactivated, LicenseActivated
from core.domain.events import DomainEvent, EventHandler
from licenses.domain.events import HardwareBound, LicenseExpired, LicenseIssued, LicenseRevoked
from telemetry.domain.events import TelemetryRecorded

logger = logging.getLogger(__name__)

audit_logger = logging.getLogger("audit")

AUDITED_EVENTS = (
    UserRegistered,
    UserLoggedIn,
    LicenseIssued,
    HardwareBound,
    LicenseExpired,
    LicenseRevoked,
    LicenseActivated,
    ActivationDeactivated,
    TelemetryRecorded,
)

# Events that change an owner's license counts on the dashboard.
DASHBOARD_EVENTS = (LicenseIssued, LicenseExpired, LicenseRevoked)


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Writes every domain event as a structured line on the audit logger.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        level = logging.DEBUG if isinstance(event, TelemetryRecorded) else logging.INFO
        audit_logger.log(
            level,
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra={
                "event_id": str(event.event_id),
                "event_type": event.event_type,
                "aggregate_id": event.aggregate_id,
                "occurred_at": event.occurred_at.isoformat(),
            },
        )


class DashboardCacheInvalidationHandler(EventHandler):
    """
    Event handler for cache invalidation.

    Drops an owner's cached dashboard stats when their licenses change.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for cache invalidation.

        Args:
            event: Domain event carrying the owner's user_id
        """
        from telemetry.application.services.dashboard_cache_service import (
            DashboardCacheService,
        )

        await DashboardCacheService.invalidate_stats(event.user_id)
        logger.debug("Dashboard cache invalidated (event: %s)", event.event_type)


def register_event_handlers(bus=None):
    """Register all event handlers with the event bus."""
    if bus is None:
        from core.infrastructure.events import event_bus as bus

    audit_handler = AuditLogEventHandler()
    cache_handler = DashboardCacheInvalidationHandler()

    for event_type in AUDITED_EVENTS:
        bus.subscribe(event_type, audit_handler)
    for event_type in DASHBOARD_EVENTS:
        bus.subscribe(event_type, cache_handler)

    logger.info("Event handlers registered")
