"""
Celery tasks for background processing.

Periodic license maintenance.
"""
import logging

from asgiref.sync import async_to_sync

from ControlPlaneService.celery import app

logger = logging.getLogger(__name__)


@app.task(bind=True, max_retries=3)
def expire_licenses(self):
    """
    Move overdue active licenses to expired.

    Returns:
        Number of licenses expired by this run
    """
    from ControlPlaneService.container import get_container
    from core.domain.exceptions import StorageError
    from licenses.application.commands.license_commands import ExpireLicensesCommand
    from licenses.application.handlers.license_lifecycle_handlers import ExpireLicensesHandler

    handler = ExpireLicensesHandler(get_container().license_repository)
    try:
        expired = async_to_sync(handler.handle)(ExpireLicensesCommand())
    except StorageError as exc:
        logger.error("License expiry sweep failed: %s", exc)
        raise self.retry(exc=exc, countdown=2 ** self.request.retries)
    return len(expired)
