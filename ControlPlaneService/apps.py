"""
App configuration for the Control Plane service.
"""
import logging
import os
import sys

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)

SKIP_SETUP_COMMANDS = ("migrate", "makemigrations", "collectstatic", "check")


class ControlPlaneServiceConfig(AppConfig):
    """App configuration for ControlPlaneService."""

    name = "ControlPlaneService"
    verbose_name = "Control Plane Service"

    def ready(self):
        """
        Build the service container and register event handlers.

        A bad token signing configuration is fatal: the service must not
        start with a missing or weak key.
        """
        # Registers the BearerAuth scheme with drf-spectacular
        import core.schema_extensions  # noqa: F401
        from core.infrastructure.event_handlers import register_event_handlers

        from .container import ServiceContainer, set_container

        if len(sys.argv) > 1 and sys.argv[1] in SKIP_SETUP_COMMANDS:
            return
        # Django's autoreloader imports the project twice
        if os.environ.get("RUN_MAIN") == "false":
            return
        if getattr(self, "_initialized", False):
            return

        set_container(ServiceContainer.build(settings))
        register_event_handlers()
        if getattr(settings, "OBSERVABILITY_ENABLED", True):
            self.setup_observability()
        self._initialized = True

    def setup_observability(self):
        """Setup OpenTelemetry; the service runs without it if the exporter is unavailable."""
        from core.instrumentation import setup_opentelemetry

        try:
            setup_opentelemetry()
        except (ImportError, OSError, RuntimeError) as e:
            logger.warning(f"Failed to setup OpenTelemetry: {e}")
