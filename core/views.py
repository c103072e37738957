"""
Liveness and readiness checks.

Each component check returns normally when the backing service answers
and raises otherwise.
"""
import logging

from django.core.cache import cache
from django.db import connection
from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

logger = logging.getLogger(__name__)

SERVICE_NAME = "control-plane-service"
CHECK_CACHE_KEY = "control_plane:health_check"


def check_database() -> None:
    with connection.cursor() as cursor:
        cursor.execute("SELECT 1")


def check_cache() -> None:
    cache.set(CHECK_CACHE_KEY, "ok", 10)
    if cache.get(CHECK_CACHE_KEY) != "ok":
        raise ConnectionError("cache did not return the check value")


CHECKS = {
    "database": check_database,
    "cache": check_cache,
}


def run_check(component: str):
    """Return (healthy, error message) for one component."""
    try:
        CHECKS[component]()
    except Exception as e:  # pylint: disable=broad-exception-caught
        # Cache backends raise their client library's own errors.
        logger.warning("Health check failed", extra={"component": component, "error": str(e)})
        return False, str(e)
    return True, None


@method_decorator(csrf_exempt, name="dispatch")
class HealthView(View):
    """Process liveness; touches no backing service."""

    def get(self, _request):
        return JsonResponse({"status": "healthy", "service": SERVICE_NAME})


@method_decorator(csrf_exempt, name="dispatch")
class ComponentHealthView(View):
    """
    Health of one backing service, selected with as_view(component=...).

    Responds 503 when the check fails.
    """

    component = None

    def get(self, _request):
        healthy, error = run_check(self.component)
        body = {
            "status": "healthy" if healthy else "unhealthy",
            self.component: "connected" if healthy else "disconnected",
        }
        if error:
            body["error"] = error
        return JsonResponse(body, status=200 if healthy else 503)


@method_decorator(csrf_exempt, name="dispatch")
class ReadyView(View):
    """Readiness: every backing service must answer."""

    def get(self, _request):
        checks = {component: run_check(component)[0] for component in CHECKS}
        ready = all(checks.values())
        return JsonResponse(
            {"status": "ready" if ready else "not_ready", "checks": checks},
            status=200 if ready else 503,
        )
