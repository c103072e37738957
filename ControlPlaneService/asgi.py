"""
ASGI config for ControlPlaneService.
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "ControlPlaneService.settings.prod")

application = get_asgi_application()
