"""
Development settings for ControlPlaneService.
"""
import os

from .base import *  # noqa: F403, F401

DEBUG = True

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "0.0.0.0"]

# Database - PostgreSQL from docker-compose, SQLite with DB_ENGINE=sqlite
if os.environ.get("DB_ENGINE") == "sqlite":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",  # noqa: F405
        }
    }

# Local signing key; never used outside development
JWT_SECRET_KEY = os.environ.get(
    "JWT_SECRET_KEY", "dev-only-signing-key-change-me-0123456789abcdef"
)

OBSERVABILITY_ENABLED = os.environ.get("OBSERVABILITY_ENABLED", "false").lower() == "true"
