"""
Model registration for the accounts app.

The models live in accounts.infrastructure.models; importing them here
lets Django discover them.
"""
from accounts.infrastructure.models import RefreshToken, User  # noqa: F401
