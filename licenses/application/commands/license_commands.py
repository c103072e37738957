"""
License commands.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from licenses.domain.license import DEFAULT_VALID_DAYS


@dataclass
class IssueLicenseCommand:
    """Command to create a license for a user from the tier catalog."""

    user_id: uuid.UUID
    tier: str
    valid_days: int = DEFAULT_VALID_DAYS
    hardware_id: Optional[str] = None
    issued_by: Optional[uuid.UUID] = None


@dataclass
class ValidateLicenseCommand:
    """
    Command to validate a license for an engine instance.

    license_ref is either the license id or the license key.
    """

    license_ref: str
    hardware_id: Optional[str] = None


@dataclass
class RevokeLicenseCommand:
    """
    Command to revoke a license.

    When requested_by is set, the requester must own the license or
    hold the MANAGE_ANY_LICENSE capability.
    """

    license_id: uuid.UUID
    requested_by: Optional[uuid.UUID] = None
    requester_role: Optional[str] = None


@dataclass
class ExpireLicensesCommand:
    """Command to sweep active licenses whose expiry has passed."""

    as_of: Optional[datetime] = None
