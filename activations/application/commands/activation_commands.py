"""
Activation commands.
"""

import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class RecordActivationCommand:
    """
    Command to activate a license for an instance.

    license_ref is either the license id or the license key.
    """

    license_ref: str
    hardware_id: str
    hostname: str = ""
    platform: str = ""
    version: str = ""
    ip_address: Optional[str] = None


@dataclass
class DeactivateActivationCommand:
    """
    Command to release an activation by id.

    When requested_by is set, the requester must own the license or
    hold the MANAGE_ANY_LICENSE capability.
    """

    activation_id: uuid.UUID
    requested_by: Optional[uuid.UUID] = None
    requester_role: Optional[str] = None


@dataclass
class DeactivateByHardwareCommand:
    """Command sent by an engine shutting down on a hardware id."""

    license_ref: str
    hardware_id: str
