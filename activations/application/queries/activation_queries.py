"""
Activation queries.
"""

import uuid
from dataclasses import dataclass


@dataclass
class ListActivationsQuery:
    """Query for every activation of a license, visible to its owner or an admin."""

    license_id: uuid.UUID
    requested_by: uuid.UUID
    requester_role: str
