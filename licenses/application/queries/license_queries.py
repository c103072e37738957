"""
License queries.
"""
import uuid
from dataclasses import dataclass
from typing import Optional

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@dataclass
class ListUserLicensesQuery:
    """Query for the licenses a user owns."""

    user_id: uuid.UUID


@dataclass
class GetLicenseQuery:
    """Query for one license, visible to its owner or an admin."""

    license_id: uuid.UUID
    requested_by: uuid.UUID
    requester_role: str


@dataclass
class ListAllLicensesQuery:
    """Admin query across all users."""

    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    tier: Optional[str] = None
    status: Optional[str] = None

    def __post_init__(self):
        """Clamp paging to sane bounds."""
        if self.page < 1:
            self.page = 1
        if self.limit < 1 or self.limit > MAX_PAGE_SIZE:
            self.limit = DEFAULT_PAGE_SIZE
