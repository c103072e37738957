"""
License DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from licenses.domain.license import License


@dataclass
class LicenseDTO:
    """DTO for license information."""

    id: uuid.UUID
    user_id: uuid.UUID
    license_key: str
    tier: str
    status: str
    max_sources: int
    max_tables: int
    max_throughput: int
    features: List[str]
    hardware_id: Optional[str]
    issued_at: datetime
    expires_at: datetime
    revoked_at: Optional[datetime]

    @classmethod
    def from_entity(cls, license: License, current_time: Optional[datetime] = None) -> "LicenseDTO":
        """Build the DTO, reporting the status in effect at current_time."""
        return cls(
            id=license.id,
            user_id=license.user_id,
            license_key=license.license_key,
            tier=license.tier.value,
            status=license.effective_status(current_time).value,
            max_sources=license.max_sources,
            max_tables=license.max_tables,
            max_throughput=license.max_throughput,
            features=list(license.features),
            hardware_id=license.hardware_id,
            issued_at=license.issued_at,
            expires_at=license.expires_at,
            revoked_at=license.revoked_at,
        )


@dataclass
class LicensePageDTO:
    """DTO for a paginated admin license listing."""

    licenses: List[LicenseDTO]
    total: int
    page: int
    limit: int
