"""
License query handlers.
"""
from datetime import datetime, timezone
from typing import List

from core.domain.exceptions import LicenseNotFoundError
from licenses.application.dto.license_dto import LicenseDTO, LicensePageDTO
from licenses.application.queries.license_queries import (
    GetLicenseQuery,
    ListAllLicensesQuery,
    ListUserLicensesQuery,
)
from licenses.domain.services import LicenseAccessPolicy
from licenses.ports.license_repository import LicenseRepository


class ListUserLicensesHandler:
    """Handler for ListUserLicensesQuery."""

    def __init__(self, license_repository: LicenseRepository):
        self.license_repository = license_repository

    async def handle(self, query: ListUserLicensesQuery) -> List[LicenseDTO]:
        now = datetime.now(timezone.utc)
        licenses = await self.license_repository.find_by_user(query.user_id)
        return [LicenseDTO.from_entity(license, now) for license in licenses]


class GetLicenseHandler:
    """Handler for GetLicenseQuery."""

    def __init__(self, license_repository: LicenseRepository):
        self.license_repository = license_repository

    async def handle(self, query: GetLicenseQuery) -> LicenseDTO:
        """
        Return one license.

        Raises:
            LicenseNotFoundError: If the license does not exist
            ForbiddenError: If the requester is neither owner nor admin
        """
        license = await self.license_repository.find_by_id(query.license_id)
        if license is None:
            raise LicenseNotFoundError()
        LicenseAccessPolicy.ensure_can_manage(license, query.requested_by, query.requester_role)
        return LicenseDTO.from_entity(license)


class ListAllLicensesHandler:
    """Handler for ListAllLicensesQuery."""

    def __init__(self, license_repository: LicenseRepository):
        self.license_repository = license_repository

    async def handle(self, query: ListAllLicensesQuery) -> LicensePageDTO:
        licenses, total = await self.license_repository.list_all(
            page=query.page, limit=query.limit, tier=query.tier, status=query.status
        )
        now = datetime.now(timezone.utc)
        return LicensePageDTO(
            licenses=[LicenseDTO.from_entity(license, now) for license in licenses],
            total=total,
            page=query.page,
            limit=query.limit,
        )
