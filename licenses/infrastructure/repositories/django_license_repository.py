"""
Django implementation of LicenseRepository port.

This adapter converts between domain entities and Django ORM models.
State transitions that race (binding, expiry, revocation) are written
as conditional updates so the database decides the winner.
"""
import uuid
from datetime import datetime
from typing import List, Optional, Tuple

from asgiref.sync import sync_to_async
from django.utils import timezone

from core.domain.exceptions import LicenseNotFoundError
from core.domain.value_objects import LicenseStatus, LicenseTier
from core.infrastructure.database import storage_errors
from licenses.domain.license import License, hash_license_key
from licenses.infrastructure.models import License as LicenseModel
from licenses.ports.license_repository import LicenseRepository


class DjangoLicenseRepository(LicenseRepository):
    """
    Django ORM implementation of LicenseRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django models
    3. Implements repository interface
    """

    def _to_domain(self, model: LicenseModel) -> License:
        """
        Convert Django model to domain entity.

        Args:
            model: Django License model

        Returns:
            License domain entity
        """
        return License(
            id=model.id,
            user_id=model.user_id,
            license_key=model.license_key,
            tier=LicenseTier(model.tier),
            status=LicenseStatus(model.status),
            max_sources=model.max_sources,
            max_tables=model.max_tables,
            max_throughput=model.max_throughput,
            features=tuple(model.features or ()),
            hardware_id=model.hardware_id,
            issued_at=model.issued_at,
            expires_at=model.expires_at,
            revoked_at=model.revoked_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _get(self, license_id: uuid.UUID) -> LicenseModel:
        try:
            return LicenseModel.objects.get(id=license_id)
        except LicenseModel.DoesNotExist as e:
            raise LicenseNotFoundError() from e

    @sync_to_async
    def save(self, license: License) -> License:
        with storage_errors("save license"):
            model, _ = LicenseModel.objects.update_or_create(
                id=license.id,
                defaults={
                    "user_id": license.user_id,
                    "license_key": license.license_key,
                    "key_hash": hash_license_key(license.license_key),
                    "tier": license.tier.value,
                    "status": license.status.value,
                    "max_sources": license.max_sources,
                    "max_tables": license.max_tables,
                    "max_throughput": license.max_throughput,
                    "features": list(license.features),
                    "hardware_id": license.hardware_id,
                    "issued_at": license.issued_at,
                    "expires_at": license.expires_at,
                    "revoked_at": license.revoked_at,
                },
            )
            return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        with storage_errors("find license"):
            model = LicenseModel.objects.filter(id=license_id).first()
            return self._to_domain(model) if model else None

    @sync_to_async
    def find_by_key(self, license_key: str) -> Optional[License]:
        with storage_errors("find license"):
            model = LicenseModel.objects.filter(key_hash=hash_license_key(license_key)).first()
            return self._to_domain(model) if model else None

    @sync_to_async
    def find_by_user(self, user_id: uuid.UUID) -> List[License]:
        with storage_errors("list licenses"):
            return [
                self._to_domain(model)
                for model in LicenseModel.objects.filter(user_id=user_id).order_by("-created_at")
            ]

    @sync_to_async
    def list_all(
        self,
        page: int,
        limit: int,
        tier: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Tuple[List[License], int]:
        with storage_errors("list licenses"):
            qs = LicenseModel.objects.all()
            if tier:
                qs = qs.filter(tier=tier)
            if status:
                qs = qs.filter(status=status)
            total = qs.count()
            offset = (page - 1) * limit
            models = list(qs.order_by("-created_at")[offset : offset + limit])
            return [self._to_domain(model) for model in models], total

    @sync_to_async
    def bind_hardware(self, license_id: uuid.UUID, hardware_id: str) -> License:
        with storage_errors("bind hardware"):
            LicenseModel.objects.filter(id=license_id, hardware_id__isnull=True).update(
                hardware_id=hardware_id, updated_at=timezone.now()
            )
            return self._to_domain(self._get(license_id))

    @sync_to_async
    def mark_expired(self, license_id: uuid.UUID) -> bool:
        with storage_errors("expire license"):
            updated = LicenseModel.objects.filter(
                id=license_id, status=LicenseStatus.ACTIVE.value, revoked_at__isnull=True
            ).update(status=LicenseStatus.EXPIRED.value, updated_at=timezone.now())
            return updated == 1

    @sync_to_async
    def revoke(self, license_id: uuid.UUID, revoked_at: datetime) -> Tuple[License, bool]:
        with storage_errors("revoke license"):
            updated = LicenseModel.objects.filter(
                id=license_id, revoked_at__isnull=True
            ).update(
                revoked_at=revoked_at,
                status=LicenseStatus.REVOKED.value,
                updated_at=timezone.now(),
            )
            return self._to_domain(self._get(license_id)), updated == 1

    @sync_to_async
    def expire_overdue(self, now: datetime) -> List[License]:
        with storage_errors("expire licenses"):
            overdue = list(
                LicenseModel.objects.filter(
                    status=LicenseStatus.ACTIVE.value,
                    revoked_at__isnull=True,
                    expires_at__lte=now,
                )
            )
            expired = []
            for model in overdue:
                updated = LicenseModel.objects.filter(
                    id=model.id, status=LicenseStatus.ACTIVE.value
                ).update(status=LicenseStatus.EXPIRED.value, updated_at=now)
                if updated:
                    model.status = LicenseStatus.EXPIRED.value
                    expired.append(self._to_domain(model))
            return expired
