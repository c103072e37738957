"""
Django implementation of ActivationRepository port.

This adapter converts between domain entities and Django ORM models.
"""

import uuid
from datetime import datetime
from typing import List, Optional, Tuple

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from activations.domain.activation import Activation
from activations.infrastructure.models import Activation as ActivationModel
from activations.ports.activation_repository import ActivationRepository, AdmitActivation
from core.domain.exceptions import ActivationNotFoundError, LicenseNotFoundError
from core.infrastructure.database import storage_errors
from licenses.infrastructure.models import License as LicenseModel


class DjangoActivationRepository(ActivationRepository):
    """
    Django ORM implementation of ActivationRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django models
    3. Implements repository interface
    """

    def _to_domain(self, model: ActivationModel) -> Activation:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Activation model

        Returns:
            Activation domain entity
        """
        return Activation(
            id=model.id,
            license_id=model.license_id,
            hardware_id=model.hardware_id,
            hostname=model.hostname,
            platform=model.platform,
            version=model.version,
            ip_address=model.ip_address,
            activated_at=model.activated_at,
            last_seen_at=model.last_seen_at,
            deactivated_at=model.deactivated_at,
        )

    def _active(self, license_id: uuid.UUID, hardware_id: str):
        return ActivationModel.objects.filter(  # pylint: disable=no-member
            license_id=license_id, hardware_id=hardware_id, deactivated_at__isnull=True
        )

    def _refresh(self, model: ActivationModel, candidate: Activation) -> ActivationModel:
        refreshed = self._to_domain(model).touch(
            seen_at=candidate.last_seen_at,
            hostname=candidate.hostname,
            platform=candidate.platform,
            version=candidate.version,
            ip_address=candidate.ip_address,
        )
        model.last_seen_at = refreshed.last_seen_at
        model.hostname = refreshed.hostname
        model.platform = refreshed.platform
        model.version = refreshed.version
        model.ip_address = refreshed.ip_address
        model.save(update_fields=["last_seen_at", "hostname", "platform", "version", "ip_address"])
        return model

    def _upsert_active(
        self, candidate: Activation, admit: AdmitActivation
    ) -> Tuple[Activation, bool]:
        with transaction.atomic():
            # Serializes activations per license so the slot count is exact.
            if not LicenseModel.objects.select_for_update().filter(id=candidate.license_id).exists():
                raise LicenseNotFoundError()

            existing = self._active(candidate.license_id, candidate.hardware_id).first()
            active_count = ActivationModel.objects.filter(  # pylint: disable=no-member
                license_id=candidate.license_id, deactivated_at__isnull=True
            ).count()
            admit(active_count, existing is not None)

            if existing is not None:
                return self._to_domain(self._refresh(existing, candidate)), False

            try:
                with transaction.atomic():
                    model = ActivationModel.objects.create(  # pylint: disable=no-member
                        id=candidate.id,
                        license_id=candidate.license_id,
                        hardware_id=candidate.hardware_id,
                        hostname=candidate.hostname,
                        platform=candidate.platform,
                        version=candidate.version,
                        ip_address=candidate.ip_address,
                        activated_at=candidate.activated_at,
                        last_seen_at=candidate.last_seen_at,
                    )
            except IntegrityError:
                # Lost the race to a concurrent insert; converge on its row.
                existing = self._active(candidate.license_id, candidate.hardware_id).get()
                return self._to_domain(self._refresh(existing, candidate)), False
            return self._to_domain(model), True

    async def upsert_active(
        self, candidate: Activation, admit: AdmitActivation
    ) -> Tuple[Activation, bool]:
        """
        Refresh or insert the active activation under a license row lock.

        Args:
            candidate: Activation carrying the reported metadata
            admit: Quota gate

        Returns:
            Tuple of (stored activation, created)
        """
        def run():
            with storage_errors("record activation"):
                return self._upsert_active(candidate, admit)

        return await sync_to_async(run)()

    @sync_to_async
    def find_by_id(self, activation_id: uuid.UUID) -> Optional[Activation]:
        with storage_errors("find activation"):
            model = ActivationModel.objects.filter(id=activation_id).first()  # pylint: disable=no-member
            return self._to_domain(model) if model else None

    @sync_to_async
    def find_active_by_license(self, license_id: uuid.UUID) -> List[Activation]:
        with storage_errors("list activations"):
            return [
                self._to_domain(model)
                for model in ActivationModel.objects.filter(  # pylint: disable=no-member
                    license_id=license_id, deactivated_at__isnull=True
                )
            ]

    @sync_to_async
    def find_all_by_license(self, license_id: uuid.UUID) -> List[Activation]:
        with storage_errors("list activations"):
            return [
                self._to_domain(model)
                for model in ActivationModel.objects.filter(  # pylint: disable=no-member
                    license_id=license_id
                ).order_by("-activated_at")
            ]

    @sync_to_async
    def find_active_by_user(self, user_id: uuid.UUID) -> List[Activation]:
        with storage_errors("list activations"):
            return [
                self._to_domain(model)
                for model in ActivationModel.objects.filter(  # pylint: disable=no-member
                    license__user_id=user_id, deactivated_at__isnull=True
                ).order_by("-last_seen_at")
            ]

    @sync_to_async
    def touch(self, license_id: uuid.UUID, hardware_id: str, seen_at: datetime) -> bool:
        with storage_errors("touch activation"):
            updated = self._active(license_id, hardware_id).filter(
                last_seen_at__lt=seen_at
            ).update(last_seen_at=seen_at)
            return updated > 0 or self._active(license_id, hardware_id).exists()

    @sync_to_async
    def deactivate(
        self, activation_id: uuid.UUID, deactivated_at: datetime
    ) -> Tuple[Activation, bool]:
        with storage_errors("deactivate activation"):
            updated = ActivationModel.objects.filter(  # pylint: disable=no-member
                id=activation_id, deactivated_at__isnull=True
            ).update(deactivated_at=deactivated_at)
            model = ActivationModel.objects.filter(id=activation_id).first()  # pylint: disable=no-member
            if model is None:
                raise ActivationNotFoundError()
            return self._to_domain(model), updated == 1

    @sync_to_async
    def deactivate_by_hardware(
        self, license_id: uuid.UUID, hardware_id: str, deactivated_at: datetime
    ) -> Optional[Activation]:
        with storage_errors("deactivate activation"):
            model = self._active(license_id, hardware_id).first()
            if model is None:
                return None
            updated = ActivationModel.objects.filter(  # pylint: disable=no-member
                id=model.id, deactivated_at__isnull=True
            ).update(deactivated_at=deactivated_at)
            if not updated:
                return None
            model.deactivated_at = deactivated_at
            return self._to_domain(model)
