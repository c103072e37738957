"""
Django implementation of RefreshTokenRepository port.
"""
from typing import Optional

from asgiref.sync import sync_to_async
from django.db import transaction
from django.utils import timezone

from accounts.domain.refresh_token import RefreshToken
from accounts.infrastructure.models import RefreshToken as RefreshTokenModel
from accounts.ports.refresh_token_repository import RefreshTokenRepository
from core.infrastructure.database import storage_errors


class DjangoRefreshTokenRepository(RefreshTokenRepository):
    """Django ORM implementation of RefreshTokenRepository."""

    def _to_domain(self, model: RefreshTokenModel) -> RefreshToken:
        return RefreshToken(
            id=model.id,
            user_id=model.user_id,
            token=model.token,
            expires_at=model.expires_at,
            created_at=model.created_at,
            revoked_at=model.revoked_at,
        )

    @sync_to_async
    def save(self, token: RefreshToken) -> RefreshToken:
        with storage_errors("save refresh token"):
            model = RefreshTokenModel.objects.create(
                id=token.id,
                user_id=token.user_id,
                token=token.token,
                expires_at=token.expires_at,
                revoked_at=token.revoked_at,
            )
            return self._to_domain(model)

    @sync_to_async
    def consume(self, token: str) -> Optional[RefreshToken]:
        now = timezone.now()
        with storage_errors("consume refresh token"), transaction.atomic():
            model = RefreshTokenModel.objects.filter(token=token).first()
            if model is None or not self._to_domain(model).is_usable(now):
                return None
            # Conditional update: a concurrent consumer that lost the race sees 0 rows.
            updated = RefreshTokenModel.objects.filter(
                id=model.id, revoked_at__isnull=True
            ).update(revoked_at=now)
            if updated == 0:
                return None
            return self._to_domain(model)

    @sync_to_async
    def revoke(self, token: str) -> bool:
        with storage_errors("revoke refresh token"):
            qs = RefreshTokenModel.objects.filter(token=token)
            if not qs.exists():
                return False
            qs.filter(revoked_at__isnull=True).update(revoked_at=timezone.now())
            return True
