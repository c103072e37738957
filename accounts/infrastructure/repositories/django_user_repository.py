"""
Django implementation of UserRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from typing import Optional

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from accounts.domain.user import User
from accounts.infrastructure.models import User as UserModel
from accounts.ports.user_repository import UserRepository
from core.domain.exceptions import UserExistsError
from core.domain.value_objects import Email, UserRole
from core.infrastructure.database import storage_errors


class DjangoUserRepository(UserRepository):
    """Django ORM implementation of UserRepository."""

    def _to_domain(self, model: UserModel) -> User:
        return User(
            id=model.id,
            email=Email(model.email),
            password_hash=model.password_hash,
            name=model.name,
            company=model.company,
            role=UserRole(model.role),
            email_verified=model.email_verified,
            created_at=model.created_at,
            updated_at=model.updated_at,
            last_login_at=model.last_login_at,
        )

    @sync_to_async
    def save(self, user: User) -> User:
        """
        Insert or update a user.

        Raises:
            UserExistsError: If the email is held by another user
        """
        with storage_errors("save user"):
            try:
                with transaction.atomic():
                    model, _ = UserModel.objects.update_or_create(
                        id=user.id,
                        defaults={
                            "email": str(user.email),
                            "password_hash": user.password_hash,
                            "name": user.name,
                            "company": user.company,
                            "role": user.role.value,
                            "email_verified": user.email_verified,
                            "last_login_at": user.last_login_at,
                        },
                    )
            except IntegrityError as e:
                raise UserExistsError() from e
            return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        with storage_errors("find user"):
            model = UserModel.objects.filter(id=user_id).first()
            return self._to_domain(model) if model else None

    @sync_to_async
    def find_by_email(self, email: str) -> Optional[User]:
        with storage_errors("find user"):
            model = UserModel.objects.filter(email__iexact=email.strip()).first()
            return self._to_domain(model) if model else None

    @sync_to_async
    def exists(self, user_id: uuid.UUID) -> bool:
        with storage_errors("find user"):
            return UserModel.objects.filter(id=user_id).exists()
