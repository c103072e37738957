"""
Account handlers: register, login, refresh and logout.
"""
import logging

from django.contrib.auth.hashers import check_password, make_password

from accounts.application.commands.auth_commands import (
    LoginCommand,
    LogoutCommand,
    RefreshTokensCommand,
    RegisterUserCommand,
)
from accounts.application.dto.auth_dto import AuthResultDTO, TokenPairDTO, UserDTO
from accounts.application.services.token_service import TokenService
from accounts.domain.events import UserLoggedIn, UserRegistered
from accounts.domain.user import User
from accounts.ports.refresh_token_repository import RefreshTokenRepository
from accounts.ports.user_repository import UserRepository
from core.domain.exceptions import BadRequestError, InvalidCredentialsError, UserExistsError
from core.infrastructure.events import event_bus

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


async def _issue_pair(token_service: TokenService, user: User) -> TokenPairDTO:
    access_token, expires_at = token_service.issue_access_token(
        user.id, str(user.email), user.role
    )
    refresh_token, _ = await token_service.issue_refresh_token(user.id)
    return TokenPairDTO(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_at=expires_at,
    )


class RegisterUserHandler:
    """Handler for RegisterUserCommand."""

    def __init__(self, user_repository: UserRepository, token_service: TokenService):
        self.user_repository = user_repository
        self.token_service = token_service

    async def handle(self, command: RegisterUserCommand) -> AuthResultDTO:
        """
        Create an account and issue its first token pair.

        Raises:
            BadRequestError: If required fields are missing or the password is short
            UserExistsError: If the email is already registered
        """
        if not command.email or not command.password or not command.name:
            raise BadRequestError("email, password, and name are required")
        if len(command.password) < MIN_PASSWORD_LENGTH:
            raise BadRequestError(
                f"password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        try:
            user = User.create(
                email=command.email,
                password_hash=make_password(command.password),
                name=command.name,
                company=command.company,
            )
        except ValueError as e:
            raise BadRequestError(str(e)) from e

        if await self.user_repository.find_by_email(str(user.email)):
            raise UserExistsError()

        user = await self.user_repository.save(user)
        tokens = await _issue_pair(self.token_service, user)

        await event_bus.publish(UserRegistered(user_id=user.id, email=str(user.email)))
        logger.info("User registered", extra={"user_id": str(user.id)})

        return AuthResultDTO(user=UserDTO.from_entity(user), tokens=tokens)


class LoginHandler:
    """Handler for LoginCommand."""

    def __init__(self, user_repository: UserRepository, token_service: TokenService):
        self.user_repository = user_repository
        self.token_service = token_service

    async def handle(self, command: LoginCommand) -> AuthResultDTO:
        """
        Verify credentials and issue a token pair.

        Raises:
            BadRequestError: If email or password is missing
            InvalidCredentialsError: If the credentials do not match
        """
        if not command.email or not command.password:
            raise BadRequestError("email and password are required")

        user = await self.user_repository.find_by_email(command.email)
        if user is None or not check_password(command.password, user.password_hash):
            raise InvalidCredentialsError()

        user = await self.user_repository.save(user.record_login())
        tokens = await _issue_pair(self.token_service, user)

        await event_bus.publish(UserLoggedIn(user_id=user.id))
        return AuthResultDTO(user=UserDTO.from_entity(user), tokens=tokens)


class RefreshTokensHandler:
    """Handler for RefreshTokensCommand."""

    def __init__(
        self,
        user_repository: UserRepository,
        refresh_token_repository: RefreshTokenRepository,
        token_service: TokenService,
    ):
        self.user_repository = user_repository
        self.refresh_token_repository = refresh_token_repository
        self.token_service = token_service

    async def handle(self, command: RefreshTokensCommand) -> TokenPairDTO:
        """
        Rotate a refresh token.

        The presented token is revoked before the new pair is issued, so
        a second use of the same token fails.

        Raises:
            InvalidCredentialsError: If the token is unknown, expired or used
        """
        if not command.refresh_token:
            raise BadRequestError("refresh_token is required")

        consumed = await self.refresh_token_repository.consume(command.refresh_token)
        if consumed is None:
            raise InvalidCredentialsError("Invalid or expired refresh token")

        user = await self.user_repository.find_by_id(consumed.user_id)
        if user is None:
            raise InvalidCredentialsError("Invalid or expired refresh token")

        return await _issue_pair(self.token_service, user)


class LogoutHandler:
    """Handler for LogoutCommand."""

    def __init__(self, refresh_token_repository: RefreshTokenRepository):
        self.refresh_token_repository = refresh_token_repository

    async def handle(self, command: LogoutCommand) -> None:
        """Revoke the refresh token; unknown tokens are ignored."""
        if not command.refresh_token:
            raise BadRequestError("refresh_token is required")
        await self.refresh_token_repository.revoke(command.refresh_token)
