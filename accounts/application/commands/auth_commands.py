"""
Account commands.
"""
from dataclasses import dataclass


@dataclass
class RegisterUserCommand:
    """Command to create an account and sign it in."""

    email: str
    password: str
    name: str
    company: str = ""


@dataclass
class LoginCommand:
    """Command to exchange email and password for tokens."""

    email: str
    password: str


@dataclass
class RefreshTokensCommand:
    """Command to rotate a refresh token into a new token pair."""

    refresh_token: str


@dataclass
class LogoutCommand:
    """Command to revoke a refresh token."""

    refresh_token: str
