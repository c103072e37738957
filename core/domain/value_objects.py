"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from abc import ABC
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class Email(ValueObject):
    """Email value object, normalised to lower case."""

    value: str

    def __post_init__(self):
        """Validate and normalise email."""
        if not self.value or "@" not in self.value:
            raise ValueError(f"Invalid email address: {self.value}")
        object.__setattr__(self, "value", self.value.strip().lower())

    def __str__(self) -> str:
        """Return email as string."""
        return self.value


@dataclass(frozen=True)
class HardwareId(ValueObject):
    """Opaque identifier of a physical or virtual engine host."""

    value: str

    def __post_init__(self):
        """Validate hardware identifier."""
        if not self.value or len(self.value.strip()) == 0:
            raise ValueError("Hardware ID cannot be empty")
        if len(self.value) > 255:
            raise ValueError("Hardware ID too long")

    def __str__(self) -> str:
        """Return hardware id as string."""
        return self.value


class UserRole(Enum):
    """Role carried by a user and its access token."""

    USER = "user"
    ADMIN = "admin"

    def __str__(self) -> str:
        """Return role as string."""
        return self.value


class LicenseTier(Enum):
    """License tier value object."""

    COMMUNITY = "community"
    TRIAL = "trial"
    PRO = "pro"
    ENTERPRISE = "enterprise"

    def __str__(self) -> str:
        """Return tier as string."""
        return self.value


class LicenseStatus(Enum):
    """License status value object."""

    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value


class InstanceStatus(Enum):
    """Liveness of a reporting engine instance."""

    ONLINE = "online"
    OFFLINE = "offline"

    def __str__(self) -> str:
        return self.value
