"""
Role-based authorization.

Capabilities are the unit of authorization checks. Each role maps to
a fixed set of capabilities; callers ask whether a role holds one
instead of comparing role strings.
"""
from enum import Enum
from typing import Dict, FrozenSet, Union

from core.domain.value_objects import UserRole


class Capability(Enum):
    """Actions a principal may be allowed to perform."""

    MANAGE_OWN_LICENSES = "manage_own_licenses"
    VIEW_OWN_USAGE = "view_own_usage"
    MANAGE_ANY_LICENSE = "manage_any_license"
    LIST_ALL_LICENSES = "list_all_licenses"
    GENERATE_LICENSES = "generate_licenses"


_USER_CAPABILITIES = frozenset(
    {
        Capability.MANAGE_OWN_LICENSES,
        Capability.VIEW_OWN_USAGE,
    }
)

ROLE_CAPABILITIES: Dict[UserRole, FrozenSet[Capability]] = {
    UserRole.USER: _USER_CAPABILITIES,
    UserRole.ADMIN: _USER_CAPABILITIES
    | frozenset(
        {
            Capability.MANAGE_ANY_LICENSE,
            Capability.LIST_ALL_LICENSES,
            Capability.GENERATE_LICENSES,
        }
    ),
}


def has_capability(role: Union[UserRole, str, None], capability: Capability) -> bool:
    """
    Check whether a role grants a capability.

    Unknown roles grant nothing.

    Args:
        role: UserRole or its string value
        capability: Capability to check

    Returns:
        True if the role holds the capability
    """
    if role is None:
        return False
    if not isinstance(role, UserRole):
        try:
            role = UserRole(role)
        except ValueError:
            return False
    return capability in ROLE_CAPABILITIES.get(role, frozenset())
