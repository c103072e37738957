"""
License tier catalog.

A limit of zero means unlimited.
"""
from dataclasses import dataclass
from typing import Dict, Tuple

from core.domain.value_objects import LicenseTier

UNLIMITED = 0

COMMUNITY_FEATURES: Tuple[str, ...] = ("postgresql", "mysql", "mariadb")
PRO_FEATURES: Tuple[str, ...] = COMMUNITY_FEATURES + (
    "mongodb",
    "sqlserver",
    "cassandra",
    "dynamodb",
    "snapshot",
    "kafka_output",
    "grpc_output",
)
ENTERPRISE_FEATURES: Tuple[str, ...] = PRO_FEATURES + (
    "oracle",
    "ha",
    "raft_cluster",
    "sso",
    "ldap",
    "audit_log",
)


@dataclass(frozen=True)
class TierLimits:
    """Quotas and feature set granted by a tier."""

    max_sources: int
    max_tables: int
    max_throughput: int
    features: Tuple[str, ...]
    key_prefix: str


TIER_CATALOG: Dict[LicenseTier, TierLimits] = {
    LicenseTier.COMMUNITY: TierLimits(1, 10, 1000, COMMUNITY_FEATURES, "COM"),
    LicenseTier.TRIAL: TierLimits(5, 50, 10000, PRO_FEATURES, "TRL"),
    LicenseTier.PRO: TierLimits(10, 100, 50000, PRO_FEATURES, "PRO"),
    LicenseTier.ENTERPRISE: TierLimits(
        UNLIMITED, UNLIMITED, UNLIMITED, ENTERPRISE_FEATURES, "ENT"
    ),
}


def limits_for(tier: LicenseTier) -> TierLimits:
    """Return the catalog entry for a tier."""
    return TIER_CATALOG[tier]


def parse_tier(value: str) -> LicenseTier:
    """
    Parse a tier name.

    Raises:
        ValueError: If the name is not a known tier
    """
    return LicenseTier((value or "").strip().lower())
