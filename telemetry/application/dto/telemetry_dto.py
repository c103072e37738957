"""
Telemetry DTOs.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from licenses.domain.services import QuotaViolation
from telemetry.domain.telemetry_record import TelemetryRecord


@dataclass
class ValidationOutcome:
    """Result of the license cross-check run during ingestion."""

    valid: bool
    code: Optional[str] = None
    message: Optional[str] = None
    quota_violations: List[QuotaViolation] = field(default_factory=list)


@dataclass
class IngestionResult:
    """
    Two-part ingestion result.

    Only persistence decides the response; the validation outcome is
    informational.
    """

    validation: ValidationOutcome
    recorded: TelemetryRecord
