"""Data models for the SPAC OS rule engine."""

from .status import (
    EntityType,
    SpacStatus,
    FilingStatus,
    ComplianceStatus,
    TargetStatus,
    OrganizationType,
)
from .criteria import (
    AcquisitionCriteria,
    OwnershipStake,
    TargetProfile,
)
from .results import (
    FitScore,
    TransitionResult,
)

__all__ = [
    "EntityType",
    "SpacStatus",
    "FilingStatus",
    "ComplianceStatus",
    "TargetStatus",
    "OrganizationType",
    "AcquisitionCriteria",
    "OwnershipStake",
    "TargetProfile",
    "FitScore",
    "TransitionResult",
]
