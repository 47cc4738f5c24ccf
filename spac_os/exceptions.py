"""Exception hierarchy for the SPAC OS rule engine.

    SpacOSError (base)
    ├── InvalidTransitionError
    ├── UnknownStatusError
    ├── NotFoundError
    ├── NotATargetError
    ├── UnknownEntityTypeError
    └── DuplicateRecordError

Rule evaluators raise the transition and unknown status or entity type
errors. The service layer raises the lookup and duplicate errors before
any rule is evaluated or anything is committed.
"""

from typing import Any, Optional


class SpacOSError(Exception):
    """Base class for all SPAC OS errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize for structured responses and log records."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            **self.details,
        }


class InvalidTransitionError(SpacOSError):
    """Requested status change is not in the entity's transition table."""

    def __init__(self, entity_type: str, current: str, requested: str):
        self.entity_type = entity_type
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot transition from {current} to {requested}",
            details={
                "entity_type": entity_type,
                "current": current,
                "requested": requested,
            },
        )


class UnknownStatusError(SpacOSError):
    """Status value outside the entity's enumeration."""

    def __init__(self, entity_type: str, value: str):
        self.entity_type = entity_type
        self.value = value
        super().__init__(
            f"Unknown {entity_type} status: {value}",
            details={"entity_type": entity_type, "value": value},
        )


class NotFoundError(SpacOSError):
    """Referenced record does not exist."""

    def __init__(self, kind: str, record_id: Any):
        self.kind = kind
        self.record_id = record_id
        super().__init__(
            f"{kind} not found",
            details={"kind": kind, "id": record_id},
        )


class NotATargetError(SpacOSError):
    """Organization cannot be fit-scored because it is not a target company."""

    def __init__(self, organization_id: Any, organization_type: Optional[str]):
        self.organization_id = organization_id
        self.organization_type = organization_type
        super().__init__(
            "Organization is not a target company",
            details={"id": organization_id, "type": organization_type},
        )


class UnknownEntityTypeError(SpacOSError):
    """Entity type with no transition table."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(
            f"Unknown entity type: {value}",
            details={"value": value},
        )


class DuplicateRecordError(SpacOSError):
    """Record would violate a uniqueness constraint."""

    def __init__(self, kind: str, field: str, value: Any):
        self.kind = kind
        self.field = field
        self.value = value
        super().__init__(
            f"{kind} with {field} {value} already exists",
            details={"kind": kind, "field": field, "value": value},
        )
