"""Status transition tables and validation for SPACs and filings."""

import logging
from enum import Enum
from typing import Union

from spac_os.exceptions import InvalidTransitionError, UnknownEntityTypeError, UnknownStatusError
from spac_os.models import EntityType, FilingStatus, SpacStatus, TransitionResult

logger = logging.getLogger(__name__)

StatusValue = Union[str, Enum]


SPAC_TRANSITIONS: dict[SpacStatus, frozenset[SpacStatus]] = {
    SpacStatus.SEARCHING: frozenset({
        SpacStatus.LOI_SIGNED, SpacStatus.LIQUIDATING, SpacStatus.TERMINATED,
    }),
    SpacStatus.LOI_SIGNED: frozenset({
        SpacStatus.DA_ANNOUNCED, SpacStatus.SEARCHING, SpacStatus.TERMINATED,
    }),
    SpacStatus.DA_ANNOUNCED: frozenset({SpacStatus.SEC_REVIEW, SpacStatus.TERMINATED}),
    SpacStatus.SEC_REVIEW: frozenset({SpacStatus.SHAREHOLDER_VOTE, SpacStatus.TERMINATED}),
    SpacStatus.SHAREHOLDER_VOTE: frozenset({SpacStatus.CLOSING, SpacStatus.TERMINATED}),
    SpacStatus.CLOSING: frozenset({SpacStatus.COMPLETED, SpacStatus.TERMINATED}),
    SpacStatus.LIQUIDATING: frozenset({SpacStatus.LIQUIDATED}),
    SpacStatus.COMPLETED: frozenset(),
    SpacStatus.LIQUIDATED: frozenset(),
    SpacStatus.TERMINATED: frozenset(),
}

FILING_TRANSITIONS: dict[FilingStatus, frozenset[FilingStatus]] = {
    FilingStatus.DRAFTING: frozenset({FilingStatus.INTERNAL_REVIEW}),
    FilingStatus.INTERNAL_REVIEW: frozenset({FilingStatus.LEGAL_REVIEW, FilingStatus.DRAFTING}),
    FilingStatus.LEGAL_REVIEW: frozenset({FilingStatus.BOARD_APPROVAL, FilingStatus.INTERNAL_REVIEW}),
    FilingStatus.BOARD_APPROVAL: frozenset({FilingStatus.FILED, FilingStatus.LEGAL_REVIEW}),
    FilingStatus.FILED: frozenset({FilingStatus.SEC_COMMENT, FilingStatus.EFFECTIVE}),
    FilingStatus.SEC_COMMENT: frozenset({FilingStatus.RESPONSE_FILED}),
    FilingStatus.RESPONSE_FILED: frozenset({
        FilingStatus.AMENDED, FilingStatus.EFFECTIVE, FilingStatus.SEC_COMMENT,
    }),
    FilingStatus.AMENDED: frozenset({FilingStatus.SEC_COMMENT, FilingStatus.EFFECTIVE}),
    FilingStatus.EFFECTIVE: frozenset(),
    FilingStatus.WITHDRAWN: frozenset(),
}

TRANSITION_TABLES: dict[EntityType, dict] = {
    EntityType.SPAC: SPAC_TRANSITIONS,
    EntityType.FILING: FILING_TRANSITIONS,
}

STATUS_ENUMS: dict[EntityType, type[Enum]] = {
    EntityType.SPAC: SpacStatus,
    EntityType.FILING: FilingStatus,
}


def _coerce_entity_type(entity_type: StatusValue) -> EntityType:
    try:
        return EntityType(entity_type)
    except ValueError:
        raise UnknownEntityTypeError(str(getattr(entity_type, "value", entity_type)))


def _coerce_status(entity_type: EntityType, value: StatusValue) -> Enum:
    enum_cls = STATUS_ENUMS[entity_type]
    raw = value.value if isinstance(value, Enum) else value
    try:
        return enum_cls(raw)
    except ValueError:
        raise UnknownStatusError(entity_type.value, str(raw))


class StatusTransitionValidator:
    """Check requested status changes against each entity type's transition table.

    The validator only decides. Persisting the new status and stamping any
    date fields that belong to it is left to the caller.
    """

    def validate(
        self,
        entity_type: StatusValue,
        current: StatusValue,
        requested: StatusValue,
    ) -> TransitionResult:
        """Accept or reject moving an entity from ``current`` to ``requested``.

        Raises UnknownStatusError if either value is not a known status for
        the entity type.
        """
        etype = _coerce_entity_type(entity_type)
        current_status = _coerce_status(etype, current)
        requested_status = _coerce_status(etype, requested)

        allowed = TRANSITION_TABLES[etype][current_status]
        if requested_status in allowed:
            return TransitionResult(
                accepted=True,
                entity_type=etype.value,
                current=current_status.value,
                requested=requested_status.value,
            )

        reason = f"Cannot transition from {current_status.value} to {requested_status.value}"
        logger.debug(f"{etype.value}: {reason}")
        return TransitionResult(
            accepted=False,
            entity_type=etype.value,
            current=current_status.value,
            requested=requested_status.value,
            reason=reason,
        )

    def require(
        self,
        entity_type: StatusValue,
        current: StatusValue,
        requested: StatusValue,
    ) -> TransitionResult:
        """Like validate(), but raise InvalidTransitionError on rejection."""
        result = self.validate(entity_type, current, requested)
        if not result.accepted:
            raise InvalidTransitionError(result.entity_type, result.current, result.requested)
        return result

    def allowed_transitions(self, entity_type: StatusValue, current: StatusValue) -> list[str]:
        """Statuses reachable in one step, sorted by enumeration order."""
        etype = _coerce_entity_type(entity_type)
        current_status = _coerce_status(etype, current)
        allowed = TRANSITION_TABLES[etype][current_status]
        return [s.value for s in STATUS_ENUMS[etype] if s in allowed]

    def is_terminal(self, entity_type: StatusValue, status: StatusValue) -> bool:
        """Whether no transition leaves ``status``."""
        etype = _coerce_entity_type(entity_type)
        return not TRANSITION_TABLES[etype][_coerce_status(etype, status)]


def transition_table(entity_type: StatusValue) -> dict:
    """The transition table for an entity type."""
    return TRANSITION_TABLES[_coerce_entity_type(entity_type)]


def terminal_states(entity_type: StatusValue) -> list[str]:
    """Statuses with no outgoing transitions."""
    table = transition_table(entity_type)
    return [status.value for status, allowed in table.items() if not allowed]


def can_transition(entity_type: StatusValue, current: StatusValue, requested: StatusValue) -> bool:
    """Quick accept/reject check."""
    return StatusTransitionValidator().validate(entity_type, current, requested).accepted
