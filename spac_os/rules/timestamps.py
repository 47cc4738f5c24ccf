"""Date fields stamped when a record enters a given status."""

from datetime import datetime
from enum import Enum
from typing import Optional, Union

from spac_os.models import ComplianceStatus, FilingStatus, TargetStatus

# status -> date fields set on entry
STATUS_DATE_FIELDS: dict[Enum, tuple[str, ...]] = {
    FilingStatus.FILED: ("filed_date",),
    FilingStatus.EFFECTIVE: ("effective_date",),
    ComplianceStatus.COMPLIANT: ("completed_date",),
    TargetStatus.NDA_SIGNED: ("nda_signed_date",),
    TargetStatus.LOI: ("loi_signed_date",),
    TargetStatus.DEFINITIVE: ("da_signed_date",),
    TargetStatus.CLOSED: ("actual_close_date",),
}


def status_date_fields(
    status: Union[Enum, str],
    now: Optional[datetime] = None,
    provided: Optional[dict[str, Optional[datetime]]] = None,
) -> dict[str, datetime]:
    """Return the date fields to set when a record enters ``status``.

    ``status`` must be an enum member; a bare string is ambiguous across
    entity types (TERMINATED, for one, is both a SPAC and a target status)
    and never stamps anything. Values in ``provided`` win over ``now``.
    """
    if not isinstance(status, Enum):
        return {}

    fields = STATUS_DATE_FIELDS.get(status, ())
    if not fields:
        return {}

    now = now or datetime.utcnow()
    provided = provided or {}
    return {field: provided.get(field) or now for field in fields}
