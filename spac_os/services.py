"""Record lookups, status changes and fit score persistence.

Every function takes an open SQLAlchemy session, commits its own changes
and raises SpacOSError subclasses for missing records or rejected input.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from spac_os.config import settings
from spac_os.exceptions import (
    DuplicateRecordError,
    InvalidTransitionError,
    NotATargetError,
    NotFoundError,
    UnknownStatusError,
)
from spac_os.models import (
    AcquisitionCriteria,
    ComplianceStatus,
    EntityType,
    FilingStatus,
    FitScore,
    OrganizationType,
    OwnershipStake,
    SpacStatus,
    TargetProfile,
    TargetStatus,
)
from spac_os.models.database import (
    DBComplianceItem,
    DBFiling,
    DBFitScore,
    DBOrganization,
    DBOwnershipStake,
    DBSpac,
    DBTarget,
)
from spac_os.rules import FitScoreCalculator, StatusTransitionValidator, status_date_fields

logger = logging.getLogger(__name__)

validator = StatusTransitionValidator()
calculator = FitScoreCalculator()


def to_number(value: Optional[Decimal]) -> Optional[float]:
    """Coerce a Numeric column value to float, keeping None."""
    return float(value) if value is not None else None


def _get_or_raise(session: Session, model, record_id: int, kind: str):
    record = session.get(model, record_id)
    if record is None:
        raise NotFoundError(kind, record_id)
    return record


def _coerce(enum_cls, value, kind: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise UnknownStatusError(kind, str(value))


# ============================================================================
# Record creation
# ============================================================================


def create_organization(
    session: Session,
    name: str,
    type: str = OrganizationType.OTHER.value,
    headquarters: Optional[str] = None,
    revenue: Optional[float] = None,
    ebitda: Optional[float] = None,
    industry_focus: Optional[list[str]] = None,
    geography_focus: Optional[list[str]] = None,
    owned_by: Optional[list[tuple[int, Optional[float]]]] = None,
) -> DBOrganization:
    """Create an organization and the stakes other organizations hold in it.

    ``owned_by`` is a list of ``(owner_id, ownership_pct)`` pairs. Every owner
    must exist, otherwise nothing is written.
    """
    org_type = _coerce(OrganizationType, type, "organization")
    owned_by = owned_by or []
    for owner_id, _ in owned_by:
        _get_or_raise(session, DBOrganization, owner_id, "Owner organization")

    org = DBOrganization(
        name=name,
        type=org_type.value,
        headquarters=headquarters,
        revenue=revenue,
        ebitda=ebitda,
    )
    org.set_industry_focus(industry_focus or [])
    org.set_geography_focus(geography_focus or [])
    try:
        session.add(org)
        session.flush()
        for owner_id, ownership_pct in owned_by:
            session.add(DBOwnershipStake(
                owner_id=owner_id, owned_id=org.id, ownership_pct=ownership_pct,
            ))
        session.commit()
    except IntegrityError:
        session.rollback()
        raise
    if owned_by:
        logger.info(f"Organization {org.id} created with {len(owned_by)} ownership stakes")
    return org


def add_ownership_stake(
    session: Session,
    owner_id: int,
    owned_id: int,
    ownership_pct: Optional[float] = None,
) -> DBOwnershipStake:
    """Record that ``owner_id`` holds ``ownership_pct`` percent of ``owned_id``."""
    _get_or_raise(session, DBOrganization, owner_id, "Owner organization")
    _get_or_raise(session, DBOrganization, owned_id, "Owned organization")
    stake = DBOwnershipStake(owner_id=owner_id, owned_id=owned_id, ownership_pct=ownership_pct)
    session.add(stake)
    session.commit()
    return stake


def create_spac(
    session: Session,
    name: str,
    ticker: Optional[str] = None,
    trust_amount: Optional[float] = None,
    target_sectors: Optional[list[str]] = None,
    target_geographies: Optional[list[str]] = None,
    status: str = SpacStatus.SEARCHING.value,
) -> DBSpac:
    """Create a SPAC. Tickers are unique."""
    if ticker and session.query(DBSpac).filter_by(ticker=ticker).first():
        raise DuplicateRecordError("SPAC", "ticker", ticker)

    spac = DBSpac(
        name=name,
        ticker=ticker,
        trust_amount=trust_amount,
        status=_coerce(SpacStatus, status, EntityType.SPAC.value).value,
    )
    spac.set_target_sectors(target_sectors or [])
    spac.set_target_geographies(target_geographies or [])
    session.add(spac)
    try:
        session.commit()
    except IntegrityError:
        # Concurrent insert of the same ticker
        session.rollback()
        raise DuplicateRecordError("SPAC", "ticker", ticker)
    return spac


def create_filing(
    session: Session,
    spac_id: int,
    form_type: str,
    status: str = FilingStatus.DRAFTING.value,
) -> DBFiling:
    """Create a filing for an existing SPAC."""
    _get_or_raise(session, DBSpac, spac_id, "SPAC")
    filing = DBFiling(
        spac_id=spac_id,
        form_type=form_type,
        status=_coerce(FilingStatus, status, EntityType.FILING.value).value,
    )
    session.add(filing)
    session.commit()
    return filing


def create_compliance_item(
    session: Session,
    spac_id: int,
    title: str,
    due_date: Optional[datetime] = None,
) -> DBComplianceItem:
    """Create a compliance item for an existing SPAC."""
    _get_or_raise(session, DBSpac, spac_id, "SPAC")
    item = DBComplianceItem(spac_id=spac_id, title=title, due_date=due_date)
    session.add(item)
    session.commit()
    return item


def create_target(
    session: Session,
    name: str,
    spac_id: Optional[int] = None,
) -> DBTarget:
    """Create a pipeline target, optionally assigned to a SPAC."""
    if spac_id is not None:
        _get_or_raise(session, DBSpac, spac_id, "SPAC")
    target = DBTarget(name=name, spac_id=spac_id)
    session.add(target)
    session.commit()
    return target


# ============================================================================
# Status changes
# ============================================================================


def _apply_dates(record, status, provided: Optional[dict[str, Optional[datetime]]] = None):
    for field, value in status_date_fields(status, provided=provided).items():
        setattr(record, field, value)


def change_spac_status(session: Session, spac_id: int, status: str) -> DBSpac:
    """Move a SPAC to ``status`` if its transition table allows it."""
    spac = _get_or_raise(session, DBSpac, spac_id, "SPAC")
    try:
        result = validator.require(EntityType.SPAC, spac.status, status)
    except InvalidTransitionError as e:
        logger.warning(f"SPAC {spac_id}: {e.message}")
        raise

    spac.status = result.requested
    session.commit()
    logger.info(f"SPAC {spac_id} moved {result.current} -> {result.requested}")
    return spac


def change_filing_status(
    session: Session,
    filing_id: int,
    status: str,
    filed_date: Optional[datetime] = None,
    effective_date: Optional[datetime] = None,
    accession_number: Optional[str] = None,
) -> DBFiling:
    """Move a filing to ``status`` and stamp its filed/effective date."""
    filing = _get_or_raise(session, DBFiling, filing_id, "Filing")
    try:
        result = validator.require(EntityType.FILING, filing.status, status)
    except InvalidTransitionError as e:
        logger.warning(f"Filing {filing_id}: {e.message}")
        raise

    new_status = FilingStatus(result.requested)
    filing.status = new_status.value
    _apply_dates(
        filing,
        new_status,
        provided={"filed_date": filed_date, "effective_date": effective_date},
    )
    if new_status == FilingStatus.FILED and accession_number:
        filing.accession_number = accession_number

    session.commit()
    logger.info(f"Filing {filing_id} moved {result.current} -> {result.requested}")
    return filing


def change_compliance_status(session: Session, item_id: int, status: str) -> DBComplianceItem:
    """Set a compliance item's status, stamping completed_date on COMPLIANT."""
    item = _get_or_raise(session, DBComplianceItem, item_id, "Compliance item")
    new_status = _coerce(ComplianceStatus, status, "compliance")
    item.status = new_status.value
    _apply_dates(item, new_status)
    session.commit()
    logger.info(f"Compliance item {item_id} set to {new_status.value}")
    return item


def change_target_status(session: Session, target_id: int, status: str) -> DBTarget:
    """Set a pipeline target's status, stamping the matching milestone date."""
    target = _get_or_raise(session, DBTarget, target_id, "Target")
    new_status = _coerce(TargetStatus, status, "target")
    target.status = new_status.value
    _apply_dates(target, new_status)
    session.commit()
    logger.info(f"Target {target_id} set to {new_status.value}")
    return target


# ============================================================================
# Fit scoring
# ============================================================================


def build_target_profile(org: DBOrganization) -> TargetProfile:
    """Rule engine view of a target organization."""
    return TargetProfile(
        name=org.name,
        revenue=to_number(org.revenue),
        ebitda=to_number(org.ebitda),
        industry_focus=org.get_industry_focus(),
        geography_focus=org.get_geography_focus(),
        headquarters=org.headquarters,
        ownership_stakes=[
            OwnershipStake(
                owner_name=stake.owner.name if stake.owner else None,
                owner_type=stake.owner.type if stake.owner else None,
                ownership_pct=to_number(stake.ownership_pct),
            )
            for stake in org.owned_by_stakes
        ],
    )


def build_acquisition_criteria(spac: DBSpac) -> AcquisitionCriteria:
    """Rule engine view of a SPAC's acquisition criteria."""
    return AcquisitionCriteria(
        name=spac.name,
        ticker=spac.ticker,
        trust_amount=to_number(spac.trust_amount),
        target_sectors=spac.get_target_sectors(),
        target_geographies=spac.get_target_geographies(),
    )


def calculate_fit_score(
    session: Session,
    organization_id: int,
    spac_id: int,
    calculated_by: Optional[str] = None,
) -> DBFitScore:
    """Score a target organization against a SPAC and upsert the result.

    A previous score for the same pair is overwritten; no history is kept.
    """
    org = _get_or_raise(session, DBOrganization, organization_id, "Target company")
    if org.type != OrganizationType.TARGET_COMPANY.value:
        raise NotATargetError(organization_id, org.type)
    spac = _get_or_raise(session, DBSpac, spac_id, "SPAC")

    score = calculator.calculate(build_target_profile(org), build_acquisition_criteria(spac))

    record = (
        session.query(DBFitScore)
        .filter_by(organization_id=organization_id, spac_id=spac_id)
        .first()
    )
    if record is None:
        record = DBFitScore(organization_id=organization_id, spac_id=spac_id)
        session.add(record)

    _copy_score(record, score)
    record.calculated_at = datetime.utcnow()
    record.calculated_by = calculated_by or settings.default_calculated_by

    session.commit()
    logger.info(
        f"Fit score {org.name} vs {spac.ticker or spac.name}: {score.overall_score}/100"
    )
    return record


def _copy_score(record: DBFitScore, score: FitScore):
    record.overall_score = score.overall_score
    record.size_score = score.size_score
    record.sector_score = score.sector_score
    record.geography_score = score.geography_score
    record.ownership_score = score.ownership_score
    record.summary = score.summary
    record.recommendation = score.recommendation


def get_fit_score(session: Session, organization_id: int, spac_id: int) -> Optional[DBFitScore]:
    """Stored fit score for a pair, or None if never calculated."""
    return (
        session.query(DBFitScore)
        .filter_by(organization_id=organization_id, spac_id=spac_id)
        .first()
    )


def list_fit_scores(session: Session, organization_id: int) -> list[DBFitScore]:
    """All stored fit scores for a target, best first."""
    return (
        session.query(DBFitScore)
        .filter_by(organization_id=organization_id)
        .order_by(DBFitScore.overall_score.desc())
        .all()
    )


def fit_score_to_dict(record: DBFitScore) -> dict[str, Any]:
    """Serialize a stored fit score with its SPAC reference."""
    return {
        "organization_id": record.organization_id,
        "spac_id": record.spac_id,
        "spac": {
            "id": record.spac.id,
            "name": record.spac.name,
            "ticker": record.spac.ticker,
        } if record.spac else None,
        "overall_score": record.overall_score,
        "size_score": record.size_score,
        "sector_score": record.sector_score,
        "geography_score": record.geography_score,
        "ownership_score": record.ownership_score,
        "summary": record.summary,
        "recommendation": record.recommendation,
        "calculated_at": record.calculated_at,
        "calculated_by": record.calculated_by,
    }
