"""API routes for SPAC OS records, status workflows and fit scores.

Service errors propagate out of the handlers. The application translates
them into HTTP responses (see ``spac_os.api.main``).
"""

from datetime import datetime
from typing import Iterator, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from spac_os import services
from spac_os.models import OrganizationType
from spac_os.models.database import get_session
from spac_os.rules import StatusTransitionValidator

router = APIRouter()


def get_db() -> Iterator[Session]:
    """Yield a database session for one request."""
    session = get_session()
    try:
        yield session
    finally:
        session.close()


# ============================================================================
# Request / response bodies
# ============================================================================


class StakeInput(BaseModel):
    """Ownership stake held in a newly created organization."""
    owner_id: int
    ownership_pct: Optional[float] = Field(default=None, ge=0, le=100)


class OrganizationCreate(BaseModel):
    name: str
    type: str = OrganizationType.OTHER.value
    headquarters: Optional[str] = None
    revenue: Optional[float] = None
    ebitda: Optional[float] = None
    industry_focus: list[str] = Field(default_factory=list)
    geography_focus: list[str] = Field(default_factory=list)
    owned_by: list[StakeInput] = Field(default_factory=list)


class OrganizationResponse(BaseModel):
    id: int
    name: str
    type: str
    headquarters: Optional[str]
    revenue: Optional[float]
    ebitda: Optional[float]
    industry_focus: list[str]
    geography_focus: list[str]


class SpacCreate(BaseModel):
    name: str
    ticker: Optional[str] = None
    trust_amount: Optional[float] = None
    target_sectors: list[str] = Field(default_factory=list)
    target_geographies: list[str] = Field(default_factory=list)
    status: str = "SEARCHING"


class SpacResponse(BaseModel):
    id: int
    name: str
    ticker: Optional[str]
    status: str
    trust_amount: Optional[float]
    target_sectors: list[str]
    target_geographies: list[str]


class FilingCreate(BaseModel):
    spac_id: int
    form_type: str
    status: str = "DRAFTING"


class FilingResponse(BaseModel):
    id: int
    spac_id: int
    form_type: str
    status: str
    filed_date: Optional[datetime]
    effective_date: Optional[datetime]
    accession_number: Optional[str]


class ComplianceItemCreate(BaseModel):
    spac_id: int
    title: str
    due_date: Optional[datetime] = None


class ComplianceItemResponse(BaseModel):
    id: int
    spac_id: int
    title: str
    status: str
    due_date: Optional[datetime]
    completed_date: Optional[datetime]


class TargetCreate(BaseModel):
    name: str
    spac_id: Optional[int] = None


class TargetResponse(BaseModel):
    id: int
    spac_id: Optional[int]
    name: str
    status: str
    nda_signed_date: Optional[datetime]
    loi_signed_date: Optional[datetime]
    da_signed_date: Optional[datetime]
    actual_close_date: Optional[datetime]


class StatusUpdate(BaseModel):
    """Request body for a status change. Status names are case-insensitive."""
    status: str

    @field_validator("status")
    @classmethod
    def normalize_status(cls, value: str) -> str:
        return value.strip().upper()


class FilingStatusUpdate(StatusUpdate):
    filed_date: Optional[datetime] = None
    effective_date: Optional[datetime] = None
    accession_number: Optional[str] = None


class TransitionsResponse(BaseModel):
    entity_type: str
    status: str
    allowed: list[str]
    is_terminal: bool


class FitScoreRequest(BaseModel):
    organization_id: int
    spac_id: int
    calculated_by: Optional[str] = None


class SpacRef(BaseModel):
    id: int
    name: str
    ticker: Optional[str]


class FitScoreResponse(BaseModel):
    organization_id: int
    spac_id: int
    spac: Optional[SpacRef]
    overall_score: int
    size_score: int
    sector_score: int
    geography_score: int
    ownership_score: int
    summary: Optional[str]
    recommendation: Optional[str]
    calculated_at: Optional[datetime]
    calculated_by: Optional[str]


def _format_organization(org) -> OrganizationResponse:
    return OrganizationResponse(
        id=org.id,
        name=org.name,
        type=org.type,
        headquarters=org.headquarters,
        revenue=services.to_number(org.revenue),
        ebitda=services.to_number(org.ebitda),
        industry_focus=org.get_industry_focus(),
        geography_focus=org.get_geography_focus(),
    )


def _format_spac(spac) -> SpacResponse:
    return SpacResponse(
        id=spac.id,
        name=spac.name,
        ticker=spac.ticker,
        status=spac.status,
        trust_amount=services.to_number(spac.trust_amount),
        target_sectors=spac.get_target_sectors(),
        target_geographies=spac.get_target_geographies(),
    )


def _format_filing(filing) -> FilingResponse:
    return FilingResponse(
        id=filing.id,
        spac_id=filing.spac_id,
        form_type=filing.form_type,
        status=filing.status,
        filed_date=filing.filed_date,
        effective_date=filing.effective_date,
        accession_number=filing.accession_number,
    )


def _format_compliance_item(item) -> ComplianceItemResponse:
    return ComplianceItemResponse(
        id=item.id,
        spac_id=item.spac_id,
        title=item.title,
        status=item.status,
        due_date=item.due_date,
        completed_date=item.completed_date,
    )


def _format_target(target) -> TargetResponse:
    return TargetResponse(
        id=target.id,
        spac_id=target.spac_id,
        name=target.name,
        status=target.status,
        nda_signed_date=target.nda_signed_date,
        loi_signed_date=target.loi_signed_date,
        da_signed_date=target.da_signed_date,
        actual_close_date=target.actual_close_date,
    )


# ============================================================================
# Record creation
# ============================================================================


@router.post("/organizations", response_model=OrganizationResponse, status_code=201)
def create_organization(request: OrganizationCreate, session: Session = Depends(get_db)):
    """Create an organization and the stakes other organizations hold in it."""
    org = services.create_organization(
        session,
        name=request.name,
        type=request.type,
        headquarters=request.headquarters,
        revenue=request.revenue,
        ebitda=request.ebitda,
        industry_focus=request.industry_focus,
        geography_focus=request.geography_focus,
        owned_by=[(stake.owner_id, stake.ownership_pct) for stake in request.owned_by],
    )
    return _format_organization(org)


@router.post("/spacs", response_model=SpacResponse, status_code=201)
def create_spac(request: SpacCreate, session: Session = Depends(get_db)):
    """Create a SPAC."""
    spac = services.create_spac(session, **request.model_dump())
    return _format_spac(spac)


@router.post("/filings", response_model=FilingResponse, status_code=201)
def create_filing(request: FilingCreate, session: Session = Depends(get_db)):
    """Create a filing."""
    filing = services.create_filing(session, **request.model_dump())
    return _format_filing(filing)


@router.post("/compliance-items", response_model=ComplianceItemResponse, status_code=201)
def create_compliance_item(request: ComplianceItemCreate, session: Session = Depends(get_db)):
    """Create a compliance item."""
    item = services.create_compliance_item(session, **request.model_dump())
    return _format_compliance_item(item)


@router.post("/targets", response_model=TargetResponse, status_code=201)
def create_target(request: TargetCreate, session: Session = Depends(get_db)):
    """Create a pipeline target."""
    target = services.create_target(session, **request.model_dump())
    return _format_target(target)


# ============================================================================
# Status workflows
# ============================================================================


@router.patch("/spacs/{spac_id}/status", response_model=SpacResponse)
def update_spac_status(spac_id: int, request: StatusUpdate, session: Session = Depends(get_db)):
    """Update SPAC status with transition validation."""
    spac = services.change_spac_status(session, spac_id, request.status)
    return _format_spac(spac)


@router.patch("/filings/{filing_id}/status", response_model=FilingResponse)
def update_filing_status(
    filing_id: int,
    request: FilingStatusUpdate,
    session: Session = Depends(get_db),
):
    """Update filing status with workflow validation."""
    filing = services.change_filing_status(
        session,
        filing_id,
        request.status,
        filed_date=request.filed_date,
        effective_date=request.effective_date,
        accession_number=request.accession_number,
    )
    return _format_filing(filing)


@router.patch("/compliance-items/{item_id}/status", response_model=ComplianceItemResponse)
def update_compliance_status(
    item_id: int,
    request: StatusUpdate,
    session: Session = Depends(get_db),
):
    """Update compliance item status."""
    item = services.change_compliance_status(session, item_id, request.status)
    return _format_compliance_item(item)


@router.patch("/targets/{target_id}/status", response_model=TargetResponse)
def update_target_status(
    target_id: int,
    request: StatusUpdate,
    session: Session = Depends(get_db),
):
    """Update pipeline target status."""
    target = services.change_target_status(session, target_id, request.status)
    return _format_target(target)


@router.get("/transitions/{entity_type}/{status}", response_model=TransitionsResponse)
def get_transitions(entity_type: str, status: str):
    """List the statuses reachable in one step."""
    validator = StatusTransitionValidator()
    entity_type = entity_type.upper()
    status = status.upper()
    allowed = validator.allowed_transitions(entity_type, status)
    return TransitionsResponse(
        entity_type=entity_type,
        status=status,
        allowed=allowed,
        is_terminal=not allowed,
    )


# ============================================================================
# Fit scores
# ============================================================================


@router.post("/fit-scores", response_model=FitScoreResponse)
def calculate_fit_score(request: FitScoreRequest, session: Session = Depends(get_db)):
    """Calculate and store the fit score of a target company against a SPAC."""
    record = services.calculate_fit_score(
        session,
        request.organization_id,
        request.spac_id,
        calculated_by=request.calculated_by,
    )
    return FitScoreResponse(**services.fit_score_to_dict(record))


@router.get("/fit-scores/{organization_id}/{spac_id}", response_model=FitScoreResponse)
def get_fit_score(organization_id: int, spac_id: int, session: Session = Depends(get_db)):
    """Get the stored fit score for a target company against a SPAC."""
    record = services.get_fit_score(session, organization_id, spac_id)
    if not record:
        raise HTTPException(status_code=404, detail="Fit score not found")
    return FitScoreResponse(**services.fit_score_to_dict(record))


@router.get("/organizations/{organization_id}/fit-scores", response_model=list[FitScoreResponse])
def list_fit_scores(organization_id: int, session: Session = Depends(get_db)):
    """List all fit scores for a target company, best first."""
    records = services.list_fit_scores(session, organization_id)
    return [FitScoreResponse(**services.fit_score_to_dict(r)) for r in records]
