"""SQLAlchemy database models and setup."""

import json
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Numeric,
    Text,
    ForeignKey,
    Index,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from spac_os.config import settings
from spac_os.models.status import (
    ComplianceStatus,
    FilingStatus,
    OrganizationType,
    SpacStatus,
    TargetStatus,
)

Base = declarative_base()


def _load_tags(raw: Optional[str]) -> list[str]:
    return json.loads(raw) if raw else []


class DBOrganization(Base):
    """PE firm, bank, target company or other counterparty."""

    __tablename__ = "organizations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(500), nullable=False)
    type = Column(String(50), nullable=False, default=OrganizationType.OTHER.value)
    headquarters = Column(String(500))

    # Financials
    revenue = Column(Numeric(20, 2))
    ebitda = Column(Numeric(20, 2))

    # Focus tags
    industry_focus = Column(Text)  # JSON array
    geography_focus = Column(Text)  # JSON array

    created_at = Column(DateTime, default=datetime.utcnow)

    # Stakes other organizations hold in this one
    owned_by_stakes = relationship(
        "DBOwnershipStake",
        foreign_keys="DBOwnershipStake.owned_id",
        back_populates="owned",
    )
    fit_scores = relationship("DBFitScore", back_populates="organization")

    __table_args__ = (
        Index("idx_organization_name", "name"),
        Index("idx_organization_type", "type"),
    )

    def get_industry_focus(self) -> list[str]:
        return _load_tags(self.industry_focus)

    def set_industry_focus(self, tags: list[str]):
        self.industry_focus = json.dumps(tags)

    def get_geography_focus(self) -> list[str]:
        return _load_tags(self.geography_focus)

    def set_geography_focus(self, tags: list[str]):
        self.geography_focus = json.dumps(tags)


class DBOwnershipStake(Base):
    """Ownership position of one organization in another."""

    __tablename__ = "ownership_stakes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("organizations.id"), nullable=False)
    owned_id = Column(Integer, ForeignKey("organizations.id"), nullable=False)
    ownership_pct = Column(Numeric(7, 4))

    owner = relationship("DBOrganization", foreign_keys=[owner_id])
    owned = relationship(
        "DBOrganization",
        foreign_keys=[owned_id],
        back_populates="owned_by_stakes",
    )

    __table_args__ = (Index("idx_stake_owned", "owned_id"),)


class DBSpac(Base):
    """SPAC entity and its acquisition criteria."""

    __tablename__ = "spacs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(500), nullable=False)
    ticker = Column(String(20), unique=True, index=True)
    status = Column(String(50), nullable=False, default=SpacStatus.SEARCHING.value)

    trust_amount = Column(Numeric(20, 2))
    target_sectors = Column(Text)  # JSON array
    target_geographies = Column(Text)  # JSON array

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    filings = relationship("DBFiling", back_populates="spac")
    compliance_items = relationship("DBComplianceItem", back_populates="spac")
    targets = relationship("DBTarget", back_populates="spac")
    fit_scores = relationship("DBFitScore", back_populates="spac")

    def get_target_sectors(self) -> list[str]:
        return _load_tags(self.target_sectors)

    def set_target_sectors(self, tags: list[str]):
        self.target_sectors = json.dumps(tags)

    def get_target_geographies(self) -> list[str]:
        return _load_tags(self.target_geographies)

    def set_target_geographies(self, tags: list[str]):
        self.target_geographies = json.dumps(tags)


class DBFiling(Base):
    """SEC filing prepared by a SPAC."""

    __tablename__ = "filings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    spac_id = Column(Integer, ForeignKey("spacs.id"), nullable=False)
    form_type = Column(String(50), nullable=False)  # S-1, 8-K, S-4, DEF14A, ...
    status = Column(String(50), nullable=False, default=FilingStatus.DRAFTING.value)

    filed_date = Column(DateTime)
    effective_date = Column(DateTime)
    accession_number = Column(String(50))

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    spac = relationship("DBSpac", back_populates="filings")

    __table_args__ = (
        Index("idx_filing_spac", "spac_id"),
        Index("idx_filing_status", "status"),
    )


class DBComplianceItem(Base):
    """Compliance obligation tracked for a SPAC."""

    __tablename__ = "compliance_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    spac_id = Column(Integer, ForeignKey("spacs.id"), nullable=False)
    title = Column(String(500), nullable=False)
    status = Column(String(50), nullable=False, default=ComplianceStatus.PENDING.value)
    due_date = Column(DateTime)
    completed_date = Column(DateTime)

    spac = relationship("DBSpac", back_populates="compliance_items")

    __table_args__ = (Index("idx_compliance_spac", "spac_id"),)


class DBTarget(Base):
    """Acquisition target in a SPAC's deal pipeline."""

    __tablename__ = "targets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    spac_id = Column(Integer, ForeignKey("spacs.id"))
    name = Column(String(500), nullable=False)
    status = Column(String(50), nullable=False, default=TargetStatus.IDENTIFIED.value)

    nda_signed_date = Column(DateTime)
    loi_signed_date = Column(DateTime)
    da_signed_date = Column(DateTime)
    actual_close_date = Column(DateTime)

    spac = relationship("DBSpac", back_populates="targets")

    __table_args__ = (Index("idx_target_status", "status"),)


class DBFitScore(Base):
    """Latest fit score for a (target organization, SPAC) pair."""

    __tablename__ = "fit_scores"

    id = Column(Integer, primary_key=True, autoincrement=True)
    organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=False)
    spac_id = Column(Integer, ForeignKey("spacs.id"), nullable=False)

    overall_score = Column(Integer, nullable=False)
    size_score = Column(Integer, nullable=False)
    sector_score = Column(Integer, nullable=False)
    geography_score = Column(Integer, nullable=False)
    ownership_score = Column(Integer, nullable=False)
    summary = Column(Text)
    recommendation = Column(Text)

    calculated_at = Column(DateTime, default=datetime.utcnow)
    calculated_by = Column(String(100))

    organization = relationship("DBOrganization", back_populates="fit_scores")
    spac = relationship("DBSpac", back_populates="fit_scores")

    __table_args__ = (
        UniqueConstraint("organization_id", "spac_id", name="uq_fit_score_pair"),
        Index("idx_fit_score_overall", "overall_score"),
    )


# Database initialization
def init_db(db_url: Optional[str] = None) -> sessionmaker:
    """Initialize database and return session maker."""
    url = db_url or settings.database_url
    if url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection so every session sees the same in-memory database
        engine = create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    elif url.startswith("sqlite"):
        # Request handlers and their session dependency can run on different threads
        engine = create_engine(url, echo=False, connect_args={"check_same_thread": False})
    else:
        engine = create_engine(url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)


_session_factory: Optional[sessionmaker] = None


def get_session_factory() -> sessionmaker:
    """Session maker for the configured database, created on first use."""
    global _session_factory
    if _session_factory is None:
        _session_factory = init_db()
    return _session_factory


def get_session() -> Session:
    """Get a new database session."""
    return get_session_factory()()
