"""Target profile and SPAC acquisition criteria schemas."""

from typing import Optional
from pydantic import BaseModel, Field


class OwnershipStake(BaseModel):
    """A tracked ownership position in a target company."""

    owner_name: Optional[str] = Field(default=None, description="Name of the owning organization")
    owner_type: Optional[str] = Field(default=None, description="Organization type of the owner, e.g. PE_FIRM")
    ownership_pct: Optional[float] = Field(default=None, ge=0, le=100, description="Percentage owned, 0-100")


class TargetProfile(BaseModel):
    """Financial, sector and geography attributes of an acquisition target."""

    name: str = Field(default="Target", description="Company name")
    revenue: Optional[float] = Field(default=None, description="Annual revenue in USD")
    ebitda: Optional[float] = Field(default=None, description="EBITDA in USD, may be negative")

    industry_focus: list[str] = Field(
        default_factory=list,
        description="Industry tags (e.g., 'Healthcare', 'fintech')"
    )
    geography_focus: list[str] = Field(
        default_factory=list,
        description="Geography tags (e.g., 'North America')"
    )
    headquarters: Optional[str] = Field(default=None, description="Headquarters location")

    ownership_stakes: list[OwnershipStake] = Field(default_factory=list)

    @property
    def total_ownership_pct(self) -> float:
        """Sum of tracked stake percentages; stakes without a value count as zero."""
        return sum(stake.ownership_pct or 0.0 for stake in self.ownership_stakes)


class AcquisitionCriteria(BaseModel):
    """A SPAC's acquisition criteria."""

    name: Optional[str] = Field(default=None, description="SPAC name")
    ticker: Optional[str] = Field(default=None, description="SPAC ticker")
    trust_amount: Optional[float] = Field(default=None, description="Capital held in trust, USD")

    target_sectors: list[str] = Field(
        default_factory=list,
        description="Sectors the SPAC is targeting"
    )
    target_geographies: list[str] = Field(
        default_factory=list,
        description="Geographies the SPAC is targeting"
    )

    @property
    def label(self) -> str:
        """Display name used in fit score summaries."""
        return self.name or self.ticker or "the SPAC"
