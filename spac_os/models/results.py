"""Rule engine result models."""

from typing import Optional
from pydantic import BaseModel, Field


class FitScore(BaseModel):
    """Fit of a target company against a SPAC's acquisition criteria."""

    size_score: int = Field(ge=0, le=100, description="Target size vs. trust capital")
    sector_score: int = Field(ge=0, le=100, description="Industry alignment")
    geography_score: int = Field(ge=0, le=100, description="Geography alignment")
    ownership_score: int = Field(ge=0, le=100, description="Ownership clarity")
    overall_score: int = Field(ge=0, le=100, description="Weighted overall score")

    summary: str = Field(description="Human-readable assessment of each sub-score")
    recommendation: str = Field(description="Recommendation tier for the overall score")

    def breakdown(self) -> dict[str, int]:
        """Sub-scores keyed by criterion."""
        return {
            "size": self.size_score,
            "sector": self.sector_score,
            "geography": self.geography_score,
            "ownership": self.ownership_score,
        }


class TransitionResult(BaseModel):
    """Outcome of a status transition check."""

    accepted: bool
    entity_type: str
    current: str
    requested: str
    reason: Optional[str] = None
