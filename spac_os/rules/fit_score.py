"""Fit scoring of acquisition targets against SPAC criteria."""

import logging
import math

from spac_os.models import AcquisitionCriteria, FitScore, OrganizationType, TargetProfile

logger = logging.getLogger(__name__)


class FitScoreCalculator:
    """Score a target company against a SPAC's acquisition criteria.

    Each sub-score is an integer in [0, 100] and falls back to a neutral
    default when the inputs it needs are missing, so calculate() always
    returns a complete FitScore.
    """

    WEIGHTS = {
        "size": 0.3,
        "sector": 0.3,
        "geography": 0.2,
        "ownership": 0.2,
    }

    # Rough enterprise value estimate as a revenue multiple
    EV_REVENUE_MULTIPLE = 3

    # EV / trust ratio bands
    GOOD_SIZE_RATIO = (2, 6)
    ACCEPTABLE_SIZE_RATIO = (1, 8)

    MATCH_SCORE = 90
    MISMATCH_SCORE = 30
    DEFAULT_SCORE = 50
    HEADQUARTERS_ONLY_SCORE = 60

    # Owner types treated as financial sponsors
    SPONSOR_OWNER_TYPES = {OrganizationType.PE_FIRM.value}

    def calculate(
        self,
        target: TargetProfile,
        criteria: AcquisitionCriteria,
    ) -> FitScore:
        """Calculate all sub-scores, the weighted overall score and the narrative."""
        size_score = self._score_size(target, criteria)
        sector_score = self._score_sector(target, criteria)
        geography_score = self._score_geography(target, criteria)
        ownership_score = self._score_ownership(target)

        overall_score = self._calculate_overall(
            {
                "size": size_score,
                "sector": sector_score,
                "geography": geography_score,
                "ownership": ownership_score,
            }
        )

        logger.debug(
            f"Fit {target.name} vs {criteria.label}: size={size_score} sector={sector_score} "
            f"geography={geography_score} ownership={ownership_score} overall={overall_score}"
        )

        return FitScore(
            size_score=size_score,
            sector_score=sector_score,
            geography_score=geography_score,
            ownership_score=ownership_score,
            overall_score=overall_score,
            summary=self._generate_summary(
                target, criteria, overall_score,
                size_score, sector_score, geography_score, ownership_score,
            ),
            recommendation=self._recommend(overall_score),
        )

    def _score_size(
        self,
        target: TargetProfile,
        criteria: AcquisitionCriteria,
    ) -> int:
        """Score how well the target's estimated EV fits the SPAC's trust."""
        revenue = target.revenue or 0
        trust_amount = criteria.trust_amount or 0
        if revenue <= 0 or trust_amount <= 0:
            return self.DEFAULT_SCORE

        estimated_ev = revenue * self.EV_REVENUE_MULTIPLE
        ratio = estimated_ev / trust_amount

        low, high = self.GOOD_SIZE_RATIO
        if low <= ratio <= high:
            return 90
        low, high = self.ACCEPTABLE_SIZE_RATIO
        if low <= ratio <= high:
            return 70
        return 30

    def _score_sector(
        self,
        target: TargetProfile,
        criteria: AcquisitionCriteria,
    ) -> int:
        """Score industry alignment."""
        if not criteria.target_sectors or not target.industry_focus:
            return self.DEFAULT_SCORE

        if tags_overlap(criteria.target_sectors, target.industry_focus):
            return self.MATCH_SCORE
        return self.MISMATCH_SCORE

    def _score_geography(
        self,
        target: TargetProfile,
        criteria: AcquisitionCriteria,
    ) -> int:
        """Score geography alignment."""
        if criteria.target_geographies and target.geography_focus:
            if tags_overlap(criteria.target_geographies, target.geography_focus):
                return self.MATCH_SCORE
            return self.MISMATCH_SCORE

        if target.headquarters:
            # Headquarters is some location signal, give partial credit
            return self.HEADQUARTERS_ONLY_SCORE

        return self.DEFAULT_SCORE

    def _score_ownership(self, target: TargetProfile) -> int:
        """Score ownership clarity."""
        total = target.total_ownership_pct
        if total == 0:
            return 70

        # Sponsor-backed targets win regardless of the tracked percentage
        if any(stake.owner_type in self.SPONSOR_OWNER_TYPES for stake in target.ownership_stakes):
            return 85
        if total > 90:
            return 80
        if total > 50:
            return 60
        return 50

    def _calculate_overall(self, scores: dict[str, int]) -> int:
        """Weighted sum of sub-scores, rounded half up."""
        weighted = sum(scores[criterion] * weight for criterion, weight in self.WEIGHTS.items())
        return int(math.floor(weighted + 0.5))

    def _generate_summary(
        self,
        target: TargetProfile,
        criteria: AcquisitionCriteria,
        overall_score: int,
        size_score: int,
        sector_score: int,
        geography_score: int,
        ownership_score: int,
    ) -> str:
        return (
            f"Target company {target.name} has a fit score of {overall_score}/100 "
            f"for {criteria.label}. "
            f"Size fit: {'Good' if size_score >= 70 else 'Moderate'}. "
            f"Sector alignment: {'Strong' if sector_score >= 70 else 'Limited'}. "
            f"Geography match: {'Yes' if geography_score >= 70 else 'Partial'}. "
            f"Ownership clarity: {'Clear' if ownership_score >= 70 else 'Complex'}."
        )

    def _recommend(self, overall_score: int) -> str:
        if overall_score >= 75:
            return "Strong fit - recommend prioritizing this opportunity."
        if overall_score >= 50:
            return "Moderate fit - worth exploring with due diligence on weak areas."
        return "Limited fit - consider only if strategic rationale is compelling."


def tags_overlap(left: list[str], right: list[str]) -> bool:
    """Case-insensitive check whether any tag of one list contains, or is contained by, a tag of the other."""
    right_lower = [tag.lower() for tag in right]
    for tag in left:
        tag = tag.lower()
        if any(tag in other or other in tag for other in right_lower):
            return True
    return False


def calculate_fit_score(target: TargetProfile, criteria: AcquisitionCriteria) -> FitScore:
    """Score a target against criteria with the default calculator."""
    return FitScoreCalculator().calculate(target, criteria)
