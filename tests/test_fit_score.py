"""Tests for target fit scoring."""

import itertools

import pytest
from pydantic import ValidationError

from spac_os.models import AcquisitionCriteria, OwnershipStake, TargetProfile
from spac_os.rules.fit_score import FitScoreCalculator, calculate_fit_score, tags_overlap


def make_target(**kwargs) -> TargetProfile:
    """Create test target profile with defaults."""
    defaults = {"name": "Acme Health"}
    defaults.update(kwargs)
    return TargetProfile(**defaults)


def make_criteria(**kwargs) -> AcquisitionCriteria:
    """Create test SPAC criteria with defaults."""
    defaults = {"name": "Growth Acquisition Corp", "ticker": "GACQ"}
    defaults.update(kwargs)
    return AcquisitionCriteria(**defaults)


def weighted(size, sector, geography, ownership) -> float:
    return 0.3 * size + 0.3 * sector + 0.2 * geography + 0.2 * ownership


class TestSizeScore:
    """Tests for target size vs. trust capital."""

    def test_acceptable_ratio(self):
        # EV 300M / trust 40M = 7.5
        result = calculate_fit_score(
            make_target(revenue=100_000_000),
            make_criteria(trust_amount=40_000_000),
        )
        assert result.size_score == 70

    def test_missing_revenue_defaults(self):
        result = calculate_fit_score(make_target(), make_criteria(trust_amount=40_000_000))
        assert result.size_score == 50

    def test_missing_trust_defaults(self):
        result = calculate_fit_score(make_target(revenue=100_000_000), make_criteria())
        assert result.size_score == 50

    def test_zero_revenue_defaults(self):
        result = calculate_fit_score(
            make_target(revenue=0),
            make_criteria(trust_amount=40_000_000),
        )
        assert result.size_score == 50

    @pytest.mark.parametrize(
        "revenue,trust,expected",
        [
            (100_000_000, 100_000_000, 90),  # ratio 3
            (200_000_000, 100_000_000, 90),  # ratio 6, upper bound inclusive
            (100_000_000, 150_000_000, 90),  # ratio 2, lower bound inclusive
            (100_000_000, 300_000_000, 70),  # ratio 1
            (100_000_000, 37_500_000, 70),   # ratio 8
            (100_000_000, 400_000_000, 30),  # ratio 0.75
            (300_000_000, 100_000_000, 30),  # ratio 9
        ],
    )
    def test_ratio_bands(self, revenue, trust, expected):
        result = calculate_fit_score(
            make_target(revenue=revenue),
            make_criteria(trust_amount=trust),
        )
        assert result.size_score == expected


class TestSectorScore:
    """Tests for industry alignment."""

    def test_case_insensitive_substring_overlap(self):
        result = calculate_fit_score(
            make_target(industry_focus=["Healthcare"]),
            make_criteria(target_sectors=["healthcare services"]),
        )
        assert result.sector_score == 90

    def test_overlap_in_either_direction(self):
        result = calculate_fit_score(
            make_target(industry_focus=["Enterprise Software"]),
            make_criteria(target_sectors=["software"]),
        )
        assert result.sector_score == 90

    def test_no_overlap(self):
        result = calculate_fit_score(
            make_target(industry_focus=["Retail"]),
            make_criteria(target_sectors=["Fintech"]),
        )
        assert result.sector_score == 30

    def test_empty_target_tags_default(self):
        result = calculate_fit_score(make_target(), make_criteria(target_sectors=["Fintech"]))
        assert result.sector_score == 50

    def test_empty_spac_tags_default(self):
        result = calculate_fit_score(make_target(industry_focus=["Fintech"]), make_criteria())
        assert result.sector_score == 50


class TestGeographyScore:
    """Tests for geography alignment."""

    def test_overlap(self):
        result = calculate_fit_score(
            make_target(geography_focus=["North America"]),
            make_criteria(target_geographies=["north america", "Europe"]),
        )
        assert result.geography_score == 90

    def test_no_overlap(self):
        result = calculate_fit_score(
            make_target(geography_focus=["Asia"]),
            make_criteria(target_geographies=["Europe"]),
        )
        assert result.geography_score == 30

    def test_headquarters_fallback(self):
        result = calculate_fit_score(
            make_target(headquarters="Boston, MA"),
            make_criteria(),
        )
        assert result.geography_score == 60

    def test_headquarters_fallback_when_target_has_no_tags(self):
        result = calculate_fit_score(
            make_target(headquarters="Boston, MA"),
            make_criteria(target_geographies=["Europe"]),
        )
        assert result.geography_score == 60

    def test_no_signal_default(self):
        result = calculate_fit_score(make_target(), make_criteria())
        assert result.geography_score == 50


class TestOwnershipScore:
    """Tests for ownership clarity."""

    def test_no_stakes_default(self):
        result = calculate_fit_score(make_target(), make_criteria())
        assert result.ownership_score == 70

    def test_stakes_without_percentages_default(self):
        target = make_target(ownership_stakes=[OwnershipStake(owner_type="PE_FIRM")])
        result = calculate_fit_score(target, make_criteria())
        assert result.ownership_score == 70

    def test_pe_backed_regardless_of_percentage(self):
        target = make_target(
            ownership_stakes=[OwnershipStake(owner_type="PE_FIRM", ownership_pct=30)]
        )
        result = calculate_fit_score(target, make_criteria())
        assert result.ownership_score == 85

    def test_pe_backed_with_tiny_stake(self):
        target = make_target(
            ownership_stakes=[
                OwnershipStake(owner_type="OTHER", ownership_pct=95),
                OwnershipStake(owner_type="PE_FIRM", ownership_pct=1),
            ]
        )
        result = calculate_fit_score(target, make_criteria())
        assert result.ownership_score == 85

    @pytest.mark.parametrize(
        "pcts,expected",
        [
            ([95], 80),
            ([60, 35], 80),
            ([90], 60),
            ([40, 20], 60),
            ([50], 50),
            ([10, 5], 50),
        ],
    )
    def test_concentration_bands(self, pcts, expected):
        target = make_target(
            ownership_stakes=[OwnershipStake(owner_type="OTHER", ownership_pct=p) for p in pcts]
        )
        result = calculate_fit_score(target, make_criteria())
        assert result.ownership_score == expected

    @pytest.mark.parametrize("pct", [-30, 100.5, 150])
    def test_percentage_out_of_range_rejected(self, pct):
        with pytest.raises(ValidationError):
            OwnershipStake(owner_type="OTHER", ownership_pct=pct)

    @pytest.mark.parametrize("pct", [0, 100])
    def test_percentage_bounds_inclusive(self, pct):
        assert OwnershipStake(owner_type="OTHER", ownership_pct=pct).ownership_pct == pct


class TestOverallScore:
    """Tests for the weighted overall score."""

    def test_all_defaults(self):
        result = calculate_fit_score(make_target(), make_criteria())
        # 50, 50, 50, 70
        assert result.overall_score == 54

    def test_strong_match(self):
        target = make_target(
            revenue=100_000_000,
            industry_focus=["Healthcare"],
            geography_focus=["United States"],
            ownership_stakes=[OwnershipStake(owner_type="PE_FIRM", ownership_pct=70)],
        )
        criteria = make_criteria(
            trust_amount=100_000_000,
            target_sectors=["healthcare"],
            target_geographies=["united states"],
        )
        result = calculate_fit_score(target, criteria)
        assert result.breakdown() == {"size": 90, "sector": 90, "geography": 90, "ownership": 85}
        assert result.overall_score == 89

    @pytest.mark.parametrize(
        "size,sector,geography,ownership",
        list(itertools.product([30, 50, 70, 90], [30, 50, 90], [30, 50, 60, 90], [50, 60, 70, 80, 85])),
    )
    def test_weighted_sum(self, size, sector, geography, ownership):
        calculator = FitScoreCalculator()
        overall = calculator._calculate_overall(
            {"size": size, "sector": sector, "geography": geography, "ownership": ownership}
        )
        assert overall == round(weighted(size, sector, geography, ownership))
        assert 0 <= overall <= 100

    def test_sub_scores_in_bounds(self):
        result = calculate_fit_score(
            make_target(revenue=5, industry_focus=["a"], geography_focus=["b"]),
            make_criteria(trust_amount=10_000_000_000, target_sectors=["c"], target_geographies=["d"]),
        )
        for value in result.breakdown().values():
            assert isinstance(value, int)
            assert 0 <= value <= 100
        assert result.overall_score == round(
            weighted(result.size_score, result.sector_score, result.geography_score, result.ownership_score)
        )

    def test_idempotent(self):
        target = make_target(revenue=80_000_000, industry_focus=["Fintech"], headquarters="London")
        criteria = make_criteria(trust_amount=50_000_000, target_sectors=["fintech"])
        calculator = FitScoreCalculator()
        assert calculator.calculate(target, criteria) == calculator.calculate(target, criteria)

    def test_negative_ebitda_accepted(self):
        result = calculate_fit_score(make_target(ebitda=-5_000_000), make_criteria())
        assert result.overall_score == 54


class TestSummary:
    """Tests for summary and recommendation text."""

    def test_summary_names_target_and_spac(self):
        result = calculate_fit_score(make_target(), make_criteria())
        assert result.summary.startswith("Target company Acme Health has a fit score of 54/100")
        assert "Growth Acquisition Corp" in result.summary

    def test_summary_falls_back_to_ticker(self):
        result = calculate_fit_score(make_target(), AcquisitionCriteria(ticker="GACQ"))
        assert "for GACQ." in result.summary

    def test_summary_buckets(self):
        result = calculate_fit_score(make_target(), make_criteria())
        # size 50, sector 50, geography 50, ownership 70
        assert "Size fit: Moderate." in result.summary
        assert "Sector alignment: Limited." in result.summary
        assert "Geography match: Partial." in result.summary
        assert "Ownership clarity: Clear." in result.summary

    def test_strong_recommendation(self):
        target = make_target(
            revenue=100_000_000,
            industry_focus=["Healthcare"],
            geography_focus=["US"],
        )
        criteria = make_criteria(
            trust_amount=100_000_000,
            target_sectors=["Healthcare"],
            target_geographies=["US"],
        )
        result = calculate_fit_score(target, criteria)
        assert result.overall_score >= 75
        assert result.recommendation.startswith("Strong fit")
        assert "Size fit: Good." in result.summary
        assert "Sector alignment: Strong." in result.summary
        assert "Geography match: Yes." in result.summary

    def test_moderate_recommendation(self):
        result = calculate_fit_score(make_target(), make_criteria())
        assert result.recommendation.startswith("Moderate fit")

    def test_limited_recommendation(self):
        target = make_target(
            revenue=1_000_000,
            industry_focus=["Retail"],
            geography_focus=["Asia"],
            ownership_stakes=[OwnershipStake(owner_type="OTHER", ownership_pct=20)],
        )
        criteria = make_criteria(
            trust_amount=300_000_000,
            target_sectors=["Fintech"],
            target_geographies=["Europe"],
        )
        result = calculate_fit_score(target, criteria)
        # 30, 30, 30, 50
        assert result.overall_score == 34
        assert result.recommendation.startswith("Limited fit")
        assert "Ownership clarity: Complex." in result.summary


class TestTagsOverlap:
    """Tests for tag matching."""

    def test_exact_match(self):
        assert tags_overlap(["Fintech"], ["fintech"])

    def test_contained(self):
        assert tags_overlap(["health"], ["Digital Health"])

    def test_no_match(self):
        assert not tags_overlap(["energy"], ["media"])

    def test_empty(self):
        assert not tags_overlap([], ["media"])
