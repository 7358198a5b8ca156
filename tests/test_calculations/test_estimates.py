"""Tests for estimates of missing listing inputs."""

import pytest

from propsim.calculations.estimates import (
    apply_estimated_defaults,
    suggest_building_ratio,
    suggest_interest_rate,
    suggest_loan_duration,
    suggest_occupancy_rate,
    suggest_operating_expense_rate,
)
from propsim.models.lookups import StructureType
from propsim.models.property import PropertyInput


class TestSuggestions:
    """Tests for the individual estimate tables."""

    def test_building_ratio_by_age_band(self):
        """Newer and sturdier buildings carry more of the price."""
        assert suggest_building_ratio(StructureType.RC, 0) == 70
        assert suggest_building_ratio(StructureType.RC, 5) == 70
        assert suggest_building_ratio(StructureType.RC, 6) == 60
        assert suggest_building_ratio(StructureType.WOOD, 12) == 40
        assert suggest_building_ratio(StructureType.S_LIGHT, 60) == 15
        assert suggest_building_ratio("WOOD", 12) == 40

    def test_building_ratio_unknown_age(self):
        """An unknown age is treated as new."""
        assert suggest_building_ratio(StructureType.SRC, None) == 70

    def test_interest_rate(self):
        """Rate by structure; unknown structure gives nothing."""
        assert suggest_interest_rate(StructureType.RC) == 1.6
        assert suggest_interest_rate(StructureType.WOOD) == 2.2
        assert suggest_interest_rate(None) is None

    def test_loan_duration(self):
        """Remaining life plus bonus, clamped to 10-35."""
        assert suggest_loan_duration(StructureType.RC, 0) == 35
        assert suggest_loan_duration(StructureType.WOOD, 12) == 25
        assert suggest_loan_duration(StructureType.S_LIGHT, 30) == 12
        assert suggest_loan_duration(StructureType.RC, 47) == 10

    def test_young_wood_gets_full_term(self):
        """Wood up to 10 years old qualifies for 35 years."""
        assert suggest_loan_duration(StructureType.WOOD, 10) == 35

    def test_loan_duration_unknown(self):
        """No structure or age, no suggestion."""
        assert suggest_loan_duration(None, 10) is None
        assert suggest_loan_duration(StructureType.RC, float("nan")) is None

    def test_occupancy_by_age(self):
        """95 / 90 / 85 / 80 by age band."""
        assert suggest_occupancy_rate(10) == 95
        assert suggest_occupancy_rate(11) == 90
        assert suggest_occupancy_rate(30) == 85
        assert suggest_occupancy_rate(31) == 80
        assert suggest_occupancy_rate(None) is None

    def test_operating_expense_rate(self):
        """Base by structure plus 2 points past 20 years."""
        assert suggest_operating_expense_rate(StructureType.RC, 20) == 15
        assert suggest_operating_expense_rate(StructureType.RC, 21) == 17
        assert suggest_operating_expense_rate(StructureType.WOOD, 12) == 22
        assert suggest_operating_expense_rate(None, 5) is None


class TestApplyEstimatedDefaults:
    """Tests for completing a partial listing."""

    def test_wood_listing(self):
        """30M wood, 12 years old, only price and rent known."""
        estimated = apply_estimated_defaults({
            "price": 30_000_000,
            "structure": "WOOD",
            "building_age": 12,
            "monthly_rent": 150_000,
        })
        inputs = estimated.inputs

        assert inputs.building_ratio == 40
        assert inputs.equity_ratio == pytest.approx(5.0)
        assert inputs.loan_amount == 28_500_000
        assert inputs.interest_rate == 2.2
        assert inputs.loan_duration == 25
        assert inputs.occupancy_rate == 90
        assert inputs.operating_expense_rate == 22
        assert inputs.monthly_rent == 150_000

        for name in ("building_ratio", "loan_amount", "interest_rate", "occupancy_rate"):
            assert name in estimated.auto_filled
        assert "monthly_rent" not in estimated.auto_filled

    def test_given_values_are_kept(self):
        """Known positive values are never overwritten."""
        estimated = apply_estimated_defaults({
            "price": 30_000_000,
            "structure": "RC",
            "building_age": 5,
            "building_ratio": 55,
            "loan_amount": 24_000_000,
            "interest_rate": 1.2,
        })
        inputs = estimated.inputs

        assert inputs.building_ratio == 55
        assert inputs.loan_amount == 24_000_000
        assert inputs.interest_rate == 1.2
        assert inputs.equity_ratio == pytest.approx(20.0)
        assert "building_ratio" not in estimated.auto_filled

    def test_non_positive_and_nan_are_missing(self):
        """Zero and NaN count as missing."""
        estimated = apply_estimated_defaults({
            "price": 20_000_000,
            "structure": "RC",
            "building_age": 25,
            "occupancy_rate": 0,
            "interest_rate": float("nan"),
        })

        assert estimated.inputs.occupancy_rate == 85
        assert estimated.inputs.interest_rate == 1.6

    def test_fixed_defaults(self):
        """Rates without an estimate table get plain defaults."""
        estimated = apply_estimated_defaults({"price": 10_000_000, "property_tax_rate": 0})

        assert estimated.inputs.property_tax_rate == 1.7
        assert estimated.inputs.scenario_rent_decline_early_rate == 1.5
        assert estimated.inputs.scenario_rent_decline_late_rate == 0.5

    def test_accepts_property_input(self):
        """A complete record passes through with its values intact."""
        original = PropertyInput()
        estimated = apply_estimated_defaults(original)

        assert estimated.inputs.price == original.price
        assert estimated.inputs.loan_amount == original.loan_amount
        assert estimated.inputs.structure == original.structure
        assert "price" not in estimated.auto_filled
