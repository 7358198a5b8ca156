"""Tests for individual and corporate tax on property income."""

import pytest

from propsim.calculations.simulation import simulate
from propsim.calculations.taxes import (
    calculate_corporate_tax,
    calculate_individual_tax,
    calculate_progressive_tax,
    calculate_tax,
)
from propsim.models.lookups import INCOME_TAX_BRACKETS
from propsim.models.property import TaxType, round_half_up
from tests.fixtures.test_inputs import get_reference_inputs


class TestProgressiveTax:
    """Tests for the bracket table plus resident tax."""

    def test_non_positive_income_is_untaxed(self):
        """Zero and negative incomes owe nothing."""
        assert calculate_progressive_tax(0) == 0
        assert calculate_progressive_tax(-1_000_000) == 0

    def test_lowest_bracket(self):
        """1M: 5% income tax + 10% resident tax."""
        assert calculate_progressive_tax(1_000_000) == 150_000

    def test_bracket_upper_bound_is_inclusive(self):
        """1,950,000 is still in the 5% bracket."""
        assert calculate_progressive_tax(1_950_000) == 292_500

    def test_middle_bracket(self):
        """5M: 5M x 20% - 427,500 + 500,000."""
        assert calculate_progressive_tax(5_000_000) == 1_072_500

    def test_top_bracket(self):
        """50M: 50M x 45% - 4,796,000 + 5M."""
        assert calculate_progressive_tax(50_000_000) == 22_704_000

    def test_bracket_table(self):
        """Bracket table is ascending with the documented rates."""
        rates = [b.rate for b in INCOME_TAX_BRACKETS]
        bounds = [b.up_to for b in INCOME_TAX_BRACKETS]

        assert rates == [0.05, 0.10, 0.20, 0.23, 0.33, 0.40, 0.45]
        assert bounds == sorted(bounds)
        assert INCOME_TAX_BRACKETS[1].deduction == 97_500
        assert INCOME_TAX_BRACKETS[-1].deduction == 4_796_000


class TestIndividualTax:
    """Tests for the incremental personal tax."""

    def test_profit_adds_tax(self):
        """5M salary + 1M property profit: 1,372,500 - 1,072,500."""
        result = calculate_individual_tax(
            real_estate_income=1_000_000,
            other_income=5_000_000,
            loan_interest=400_000,
            land_ratio=0.4,
        )

        assert result.tax_amount == 300_000

    def test_loss_reduced_by_land_interest(self):
        """A loss is reduced by interest x land ratio before offsetting salary."""
        result = calculate_individual_tax(
            real_estate_income=-1_000_000,
            other_income=5_000_000,
            loan_interest=400_000,
            land_ratio=0.4,
        )

        assert result.taxable_income == pytest.approx(-840_000)
        # tax(4,160,000) - tax(5,000,000) = 820,500 - 1,072,500
        assert result.tax_amount == -252_000

    def test_negative_tax_is_not_floored(self):
        """Tax savings from a loss stay negative."""
        result = calculate_individual_tax(-2_000_000, 8_000_000, 0, 0.0)
        assert result.tax_amount < 0

    def test_no_other_income(self):
        """Without other income a loss saves nothing."""
        result = calculate_individual_tax(-2_000_000, 0, 500_000, 0.5)
        assert result.tax_amount == 0

    def test_incremental_tax_across_other_incomes(self):
        """For each year the tax equals tax(other + property) - tax(other)."""
        for other_income in (0, 3_000_000, 12_000_000):
            inputs = get_reference_inputs(other_income=other_income)
            land_ratio = inputs.land_ratio

            for result in simulate(inputs):
                adjusted = result.taxable_income
                if adjusted < 0:
                    adjusted += result.loan_interest * land_ratio
                expected = round_half_up(
                    calculate_progressive_tax(other_income + adjusted)
                    - calculate_progressive_tax(other_income)
                )
                assert result.tax_amount == expected


class TestCorporateTax:
    """Tests for the corporate regime."""

    def test_lower_rate_on_small_profit(self):
        """1M at 15% plus the 70k minimum."""
        assert calculate_corporate_tax(1_000_000, 70_000).tax_amount == 220_000

    def test_upper_rate_applies_to_whole_income(self):
        """10M at 23% plus the minimum."""
        assert calculate_corporate_tax(10_000_000, 70_000).tax_amount == 2_370_000

    def test_minimum_tax_on_loss(self):
        """The minimum levy is owed in loss years."""
        assert calculate_corporate_tax(-1_000_000, 70_000).tax_amount == 70_000

    def test_dispatch_by_tax_type(self):
        """calculate_tax selects the regime."""
        corporate = calculate_tax(TaxType.CORPORATE, 1_000_000, 0, 0, corporate_minimum_tax=70_000)
        individual = calculate_tax(TaxType.INDIVIDUAL, 1_000_000, 0, 0, other_income=0)

        assert corporate.tax_amount == 220_000
        assert individual.tax_amount == 150_000
