"""Tests for the baseline vs stressed comparison."""

import pytest

from propsim.calculations.simulation import simulate
from propsim.models.scenario_config import ScenarioConfig
from propsim.scenarios import (
    INTEREST_STRESS_DELTA,
    format_comparison_table,
    interest_stress_inputs,
    run_scenario_comparison,
)
from tests.fixtures.test_inputs import get_reference_inputs


class TestInterestStress:
    """Tests for the +1 point interest run."""

    def test_rate_raised(self, reference_inputs):
        """The base rate goes up by one point, nothing else changes."""
        stressed = interest_stress_inputs(reference_inputs)

        assert stressed.interest_rate == reference_inputs.interest_rate + INTEREST_STRESS_DELTA
        assert stressed.loan_amount == reference_inputs.loan_amount

    def test_rate_floored(self):
        """A negative delta never pushes the rate below zero."""
        inputs = get_reference_inputs(interest_rate=0.5)
        assert interest_stress_inputs(inputs, delta=-2).interest_rate == 0.0


class TestRunScenarioComparison:
    """Tests for the three-way run."""

    def test_baseline_matches_plain_run(self, stressed_inputs):
        """The baseline ledger ignores the inputs' scenario block."""
        comparison = run_scenario_comparison(stressed_inputs)

        assert comparison.baseline == simulate(stressed_inputs)
        assert len(comparison.stressed) == 35
        assert len(comparison.interest_stressed) == 35

    def test_stress_lowers_cash_flow(self, stressed_inputs):
        """Rate shock, rent curve and occupancy drop cost cash."""
        comparison = run_scenario_comparison(stressed_inputs)

        assert comparison.cash_flow_difference < 0
        assert comparison.stressed[2] != comparison.baseline[2]
        assert comparison.stressed[5].loan_payment_total > comparison.baseline[5].loan_payment_total

    def test_interest_stress_lowers_dscr(self, reference_inputs):
        """One more point of interest lowers the minimum DSCR."""
        comparison = run_scenario_comparison(reference_inputs)

        assert comparison.stressed_min_dscr < comparison.baseline_summary.min_dscr

    def test_unstressed_scenario_matches_baseline(self, reference_inputs):
        """With nothing enabled the stressed run equals the baseline."""
        comparison = run_scenario_comparison(reference_inputs)

        assert comparison.stressed == comparison.baseline
        assert comparison.cash_flow_difference == 0

    def test_explicit_scenario(self, reference_inputs):
        """An explicit scenario replaces the inputs' own."""
        comparison = run_scenario_comparison(
            reference_inputs,
            ScenarioConfig(interest_rate_shock_enabled=True, interest_rate_shock_year=3),
        )

        assert comparison.stressed[:2] == comparison.baseline[:2]
        assert comparison.stressed[2] != comparison.baseline[2]

    def test_thread_pool_matches_sequential(self, stressed_inputs):
        """Parallel and sequential runs are identical."""
        sequential = run_scenario_comparison(stressed_inputs)
        parallel = run_scenario_comparison(stressed_inputs, max_workers=3)

        assert parallel.baseline == sequential.baseline
        assert parallel.stressed == sequential.stressed
        assert parallel.interest_stressed == sequential.interest_stressed
        assert parallel.stressed_exit == sequential.stressed_exit

    def test_exit_shares_basis_and_equity(self, stressed_inputs):
        """The stressed exit is valued on the baseline basis and equity."""
        comparison = run_scenario_comparison(stressed_inputs)
        base_exit = comparison.baseline_exit
        stress_exit = comparison.stressed_exit

        assert base_exit is not None and stress_exit is not None
        assert stress_exit.exit_year == base_exit.exit_year == 10
        assert stress_exit.remaining_basis == base_exit.remaining_basis
        assert stress_exit.equity == base_exit.equity
        assert stress_exit.cashflows[0] == pytest.approx(-base_exit.equity)
        assert stress_exit.sale_price < base_exit.sale_price

    def test_no_exit_when_disabled(self, reference_inputs):
        """Exit valuations are only computed when exit is enabled."""
        comparison = run_scenario_comparison(reference_inputs)

        assert comparison.baseline_exit is None
        assert comparison.stressed_exit is None


class TestFormatComparisonTable:
    """Tests for the text table."""

    def test_table_with_exit(self, stressed_inputs):
        """Table lists cash flow, DSCR and exit rows."""
        table = format_comparison_table(run_scenario_comparison(stressed_inputs))

        assert "SCENARIO COMPARISON (baseline vs stressed)" in table
        assert "Total cash flow (35y)" in table
        assert "Minimum DSCR" in table
        assert "Exit in year 10" in table
        assert "IRR" in table
        assert "Minimum DSCR at +1% interest" in table

    def test_table_without_exit(self, reference_inputs):
        """Exit rows are left out when there is no exit."""
        table = format_comparison_table(run_scenario_comparison(reference_inputs))

        assert "Exit in year" not in table
        assert "First dead-cross year" in table
