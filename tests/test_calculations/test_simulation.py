"""Tests for the 35-year ledger."""

import math

import pytest

from propsim.calculations.debt import calculate_pmt
from propsim.calculations.depreciation import calculate_useful_life
from propsim.calculations.property_tax import calculate_acquisition_tax
from propsim.calculations.simulation import SIMULATION_YEARS, simulate
from propsim.models.lookups import StructureType
from propsim.models.property import PropertyInput, TaxType
from propsim.models.scenario_config import ScenarioConfig
from tests.fixtures.test_inputs import get_reference_inputs


class TestLedgerShape:
    """Tests for the horizon and determinism."""

    def test_emits_every_year(self, reference_inputs):
        """One result per year, 1 through 35."""
        results = simulate(reference_inputs)

        assert len(results) == SIMULATION_YEARS
        assert [r.year for r in results] == list(range(1, 36))

    def test_deterministic(self, reference_inputs):
        """Same inputs, same ledger."""
        assert simulate(reference_inputs) == simulate(reference_inputs)

    def test_year_one_income(self, reference_inputs):
        """Year-1 income is 1,140,000 exactly."""
        assert simulate(reference_inputs)[0].income == 1_140_000


class TestLoanSchedule:
    """Tests for balances and principal over the horizon."""

    def test_balance_never_increases(self, reference_inputs):
        """Balance is non-increasing and stays at zero once repaid."""
        results = simulate(reference_inputs)
        balances = [reference_inputs.loan_amount] + [r.loan_balance for r in results]

        for previous, current in zip(balances, balances[1:]):
            assert current <= previous

        first_zero = next(i for i, b in enumerate(balances) if b == 0)
        assert all(b == 0 for b in balances[first_zero:])

    def test_principal_sums_to_amortized_amount(self, reference_inputs):
        """Principal over the term equals loan minus remaining balance."""
        results = simulate(reference_inputs)
        term = min(int(reference_inputs.loan_duration), SIMULATION_YEARS)

        principal = sum(r.loan_principal for r in results[:term])
        expected = reference_inputs.loan_amount - results[term - 1].loan_balance
        assert principal == pytest.approx(expected, abs=1e-3)

    def test_repaid_by_end_of_term(self, reference_inputs):
        """20M at 2% over 25 years is repaid by year 25."""
        results = simulate(reference_inputs)

        assert results[24].loan_balance == pytest.approx(0, abs=1.0)
        assert results[26].loan_payment_total == 0
        assert results[26].dscr is None

    def test_no_loan(self):
        """A zero loan produces zero debt service throughout."""
        results = simulate(get_reference_inputs(loan_amount=0))

        assert all(r.loan_payment_total == 0 for r in results)
        assert all(r.loan_balance == 0 for r in results)
        assert all(not r.is_dead_cross for r in results)


class TestDepreciationInLedger:
    """Tests for depreciation rows."""

    def test_new_rc_depreciates_all_horizon(self):
        """price 24M, 60% building, RC age 0: life 47, depreciation every year."""
        inputs = get_reference_inputs()
        results = simulate(inputs)

        assert calculate_useful_life(StructureType.RC, 0) == 47
        assert all(r.depreciation_body == pytest.approx(14_400_000 / 47) for r in results)

    def test_zero_after_useful_life(self):
        """Old wood: 4-year life, nothing after."""
        inputs = get_reference_inputs(
            structure=StructureType.WOOD,
            building_age=30,
            enable_equipment_split=True,
            equipment_useful_life=15,
        )
        results = simulate(inputs)
        life = calculate_useful_life(inputs.structure, inputs.building_age)

        for r in results:
            if r.year > life:
                assert r.depreciation_body == 0
            if r.year > 15:
                assert r.depreciation_equipment == 0
            assert r.depreciation_total == r.depreciation_body + r.depreciation_equipment


class TestCashFlows:
    """Tests for cash flow assembly and flags."""

    def test_dead_cross_flag(self):
        """Flag is set exactly when principal exceeds depreciation."""
        inputs = get_reference_inputs(structure=StructureType.WOOD, building_age=20)
        results = simulate(inputs)

        for r in results:
            assert r.is_dead_cross == (r.loan_principal > r.depreciation_total)
        assert any(r.is_dead_cross for r in results)

    def test_acquisition_tax_in_year_two_only(self, reference_inputs):
        """Acquisition tax is charged once, in year 2."""
        results = simulate(reference_inputs)

        assert results[1].acquisition_tax == calculate_acquisition_tax(reference_inputs)
        assert all(r.acquisition_tax == 0 for r in results if r.year != 2)

    def test_cash_flow_identities(self, reference_inputs):
        """Pre-tax and post-tax cash flow follow from the ledger rows."""
        inputs = get_reference_inputs(
            repair_events=[{"year": 3, "amount": 2_000_000, "label": "Roof"}],
        )

        for r in simulate(inputs):
            expected = (
                r.income
                - r.expense
                - r.repair_cost
                - r.loan_payment_total
                - r.property_tax
                - r.acquisition_tax
            )
            assert r.cash_flow_pre_tax == pytest.approx(expected)
            assert r.cash_flow_post_tax == pytest.approx(r.cash_flow_pre_tax - r.tax_amount)

        assert simulate(inputs)[2].repair_cost == 2_000_000

    def test_corporate_pays_minimum_tax(self):
        """Corporate ownership owes at least the minimum levy every year."""
        inputs = get_reference_inputs(tax_type=TaxType.CORPORATE, corporate_minimum_tax=70_000)

        assert all(r.tax_amount >= 70_000 for r in simulate(inputs))


class TestRateShock:
    """Tests for the interest rate shock."""

    def test_shock_reamortizes_from_shock_year(self, reference_inputs):
        """Years before the shock match the baseline; the payment rises after."""
        baseline = simulate(reference_inputs)
        shocked = simulate(
            reference_inputs,
            ScenarioConfig(
                interest_rate_shock_enabled=True,
                interest_rate_shock_year=5,
                interest_rate_shock_delta=1.0,
            ),
        )

        assert shocked[:4] == baseline[:4]

        expected_payment = calculate_pmt(3.0, 21, baseline[3].loan_balance)
        assert shocked[4].loan_payment_total == pytest.approx(expected_payment * 12, rel=1e-9)
        assert shocked[4].loan_payment_total > baseline[4].loan_payment_total

    def test_shocked_loan_still_repaid_at_term(self, reference_inputs):
        """Re-amortizing over the remaining term keeps the original maturity."""
        shocked = simulate(
            reference_inputs,
            ScenarioConfig(interest_rate_shock_enabled=True, interest_rate_shock_year=10),
        )

        assert shocked[24].loan_balance == pytest.approx(0, abs=1.0)

    def test_disabled_shock_matches_baseline(self, reference_inputs):
        """A scenario with nothing switched on reproduces the baseline."""
        assert simulate(reference_inputs, ScenarioConfig()) == simulate(reference_inputs)


class TestDegenerateInputs:
    """Tests for malformed and zero inputs."""

    def test_zero_price(self):
        """Zero price and loan produce a finite all-zero-ish ledger."""
        inputs = PropertyInput(price=0, loan_amount=0, monthly_rent=0)
        results = simulate(inputs)

        assert len(results) == SIMULATION_YEARS
        for r in results:
            assert math.isfinite(r.cash_flow_post_tax)
            assert r.depreciation_total == 0

    def test_nan_inputs_are_normalized(self):
        """NaN and infinite inputs fall back before the loop runs."""
        inputs = get_reference_inputs(monthly_rent=float("nan"), interest_rate=float("inf"))
        results = simulate(inputs)

        assert inputs.monthly_rent == 0
        assert inputs.interest_rate == 0
        assert all(math.isfinite(r.cash_flow_post_tax) for r in results)
        assert results[0].loan_payment_total == pytest.approx(20_000_000 / 25)
