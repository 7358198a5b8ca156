"""35-year cash flow ledger for a leveraged income property."""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..models.property import PropertyInput
from ..models.scenario_config import ScenarioConfig, resolve_scenario
from .debt import apply_rate_change, open_loan, step_loan_year
from .depreciation import build_depreciation_schedule
from .operating_expenses import calculate_operating_expense
from .property_tax import calculate_acquisition_tax, calculate_property_tax
from .revenue import calculate_income, calculate_repair_cost
from .taxes import calculate_real_estate_income, calculate_tax

logger = logging.getLogger(__name__)

SIMULATION_YEARS = 35

# Acquisition tax is assessed after purchase and paid in the second year
ACQUISITION_TAX_YEAR = 2


@dataclass(frozen=True)
class YearlyResult:
    """One row of the simulation ledger."""

    year: int
    gross_potential_rent: float
    income: float
    expense: float
    property_tax: int
    repair_cost: float
    loan_payment_total: float
    loan_interest: float
    loan_principal: float
    loan_balance: float
    depreciation_body: float
    depreciation_equipment: float
    depreciation_total: float
    taxable_income: float
    tax_amount: int
    cash_flow_pre_tax: float
    cash_flow_post_tax: float
    acquisition_tax: int
    is_dead_cross: bool

    @property
    def noi(self) -> float:
        """Net operating income: income less expense, property tax and repairs."""
        return self.income - self.expense - self.property_tax - self.repair_cost

    @property
    def dscr(self) -> Optional[float]:
        """Debt service coverage ratio, or None in years without debt service."""
        if self.loan_payment_total <= 0:
            return None
        return self.noi / self.loan_payment_total


def simulate(
    inputs: PropertyInput,
    scenario: Optional[ScenarioConfig] = None,
) -> List[YearlyResult]:
    """Run the yearly ledger over the full holding horizon.

    Each year: income -> operating expense, repairs and property tax ->
    twelve monthly loan payments (re-amortized once a rate shock starts) ->
    depreciation -> tax -> cash flows and the dead-cross flag.

    Pre-tax CF = income - expense - repairs - debt service - property tax
                 - acquisition tax (year 2 only)
    Post-tax CF = pre-tax CF - tax

    Args:
        inputs: Normalized property inputs.
        scenario: Stress overrides, or None for the baseline run.

    Returns:
        One YearlyResult per year, years 1 through SIMULATION_YEARS.
    """
    resolved = resolve_scenario(inputs, scenario)
    schedule = build_depreciation_schedule(inputs)
    acquisition_tax_estimate = calculate_acquisition_tax(inputs)
    land_ratio = inputs.land_ratio

    loan = open_loan(inputs.loan_amount, inputs.interest_rate, inputs.loan_duration)

    logger.debug(
        "Simulating %d years: loan %.0f at %.3f%% over %s years, body life %d, stressed=%s",
        SIMULATION_YEARS,
        inputs.loan_amount,
        inputs.interest_rate,
        inputs.loan_duration,
        schedule.body_life,
        resolved.is_stressed,
    )

    results = []
    for year in range(1, SIMULATION_YEARS + 1):
        # === Income and operating costs ===
        income = calculate_income(inputs, year, resolved)
        expense = calculate_operating_expense(
            inputs, year, income.gross_potential_rent, income.effective_income
        )
        repair_cost = calculate_repair_cost(inputs.repair_events, year)
        property_tax = calculate_property_tax(inputs, year)

        # === Debt service ===
        if resolved.shock_enabled and year >= resolved.shock_year:
            rate = max(0.0, inputs.interest_rate + resolved.shock_delta)
        else:
            rate = inputs.interest_rate
        if rate != loan.rate:
            remaining_years = max(0.0, inputs.loan_duration - (year - 1))
            loan = apply_rate_change(loan, rate, remaining_years)
            logger.debug(
                "Year %d: rate %.3f%%, payment re-amortized to %.0f/month",
                year,
                rate,
                loan.monthly_payment,
            )
        debt_service, loan = step_loan_year(loan)

        # === Depreciation ===
        depreciation_body = schedule.body_for_year(year)
        depreciation_equipment = schedule.equipment_for_year(year)
        depreciation_total = depreciation_body + depreciation_equipment

        # === Tax ===
        real_estate_income = calculate_real_estate_income(
            income=income.effective_income,
            expense=expense,
            repair_cost=repair_cost,
            loan_interest=debt_service.interest,
            depreciation=depreciation_total,
            property_tax=property_tax,
        )
        tax = calculate_tax(
            inputs.tax_type,
            real_estate_income,
            loan_interest=debt_service.interest,
            land_ratio=land_ratio,
            other_income=inputs.other_income,
            corporate_minimum_tax=inputs.corporate_minimum_tax,
        )

        # === Cash flow ===
        acquisition_tax = acquisition_tax_estimate if year == ACQUISITION_TAX_YEAR else 0
        cash_flow_pre_tax = (
            income.effective_income
            - expense
            - repair_cost
            - debt_service.payment_total
            - property_tax
            - acquisition_tax
        )

        results.append(
            YearlyResult(
                year=year,
                gross_potential_rent=income.gross_potential_rent,
                income=income.effective_income,
                expense=expense,
                property_tax=property_tax,
                repair_cost=repair_cost,
                loan_payment_total=debt_service.payment_total,
                loan_interest=debt_service.interest,
                loan_principal=debt_service.principal,
                loan_balance=max(0.0, loan.balance),
                depreciation_body=depreciation_body,
                depreciation_equipment=depreciation_equipment,
                depreciation_total=depreciation_total,
                taxable_income=real_estate_income,
                tax_amount=tax.tax_amount,
                cash_flow_pre_tax=cash_flow_pre_tax,
                cash_flow_post_tax=cash_flow_pre_tax - tax.tax_amount,
                acquisition_tax=acquisition_tax,
                is_dead_cross=debt_service.principal > depreciation_total,
            )
        )

    return results
