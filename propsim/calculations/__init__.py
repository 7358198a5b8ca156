"""Calculation modules for the income property simulation."""

from .depreciation import calculate_useful_life, build_depreciation_schedule, DepreciationSchedule
from .debt import (
    calculate_pmt,
    open_loan,
    apply_rate_change,
    step_loan_year,
    LoanState,
    LoanYear,
)
from .revenue import (
    calculate_decline_factor,
    calculate_income,
    calculate_repair_cost,
    calculate_vacancy_loss,
    occupancy_for_age,
    IncomeResult,
)
from .operating_expenses import (
    calculate_operating_expense,
    calculate_detailed_expense,
    get_oer_rate_for_age,
    infer_oer_property_type,
)
from .property_tax import calculate_property_tax, calculate_acquisition_tax
from .costs import calculate_acquisition_costs, calculate_equity, AcquisitionCosts
from .taxes import (
    calculate_progressive_tax,
    calculate_individual_tax,
    calculate_corporate_tax,
    calculate_tax,
    TaxResult,
)
from .simulation import simulate, YearlyResult, SIMULATION_YEARS
from .exit import calculate_exit_valuation, calculate_sale_price, ExitValuation
from .metrics import (
    net_present_value,
    solve_irr,
    internal_rate_of_return,
    summarize_results,
    IRRResult,
    RunSummary,
)

# Estimates for partially-known listings
from .estimates import (
    apply_estimated_defaults,
    suggest_building_ratio,
    suggest_interest_rate,
    suggest_loan_duration,
    suggest_occupancy_rate,
    suggest_operating_expense_rate,
    EstimatedInputs,
)

__all__ = [
    # Depreciation
    "calculate_useful_life",
    "build_depreciation_schedule",
    "DepreciationSchedule",
    # Debt
    "calculate_pmt",
    "open_loan",
    "apply_rate_change",
    "step_loan_year",
    "LoanState",
    "LoanYear",
    # Revenue
    "calculate_decline_factor",
    "calculate_income",
    "calculate_repair_cost",
    "calculate_vacancy_loss",
    "occupancy_for_age",
    "IncomeResult",
    # Operating expenses
    "calculate_operating_expense",
    "calculate_detailed_expense",
    "get_oer_rate_for_age",
    "infer_oer_property_type",
    # Property tax
    "calculate_property_tax",
    "calculate_acquisition_tax",
    # Costs
    "calculate_acquisition_costs",
    "calculate_equity",
    "AcquisitionCosts",
    # Taxes
    "calculate_progressive_tax",
    "calculate_individual_tax",
    "calculate_corporate_tax",
    "calculate_tax",
    "TaxResult",
    # Simulation
    "simulate",
    "YearlyResult",
    "SIMULATION_YEARS",
    # Exit
    "calculate_exit_valuation",
    "calculate_sale_price",
    "ExitValuation",
    # Metrics
    "net_present_value",
    "solve_irr",
    "internal_rate_of_return",
    "summarize_results",
    "IRRResult",
    "RunSummary",
    # Estimates
    "apply_estimated_defaults",
    "suggest_building_ratio",
    "suggest_interest_rate",
    "suggest_loan_duration",
    "suggest_occupancy_rate",
    "suggest_operating_expense_rate",
    "EstimatedInputs",
]
