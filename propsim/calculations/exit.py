"""Sale of the property at a chosen exit year and the resulting equity returns."""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..models.property import PropertyInput, round_half_up
from .costs import AcquisitionCosts, calculate_acquisition_costs, calculate_equity
from .metrics import calculate_equity_multiple, internal_rate_of_return, net_present_value
from .property_tax import calculate_acquisition_tax
from .simulation import SIMULATION_YEARS, YearlyResult

# Holding periods up to this many years are taxed at the short-term rate
SHORT_TERM_HOLDING_YEARS = 5


@dataclass(frozen=True)
class ExitValuation:
    """Sale economics and equity returns for one exit."""

    exit_year: int
    noi: float  # Income - expense - property tax in the exit year
    sale_price: int
    brokerage: int
    other_costs: int
    remaining_basis: float
    taxable_gain: float
    tax_rate: float  # % applied to a positive gain
    exit_tax: int
    loan_balance: float
    net_proceeds: int
    equity: float
    cashflows: List[float] = field(default_factory=list)  # [-equity, ATCF..., ATCF + proceeds]
    irr: Optional[float] = None
    npv: float = 0.0
    equity_multiple: Optional[float] = None


def resolve_exit_year(exit_year: float) -> int:
    """Round the exit year and clamp it into the simulated horizon."""
    return min(max(1, round_half_up(exit_year)), SIMULATION_YEARS)


def calculate_sale_price(noi: float, cap_rate: float) -> int:
    """Direct capitalization: sale price = NOI / cap rate.

    Args:
        noi: Net operating income in the exit year.
        cap_rate: Exit cap rate in percent.

    Returns:
        Sale price rounded to the currency unit, 0 for a non-positive cap rate.

    Example:
        >>> calculate_sale_price(1_000_000, 5.0)
        20000000
    """
    if cap_rate <= 0:
        return 0
    return round_half_up(noi / (cap_rate / 100))


def calculate_remaining_basis(
    inputs: PropertyInput,
    results: Sequence[YearlyResult],
    exit_year: int,
    costs: AcquisitionCosts,
) -> float:
    """Tax basis left at sale.

    Land + undepreciated body + undepreciated equipment + initial costs
    + acquisition tax.
    """
    held = [r for r in results if r.year <= exit_year]
    accumulated_body = sum(r.depreciation_body for r in held)
    accumulated_equipment = sum(r.depreciation_equipment for r in held)

    return (
        inputs.land_price
        + max(0.0, inputs.body_price - accumulated_body)
        + max(0.0, inputs.equipment_price - accumulated_equipment)
        + costs.total
        + calculate_acquisition_tax(inputs)
    )


def calculate_exit_valuation(
    results: Sequence[YearlyResult],
    inputs: PropertyInput,
    remaining_basis: Optional[float] = None,
    equity: Optional[float] = None,
) -> ExitValuation:
    """Value a sale at the inputs' exit year.

    Sale price = exit-year NOI / cap rate. Net proceeds = sale price -
    brokerage (rate + fixed fee) - other costs - capital gains tax -
    outstanding loan. The gain is taxed at the short-term rate for exits
    within five years and at the long-term rate afterwards.

    Args:
        results: Simulation ledger to sell out of.
        inputs: Normalized property inputs with the exit parameters.
        remaining_basis: Tax basis to use instead of the one derived from
            ``results`` (a stressed run is compared on the baseline basis).
        equity: Initial equity to use instead of the one derived from inputs.

    Returns:
        ExitValuation with proceeds, IRR, NPV and equity multiple.
    """
    exit_year = resolve_exit_year(inputs.exit_year)
    costs = calculate_acquisition_costs(inputs)

    if remaining_basis is None:
        remaining_basis = calculate_remaining_basis(inputs, results, exit_year, costs)
    if equity is None:
        equity = calculate_equity(inputs, costs)

    exit_result = next((r for r in results if r.year == exit_year), None)
    noi = (
        exit_result.income - exit_result.expense - exit_result.property_tax
        if exit_result is not None
        else 0.0
    )
    loan_balance = exit_result.loan_balance if exit_result is not None else 0.0

    sale_price = calculate_sale_price(noi, inputs.exit_cap_rate)
    brokerage = round_half_up(
        sale_price * (inputs.exit_brokerage_rate / 100) + inputs.exit_brokerage_fixed
    )
    other_costs = round_half_up(sale_price * (inputs.exit_other_cost_rate / 100))
    taxable_gain = sale_price - brokerage - other_costs - remaining_basis

    tax_rate = (
        inputs.exit_short_term_tax_rate
        if exit_year <= SHORT_TERM_HOLDING_YEARS
        else inputs.exit_long_term_tax_rate
    )
    exit_tax = round_half_up(taxable_gain * (tax_rate / 100)) if taxable_gain > 0 else 0
    net_proceeds = round_half_up(sale_price - brokerage - other_costs - exit_tax - loan_balance)

    cashflows = [-equity] + [r.cash_flow_post_tax for r in results[:exit_year]]
    if len(cashflows) > exit_year:
        cashflows[exit_year] += net_proceeds

    return ExitValuation(
        exit_year=exit_year,
        noi=noi,
        sale_price=sale_price,
        brokerage=brokerage,
        other_costs=other_costs,
        remaining_basis=remaining_basis,
        taxable_gain=taxable_gain,
        tax_rate=tax_rate,
        exit_tax=exit_tax,
        loan_balance=loan_balance,
        net_proceeds=net_proceeds,
        equity=equity,
        cashflows=cashflows,
        irr=internal_rate_of_return(cashflows),
        npv=net_present_value(inputs.exit_discount_rate / 100, cashflows),
        equity_multiple=calculate_equity_multiple(cashflows, equity),
    )
