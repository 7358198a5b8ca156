"""Income tax on the property's yearly result, individual or corporate."""

from dataclasses import dataclass

from ..models.lookups import (
    CORPORATE_LOWER_RATE,
    CORPORATE_TAX_THRESHOLD,
    CORPORATE_UPPER_RATE,
    RESIDENT_TAX_RATE,
    find_tax_bracket,
)
from ..models.property import TaxType, round_half_up


@dataclass(frozen=True)
class TaxResult:
    """Tax attributable to the property for one year."""

    real_estate_income: float  # Before the loss add-back
    taxable_income: float  # After the loss add-back (individual regime)
    tax_amount: int  # Negative when the property lowers total tax


def calculate_progressive_tax(taxable_income: float) -> int:
    """Calculate income tax plus flat resident tax for one taxable income.

    Tax = income x marginal rate - bracket deduction + income x 10%

    Args:
        taxable_income: Total taxable income.

    Returns:
        Tax rounded to the currency unit, never negative. Zero for a
        non-positive income.

    Example:
        >>> calculate_progressive_tax(5_000_000)
        1072500
    """
    if taxable_income <= 0:
        return 0

    bracket = find_tax_bracket(taxable_income)
    income_tax = taxable_income * bracket.rate - bracket.deduction
    resident_tax = taxable_income * RESIDENT_TAX_RATE
    return max(0, round_half_up(income_tax + resident_tax))


def calculate_real_estate_income(
    income: float,
    expense: float,
    repair_cost: float,
    loan_interest: float,
    depreciation: float,
    property_tax: float,
) -> float:
    """Taxable real estate income before any loss adjustment."""
    return income - expense - repair_cost - loan_interest - depreciation - property_tax


def calculate_individual_tax(
    real_estate_income: float,
    other_income: float,
    loan_interest: float,
    land_ratio: float,
) -> TaxResult:
    """Incremental personal tax caused by the property.

    A real estate loss is reduced by the interest attributable to land
    (interest x land ratio) before it offsets other income. The result is
    tax(other + property) - tax(other), which is negative when the loss
    saves tax.

    Args:
        real_estate_income: Property income after all deductions.
        other_income: Salary and other non-property income.
        loan_interest: Interest paid in the year.
        land_ratio: Land price / total price as a decimal.

    Returns:
        TaxResult with the incremental tax.
    """
    if real_estate_income < 0:
        adjusted_income = real_estate_income + loan_interest * land_ratio
    else:
        adjusted_income = real_estate_income

    total_tax = calculate_progressive_tax(other_income + adjusted_income)
    base_tax = calculate_progressive_tax(other_income)

    return TaxResult(
        real_estate_income=real_estate_income,
        taxable_income=adjusted_income,
        tax_amount=round_half_up(total_tax - base_tax),
    )


def calculate_corporate_tax(real_estate_income: float, minimum_tax: float) -> TaxResult:
    """Corporate tax on the property income plus the fixed minimum levy.

    The lower rate applies to the whole income up to the threshold and the
    upper rate to the whole income above it. The minimum levy is owed even
    in loss years.
    """
    tax = 0.0
    if real_estate_income > 0:
        rate = (
            CORPORATE_LOWER_RATE
            if real_estate_income <= CORPORATE_TAX_THRESHOLD
            else CORPORATE_UPPER_RATE
        )
        tax = real_estate_income * rate
    tax += minimum_tax

    return TaxResult(
        real_estate_income=real_estate_income,
        taxable_income=real_estate_income,
        tax_amount=round_half_up(tax),
    )


def calculate_tax(
    tax_type: TaxType,
    real_estate_income: float,
    loan_interest: float,
    land_ratio: float,
    other_income: float = 0.0,
    corporate_minimum_tax: float = 0.0,
) -> TaxResult:
    """Dispatch to the individual or corporate regime."""
    if tax_type == TaxType.CORPORATE:
        return calculate_corporate_tax(real_estate_income, corporate_minimum_tax)
    return calculate_individual_tax(real_estate_income, other_income, loan_interest, land_ratio)
