"""Suggested values for inputs a listing leaves blank."""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from ..models.lookups import (
    BUILDING_RATIO_TABLE,
    LOAN_DURATION_BONUS,
    SUGGESTED_INTEREST_RATE,
    SUGGESTED_OPERATING_EXPENSE_RATE,
    StructureType,
    get_statutory_life,
)
from ..models.property import PropertyInput, round_half_up, safe_number

logger = logging.getLogger(__name__)

# Loan assumed when a listing gives a price but no financing
DEFAULT_LOAN_TO_PRICE = 0.95
MIN_LOAN_DURATION = 10
MAX_LOAN_DURATION = 35
# Expense uplift (percentage points) for buildings older than this
OER_AGING_THRESHOLD = 20
OER_AGING_UPLIFT = 2

# Plain defaults for fields with no structure- or age-based estimate
FIXED_DEFAULTS: Mapping[str, float] = {
    "oer_leasing_months": 2,
    "oer_leasing_tenancy_years": 2,
    "rent_decline_rate": 0.5,
    "water_contribution_rate": 0.2,
    "fire_insurance_rate": 0.4,
    "loan_fee_rate": 2.2,
    "registration_cost_rate": 1.2,
    "acquisition_tax_rate": 3,
    "acquisition_land_reduction_rate": 50,
    "land_evaluation_rate": 70,
    "building_evaluation_rate": 50,
    "land_tax_reduction_rate": 16.67,
    "property_tax_rate": 1.7,
    "vacancy_cycle_years": 4,
    "vacancy_cycle_months": 3,
    "vacancy_probability": 20,
    "vacancy_probability_months": 2,
    "corporate_minimum_tax": 70_000,
    "equipment_ratio": 20,
    "equipment_useful_life": 15,
    "scenario_interest_shock_year": 5,
    "scenario_interest_shock_delta": 1,
    "scenario_rent_decline_early_rate": 1.5,
    "scenario_rent_decline_late_rate": 0.5,
    "scenario_rent_decline_switch_year": 10,
    "scenario_occupancy_decline_start_year": 10,
    "scenario_occupancy_decline_delta": 5,
    "exit_year": 10,
    "exit_cap_rate": 7,
    "exit_brokerage_rate": 3,
    "exit_brokerage_fixed": 600_000,
    "exit_other_cost_rate": 1,
    "exit_short_term_tax_rate": 39,
    "exit_long_term_tax_rate": 20,
    "exit_discount_rate": 4,
}


def _normalize_age(age: Any) -> Optional[int]:
    number = safe_number(age, math.nan)
    if not math.isfinite(number):
        return None
    return max(0, math.floor(number))


def _is_missing(value: Any) -> bool:
    number = safe_number(value, math.nan)
    return not math.isfinite(number) or number <= 0


def suggest_building_ratio(structure: StructureType, age: Any) -> float:
    """Typical building share of price (%) for a structure and age.

    Example:
        >>> suggest_building_ratio(StructureType.WOOD, 12)
        40
    """
    safe_age = _normalize_age(age) or 0
    bands = BUILDING_RATIO_TABLE[StructureType(structure)]
    for band in bands:
        if safe_age <= band.max_age:
            return band.ratio
    return bands[-1].ratio


def suggest_interest_rate(structure: Optional[StructureType]) -> Optional[float]:
    """Typical lending rate (%) for the structure."""
    if structure is None:
        return None
    return SUGGESTED_INTEREST_RATE.get(structure)


def suggest_loan_duration(structure: Optional[StructureType], age: Any) -> Optional[int]:
    """Loan term (years) lenders typically allow.

    Remaining statutory life plus a structure bonus, clamped to 10-35
    years. Wooden buildings up to 10 years old qualify for the full 35.

    Args:
        structure: Structural class.
        age: Building age in years.

    Returns:
        Suggested term, or None if structure or age is unknown.
    """
    if structure is None:
        return None
    safe_age = _normalize_age(age)
    if safe_age is None:
        return None

    remaining = max(0, get_statutory_life(structure) - safe_age)
    optimistic = remaining + LOAN_DURATION_BONUS.get(structure, 0)
    if structure == StructureType.WOOD and safe_age <= 10:
        optimistic = max(optimistic, MAX_LOAN_DURATION)

    return min(MAX_LOAN_DURATION, max(MIN_LOAN_DURATION, round_half_up(optimistic)))


def suggest_occupancy_rate(age: Any) -> Optional[float]:
    """Typical occupancy (%) for a building age."""
    safe_age = _normalize_age(age)
    if safe_age is None:
        return None
    if safe_age <= 10:
        return 95
    if safe_age <= 20:
        return 90
    if safe_age <= 30:
        return 85
    return 80


def suggest_operating_expense_rate(
    structure: Optional[StructureType],
    age: Any = None,
) -> Optional[float]:
    """Typical operating expense ratio (%), higher for buildings over 20 years."""
    if structure is None:
        return None
    base = SUGGESTED_OPERATING_EXPENSE_RATE.get(structure)
    if base is None:
        return None
    safe_age = _normalize_age(age)
    uplift = OER_AGING_UPLIFT if safe_age is not None and safe_age > OER_AGING_THRESHOLD else 0
    return base + uplift


@dataclass(frozen=True)
class EstimatedInputs:
    """Inputs completed with estimates, and which fields were filled."""

    inputs: PropertyInput
    auto_filled: List[str] = field(default_factory=list)


def apply_estimated_defaults(
    data: Union[PropertyInput, Mapping[str, Any]],
) -> EstimatedInputs:
    """Fill missing or non-positive inputs with estimates.

    Structure- and age-dependent fields (building ratio, financing,
    occupancy, expense ratio) use the estimate tables; other rates use
    FIXED_DEFAULTS. A field absent from a partial mapping counts as missing.

    Args:
        data: Partial inputs, as a mapping of field values or a PropertyInput.

    Returns:
        EstimatedInputs with the completed PropertyInput and the names of
        the fields that were filled.
    """
    values: Dict[str, Any] = (
        data.to_dict() if isinstance(data, PropertyInput) else dict(data)
    )
    structure = StructureType(values.get("structure") or StructureType.RC)
    age = values.get("building_age")
    price = safe_number(values.get("price"), 0.0)

    estimates: Dict[str, Any] = {}

    if _is_missing(values.get("building_ratio")):
        estimates["building_ratio"] = suggest_building_ratio(structure, age)

    if _is_missing(values.get("equity_ratio")) and price > 0:
        loan = safe_number(values.get("loan_amount"), 0.0)
        if loan <= 0:
            loan = round_half_up(price * DEFAULT_LOAN_TO_PRICE)
        estimates["equity_ratio"] = min(100.0, max(0.0, (price - loan) / price * 100))

    if _is_missing(values.get("loan_amount")) and price > 0:
        equity_ratio = estimates.get("equity_ratio", safe_number(values.get("equity_ratio"), 5.0))
        estimates["loan_amount"] = max(0, round_half_up(price * (1 - equity_ratio / 100)))

    structural = {
        "interest_rate": lambda: suggest_interest_rate(structure),
        "loan_duration": lambda: suggest_loan_duration(structure, age),
        "occupancy_rate": lambda: suggest_occupancy_rate(age),
        "operating_expense_rate": lambda: suggest_operating_expense_rate(structure, age),
    }
    for name, suggest in structural.items():
        if _is_missing(values.get(name)):
            suggestion = suggest()
            if suggestion is not None:
                estimates[name] = suggestion

    for name, default in FIXED_DEFAULTS.items():
        if _is_missing(values.get(name)):
            estimates[name] = default

    auto_filled = [name for name, value in estimates.items() if values.get(name) != value]
    if auto_filled:
        logger.debug("Estimated %d missing inputs: %s", len(auto_filled), ", ".join(auto_filled))

    values.update(estimates)
    return EstimatedInputs(inputs=PropertyInput.from_dict(values), auto_filled=auto_filled)
