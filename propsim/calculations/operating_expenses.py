"""Operating expense calculations (simple ratio or itemized)."""

import math
from typing import Iterable

from ..models.lookups import OER_TEMPLATES, OerPropertyType, StructureType
from ..models.property import (
    OerBase,
    OerEventItem,
    OerEventMode,
    OerFixedItem,
    OerMode,
    OerRateItem,
    PropertyInput,
    round_half_up,
)

# A simple-mode rate this close to the template is treated as "use template"
TEMPLATE_MATCH_TOLERANCE = 0.01


def infer_oer_property_type(structure: StructureType, unit_count: float) -> OerPropertyType:
    """Pick an expense template from structure and unit count."""
    if 0 < unit_count <= 1:
        return OerPropertyType.UNIT
    if structure == StructureType.WOOD:
        return OerPropertyType.WOOD_APARTMENT
    if structure in (StructureType.S_HEAVY, StructureType.S_LIGHT):
        return OerPropertyType.STEEL_APARTMENT
    return OerPropertyType.RC_APARTMENT


def get_oer_rate_for_age(property_type: OerPropertyType, age: float) -> float:
    """Template expense ratio (%) for a building age.

    Interpolates linearly from the NEW anchor (age 0) to MID (age 10) and
    from MID to OLD (age 20); flat at OLD beyond that.

    Args:
        property_type: Expense template to use.
        age: Building age in years.

    Returns:
        Operating expense ratio in percent.
    """
    template = OER_TEMPLATES[property_type]
    safe_age = max(0.0, age) if math.isfinite(age) else 0.0

    if safe_age <= 10:
        return template.new + (template.mid - template.new) * (safe_age / 10)
    if safe_age <= 20:
        return template.mid + (template.old - template.mid) * ((safe_age - 10) / 10)
    return template.old


def _rate_items_expense(
    items: Iterable[OerRateItem],
    gross_potential_rent: float,
    effective_income: float,
) -> float:
    total = 0.0
    for item in items:
        if not item.enabled:
            continue
        base = effective_income if item.base == OerBase.EGI else gross_potential_rent
        total += base * (item.rate / 100)
    return total


def _fixed_items_expense(items: Iterable[OerFixedItem]) -> float:
    return sum(item.annual_amount for item in items if item.enabled)


def _event_items_expense(items: Iterable[OerEventItem], year: int) -> float:
    total = 0.0
    for item in items:
        if not item.enabled:
            continue
        interval = max(1, round_half_up(item.interval_years))
        start_year = max(1, round_half_up(item.start_year))
        if item.mode == OerEventMode.CASH:
            if year >= start_year and (year - start_year) % interval == 0:
                total += item.amount
        else:
            total += item.amount / interval
    return total


def calculate_leasing_rate(months: float, tenancy_years: float) -> float:
    """Leasing cost as % of GPR: months of rent paid per average tenancy."""
    if months <= 0 or tenancy_years <= 0:
        return 0.0
    return (months / (tenancy_years * 12)) * 100


def calculate_detailed_expense(
    inputs: PropertyInput,
    year: int,
    gross_potential_rent: float,
    effective_income: float,
) -> float:
    """Sum itemized operating expenses for a year.

    Rate items + fixed items + event items (CASH in the year they fall,
    RESERVE spread evenly) + leasing cost on GPR.
    """
    leasing_rate = (
        calculate_leasing_rate(inputs.oer_leasing_months, inputs.oer_leasing_tenancy_years)
        if inputs.oer_leasing_enabled
        else 0.0
    )

    return (
        _rate_items_expense(inputs.oer_rate_items, gross_potential_rent, effective_income)
        + _fixed_items_expense(inputs.oer_fixed_items)
        + _event_items_expense(inputs.oer_event_items, year)
        + gross_potential_rent * (leasing_rate / 100)
    )


def calculate_operating_expense(
    inputs: PropertyInput,
    year: int,
    gross_potential_rent: float,
    effective_income: float,
) -> float:
    """Calculate a year's operating expense.

    In SIMPLE mode the expense is effective income x operating expense
    rate. If that rate equals the template rate for the building's age at
    purchase, the rate follows the template as the building ages.

    Args:
        inputs: Normalized property inputs.
        year: Simulation year (1-indexed).
        gross_potential_rent: Year's rent at full occupancy.
        effective_income: Year's rent after occupancy and vacancy.

    Returns:
        Operating expense for the year.
    """
    if inputs.oer_mode == OerMode.DETAILED:
        return calculate_detailed_expense(inputs, year, gross_potential_rent, effective_income)

    template_type = inputs.oer_template_type or infer_oer_property_type(
        inputs.structure, inputs.unit_count
    )
    rate = inputs.operating_expense_rate
    purchase_rate = get_oer_rate_for_age(template_type, inputs.building_age)

    if abs(rate - purchase_rate) < TEMPLATE_MATCH_TOLERANCE:
        age_at_year = inputs.building_age + (year - 1)
        rate = get_oer_rate_for_age(template_type, age_at_year)

    return effective_income * (rate / 100)
