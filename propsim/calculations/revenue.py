"""Rental income: rent decline, occupancy, vacancy overlay, and repair events."""

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from ..models.property import PropertyInput, RepairEvent, VacancyModel, round_half_up
from ..models.scenario_config import ResolvedScenario


@dataclass(frozen=True)
class IncomeResult:
    """Income figures for one simulation year."""

    gross_potential_rent: float  # Annual rent at full occupancy after decline
    base_occupancy: float  # % before stress and vacancy overlay
    effective_occupancy: float  # % after occupancy stress
    vacancy_loss: float  # Fraction of the year lost to the vacancy model
    adjusted_occupancy: float  # % actually applied
    effective_income: float


def calculate_decline_factor(
    year: int,
    base_decline_rate: float,
    scenario: ResolvedScenario,
) -> float:
    """Calculate the cumulative rent decline factor for a year.

    Rent steps down once per completed 2-year block. With the two-phase
    curve, the early rate applies to blocks up to the switch year and the
    late rate to blocks after it.

    Args:
        year: Simulation year (1-indexed).
        base_decline_rate: Single-phase decline per 2-year block (%).
        scenario: Resolved scenario carrying the two-phase curve.

    Returns:
        Multiplier applied to base annual rent (1.0 in year 1).
    """
    if scenario.rent_curve_enabled:
        switch_year = scenario.rent_decline_switch_year
        early_blocks = math.floor((min(year, switch_year) - 1) / 2)
        late_blocks = math.floor(max(0, year - switch_year) / 2)
        return (
            (1 - scenario.rent_decline_early_rate / 100) ** early_blocks
            * (1 - scenario.rent_decline_late_rate / 100) ** late_blocks
        )

    return (1 - base_decline_rate / 100) ** math.floor((year - 1) / 2)


def _band_rate(value: Optional[float], fallback: float) -> float:
    return value if value is not None else fallback


def occupancy_for_age(inputs: PropertyInput, age: float) -> float:
    """Get the base occupancy rate for a building age.

    When age-banded occupancy is enabled, the band covering the age
    applies; any missing band falls back to the flat occupancy rate.
    """
    base = inputs.occupancy_rate
    if not inputs.occupancy_detail_enabled:
        return base

    safe_age = max(0, math.floor(age))
    if safe_age <= 2:
        return _band_rate(inputs.occupancy_rate_year_1_to_2, base)
    if safe_age <= 10:
        return _band_rate(inputs.occupancy_rate_year_3_to_10, base)
    if safe_age <= 20:
        return _band_rate(inputs.occupancy_rate_year_11_to_20, base)
    if safe_age <= 30:
        return _band_rate(inputs.occupancy_rate_year_20_to_30, base)
    return _band_rate(inputs.occupancy_rate_year_30_to_40, base)


def calculate_vacancy_loss(inputs: PropertyInput, year: int) -> float:
    """Fraction of the year's rent lost to the vacancy model.

    - FIXED: no extra loss.
    - CYCLE: every N years, lose the configured months of rent.
    - PROBABILITY: probability x months / 12, applied every year.
    """
    if inputs.vacancy_model == VacancyModel.CYCLE:
        cycle_years = max(1, round_half_up(inputs.vacancy_cycle_years))
        cycle_months = max(0.0, inputs.vacancy_cycle_months)
        if year % cycle_years == 0:
            return cycle_months / 12
        return 0.0

    if inputs.vacancy_model == VacancyModel.PROBABILITY:
        probability = max(0.0, inputs.vacancy_probability) / 100
        months = max(0.0, inputs.vacancy_probability_months)
        return probability * (months / 12)

    return 0.0


def calculate_income(
    inputs: PropertyInput,
    year: int,
    scenario: ResolvedScenario,
) -> IncomeResult:
    """Calculate a year's effective rental income.

    Effective income = annual rent x decline factor x adjusted occupancy,
    where adjusted occupancy = clamp(occupancy x (1 - vacancy loss), 0, 100).

    Args:
        inputs: Normalized property inputs.
        year: Simulation year (1-indexed).
        scenario: Resolved stress scenario.

    Returns:
        IncomeResult for the year.

    Example:
        >>> result = calculate_income(inputs, 1, baseline)  # 100k/mo at 95%
        >>> result.effective_income
        1140000.0
    """
    base_annual_rent = inputs.monthly_rent * 12
    age_at_year = inputs.building_age + (year - 1)
    base_occupancy = occupancy_for_age(inputs, age_at_year)

    if scenario.occupancy_decline_enabled and year >= scenario.occupancy_decline_start_year:
        effective_occupancy = max(0.0, base_occupancy - scenario.occupancy_decline_delta)
    else:
        effective_occupancy = base_occupancy

    vacancy_loss = calculate_vacancy_loss(inputs, year)
    adjusted_occupancy = min(100.0, max(0.0, effective_occupancy * (1 - vacancy_loss)))

    gross_potential_rent = base_annual_rent * calculate_decline_factor(
        year, inputs.rent_decline_rate, scenario
    )

    return IncomeResult(
        gross_potential_rent=gross_potential_rent,
        base_occupancy=base_occupancy,
        effective_occupancy=effective_occupancy,
        vacancy_loss=vacancy_loss,
        adjusted_occupancy=adjusted_occupancy,
        effective_income=gross_potential_rent * (adjusted_occupancy / 100),
    )


def calculate_repair_cost(events: Iterable[RepairEvent], year: int) -> float:
    """Sum repair outlays scheduled for a year (negative amounts count as 0)."""
    return sum(max(0.0, event.amount) for event in events if event.year == year)
