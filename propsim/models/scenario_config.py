"""Stress scenario configuration and its merge onto the base inputs."""

from dataclasses import dataclass
from typing import Optional

from .property import PropertyInput, round_half_up, safe_number


@dataclass(frozen=True)
class ScenarioConfig:
    """Sparse overrides for a stressed run.

    Any field left as None falls back to the matching ``scenario_*`` field on
    PropertyInput when the scenario is resolved.
    """

    interest_rate_shock_enabled: Optional[bool] = None
    interest_rate_shock_year: Optional[float] = None
    interest_rate_shock_delta: Optional[float] = None  # Percentage points

    rent_curve_enabled: Optional[bool] = None
    rent_decline_early_rate: Optional[float] = None  # % per 2-year block
    rent_decline_late_rate: Optional[float] = None
    rent_decline_switch_year: Optional[float] = None

    occupancy_decline_enabled: Optional[bool] = None
    occupancy_decline_start_year: Optional[float] = None
    occupancy_decline_delta: Optional[float] = None  # Percentage points


@dataclass(frozen=True)
class ResolvedScenario:
    """Fully-resolved stress parameters consumed by the yearly loop."""

    shock_enabled: bool = False
    shock_year: int = 5
    shock_delta: float = 1.0

    rent_curve_enabled: bool = False
    rent_decline_early_rate: float = 0.0
    rent_decline_late_rate: float = 0.0
    rent_decline_switch_year: int = 10

    occupancy_decline_enabled: bool = False
    occupancy_decline_start_year: int = 10
    occupancy_decline_delta: float = 5.0

    @property
    def is_stressed(self) -> bool:
        """True if any stress is switched on."""
        return self.shock_enabled or self.rent_curve_enabled or self.occupancy_decline_enabled


def _pick(override, base):
    return base if override is None else override


def _year(value: float, fallback: float) -> int:
    return max(1, round_half_up(safe_number(value, fallback)))


def resolve_scenario(
    inputs: PropertyInput,
    scenario: Optional[ScenarioConfig] = None,
) -> ResolvedScenario:
    """Merge sparse overrides onto the inputs' scenario block.

    Args:
        inputs: Normalized base inputs.
        scenario: Overrides, or None for the unstressed baseline.

    Returns:
        ResolvedScenario with every field set. Years are rounded and
        floored at 1; missing rent curve rates fall back to the base
        decline rate.
    """
    base_decline = inputs.rent_decline_rate

    if scenario is None:
        return ResolvedScenario(
            rent_decline_early_rate=base_decline,
            rent_decline_late_rate=base_decline,
        )

    early = _pick(scenario.rent_decline_early_rate, inputs.scenario_rent_decline_early_rate)
    late = _pick(scenario.rent_decline_late_rate, inputs.scenario_rent_decline_late_rate)

    return ResolvedScenario(
        shock_enabled=bool(_pick(scenario.interest_rate_shock_enabled, inputs.scenario_enabled)),
        shock_year=_year(
            _pick(scenario.interest_rate_shock_year, inputs.scenario_interest_shock_year), 5
        ),
        shock_delta=safe_number(
            _pick(scenario.interest_rate_shock_delta, inputs.scenario_interest_shock_delta), 1.0
        ),
        rent_curve_enabled=bool(
            _pick(scenario.rent_curve_enabled, inputs.scenario_rent_curve_enabled)
        ),
        rent_decline_early_rate=safe_number(early, base_decline),
        rent_decline_late_rate=safe_number(late, base_decline),
        rent_decline_switch_year=_year(
            _pick(scenario.rent_decline_switch_year, inputs.scenario_rent_decline_switch_year), 10
        ),
        occupancy_decline_enabled=bool(
            _pick(scenario.occupancy_decline_enabled, inputs.scenario_occupancy_decline_enabled)
        ),
        occupancy_decline_start_year=_year(
            _pick(
                scenario.occupancy_decline_start_year,
                inputs.scenario_occupancy_decline_start_year,
            ),
            10,
        ),
        occupancy_decline_delta=safe_number(
            _pick(scenario.occupancy_decline_delta, inputs.scenario_occupancy_decline_delta), 5.0
        ),
    )


def scenario_from_inputs(inputs: PropertyInput) -> ScenarioConfig:
    """Build the stress scenario described by the inputs' own scenario block."""
    return ScenarioConfig(
        interest_rate_shock_enabled=inputs.scenario_enabled,
        interest_rate_shock_year=inputs.scenario_interest_shock_year,
        interest_rate_shock_delta=inputs.scenario_interest_shock_delta,
        rent_curve_enabled=inputs.scenario_rent_curve_enabled,
        rent_decline_early_rate=inputs.scenario_rent_decline_early_rate,
        rent_decline_late_rate=inputs.scenario_rent_decline_late_rate,
        rent_decline_switch_year=inputs.scenario_rent_decline_switch_year,
        occupancy_decline_enabled=inputs.scenario_occupancy_decline_enabled,
        occupancy_decline_start_year=inputs.scenario_occupancy_decline_start_year,
        occupancy_decline_delta=inputs.scenario_occupancy_decline_delta,
    )
