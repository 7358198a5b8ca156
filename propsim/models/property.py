"""Property data model containing all deal inputs for a simulation run."""

import logging
import math
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from .lookups import OerPropertyType, StructureType

logger = logging.getLogger(__name__)


class VacancyModel(Enum):
    """How vacancy beyond the baseline occupancy is modeled."""

    FIXED = "FIXED"  # No extra loss
    CYCLE = "CYCLE"  # Lose N months every M years
    PROBABILITY = "PROBABILITY"  # Expected loss spread over every year


class TaxType(Enum):
    """Who owns the property for tax purposes."""

    INDIVIDUAL = "INDIVIDUAL"
    CORPORATE = "CORPORATE"


class OerMode(Enum):
    """Operating expense calculation mode."""

    SIMPLE = "SIMPLE"  # Single ratio of effective income
    DETAILED = "DETAILED"  # Itemized rate, fixed and event expenses


class OerBase(Enum):
    """Income base for a rate-driven expense item."""

    GPR = "GPR"  # Gross potential rent
    EGI = "EGI"  # Effective gross income


class OerEventMode(Enum):
    """Whether a periodic expense is reserved annually or paid when it occurs."""

    RESERVE = "RESERVE"
    CASH = "CASH"


def safe_number(value: Any, fallback: float) -> float:
    """Return value as a finite float, or fallback if it is not one."""
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    return number if math.isfinite(number) else fallback


# Strings read as False when stored snapshots hold booleans as text
_FALSE_STRINGS = frozenset({"", "0", "false", "no", "off"})


def safe_bool(value: Any) -> bool:
    """Return value as a bool, reading "false", "0", "no" and "off" as False."""
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (2.5 -> 3, -2.5 -> -2).

    Currency amounts are rounded this way rather than with Python's
    banker's rounding.
    """
    return math.floor(value + 0.5)


def _coerce_enum(enum_cls, value, default):
    if isinstance(value, enum_cls):
        return value
    if value is None:
        return default
    try:
        return enum_cls(value)
    except ValueError:
        raise ValueError(f"Unknown {enum_cls.__name__} value: {value!r}") from None


@dataclass(frozen=True)
class RepairEvent:
    """A discrete repair outlay in a given simulation year."""

    year: int
    amount: float
    label: str = ""

    def __post_init__(self):
        object.__setattr__(self, "year", round_half_up(safe_number(self.year, 0.0)))
        object.__setattr__(self, "amount", safe_number(self.amount, 0.0))


@dataclass(frozen=True)
class OerRateItem:
    """Expense charged as a percentage of GPR or EGI."""

    label: str
    rate: float  # %
    base: OerBase = OerBase.GPR
    enabled: bool = True

    def __post_init__(self):
        object.__setattr__(self, "rate", max(0.0, safe_number(self.rate, 0.0)))
        object.__setattr__(self, "base", _coerce_enum(OerBase, self.base, OerBase.GPR))
        object.__setattr__(self, "enabled", safe_bool(self.enabled))


@dataclass(frozen=True)
class OerFixedItem:
    """Expense with a fixed annual amount."""

    label: str
    annual_amount: float
    enabled: bool = True

    def __post_init__(self):
        object.__setattr__(self, "annual_amount", max(0.0, safe_number(self.annual_amount, 0.0)))
        object.__setattr__(self, "enabled", safe_bool(self.enabled))


@dataclass(frozen=True)
class OerEventItem:
    """Periodic expense (e.g., repainting every N years)."""

    label: str
    amount: float
    interval_years: float = 1
    start_year: float = 1
    mode: OerEventMode = OerEventMode.RESERVE
    enabled: bool = True

    def __post_init__(self):
        object.__setattr__(self, "amount", max(0.0, safe_number(self.amount, 0.0)))
        object.__setattr__(self, "interval_years", safe_number(self.interval_years, 0.0))
        object.__setattr__(self, "start_year", safe_number(self.start_year, 1.0))
        object.__setattr__(
            self, "mode", _coerce_enum(OerEventMode, self.mode, OerEventMode.RESERVE)
        )
        object.__setattr__(self, "enabled", safe_bool(self.enabled))


# Substitutes for non-finite numeric inputs. Fields not listed fall back to 0.
NUMERIC_FALLBACKS: Mapping[str, float] = {
    "land_evaluation_rate": 70.0,
    "building_evaluation_rate": 50.0,
    "land_tax_reduction_rate": 16.67,
    "property_tax_rate": 1.7,
    "new_build_tax_reduction_rate": 50.0,
    "acquisition_tax_rate": 3.0,
    "acquisition_land_reduction_rate": 50.0,
    "equipment_useful_life": 15.0,
    "occupancy_rate": 100.0,
    "vacancy_cycle_years": 4.0,
    "scenario_interest_shock_year": 5.0,
    "scenario_interest_shock_delta": 1.0,
    "scenario_rent_decline_switch_year": 10.0,
    "scenario_occupancy_decline_start_year": 10.0,
    "scenario_occupancy_decline_delta": 5.0,
}

# Band overrides stay None when absent so the base occupancy applies
_OPTIONAL_NUMERIC_FIELDS = (
    "occupancy_rate_year_1_to_2",
    "occupancy_rate_year_3_to_10",
    "occupancy_rate_year_11_to_20",
    "occupancy_rate_year_20_to_30",
    "occupancy_rate_year_30_to_40",
    "scenario_rent_decline_early_rate",
    "scenario_rent_decline_late_rate",
)

_ENUM_FIELDS = {
    "structure": (StructureType, StructureType.RC),
    "vacancy_model": (VacancyModel, VacancyModel.FIXED),
    "tax_type": (TaxType, TaxType.INDIVIDUAL),
    "oer_mode": (OerMode, OerMode.SIMPLE),
}

_ITEM_FIELDS = {
    "repair_events": RepairEvent,
    "oer_rate_items": OerRateItem,
    "oer_fixed_items": OerFixedItem,
    "oer_event_items": OerEventItem,
}


@dataclass(frozen=True)
class PropertyInput:
    """Complete, immutable deal parameters for one simulation.

    Percent fields use whole-number percents (``interest_rate=2.0`` is 2%).
    Construction normalizes the record: any numeric field that is NaN,
    infinite or not a number is replaced by its entry in NUMERIC_FALLBACKS
    (0 when absent), so the yearly loop never sees a non-finite value.
    """

    # === Acquisition ===
    price: float = 30_000_000.0  # Building + land
    building_ratio: float = 60.0  # Building share of price (%)
    misc_cost_rate: float = 0.0  # Brokerage and other closing costs (% of price)
    water_contribution_rate: float = 0.2  # % of price
    fire_insurance_rate: float = 0.4  # % of building price
    loan_fee_rate: float = 2.2  # % of loan amount
    registration_cost_rate: float = 1.2  # % of price
    acquisition_tax_rate: float = 3.0  # % of evaluation
    acquisition_land_reduction_rate: float = 50.0  # Land evaluation compression (%)

    # === Tax Evaluation ===
    land_evaluation_rate: float = 70.0  # Assessed land value / land price (%)
    building_evaluation_rate: float = 50.0  # Assessed building value / building price (%)
    land_tax_reduction_rate: float = 16.67  # Residential land special reduction (%)
    property_tax_rate: float = 1.7  # Fixed asset + city planning tax (%)
    new_build_tax_reduction_enabled: bool = False
    new_build_tax_reduction_years: float = 0.0
    new_build_tax_reduction_rate: float = 50.0  # Share of building tax still charged (%)

    # === Structure ===
    structure: StructureType = StructureType.RC
    building_age: float = 10.0

    # === Equipment Split ===
    enable_equipment_split: bool = False
    equipment_ratio: float = 20.0  # % of building price
    equipment_useful_life: float = 15.0  # Years

    # === Financing ===
    equity_ratio: float = 5.0  # %
    loan_amount: float = 28_500_000.0
    interest_rate: float = 1.6  # Annual %
    loan_duration: float = 30.0  # Years

    # === Income ===
    monthly_rent: float = 180_000.0
    occupancy_rate: float = 95.0  # %
    rent_decline_rate: float = 0.5  # % per 2-year block
    occupancy_detail_enabled: bool = False
    occupancy_rate_year_1_to_2: Optional[float] = None
    occupancy_rate_year_3_to_10: Optional[float] = None
    occupancy_rate_year_11_to_20: Optional[float] = None
    occupancy_rate_year_20_to_30: Optional[float] = None
    occupancy_rate_year_30_to_40: Optional[float] = None
    vacancy_model: VacancyModel = VacancyModel.FIXED
    vacancy_cycle_years: float = 4.0
    vacancy_cycle_months: float = 3.0
    vacancy_probability: float = 20.0  # Annual %
    vacancy_probability_months: float = 2.0

    # === Operating Expenses ===
    operating_expense_rate: float = 15.0  # % of effective income
    oer_mode: OerMode = OerMode.SIMPLE
    oer_template_type: Optional[OerPropertyType] = None
    unit_count: float = 0.0
    oer_rate_items: Tuple[OerRateItem, ...] = ()
    oer_fixed_items: Tuple[OerFixedItem, ...] = ()
    oer_event_items: Tuple[OerEventItem, ...] = ()
    oer_leasing_enabled: bool = True
    oer_leasing_months: float = 2.0
    oer_leasing_tenancy_years: float = 2.0

    # === Repairs ===
    repair_events: Tuple[RepairEvent, ...] = ()

    # === Tax Regime ===
    tax_type: TaxType = TaxType.INDIVIDUAL
    other_income: float = 0.0  # Salary and other non-property income
    corporate_minimum_tax: float = 70_000.0  # Per-capita levy charged every year

    # === Exit ===
    exit_enabled: bool = False
    exit_year: float = 10.0
    exit_cap_rate: float = 7.0  # %
    exit_brokerage_rate: float = 3.0  # %
    exit_brokerage_fixed: float = 600_000.0
    exit_other_cost_rate: float = 1.0  # %
    exit_short_term_tax_rate: float = 39.0  # % (held 5 years or less)
    exit_long_term_tax_rate: float = 20.0  # %
    exit_discount_rate: float = 4.0  # % for NPV

    # === Stress Scenario ===
    scenario_enabled: bool = False  # Interest rate shock
    scenario_interest_shock_year: float = 5.0
    scenario_interest_shock_delta: float = 1.0  # Percentage points
    scenario_rent_curve_enabled: bool = False
    scenario_rent_decline_early_rate: Optional[float] = None
    scenario_rent_decline_late_rate: Optional[float] = None
    scenario_rent_decline_switch_year: float = 10.0
    scenario_occupancy_decline_enabled: bool = False
    scenario_occupancy_decline_start_year: float = 10.0
    scenario_occupancy_decline_delta: float = 5.0  # Percentage points

    def __post_init__(self):
        for f in fields(self):
            name = f.name
            value = getattr(self, name)

            if name in _ENUM_FIELDS:
                enum_cls, default = _ENUM_FIELDS[name]
                object.__setattr__(self, name, _coerce_enum(enum_cls, value, default))
            elif name == "oer_template_type":
                if value is not None:
                    object.__setattr__(
                        self, name, _coerce_enum(OerPropertyType, value, None)
                    )
            elif name in _ITEM_FIELDS:
                object.__setattr__(self, name, _coerce_items(_ITEM_FIELDS[name], value))
            elif f.type is bool:
                object.__setattr__(self, name, safe_bool(value))
            elif name in _OPTIONAL_NUMERIC_FIELDS:
                if value is not None:
                    number = safe_number(value, math.nan)
                    object.__setattr__(self, name, number if math.isfinite(number) else None)
            else:
                number = safe_number(value, math.nan)
                if not math.isfinite(number):
                    number = NUMERIC_FALLBACKS.get(name, 0.0)
                    logger.warning(
                        "Non-finite value %r for %s replaced with %s", value, name, number
                    )
                object.__setattr__(self, name, number)

        if self.property_tax_rate <= 0:
            object.__setattr__(self, "property_tax_rate", NUMERIC_FALLBACKS["property_tax_rate"])

    # === Derived values ===

    @property
    def building_price(self) -> float:
        """Building share of the purchase price."""
        return self.price * (self.building_ratio / 100)

    @property
    def land_price(self) -> float:
        """Land share of the purchase price (never negative)."""
        return max(0.0, self.price - self.building_price)

    @property
    def land_ratio(self) -> float:
        """Land price / total price as a decimal (0 for a zero price)."""
        return self.land_price / self.price if self.price > 0 else 0.0

    @property
    def equipment_price(self) -> float:
        """Equipment portion of the building price, when split out."""
        if not self.enable_equipment_split:
            return 0.0
        return self.building_price * (self.equipment_ratio / 100)

    @property
    def body_price(self) -> float:
        """Structural (body) portion of the building price."""
        return self.building_price - self.equipment_price

    def validate(self) -> list[str]:
        """Validate inputs and return list of problems.

        Returns:
            List of validation messages. Empty if the inputs look sane.
        """
        errors = []

        if self.price < 0:
            errors.append(f"price must be non-negative, got {self.price:,.0f}")
        if not 0 <= self.building_ratio <= 100:
            errors.append(f"building_ratio must be 0-100, got {self.building_ratio}")
        if not 0 <= self.occupancy_rate <= 100:
            errors.append(f"occupancy_rate must be 0-100, got {self.occupancy_rate}")
        if self.building_age < 0:
            errors.append(f"building_age must be non-negative, got {self.building_age}")
        if self.loan_amount < 0:
            errors.append(f"loan_amount must be non-negative, got {self.loan_amount:,.0f}")
        if self.loan_amount > 0 and self.loan_duration <= 0:
            errors.append("loan_duration must be positive when a loan is taken")
        if self.price > 0 and self.loan_amount > self.price * 1.2:
            errors.append(
                f"loan_amount ({self.loan_amount:,.0f}) exceeds 120% of price "
                f"({self.price:,.0f})"
            )
        if self.interest_rate < 0:
            errors.append(f"interest_rate must be non-negative, got {self.interest_rate}")
        if self.enable_equipment_split and not 0 <= self.equipment_ratio <= 100:
            errors.append(f"equipment_ratio must be 0-100, got {self.equipment_ratio}")
        if self.exit_enabled:
            if not 1 <= self.exit_year <= 35:
                errors.append(f"exit_year must be 1-35, got {self.exit_year}")
            if self.exit_cap_rate <= 0:
                errors.append("exit_cap_rate must be positive when exit is enabled")
        for event in self.repair_events:
            if not 1 <= event.year <= 35:
                errors.append(f"repair event year {event.year} is outside 1-35")

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot of the inputs as plain values (enums as their strings)."""
        return _plain(asdict(self))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PropertyInput":
        """Build inputs from a stored snapshot, ignoring unknown keys.

        Args:
            data: Field name -> value. Item lists may hold dicts.

        Returns:
            Normalized PropertyInput.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        return cls(**kwargs)


def _coerce_items(item_cls, value) -> tuple:
    if not value:
        return ()
    items = []
    for item in value:
        if isinstance(item, item_cls):
            items.append(item)
        elif isinstance(item, Mapping):
            known = {f.name for f in fields(item_cls)}
            items.append(item_cls(**{k: v for k, v in item.items() if k in known}))
    return tuple(items)


def _plain(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value
