"""Data models for the income property simulation engine."""

from .lookups import (
    StructureType,
    OerPropertyType,
    TaxBracket,
    OerTemplate,
    STATUTORY_USEFUL_LIFE,
    INCOME_TAX_BRACKETS,
    RESIDENT_TAX_RATE,
    OER_TEMPLATES,
)
from .property import (
    VacancyModel,
    TaxType,
    OerMode,
    OerBase,
    OerEventMode,
    RepairEvent,
    OerRateItem,
    OerFixedItem,
    OerEventItem,
    PropertyInput,
    NUMERIC_FALLBACKS,
    safe_number,
    safe_bool,
    round_half_up,
)
from .scenario_config import (
    ScenarioConfig,
    ResolvedScenario,
    resolve_scenario,
    scenario_from_inputs,
)

__all__ = [
    "StructureType",
    "OerPropertyType",
    "TaxBracket",
    "OerTemplate",
    "STATUTORY_USEFUL_LIFE",
    "INCOME_TAX_BRACKETS",
    "RESIDENT_TAX_RATE",
    "OER_TEMPLATES",
    "VacancyModel",
    "TaxType",
    "OerMode",
    "OerBase",
    "OerEventMode",
    "RepairEvent",
    "OerRateItem",
    "OerFixedItem",
    "OerEventItem",
    "PropertyInput",
    "NUMERIC_FALLBACKS",
    "safe_number",
    "safe_bool",
    "round_half_up",
    "ScenarioConfig",
    "ResolvedScenario",
    "resolve_scenario",
    "scenario_from_inputs",
]
