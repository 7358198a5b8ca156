"""Lookup tables for structures, income tax brackets, and expense templates."""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple


class StructureType(Enum):
    """Structural class of the building (drives statutory depreciation life)."""

    RC = "RC"  # Reinforced concrete
    SRC = "SRC"  # Steel reinforced concrete
    S_HEAVY = "S_HEAVY"  # Heavy steel frame (members > 4mm)
    S_LIGHT = "S_LIGHT"  # Light steel frame (members <= 3mm)
    WOOD = "WOOD"


class OerPropertyType(Enum):
    """Property type used to pick an operating expense ratio template."""

    UNIT = "UNIT"  # Single condominium unit
    WOOD_APARTMENT = "WOOD_APARTMENT"
    STEEL_APARTMENT = "STEEL_APARTMENT"
    RC_APARTMENT = "RC_APARTMENT"


# Statutory useful life in years by structure
STATUTORY_USEFUL_LIFE: Mapping[StructureType, int] = MappingProxyType({
    StructureType.RC: 47,
    StructureType.SRC: 47,
    StructureType.S_HEAVY: 34,
    StructureType.S_LIGHT: 19,
    StructureType.WOOD: 22,
})

# Simplified method: share of elapsed years that still counts toward life
ELAPSED_LIFE_FACTOR = 0.2


@dataclass(frozen=True)
class TaxBracket:
    """One bracket of the progressive income tax table."""

    up_to: float  # Inclusive upper bound of taxable income
    rate: float  # Marginal rate (decimal)
    deduction: float  # Quick-calculation deduction


INCOME_TAX_BRACKETS: Tuple[TaxBracket, ...] = (
    TaxBracket(up_to=1_950_000, rate=0.05, deduction=0),
    TaxBracket(up_to=3_300_000, rate=0.10, deduction=97_500),
    TaxBracket(up_to=6_950_000, rate=0.20, deduction=427_500),
    TaxBracket(up_to=9_000_000, rate=0.23, deduction=636_000),
    TaxBracket(up_to=18_000_000, rate=0.33, deduction=1_536_000),
    TaxBracket(up_to=40_000_000, rate=0.40, deduction=2_796_000),
    TaxBracket(up_to=float("inf"), rate=0.45, deduction=4_796_000),
)

RESIDENT_TAX_RATE = 0.10

# Corporate regime: lower rate applies when income is at or below threshold
CORPORATE_TAX_THRESHOLD = 8_000_000
CORPORATE_LOWER_RATE = 0.15
CORPORATE_UPPER_RATE = 0.23


@dataclass(frozen=True)
class OerTemplate:
    """Operating expense ratio (%, excluding consumption tax) by age band."""

    new: float  # Age 0
    mid: float  # Age 10
    old: float  # Age 20+


OER_TEMPLATES: Mapping[OerPropertyType, OerTemplate] = MappingProxyType({
    OerPropertyType.UNIT: OerTemplate(new=16, mid=18, old=22),
    OerPropertyType.WOOD_APARTMENT: OerTemplate(new=11, mid=16, old=24),
    OerPropertyType.STEEL_APARTMENT: OerTemplate(new=14, mid=20, old=26),
    OerPropertyType.RC_APARTMENT: OerTemplate(new=15, mid=21, old=29),
})


@dataclass(frozen=True)
class BuildingRatioBand:
    """Suggested building share of price for buildings up to max_age."""

    max_age: float
    ratio: float  # %


def _ratio_bands(*ratios: float) -> Tuple[BuildingRatioBand, ...]:
    ages = (5, 15, 25, 35, float("inf"))
    return tuple(BuildingRatioBand(max_age=a, ratio=r) for a, r in zip(ages, ratios))


# Estimate tables for partially-known listings
BUILDING_RATIO_TABLE: Mapping[StructureType, Tuple[BuildingRatioBand, ...]] = MappingProxyType({
    StructureType.RC: _ratio_bands(70, 60, 50, 40, 30),
    StructureType.SRC: _ratio_bands(70, 60, 50, 40, 30),
    StructureType.S_HEAVY: _ratio_bands(65, 55, 45, 35, 25),
    StructureType.S_LIGHT: _ratio_bands(55, 45, 35, 25, 15),
    StructureType.WOOD: _ratio_bands(50, 40, 30, 20, 10),
})

SUGGESTED_INTEREST_RATE: Mapping[StructureType, float] = MappingProxyType({
    StructureType.RC: 1.6,
    StructureType.SRC: 1.6,
    StructureType.S_HEAVY: 1.8,
    StructureType.S_LIGHT: 2.0,
    StructureType.WOOD: 2.2,
})

SUGGESTED_OPERATING_EXPENSE_RATE: Mapping[StructureType, float] = MappingProxyType({
    StructureType.RC: 15,
    StructureType.SRC: 15,
    StructureType.S_HEAVY: 17,
    StructureType.S_LIGHT: 20,
    StructureType.WOOD: 22,
})

# Years lenders typically allow beyond the remaining statutory life
LOAN_DURATION_BONUS: Mapping[StructureType, int] = MappingProxyType({
    StructureType.RC: 8,
    StructureType.SRC: 8,
    StructureType.S_HEAVY: 10,
    StructureType.S_LIGHT: 12,
    StructureType.WOOD: 15,
})


def get_statutory_life(structure: StructureType) -> int:
    """Get the statutory useful life for a structure.

    Args:
        structure: Structural class, or its string value.

    Returns:
        Statutory life in years.

    Raises:
        ValueError: If the structure is not a known StructureType value.
    """
    return STATUTORY_USEFUL_LIFE[StructureType(structure)]


def find_tax_bracket(taxable_income: float) -> TaxBracket:
    """Get the bracket whose upper bound first covers the income."""
    for bracket in INCOME_TAX_BRACKETS:
        if taxable_income <= bracket.up_to:
            return bracket
    return INCOME_TAX_BRACKETS[-1]
