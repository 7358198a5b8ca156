"""Useful life and straight-line depreciation for building body and equipment."""

import math
from dataclasses import dataclass

from ..models.lookups import ELAPSED_LIFE_FACTOR, StructureType, get_statutory_life
from ..models.property import PropertyInput


def calculate_useful_life(structure: StructureType, age: float) -> int:
    """Calculate remaining depreciation life for a used building.

    Uses the simplified method:
    - Past statutory life: floor(life x 0.2)
    - Otherwise: floor((life - age) + age x 0.2)

    Args:
        structure: Structural class.
        age: Current building age in years.

    Returns:
        Remaining useful life in years, never less than 1.

    Example:
        >>> calculate_useful_life(StructureType.RC, 0)
        47
        >>> calculate_useful_life(StructureType.WOOD, 30)
        4
    """
    statutory_life = get_statutory_life(structure)

    if age >= statutory_life:
        life = math.floor(statutory_life * ELAPSED_LIFE_FACTOR)
    else:
        life = math.floor((statutory_life - age) + age * ELAPSED_LIFE_FACTOR)

    return max(1, life)


@dataclass(frozen=True)
class DepreciationSchedule:
    """Depreciable bases and lives for one property."""

    body_price: float
    body_life: int
    equipment_price: float
    equipment_life: float  # 0 when the equipment split is disabled

    def body_for_year(self, year: int) -> float:
        """Body depreciation for a simulation year (0 after the life ends)."""
        return self.body_price / self.body_life if year <= self.body_life else 0.0

    def equipment_for_year(self, year: int) -> float:
        """Equipment depreciation for a simulation year."""
        if self.equipment_life <= 0 or year > self.equipment_life:
            return 0.0
        return self.equipment_price / self.equipment_life


def build_depreciation_schedule(inputs: PropertyInput) -> DepreciationSchedule:
    """Split the building price into body and equipment and derive lives.

    Args:
        inputs: Normalized property inputs.

    Returns:
        DepreciationSchedule for the holding period.
    """
    equipment_life = (
        max(1.0, inputs.equipment_useful_life) if inputs.enable_equipment_split else 0.0
    )

    return DepreciationSchedule(
        body_price=inputs.body_price,
        body_life=calculate_useful_life(inputs.structure, inputs.building_age),
        equipment_price=inputs.equipment_price,
        equipment_life=equipment_life,
    )
