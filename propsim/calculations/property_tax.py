"""Fixed asset tax and real estate acquisition tax estimates."""

from ..models.property import PropertyInput, round_half_up

# Annual decay of the building's assessed value (% per year of age)
BUILDING_EVALUATION_DECAY_RATE = 1.5


def calculate_land_evaluation(inputs: PropertyInput) -> float:
    """Assessed land value."""
    return inputs.land_price * (inputs.land_evaluation_rate / 100)


def calculate_building_evaluation(inputs: PropertyInput) -> float:
    """Assessed building value at purchase."""
    return inputs.building_price * (inputs.building_evaluation_rate / 100)


def calculate_property_tax(inputs: PropertyInput, year: int) -> int:
    """Estimate the annual fixed asset tax for a simulation year.

    Taxable value = land evaluation x residential land reduction
                  + building evaluation x age decay x new-build reduction

    The building evaluation decays 1.5% per year of age (floored at zero).
    While the building is younger than the new-build reduction period,
    only the reduction rate share of the building tax is charged.

    Args:
        inputs: Normalized property inputs.
        year: Simulation year (1-indexed).

    Returns:
        Tax amount, rounded to the currency unit.

    Example:
        >>> calculate_property_tax(inputs, year=1)  # 30M, 60% building, new
        176805
    """
    building_age = max(0, int(inputs.building_age))
    age_at_year = building_age + max(0, year - 1)

    decay_factor = max(0.0, 1 - (BUILDING_EVALUATION_DECAY_RATE / 100) * age_at_year)
    building_evaluation = calculate_building_evaluation(inputs) * decay_factor

    reduction_years = max(0, int(inputs.new_build_tax_reduction_years))
    in_reduction_period = (
        inputs.new_build_tax_reduction_enabled
        and reduction_years > 0
        and age_at_year < reduction_years
    )
    if in_reduction_period:
        reduction_rate = max(0.0, inputs.new_build_tax_reduction_rate)
        building_taxable = building_evaluation * (reduction_rate / 100)
    else:
        building_taxable = building_evaluation

    taxable_value = (
        calculate_land_evaluation(inputs) * (inputs.land_tax_reduction_rate / 100)
        + building_taxable
    )
    return round_half_up(taxable_value * (inputs.property_tax_rate / 100))


def calculate_acquisition_tax(inputs: PropertyInput) -> int:
    """Estimate the one-time real estate acquisition tax.

    Tax = (land evaluation x land reduction + building evaluation) x rate

    Args:
        inputs: Normalized property inputs.

    Returns:
        Tax amount, rounded to the currency unit.
    """
    base = (
        calculate_land_evaluation(inputs) * (inputs.acquisition_land_reduction_rate / 100)
        + calculate_building_evaluation(inputs)
    )
    return round_half_up(base * (inputs.acquisition_tax_rate / 100))
