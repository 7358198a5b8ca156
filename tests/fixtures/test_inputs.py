"""Reference deals used across the test suite."""

from propsim.models.lookups import StructureType
from propsim.models.property import PropertyInput, VacancyModel


def get_reference_inputs(**overrides) -> PropertyInput:
    """Get the reference deal: new RC building, 20M loan at 2% over 25 years.

    These inputs should produce:
    - Useful life: 47 years (depreciation runs through year 35)
    - Monthly payment: ~84,771
    - Year-1 income: 1,140,000 (100k/month at 95%, no decline)

    Operating expense rate is 20% so it does not coincide with the RC
    template rate at age 0 (which would switch to age-tracking).

    Returns:
        PropertyInput for the reference deal.
    """
    params = dict(
        # Acquisition
        price=24_000_000,
        building_ratio=60,
        structure=StructureType.RC,
        building_age=0,

        # Financing
        loan_amount=20_000_000,
        interest_rate=2.0,
        loan_duration=25,

        # Income
        monthly_rent=100_000,
        occupancy_rate=95,
        rent_decline_rate=0,
        vacancy_model=VacancyModel.FIXED,

        # Operating
        operating_expense_rate=20,
    )
    params.update(overrides)
    return PropertyInput(**params)


def get_exit_inputs(**overrides) -> PropertyInput:
    """Get the reference deal with a sale in year 10 at a 5% cap rate."""
    params = dict(
        exit_enabled=True,
        exit_year=10,
        exit_cap_rate=5.0,
        exit_brokerage_rate=3.0,
        exit_brokerage_fixed=600_000,
        exit_other_cost_rate=1.0,
        exit_short_term_tax_rate=39.0,
        exit_long_term_tax_rate=20.0,
        exit_discount_rate=4.0,
    )
    params.update(overrides)
    return get_reference_inputs(**params)


def get_stressed_inputs(**overrides) -> PropertyInput:
    """Get the reference deal with every stress switched on in its scenario block.

    - Rate shock: +1.5 points from year 5
    - Rent curve: 2% per block to year 10, 1% after
    - Occupancy: -10 points from year 8
    """
    params = dict(
        rent_decline_rate=1.0,
        scenario_enabled=True,
        scenario_interest_shock_year=5,
        scenario_interest_shock_delta=1.5,
        scenario_rent_curve_enabled=True,
        scenario_rent_decline_early_rate=2.0,
        scenario_rent_decline_late_rate=1.0,
        scenario_rent_decline_switch_year=10,
        scenario_occupancy_decline_enabled=True,
        scenario_occupancy_decline_start_year=8,
        scenario_occupancy_decline_delta=10,
    )
    params.update(overrides)
    return get_exit_inputs(**params)
