"""Initial acquisition costs and required equity."""

from dataclasses import dataclass

from ..models.property import PropertyInput, round_half_up


@dataclass(frozen=True)
class AcquisitionCosts:
    """Closing costs paid at purchase (each rounded to the currency unit)."""

    misc_cost: int
    water_contribution: int
    fire_insurance: int
    loan_fee: int
    registration_cost: int

    @property
    def total(self) -> int:
        """Total initial costs."""
        return (
            self.misc_cost
            + self.water_contribution
            + self.fire_insurance
            + self.loan_fee
            + self.registration_cost
        )


def calculate_acquisition_costs(inputs: PropertyInput) -> AcquisitionCosts:
    """Calculate closing costs from their rates.

    Fire insurance is charged on the building price and the loan fee on the
    loan amount; every other cost is a share of the purchase price.

    Args:
        inputs: Normalized property inputs.

    Returns:
        AcquisitionCosts with each component.
    """
    price = inputs.price
    building_price = round_half_up(inputs.building_price)

    return AcquisitionCosts(
        misc_cost=round_half_up(price * (inputs.misc_cost_rate / 100)),
        water_contribution=round_half_up(price * (inputs.water_contribution_rate / 100)),
        fire_insurance=round_half_up(building_price * (inputs.fire_insurance_rate / 100)),
        loan_fee=round_half_up(inputs.loan_amount * (inputs.loan_fee_rate / 100)),
        registration_cost=round_half_up(price * (inputs.registration_cost_rate / 100)),
    )


def calculate_total_price(inputs: PropertyInput, costs: AcquisitionCosts) -> float:
    """Purchase price plus closing costs."""
    return inputs.price + costs.total


def calculate_equity(inputs: PropertyInput, costs: AcquisitionCosts) -> float:
    """Cash the buyer puts in: total price less the loan."""
    return calculate_total_price(inputs, costs) - inputs.loan_amount
