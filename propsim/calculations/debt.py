"""Loan amortization: level payments stepped month by month."""

from dataclasses import dataclass

import numpy_financial as npf

# Balances below this are treated as fully repaid
BALANCE_EPSILON = 1e-6


@dataclass(frozen=True)
class LoanState:
    """Outstanding loan carried from one simulation year to the next."""

    balance: float
    rate: float  # Annual %
    monthly_payment: float

    @property
    def monthly_rate(self) -> float:
        """Monthly interest rate as a decimal."""
        return self.rate / 12 / 100

    @property
    def is_repaid(self) -> bool:
        return self.balance <= 0


@dataclass(frozen=True)
class LoanYear:
    """Debt service booked in one simulation year."""

    interest: float
    principal: float

    @property
    def payment_total(self) -> float:
        """Interest plus principal."""
        return self.interest + self.principal


def calculate_pmt(rate: float, term_years: float, principal: float) -> float:
    """Calculate the level monthly payment of an amortizing loan.

    PMT = P x r / (1 - (1 + r)^-n), with r = rate / 12 / 100 and
    n = term_years x 12. A zero rate spreads principal evenly.

    Args:
        rate: Annual interest rate in percent (e.g., 2.0 for 2%).
        term_years: Amortization term in years.
        principal: Amount borrowed.

    Returns:
        Monthly payment. Zero when there is no principal or no term.

    Example:
        >>> round(calculate_pmt(2.0, 25, 20_000_000))
        84771
    """
    if principal <= 0 or term_years <= 0:
        return 0.0

    num_payments = term_years * 12
    if rate == 0:
        return principal / num_payments

    # numpy_financial returns the payment as a negative outflow
    return float(-npf.pmt(rate / 12 / 100, num_payments, principal))


def open_loan(principal: float, rate: float, term_years: float) -> LoanState:
    """Create the opening loan state.

    A loan without a positive term cannot amortize and is treated as absent.
    """
    if principal <= 0 or term_years <= 0:
        return LoanState(balance=0.0, rate=rate, monthly_payment=0.0)

    return LoanState(
        balance=principal,
        rate=rate,
        monthly_payment=calculate_pmt(rate, term_years, principal),
    )


def apply_rate_change(
    state: LoanState,
    new_rate: float,
    remaining_years: float,
) -> LoanState:
    """Re-amortize the current balance when the interest rate changes.

    Args:
        state: Loan state before the change.
        new_rate: New annual rate in percent.
        remaining_years: Years left on the original term.

    Returns:
        New state with the recomputed payment. Unchanged if the rate is
        the same.
    """
    if new_rate == state.rate:
        return state

    payment = (
        calculate_pmt(new_rate, remaining_years, state.balance)
        if remaining_years > 0
        else 0.0
    )
    return LoanState(balance=state.balance, rate=new_rate, monthly_payment=payment)


def step_loan_year(state: LoanState) -> tuple[LoanYear, LoanState]:
    """Apply twelve monthly payments to the loan.

    Each month: interest = balance x monthly rate, principal = payment -
    interest (capped at the outstanding balance). Stops once the balance
    is repaid.

    Args:
        state: Loan state at the start of the year.

    Returns:
        Tuple of (debt service for the year, state at year end).
    """
    balance = state.balance
    monthly_rate = state.monthly_rate
    yearly_interest = 0.0
    yearly_principal = 0.0

    for _ in range(12):
        if balance <= BALANCE_EPSILON:
            break
        interest = balance * monthly_rate
        principal = min(state.monthly_payment - interest, balance)

        yearly_interest += interest
        yearly_principal += principal
        balance -= principal

    # Floating-point residue after payoff
    if balance < BALANCE_EPSILON:
        balance = 0.0

    next_state = LoanState(
        balance=balance,
        rate=state.rate,
        monthly_payment=state.monthly_payment,
    )
    return LoanYear(interest=yearly_interest, principal=yearly_principal), next_state
