"""Discounting, IRR and summary metrics over simulation results."""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

IRR_MAX_ITERATIONS = 100
IRR_TOLERANCE = 1e-7
IRR_DEFAULT_GUESS = 0.1
# Rates at or below this are treated as divergence (1 + r approaches 0)
IRR_RATE_FLOOR = -0.9999


@dataclass(frozen=True)
class IRRResult:
    """Outcome of the IRR solver.

    ``rate`` is None when no solution was found; callers must handle that
    case rather than treating it as zero.
    """

    rate: Optional[float]
    iterations: int

    @property
    def converged(self) -> bool:
        return self.rate is not None


def net_present_value(rate: float, cashflows: Sequence[float]) -> float:
    """Calculate NPV with the first cash flow at t=0.

    NPV = sum(cf[t] / (1 + rate)^t)

    Args:
        rate: Discount rate per period as a decimal. A non-finite rate is
            treated as 0.
        cashflows: Cash flows, first one undiscounted.

    Returns:
        Net present value.

    Example:
        >>> net_present_value(0.0, [-100, 60, 60])
        20.0
    """
    safe_rate = rate if math.isfinite(rate) else 0.0
    flows = np.asarray(cashflows, dtype=float)
    if flows.size == 0:
        return 0.0

    periods = np.arange(flows.size)
    return float(np.sum(flows / (1 + safe_rate) ** periods))


def _npv_and_derivative(rate: float, flows: np.ndarray, periods: np.ndarray):
    # A diverging rate overflows to inf/nan, which the solver reports as no solution
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        discount = (1 + rate) ** periods
        npv = np.sum(flows / discount)
        # d/dr of cf[t] / (1+r)^t is -t cf[t] / (1+r)^(t+1); the t=0 term is 0
        derivative = np.sum((-periods[1:] * flows[1:]) / (discount[1:] * (1 + rate)))
    return float(npv), float(derivative)


def solve_irr(cashflows: Sequence[float], guess: float = IRR_DEFAULT_GUESS) -> IRRResult:
    """Find the IRR with Newton-Raphson iteration.

    rate <- rate - NPV(rate) / NPV'(rate), stopping once |NPV| < 1e-7.
    The solve fails if the derivative is zero, the rate stops being finite
    or falls to -99.99% or below, or 100 iterations pass.

    Args:
        cashflows: Cash flows with the investment at t=0.
        guess: Starting rate. A non-finite guess starts from 0.1.

    Returns:
        IRRResult; ``rate`` is None if no solution was found.
    """
    rate = guess if math.isfinite(guess) else IRR_DEFAULT_GUESS
    flows = np.asarray(cashflows, dtype=float)
    periods = np.arange(flows.size)

    for iteration in range(1, IRR_MAX_ITERATIONS + 1):
        npv, derivative = _npv_and_derivative(rate, flows, periods)

        if abs(npv) < IRR_TOLERANCE:
            return IRRResult(rate=rate, iterations=iteration)
        if derivative == 0:
            break

        rate -= npv / derivative
        if not math.isfinite(rate) or rate <= IRR_RATE_FLOOR:
            return IRRResult(rate=None, iterations=iteration)

    return IRRResult(rate=None, iterations=iteration)


def internal_rate_of_return(
    cashflows: Sequence[float],
    guess: float = IRR_DEFAULT_GUESS,
) -> Optional[float]:
    """IRR as a decimal, or None if the solver found no solution."""
    return solve_irr(cashflows, guess).rate


def calculate_equity_multiple(cashflows: Sequence[float], equity: float) -> Optional[float]:
    """Cash returned after the initial investment divided by equity.

    Returns None when there is no positive equity to divide by.
    """
    if equity <= 0:
        return None
    return float(sum(cashflows[1:])) / equity


@dataclass(frozen=True)
class RunSummary:
    """Headline figures for one simulation run."""

    total_cash_flow: float  # Sum of post-tax cash flow over the horizon
    min_cash_flow: float
    min_cash_flow_year: int  # First year the minimum occurs
    min_dscr: Optional[float]  # None if no year carries debt service
    dead_cross_years: List[int] = field(default_factory=list)

    @property
    def first_dead_cross_year(self) -> Optional[int]:
        return self.dead_cross_years[0] if self.dead_cross_years else None


def summarize_results(results) -> RunSummary:
    """Summarize a run's cash flow, DSCR and dead-cross exposure.

    Args:
        results: Sequence of YearlyResult.

    Returns:
        RunSummary over all years.
    """
    total_cash_flow = 0.0
    min_cash_flow = math.inf
    min_cash_flow_year = 1
    min_dscr = math.inf

    for result in results:
        total_cash_flow += result.cash_flow_post_tax
        if result.cash_flow_post_tax < min_cash_flow:
            min_cash_flow = result.cash_flow_post_tax
            min_cash_flow_year = result.year

        dscr = result.dscr
        if dscr is not None and dscr < min_dscr:
            min_dscr = dscr

    return RunSummary(
        total_cash_flow=total_cash_flow,
        min_cash_flow=min_cash_flow if math.isfinite(min_cash_flow) else 0.0,
        min_cash_flow_year=min_cash_flow_year,
        min_dscr=min_dscr if math.isfinite(min_dscr) else None,
        dead_cross_years=[result.year for result in results if result.is_dead_cross],
    )
