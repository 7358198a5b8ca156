"""Baseline vs stressed scenario runner.

Runs the ledger once as given, once with the stress scenario merged in,
and once with the interest rate raised one point, then summarizes and
values each run side by side.
"""

import concurrent.futures
import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional

from .models.property import PropertyInput
from .models.scenario_config import ScenarioConfig, scenario_from_inputs
from .calculations.exit import ExitValuation, calculate_exit_valuation
from .calculations.metrics import RunSummary, summarize_results
from .calculations.simulation import YearlyResult, simulate

logger = logging.getLogger(__name__)

# Percentage points added to the rate for the interest stress run
INTEREST_STRESS_DELTA = 1.0


@dataclass
class ScenarioComparison:
    """Baseline and stressed runs with their summaries and exits."""

    baseline: List[YearlyResult]
    stressed: List[YearlyResult]
    interest_stressed: List[YearlyResult]

    baseline_summary: RunSummary
    stressed_summary: RunSummary
    interest_stressed_summary: RunSummary

    baseline_exit: Optional[ExitValuation] = None
    stressed_exit: Optional[ExitValuation] = None

    @property
    def cash_flow_difference(self) -> float:
        """Stressed minus baseline total post-tax cash flow."""
        return self.stressed_summary.total_cash_flow - self.baseline_summary.total_cash_flow

    @property
    def stressed_min_dscr(self) -> Optional[float]:
        """Minimum DSCR with the interest rate one point higher."""
        return self.interest_stressed_summary.min_dscr


def interest_stress_inputs(inputs: PropertyInput, delta: float = INTEREST_STRESS_DELTA) -> PropertyInput:
    """Copy of the inputs with the base rate raised by delta (floored at 0)."""
    return replace(inputs, interest_rate=max(0.0, inputs.interest_rate + delta))


def run_scenario_comparison(
    inputs: PropertyInput,
    scenario: Optional[ScenarioConfig] = None,
    max_workers: int = 1,
) -> ScenarioComparison:
    """Run baseline, stressed and interest-stressed simulations.

    The three runs share no state. With max_workers > 1 they are evaluated
    in a thread pool.

    When exit is enabled both the baseline and the stressed run are valued
    at the same exit year. The stressed exit reuses the baseline tax basis
    and equity so the two differ only through the stressed cash flows.

    Args:
        inputs: Normalized property inputs.
        scenario: Stress overrides. Defaults to the inputs' own scenario block.
        max_workers: Thread count for the independent runs.

    Returns:
        ScenarioComparison with ledgers, summaries and exit valuations.
    """
    if scenario is None:
        scenario = scenario_from_inputs(inputs)

    runs: Dict[str, Callable[[], List[YearlyResult]]] = {
        "baseline": lambda: simulate(inputs),
        "stressed": lambda: simulate(inputs, scenario),
        "interest_stressed": lambda: simulate(interest_stress_inputs(inputs)),
    }

    if max_workers > 1:
        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {name: executor.submit(run) for name, run in runs.items()}
            ledgers = {name: future.result() for name, future in futures.items()}
    else:
        ledgers = {name: run() for name, run in runs.items()}

    baseline = ledgers["baseline"]
    stressed = ledgers["stressed"]
    interest_stressed = ledgers["interest_stressed"]

    comparison = ScenarioComparison(
        baseline=baseline,
        stressed=stressed,
        interest_stressed=interest_stressed,
        baseline_summary=summarize_results(baseline),
        stressed_summary=summarize_results(stressed),
        interest_stressed_summary=summarize_results(interest_stressed),
    )

    if inputs.exit_enabled:
        comparison.baseline_exit = calculate_exit_valuation(baseline, inputs)
        comparison.stressed_exit = calculate_exit_valuation(
            stressed,
            inputs,
            remaining_basis=comparison.baseline_exit.remaining_basis,
            equity=comparison.baseline_exit.equity,
        )

    logger.info(
        "Scenario comparison: baseline total CF %.0f, stressed total CF %.0f (%+.0f)",
        comparison.baseline_summary.total_cash_flow,
        comparison.stressed_summary.total_cash_flow,
        comparison.cash_flow_difference,
    )

    return comparison


def _format_amount(value: Optional[float]) -> str:
    return "-" if value is None else f"{value:,.0f}"


def _format_ratio(value: Optional[float]) -> str:
    return "-" if value is None else f"{value:.2f}x"


def _format_rate(value: Optional[float]) -> str:
    return "-" if value is None else f"{value:.2%}"


def format_comparison_table(comparison: ScenarioComparison) -> str:
    """Format a scenario comparison as a text table.

    Args:
        comparison: Result of run_scenario_comparison.

    Returns:
        Formatted string table.
    """
    base = comparison.baseline_summary
    stress = comparison.stressed_summary

    lines = [
        "=" * 72,
        "SCENARIO COMPARISON (baseline vs stressed)",
        "=" * 72,
        "",
        f"{'Metric':<30} {'Baseline':>20} {'Stressed':>20}",
        "-" * 72,
        f"{'Total cash flow (35y)':<30} "
        f"{_format_amount(base.total_cash_flow):>20} {_format_amount(stress.total_cash_flow):>20}",
        f"{'Minimum cash flow':<30} "
        f"{_format_amount(base.min_cash_flow):>20} {_format_amount(stress.min_cash_flow):>20}",
        f"{'Minimum cash flow year':<30} "
        f"{base.min_cash_flow_year:>20d} {stress.min_cash_flow_year:>20d}",
        f"{'Minimum DSCR':<30} "
        f"{_format_ratio(base.min_dscr):>20} {_format_ratio(stress.min_dscr):>20}",
        f"{'First dead-cross year':<30} "
        f"{_format_amount(base.first_dead_cross_year):>20} "
        f"{_format_amount(stress.first_dead_cross_year):>20}",
    ]

    base_exit = comparison.baseline_exit
    stress_exit = comparison.stressed_exit
    if base_exit is not None and stress_exit is not None:
        lines.extend([
            "-" * 72,
            f"Exit in year {base_exit.exit_year}",
            f"{'Sale price':<30} "
            f"{_format_amount(base_exit.sale_price):>20} {_format_amount(stress_exit.sale_price):>20}",
            f"{'Net proceeds':<30} "
            f"{_format_amount(base_exit.net_proceeds):>20} "
            f"{_format_amount(stress_exit.net_proceeds):>20}",
            f"{'IRR':<30} {_format_rate(base_exit.irr):>20} {_format_rate(stress_exit.irr):>20}",
            f"{'NPV':<30} {_format_amount(base_exit.npv):>20} {_format_amount(stress_exit.npv):>20}",
            f"{'Equity multiple':<30} "
            f"{_format_ratio(base_exit.equity_multiple):>20} "
            f"{_format_ratio(stress_exit.equity_multiple):>20}",
        ])

    lines.append("-" * 72)
    lines.append(
        f"Minimum DSCR at +{INTEREST_STRESS_DELTA:.0f}% interest: "
        f"{_format_ratio(comparison.stressed_min_dscr)}"
    )
    lines.append("=" * 72)

    return "\n".join(lines)
