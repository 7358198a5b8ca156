"""Export module for simulation ledgers and reports."""

from .ledger_report import (
    LedgerReportConfig,
    results_to_dataframe,
    five_year_rollup,
    generate_ledger_excel,
)

__all__ = [
    "LedgerReportConfig",
    "results_to_dataframe",
    "five_year_rollup",
    "generate_ledger_excel",
]
