"""Ledger export - tabular results and an Excel workbook of a simulation run.

Builds a pandas DataFrame of the yearly ledger, a 5-year rollup of it, and
an Excel workbook with summary, ledger and rollup sheets.
"""

import io
import logging
import math
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import List, Optional, Sequence

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.utils.dataframe import dataframe_to_rows

from ..calculations.exit import ExitValuation
from ..calculations.metrics import RunSummary, summarize_results
from ..calculations.simulation import YearlyResult

logger = logging.getLogger(__name__)

# Column order and headers of the ledger
LEDGER_COLUMNS = [
    ("year", "Year"),
    ("gross_potential_rent", "GPR"),
    ("income", "Income"),
    ("expense", "OpEx"),
    ("property_tax", "Property Tax"),
    ("repair_cost", "Repairs"),
    ("noi", "NOI"),
    ("loan_payment_total", "Debt Service"),
    ("loan_interest", "Interest"),
    ("loan_principal", "Principal"),
    ("loan_balance", "Loan Balance"),
    ("depreciation_body", "Depr. Body"),
    ("depreciation_equipment", "Depr. Equipment"),
    ("depreciation_total", "Depr. Total"),
    ("taxable_income", "Taxable Income"),
    ("tax_amount", "Tax"),
    ("acquisition_tax", "Acquisition Tax"),
    ("cash_flow_pre_tax", "CF Pre-Tax"),
    ("cash_flow_post_tax", "CF Post-Tax"),
    ("dscr", "DSCR"),
    ("is_dead_cross", "Dead Cross"),
]

ROLLUP_INTERVAL = 5
ROLLUP_LAST_YEAR = 30


@dataclass
class LedgerReportConfig:
    """Configuration for ledger report generation."""
    include_summary: bool = True
    include_rollup: bool = True
    property_name: str = "Income Property"
    scenario_name: str = "Baseline"
    generated_at: Optional[datetime] = None  # Stamp on the summary sheet; omitted when None


def results_to_dataframe(results: Sequence[YearlyResult]) -> pd.DataFrame:
    """Convert a simulation ledger to a DataFrame, one row per year.

    Includes the derived NOI and DSCR columns.
    """
    rows = []
    for result in results:
        row = asdict(result)
        row["noi"] = result.noi
        row["dscr"] = result.dscr
        rows.append(row)

    df = pd.DataFrame(rows, columns=[name for name, _ in LEDGER_COLUMNS])
    return df.set_index("year", drop=False)


def five_year_rollup(results: Sequence[YearlyResult]) -> pd.DataFrame:
    """Rows for year 1 and every fifth year up to year 30."""
    df = results_to_dataframe(results)
    mask = (df["year"] == 1) | ((df["year"] % ROLLUP_INTERVAL == 0) & (df["year"] <= ROLLUP_LAST_YEAR))
    return df[mask]


def _add_header_style(ws, row: int, cols: int) -> None:
    """Apply header styling to a row."""
    header_fill = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
    header_font = Font(color="FFFFFF", bold=True)

    for col in range(1, cols + 1):
        cell = ws.cell(row=row, column=col)
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center")


def _add_section_header(ws, title: str, row: int) -> int:
    """Add a section header and return next row."""
    ws.cell(row=row, column=1, value=title)
    ws.cell(row=row, column=1).font = Font(bold=True, size=14)
    return row + 1


def generate_ledger_excel(
    results: Sequence[YearlyResult],
    exit_valuation: Optional[ExitValuation] = None,
    config: Optional[LedgerReportConfig] = None,
) -> bytes:
    """Generate an Excel workbook of a simulation run.

    Args:
        results: Simulation ledger.
        exit_valuation: Exit to show on the summary sheet, if any.
        config: Optional configuration for the report.

    Returns:
        Excel file as bytes.
    """
    if config is None:
        config = LedgerReportConfig()

    wb = Workbook()

    # Remove default sheet
    wb.remove(wb.active)

    # === Sheet 1: Summary ===
    if config.include_summary:
        ws = wb.create_sheet("Summary")
        _create_summary_sheet(ws, summarize_results(results), exit_valuation, config)

    # === Sheet 2: Ledger ===
    ws = wb.create_sheet("Ledger")
    _create_table_sheet(ws, "Yearly Ledger", results_to_dataframe(results))

    # === Sheet 3: 5-Year Rollup ===
    if config.include_rollup:
        ws = wb.create_sheet("5-Year Rollup")
        _create_table_sheet(ws, "Every Fifth Year", five_year_rollup(results))

    logger.debug("Generated ledger workbook with sheets %s", wb.sheetnames)

    # Save to bytes
    output = io.BytesIO()
    wb.save(output)
    output.seek(0)
    return output.getvalue()


def _create_summary_sheet(
    ws,
    summary: RunSummary,
    exit_valuation: Optional[ExitValuation],
    config: LedgerReportConfig,
) -> None:
    """Create the summary sheet."""
    row = 1

    # Title
    ws.cell(row=row, column=1, value=f"Simulation Report: {config.property_name}")
    ws.cell(row=row, column=1).font = Font(bold=True, size=16)
    row += 1

    ws.cell(row=row, column=1, value=f"Scenario: {config.scenario_name}")
    row += 1

    if config.generated_at is not None:
        ws.cell(row=row, column=1, value=f"Generated: {config.generated_at.strftime('%Y-%m-%d %H:%M:%S')}")
        row += 1
    row += 1

    # Key Metrics
    row = _add_section_header(ws, "Key Metrics", row)
    row += 1

    metrics = [
        ("Total Cash Flow (35y)", f"{summary.total_cash_flow:,.0f}"),
        ("Minimum Cash Flow", f"{summary.min_cash_flow:,.0f} (year {summary.min_cash_flow_year})"),
        ("Minimum DSCR", f"{summary.min_dscr:.2f}x" if summary.min_dscr is not None else "-"),
        ("First Dead Cross", str(summary.first_dead_cross_year or "-")),
        ("Dead Cross Years", len(summary.dead_cross_years)),
    ]

    if exit_valuation is not None:
        irr = exit_valuation.irr
        multiple = exit_valuation.equity_multiple
        metrics.extend([
            ("", ""),
            ("Exit Year", exit_valuation.exit_year),
            ("Sale Price", f"{exit_valuation.sale_price:,.0f}"),
            ("Net Proceeds", f"{exit_valuation.net_proceeds:,.0f}"),
            ("IRR", f"{irr:.2%}" if irr is not None else "-"),
            ("NPV", f"{exit_valuation.npv:,.0f}"),
            ("Equity Multiple", f"{multiple:.2f}x" if multiple is not None else "-"),
        ])

    for label, value in metrics:
        if label:
            ws.cell(row=row, column=1, value=label)
            ws.cell(row=row, column=2, value=value)
        row += 1

    # Adjust column widths
    ws.column_dimensions['A'].width = 25
    ws.column_dimensions['B'].width = 25


def _cell_value(value):
    """Plain Python value for a cell (numpy scalars unwrapped, NaN left blank)."""
    if hasattr(value, "item"):
        value = value.item()
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def _create_table_sheet(ws, title: str, df: pd.DataFrame) -> None:
    """Write a ledger DataFrame under a section header."""
    row = _add_section_header(ws, title, 1)
    row += 1

    headers: List[str] = [header for _, header in LEDGER_COLUMNS]
    for col, header in enumerate(headers, 1):
        ws.cell(row=row, column=col, value=header)
    _add_header_style(ws, row, len(headers))
    row += 1

    for values in dataframe_to_rows(df, index=False, header=False):
        for col, value in enumerate(values, 1):
            cell = ws.cell(row=row, column=col, value=_cell_value(value))
            if isinstance(cell.value, float):
                cell.number_format = "0.00" if headers[col - 1] == "DSCR" else "#,##0"
        row += 1

    # Adjust column widths
    for col in range(1, len(headers) + 1):
        ws.column_dimensions[get_column_letter(col)].width = 15
