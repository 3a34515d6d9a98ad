"""Excel workbook export of a reconciled AMC schedule.

The workbook has three worksheets: ``Payment Status``, ``Quarter Summary``
and ``AMC Schedule``. On the first two, PAID quarters get a green status
cell and a yellow payment date cell.
"""

from __future__ import annotations

from pathlib import Path  # Filesystem path management
from typing import Any, Dict, List, Sequence

from openpyxl import Workbook  # Excel workbook builder
from openpyxl.styles import PatternFill  # Solid cell backgrounds

from amc_reconciler.model import ReconciledQuarter, Record
from amc_reconciler.reconcile import Instant
from amc_reconciler.report import (
    PAYMENT_STATUS_COLUMNS,
    QUARTER_SUMMARY_COLUMNS,
    dated_filename,
    payment_status_rows,
    quarter_summary_rows,
    schedule_columns,
    schedule_rows,
)

PAID_FILL = PatternFill(fill_type="solid", fgColor="FF52E618")  # Green
PAYMENT_DATE_FILL = PatternFill(fill_type="solid", fgColor="FFFFFF00")  # Yellow


def _add_sheet(
    workbook: Workbook,
    title: str,
    columns: Sequence[str],
    rows: List[Dict[str, Any]],
    status_column: str | None = None,
) -> None:
    sheet = workbook.create_sheet(title)
    if not rows:
        return  # Nothing to show, not even a header

    sheet.append(list(columns))
    for row in rows:
        sheet.append([row.get(column) for column in columns])
        if status_column is None or row.get(status_column) != "PAID":
            continue
        # Column indices are 1-based in openpyxl
        status_idx = columns.index(status_column) + 1
        date_idx = columns.index("Payment Date") + 1
        sheet.cell(row=sheet.max_row, column=status_idx).fill = PAID_FILL
        sheet.cell(row=sheet.max_row, column=date_idx).fill = PAYMENT_DATE_FILL


def build_workbook(
    records: Sequence[Record], quarters: Sequence[ReconciledQuarter]
) -> Workbook:
    """Build the three-sheet workbook in memory."""

    workbook = Workbook()
    workbook.remove(workbook.active)  # Drop the default empty sheet

    _add_sheet(
        workbook,
        "Payment Status",
        PAYMENT_STATUS_COLUMNS,
        payment_status_rows(quarters),
        status_column="Status",
    )
    _add_sheet(
        workbook,
        "Quarter Summary",
        QUARTER_SUMMARY_COLUMNS,
        quarter_summary_rows(quarters),
        status_column="Payment Status",
    )
    _add_sheet(workbook, "AMC Schedule", schedule_columns(records), schedule_rows(records))
    return workbook


def write_workbook(
    records: Sequence[Record],
    quarters: Sequence[ReconciledQuarter],
    output_dir: Path,
    now: Instant,
    stem: str = "AMC_Schedule",
) -> Path:
    output_path = Path(output_dir) / dated_filename(stem, "xlsx", now)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    workbook = build_workbook(records, quarters)
    workbook.save(output_path)
    return output_path


__all__ = ["PAID_FILL", "PAYMENT_DATE_FILL", "build_workbook", "write_workbook"]
