"""Excel extraction for the AMC schedule and its payment ledger.

This module reads the ``schedule`` worksheet from an Excel workbook using
``openpyxl`` and converts rows into :class:`Record` objects. Any header of the
form ``CODE-YYYY`` becomes a quarter field of the record. An optional
``payments`` worksheet provides the ledger of paid quarters.
"""

from __future__ import annotations

from datetime import date, datetime  # Cell values openpyxl returns for dates
from pathlib import Path  # Filesystem path management
from typing import Any, Dict, List  # Concrete container types for return values

from openpyxl import load_workbook  # Excel file loader

from amc_reconciler.model import LedgerEntry, Record  # Domain models used as output
from amc_reconciler.quarters import coerce_amount, is_quarter_tag, quarter_fields_from_mapping

SCHEDULE_SHEET = "schedule"
PAYMENTS_SHEET = "payments"

_TRUTHY = {"true", "yes", "y", "paid", "1"}  # Accepted spellings of a paid flag


def _cell_text(value: Any) -> str:
    """Normalise a cell to text; dates become ISO ``YYYY-MM-DD``."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()


def _rows_as_dicts(workbook_path: Path, sheet_name: str) -> List[Dict[str, Any]]:
    workbook_path = Path(workbook_path)  # Ensure we have a Path instance
    if not workbook_path.exists():  # Validate the file exists
        raise FileNotFoundError(f"Workbook not found: {workbook_path}")

    # Open in read-only mode for performance and safety; use cell values only
    workbook = load_workbook(filename=workbook_path, read_only=True, data_only=True)
    try:
        try:
            sheet = workbook[sheet_name]  # Access the required worksheet by name
        except KeyError as exc:
            raise ValueError(f"Worksheet '{sheet_name}' not found in workbook") from exc

        rows = sheet.iter_rows(values_only=True)  # Iterate rows as tuples of raw values
        headers_row = next(rows, None)  # First row should contain column headers
        if headers_row is None:  # Empty sheet edge case
            return []

        headers = [
            str(header).strip() if header is not None else "" for header in headers_row
        ]
        result: List[Dict[str, Any]] = []
        for row in rows:
            if row is None or all(cell is None for cell in row):
                continue  # Skip fully blank rows
            result.append(
                {header: row[idx] for idx, header in enumerate(headers) if header and idx < len(row)}
            )
        return result
    finally:
        workbook.close()  # Always close the workbook handle


def extract_records(workbook_path: Path, sheet_name: str = SCHEDULE_SHEET) -> List[Record]:
    """Return schedule records parsed from the Excel workbook.

    Raises :class:`FileNotFoundError` if the workbook cannot be located and
    :class:`ValueError` if the worksheet is missing. Rows without a product
    name are skipped.
    """

    records: List[Record] = []
    for row in _rows_as_dicts(workbook_path, sheet_name):
        name = _cell_text(row.get("Product Name"))
        if not name:
            continue  # Skip rows without a product

        quarters = {
            tag: coerce_amount(value) for tag, value in quarter_fields_from_mapping(row).items()
        }
        records.append(
            Record(
                product_name=name,
                location=_cell_text(row.get("Location")),
                invoice_value=coerce_amount(row.get("Invoice Value")),
                quantity=coerce_amount(row.get("Quantity")),
                amc_start_date=_cell_text(row.get("AMC Start Date")),
                uat_date=_cell_text(row.get("UAT Date")),
                quarters=quarters,
            )
        )
    return records


def extract_ledger(
    workbook_path: Path, sheet_name: str = PAYMENTS_SHEET
) -> Dict[str, LedgerEntry]:
    """Return the payment ledger from the ``payments`` worksheet.

    Expected columns: ``Quarter``, ``Paid`` and ``Date``. Rows whose quarter
    is not a ``CODE-YYYY`` tag are ignored.
    """

    ledger: Dict[str, LedgerEntry] = {}
    for row in _rows_as_dicts(workbook_path, sheet_name):
        tag = _cell_text(row.get("Quarter"))
        if not is_quarter_tag(tag):
            continue

        flag = row.get("Paid")
        paid = flag if isinstance(flag, bool) else _cell_text(flag).lower() in _TRUTHY
        payment_date = _cell_text(row.get("Date")) or None
        ledger[tag] = LedgerEntry(paid=paid, date=payment_date)
    return ledger


__all__ = ["PAYMENTS_SHEET", "SCHEDULE_SHEET", "extract_ledger", "extract_records"]
