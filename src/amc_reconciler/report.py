from __future__ import annotations

import csv
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence

from amc_reconciler.config import Settings
from amc_reconciler.model import Amount, PaymentSummary, ReconciledQuarter, Record
from amc_reconciler.quarters import ordered_quarter_tags
from amc_reconciler.reconcile import SCHEDULE_COLUMNS, Instant, project_records

QUARTER_SUMMARY_COLUMNS = (
    "Quarter",
    "Amount (With GST)",
    "Amount (Without GST)",
    "Payment Status",
    "Payment Date",
)
PAYMENT_STATUS_COLUMNS = ("Quarter", "Amount", "Status", "Payment Date", "Days Overdue")
SUMMARY_COLUMNS = ("Metric", "Value")


def iso_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def dated_filename(stem: str, extension: str, now: Instant) -> str:
    """``AMC_Schedule`` + ``xlsx`` -> ``AMC_Schedule_2024-11-15.xlsx``."""
    day = now.date() if isinstance(now, datetime) else now
    return f"{stem}_{day.isoformat()}.{extension}"


def format_amount(amount: Amount, currency_symbol: str = "") -> str:
    if isinstance(amount, float) and amount.is_integer():
        amount = int(amount)
    text = f"{amount:,}" if isinstance(amount, int) else f"{amount:,.2f}"
    return f"{currency_symbol}{text}"


def quarter_summary_rows(quarters: Iterable[ReconciledQuarter]) -> List[Dict[str, Any]]:
    return [
        {
            "Quarter": q.quarter,
            "Amount (With GST)": q.amount_with_tax,
            "Amount (Without GST)": q.amount_without_tax,
            "Payment Status": q.status,
            "Payment Date": q.payment_date,
        }
        for q in quarters
    ]


def payment_status_rows(quarters: Iterable[ReconciledQuarter]) -> List[Dict[str, Any]]:
    return [
        {
            "Quarter": q.quarter,
            "Amount": q.amount_with_tax,
            "Status": q.status,
            "Payment Date": q.payment_date,
            "Days Overdue": q.days_overdue,
        }
        for q in quarters
    ]


def schedule_columns(records: Sequence[Record]) -> List[str]:
    """Identifying columns followed by every quarter seen, oldest first."""
    return list(SCHEDULE_COLUMNS) + ordered_quarter_tags(records)


def schedule_rows(records: Sequence[Record]) -> List[Dict[str, Any]]:
    return project_records(records)


def summary_rows(summary: PaymentSummary, currency_symbol: str = "") -> List[List[str]]:
    return [
        ["Total Amount", format_amount(summary.total, currency_symbol)],
        ["Paid Amount", format_amount(summary.paid, currency_symbol)],
        ["Balance Amount", format_amount(summary.balance, currency_symbol)],
        ["Quarters Paid", f"{summary.paid_count}/{summary.total_count}"],
    ]


def settings_rows(settings: Settings) -> List[Dict[str, Any]]:
    return [
        {"Setting": "GST Rate", "Value": f"{settings.gst_rate * 100:g}%"},
        {"Setting": "Currency", "Value": settings.currency_symbol},
        {"Setting": "Report Title", "Value": settings.report_title},
    ]


def _serialise_summary(summary: PaymentSummary) -> Dict[str, Any]:
    return {
        "total": summary.total,
        "paid": summary.paid,
        "balance": summary.balance,
        "paidCount": summary.paid_count,
        "totalCount": summary.total_count,
    }


def build_snapshot_payload(
    records: Sequence[Record],
    quarters: Sequence[ReconciledQuarter],
    summary: PaymentSummary,
    settings: Settings,
    now: Instant,
) -> Dict[str, Any]:
    """Build the JSON snapshot of the schedule and its reconciliation."""

    return {
        "metadata": {
            "exportDate": now.isoformat(),
            "settings": settings.to_dict(),
            "totalProducts": len(records),
        },
        "scheduleData": schedule_rows(records),
        "quarterSummary": quarter_summary_rows(quarters),
        "paymentStatus": payment_status_rows(quarters),
        "paymentSummary": _serialise_summary(summary),
        "settings": settings_rows(settings),
    }


def write_snapshot_json(
    records: Sequence[Record],
    quarters: Sequence[ReconciledQuarter],
    summary: PaymentSummary,
    settings: Settings,
    output_dir: Path,
    now: Instant,
    stem: str = "AMC_Data",
) -> Path:
    payload = build_snapshot_payload(records, quarters, summary, settings, now)

    output_path = Path(output_dir) / dated_filename(stem, "json", now)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)

    return output_path


def write_schedule_csv(
    records: Sequence[Record],
    output_dir: Path,
    now: Instant,
    stem: str = "AMC_Schedule",
) -> Path:
    """Write the flattened schedule; quarters a record lacks are left blank."""

    output_path = Path(output_dir) / dated_filename(stem, "csv", now)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=schedule_columns(records), restval="")
        writer.writeheader()
        for row in schedule_rows(records):
            writer.writerow({k: ("" if v is None else v) for k, v in row.items()})

    return output_path


__all__ = [
    "PAYMENT_STATUS_COLUMNS",
    "QUARTER_SUMMARY_COLUMNS",
    "SUMMARY_COLUMNS",
    "build_snapshot_payload",
    "dated_filename",
    "format_amount",
    "iso_timestamp",
    "payment_status_rows",
    "quarter_summary_rows",
    "schedule_columns",
    "schedule_rows",
    "settings_rows",
    "summary_rows",
    "write_schedule_csv",
    "write_snapshot_json",
]
