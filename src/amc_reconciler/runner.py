from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List

from amc_reconciler import excel_reader, json_reader
from amc_reconciler.config import load_settings
from amc_reconciler.excel_writer import write_workbook
from amc_reconciler.model import LedgerEntry, Record
from amc_reconciler.pdf_report import write_pdf_report
from amc_reconciler.reconcile import Instant, reconcile
from amc_reconciler.report import iso_timestamp, write_schedule_csv, write_snapshot_json

logger = logging.getLogger(__name__)

DEFAULT_REPORT_NAME = "amc_export_report.json"
ALL_FORMATS = ("xlsx", "csv", "pdf", "json")


def _load_records(path: Path) -> List[Record]:
    if path.suffix.lower() == ".json":
        return json_reader.load_records(path)
    return excel_reader.extract_records(path)


def _load_ledger(path: Path | None) -> Dict[str, LedgerEntry]:
    if path is None:
        logger.info("No payment ledger given; every quarter will be pending")
        return {}
    if path.suffix.lower() == ".json":
        return json_reader.load_ledger(path)
    return excel_reader.extract_ledger(path)


def _check_formats(formats: Iterable[str]) -> List[str]:
    requested = [fmt.lower() for fmt in formats]
    unknown = sorted(set(requested) - set(ALL_FORMATS))
    if unknown:
        raise ValueError(f"Unsupported export format(s): {', '.join(unknown)}")
    return requested


def _write_report(report_path: Path, payload: dict) -> None:
    report_path.parent.mkdir(parents=True, exist_ok=True)
    with report_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)


def run_amc_export(
    workbook_path: str,
    *,
    ledger_path: str | None = None,
    settings_path: str | None = None,
    output_dir: str = ".",
    formats: Iterable[str] = ALL_FORMATS,
    now: Instant | None = None,
    report_name: str = DEFAULT_REPORT_NAME,
) -> Path:
    """Reconcile the AMC schedule, export every requested format and write a run report."""

    requested = _check_formats(formats)
    out_dir = Path(output_dir)
    report_path = out_dir / report_name
    now = now or datetime.now()

    try:
        # 1. Read schedule records, payment ledger and settings
        records = _load_records(Path(workbook_path))
        ledger = _load_ledger(Path(ledger_path) if ledger_path else None)
        settings = load_settings(settings_path)
        logger.info("Loaded %d records and %d ledger entries", len(records), len(ledger))

        # 2. Reconcile quarters against the ledger
        quarters, summary = reconcile(records, ledger, settings.gst_rate, now)

        # 3. Render each requested format
        written: List[Path] = []
        for fmt in requested:
            if fmt == "xlsx":
                path = write_workbook(records, quarters, out_dir, now)
            elif fmt == "csv":
                path = write_schedule_csv(records, out_dir, now)
            elif fmt == "pdf":
                path = write_pdf_report(quarters, summary, settings, out_dir, now)
            else:
                path = write_snapshot_json(records, quarters, summary, settings, out_dir, now)
            logger.info("Wrote %s export to %s", fmt, path)
            written.append(path)

        # 4. Run report
        report_payload = {
            "status": "success",
            "timestamp": iso_timestamp(),
            "summary": {
                "total": summary.total,
                "paid": summary.paid,
                "balance": summary.balance,
                "paid_count": summary.paid_count,
                "total_count": summary.total_count,
            },
            "overdue_quarters": [q.quarter for q in quarters if q.days_overdue > 0],
            "files": [str(p) for p in written],
            "error": None,
        }
    except Exception as exc:
        logger.exception("AMC export failed")
        report_payload = {
            "status": "error",
            "timestamp": iso_timestamp(),
            "summary": None,
            "overdue_quarters": [],
            "files": [],
            "error": str(exc),
        }

    _write_report(report_path, report_payload)
    return report_path


__all__ = ["ALL_FORMATS", "DEFAULT_REPORT_NAME", "run_amc_export"]
