"""JSON sources for the schedule and the payment ledger.

The schedule tool saves its products as a list of objects keyed
``productName``, ``location``, ``invoiceValue``, ``quantity``,
``amcStartDate``, ``uatDate`` plus one ``CODE-YYYY`` key per quarter, and its
paid quarters as ``{"JAS-2024": {"paid": true, "date": "2024-10-05"}}``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from amc_reconciler.model import LedgerEntry, Record
from amc_reconciler.quarters import coerce_amount, quarter_fields_from_mapping


def _read_json(path: Path | str) -> Any:
    json_path = Path(path)
    if not json_path.exists():
        raise FileNotFoundError(f"File not found: {json_path}")
    with json_path.open("r", encoding="utf-8") as f:
        return json.load(f)


def record_from_mapping(product: Mapping[str, Any]) -> Record:
    return Record(
        product_name=str(product.get("productName") or ""),
        location=str(product.get("location") or ""),
        invoice_value=coerce_amount(product.get("invoiceValue")),
        quantity=coerce_amount(product.get("quantity")),
        amc_start_date=str(product.get("amcStartDate") or ""),
        uat_date=str(product.get("uatDate") or ""),
        quarters={
            tag: coerce_amount(value)
            for tag, value in quarter_fields_from_mapping(product).items()
        },
    )


def payment_date_text(value: Any) -> Optional[str]:
    """Payment dates are kept as text; empty values become None."""
    if value is None or value == "":
        return None
    return str(value)


def ledger_from_mapping(data: Mapping[str, Any]) -> Dict[str, LedgerEntry]:
    ledger: Dict[str, LedgerEntry] = {}
    for tag, entry in data.items():
        if not isinstance(entry, Mapping):
            raise ValueError(f"Ledger entry for {tag!r} must be an object")
        ledger[tag] = LedgerEntry(
            paid=bool(entry.get("paid")), date=payment_date_text(entry.get("date"))
        )
    return ledger


def load_records(path: Path | str) -> List[Record]:
    """Load schedule records from a JSON array of product objects."""

    data = _read_json(path)
    if not isinstance(data, list) or not all(isinstance(p, Mapping) for p in data):
        raise ValueError("Schedule JSON must be an array of objects")
    return [record_from_mapping(product) for product in data]


def load_ledger(path: Path | str) -> Dict[str, LedgerEntry]:
    """Load the paid-quarters ledger from a JSON object."""

    data = _read_json(path)
    if not isinstance(data, Mapping):
        raise ValueError("Ledger JSON must be an object keyed by quarter")
    return ledger_from_mapping(data)


__all__ = [
    "ledger_from_mapping",
    "load_ledger",
    "load_records",
    "payment_date_text",
    "record_from_mapping",
]
