"""Quarter payment reconciliation.

Aggregated schedule amounts are joined against the payment ledger, each
quarter is classified as PAID or PENDING, pending quarters get an overdue
day count and the sequence is rolled up into a :class:`PaymentSummary`.
Every function here is pure; the current instant is always passed in.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from datetime import date, datetime, time
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple, Union

from amc_reconciler.model import (
    Amount,
    InvalidConfiguration,
    LedgerEntry,
    PaymentSummary,
    QuarterTag,
    ReconciledQuarter,
    Record,
)
from amc_reconciler.quarters import aggregate_quarters, extract_quarter_fields, order_quarters

logger = logging.getLogger(__name__)

Instant = Union[date, datetime]
Ledger = Mapping[str, Union[LedgerEntry, Mapping[str, Any]]]

SCHEDULE_COLUMNS = (
    "Product Name",
    "Location",
    "Invoice Value",
    "Quantity",
    "AMC Start Date",
    "UAT Date",
)


def validate_tax_rate(tax_rate: float) -> float:
    """Reject tax rates that would make the tax-exclusive amount diverge."""

    if isinstance(tax_rate, bool) or not isinstance(tax_rate, (int, float)):
        raise InvalidConfiguration(f"Tax rate must be a number, got {tax_rate!r}")
    if not math.isfinite(tax_rate) or tax_rate <= -1:
        raise InvalidConfiguration(f"Tax rate must be greater than -1, got {tax_rate!r}")
    return float(tax_rate)


def tax_exclusive(amount: Amount, tax_rate: float) -> int:
    """Strip tax from ``amount``, rounding half up to a whole unit."""

    rate = validate_tax_rate(tax_rate)
    return math.floor(amount / (1 + rate) + 0.5)


def _ledger_entry(value: Union[LedgerEntry, Mapping[str, Any], None]) -> LedgerEntry | None:
    if value is None or isinstance(value, LedgerEntry):
        return value
    return LedgerEntry(paid=bool(value.get("paid")), date=value.get("date"))


def reconcile_quarters(
    ordered: Sequence[Tuple[str, Amount]],
    ledger: Ledger,
    tax_rate: float,
    now: Instant,
) -> List[ReconciledQuarter]:
    """Classify each ordered aggregate against the payment ledger.

    A quarter with no ledger entry, or with an entry not marked paid, is
    PENDING. A paid entry without a date keeps an empty payment date.
    """

    reconciled: List[ReconciledQuarter] = []
    for tag, amount in ordered:
        entry = _ledger_entry(ledger.get(tag))
        if entry is not None and entry.paid:
            quarter = ReconciledQuarter(
                quarter=tag,
                amount_with_tax=amount,
                amount_without_tax=tax_exclusive(amount, tax_rate),
                status="PAID",
                payment_date=str(entry.date) if entry.date else "",
            )
        else:
            quarter = ReconciledQuarter(
                quarter=tag,
                amount_with_tax=amount,
                amount_without_tax=tax_exclusive(amount, tax_rate),
                status="PENDING",
            )
            quarter = replace(quarter, days_overdue=days_overdue(quarter, now))
        reconciled.append(quarter)
    return reconciled


def days_overdue(quarter: ReconciledQuarter, now: Instant) -> int:
    """Whole days a pending quarter is past its calendar end date."""

    if quarter.status != "PENDING":
        return 0
    end = QuarterTag.parse(quarter.quarter).end_date
    if end is None:
        return 0

    if isinstance(now, datetime):
        elapsed = now - datetime.combine(end, time.min, tzinfo=now.tzinfo)
    else:
        elapsed = now - end
    if elapsed.total_seconds() <= 0:
        return 0
    return elapsed.days  # timedelta.days is already floored


def summarise(quarters: Iterable[ReconciledQuarter]) -> PaymentSummary:
    """Roll a reconciled sequence up into totals and counts."""

    total: Amount = 0
    paid: Amount = 0
    paid_count = 0
    total_count = 0
    for quarter in quarters:
        total += quarter.amount_with_tax
        total_count += 1
        if quarter.is_paid:
            paid += quarter.amount_with_tax
            paid_count += 1
    return PaymentSummary(
        total=total,
        paid=paid,
        balance=total - paid,
        paid_count=paid_count,
        total_count=total_count,
    )


def reconcile(
    records: Iterable[Record],
    ledger: Ledger,
    tax_rate: float,
    now: Instant,
) -> Tuple[List[ReconciledQuarter], PaymentSummary]:
    """Aggregate, order and reconcile ``records`` against ``ledger``."""

    validate_tax_rate(tax_rate)
    ordered = order_quarters(aggregate_quarters(records))
    quarters = reconcile_quarters(ordered, ledger, tax_rate, now)
    summary = summarise(quarters)
    logger.debug(
        "Reconciled %d quarters (%d paid)", summary.total_count, summary.paid_count
    )
    return quarters, summary


def project_record(record: Record) -> Dict[str, Any]:
    row: Dict[str, Any] = dict(
        zip(
            SCHEDULE_COLUMNS,
            (
                record.product_name,
                record.location,
                record.invoice_value,
                record.quantity,
                record.amc_start_date,
                record.uat_date,
            ),
        )
    )
    for tag in extract_quarter_fields(record):
        row[tag] = record.quarters[tag]
    return row


def project_records(records: Iterable[Record]) -> List[Dict[str, Any]]:
    """Flat per-record rows for detailed schedule views."""

    return [project_record(record) for record in records]


__all__ = [
    "Instant",
    "Ledger",
    "SCHEDULE_COLUMNS",
    "days_overdue",
    "project_record",
    "project_records",
    "reconcile",
    "reconcile_quarters",
    "summarise",
    "tax_exclusive",
    "validate_tax_rate",
]
