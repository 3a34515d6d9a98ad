"""Quarter tag discovery, aggregation and ordering."""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from amc_reconciler.model import QUARTER_PATTERN, Amount, QuarterTag, Record

logger = logging.getLogger(__name__)


def is_quarter_tag(key: Any) -> bool:
    """Return True when ``key`` looks like ``CODE-YYYY`` (e.g. ``OND-2023``)."""
    return isinstance(key, str) and QUARTER_PATTERN.fullmatch(key) is not None


def quarter_fields_from_mapping(row: Mapping[Any, Any]) -> Dict[str, Optional[Amount]]:
    """Pick the quarter-tagged fields out of a raw row.

    Keys that do not match the tag pattern (wrong case, wrong digit count,
    identifying columns) are ignored without complaint. Values are kept as
    given so that empty cells can be told apart from zero amounts.
    """

    return {key: row[key] for key in row if is_quarter_tag(key)}


def coerce_amount(value: Any) -> Optional[Amount]:
    """Return a finite number for ``value``; numeric text is parsed, anything else is None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    text = str(value).replace(",", "").strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def extract_quarter_fields(record: Record) -> Dict[str, Amount]:
    """Return the quarter -> amount contributions of a single record.

    Empty, non-numeric and non-finite amounts contribute 0.
    """

    contributions: Dict[str, Amount] = {}
    for tag, amount in record.quarters.items():
        if not is_quarter_tag(tag):
            continue
        contributions[tag] = coerce_amount(amount) or 0
    return contributions


def aggregate_quarters(records: Iterable[Record]) -> Dict[str, Amount]:
    """Sum every record's quarter contributions per quarter tag."""

    totals: Dict[str, Amount] = {}
    for record in records:
        for tag, amount in extract_quarter_fields(record).items():
            totals[tag] = totals.get(tag, 0) + amount
    logger.debug("Aggregated %d distinct quarters", len(totals))
    return totals


def quarter_sort_key(tag: str) -> Tuple[int, int, str]:
    return QuarterTag.parse(tag).sort_key()


def order_quarters(aggregates: Mapping[str, Amount]) -> List[Tuple[str, Amount]]:
    """Order aggregated quarters chronologically by (year, quarter rank)."""

    return sorted(aggregates.items(), key=lambda item: quarter_sort_key(item[0]))


def ordered_quarter_tags(records: Iterable[Record]) -> List[str]:
    """Distinct quarter tags found across ``records`` in canonical order."""

    seen = {tag for record in records for tag in extract_quarter_fields(record)}
    return sorted(seen, key=quarter_sort_key)


__all__ = [
    "aggregate_quarters",
    "coerce_amount",
    "extract_quarter_fields",
    "is_quarter_tag",
    "order_quarters",
    "ordered_quarter_tags",
    "quarter_fields_from_mapping",
    "quarter_sort_key",
]
