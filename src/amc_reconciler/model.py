"""Domain models for AMC quarter reconciliation.

These dataclasses represent the core entities shared throughout the tool:
schedule records, quarter tags, payment ledger entries, reconciled quarters
and the payment summary derived from them.
"""

from __future__ import annotations  # Postponed evaluation of annotations (PEP 563)

import calendar  # Month lengths for quarter end dates
import re  # Quarter tag pattern
from dataclasses import dataclass, field  # Dataclass utilities
from datetime import MINYEAR, date  # Calendar dates for quarter boundaries
from typing import Literal, Optional, Union  # Constrained string types for clarity

PaymentStatus = Literal["PAID", "PENDING"]  # Classification of a reconciled quarter
Amount = Union[int, float]  # Monetary amount as stored in the schedule

QUARTER_PATTERN = re.compile(r"[A-Z]{3}-[0-9]{4}")  # e.g. "JAS-2024", always fullmatch

# Calendar-quarter codes mapped to (rank, final month of the quarter)
QUARTER_CODES: dict[str, tuple[int, int]] = {
    "JFM": (0, 3),
    "AMJ": (1, 6),
    "JAS": (2, 9),
    "OND": (3, 12),
}


class InvalidConfiguration(ValueError):
    """Raised when settings would make the reconciliation diverge."""


@dataclass(frozen=True, slots=True)
class QuarterTag:
    """A calendar quarter identified as ``CODE-YYYY``."""

    code: str  # Three-letter calendar-quarter code
    year: int  # Four-digit year

    @classmethod
    def parse(cls, tag: str) -> "QuarterTag":
        if not QUARTER_PATTERN.fullmatch(tag):
            raise ValueError(f"Not a quarter tag: {tag!r}")
        code, year = tag.split("-")
        return cls(code=code, year=int(year))

    @property
    def rank(self) -> int:
        # Unknown codes still match the tag pattern; they sort after OND
        return QUARTER_CODES.get(self.code, (len(QUARTER_CODES), 0))[0]

    @property
    def end_date(self) -> Optional[date]:
        """Last calendar day of the quarter, or ``None`` for an unknown code or year."""
        if self.code not in QUARTER_CODES or self.year < MINYEAR:
            return None
        month = QUARTER_CODES[self.code][1]
        return date(self.year, month, calendar.monthrange(self.year, month)[1])

    def sort_key(self) -> tuple[int, int, str]:
        return (self.year, self.rank, self.code)

    def __str__(self) -> str:
        return f"{self.code}-{self.year:04d}"


@dataclass(slots=True)
class Record:
    """One AMC schedule line (a product installed at a location)."""

    product_name: str
    location: str = ""
    invoice_value: Optional[Amount] = None
    quantity: Optional[Amount] = None
    amc_start_date: str = ""
    uat_date: str = ""
    # Quarter tag -> tax-inclusive amount; None for a present but empty cell
    quarters: dict[str, Optional[Amount]] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"record(product={self.product_name}, location={self.location})"


@dataclass(frozen=True, slots=True)
class LedgerEntry:
    """Payment recorded against a quarter tag."""

    paid: bool = False
    date: Optional[str] = None  # Payment date as entered, may be absent


@dataclass(frozen=True, slots=True)
class ReconciledQuarter:
    """Aggregated quarter amount classified against the payment ledger."""

    quarter: str
    amount_with_tax: Amount
    amount_without_tax: int
    status: PaymentStatus
    payment_date: str = ""  # Empty unless PAID with a recorded date
    days_overdue: int = 0

    @property
    def is_paid(self) -> bool:
        return self.status == "PAID"


@dataclass(frozen=True, slots=True)
class PaymentSummary:
    """Totals rolled up from a reconciled quarter sequence."""

    total: Amount = 0
    paid: Amount = 0
    balance: Amount = 0
    paid_count: int = 0
    total_count: int = 0


__all__ = [
    "Amount",
    "InvalidConfiguration",
    "LedgerEntry",
    "PaymentStatus",
    "PaymentSummary",
    "QUARTER_CODES",
    "QUARTER_PATTERN",
    "QuarterTag",
    "ReconciledQuarter",
    "Record",
]
