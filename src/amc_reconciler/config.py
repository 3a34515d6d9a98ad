"""Export settings.

Settings are read from an optional JSON file using the same camelCase keys
the schedule tool stores (``gstRate``, ``currencySymbol``, ``reportTitle``).
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from amc_reconciler.model import InvalidConfiguration
from amc_reconciler.reconcile import validate_tax_rate

DEFAULT_GST_RATE = 0.18


@dataclass(frozen=True, slots=True)
class Settings:
    """Values shared by the reconciliation core and the renderers."""

    gst_rate: float = DEFAULT_GST_RATE  # Tax rate as a fraction (0.18 == 18%)
    currency_symbol: str = "₹"  # Rupee sign
    report_title: str = "AMC Payment Report"

    def __post_init__(self) -> None:
        validate_tax_rate(self.gst_rate)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gstRate": self.gst_rate,
            "currencySymbol": self.currency_symbol,
            "reportTitle": self.report_title,
        }


def settings_from_mapping(data: Dict[str, Any]) -> Settings:
    defaults = Settings()
    return Settings(
        gst_rate=data.get("gstRate", defaults.gst_rate),
        currency_symbol=str(data.get("currencySymbol", defaults.currency_symbol)),
        report_title=str(data.get("reportTitle", defaults.report_title)),
    )


def load_settings(path: Path | str | None = None) -> Settings:
    """Load settings from ``path``; defaults when no path is given."""

    if path is None:
        return Settings()

    settings_path = Path(path)
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise InvalidConfiguration("Settings must be a JSON object")
    return settings_from_mapping(data)


__all__ = ["DEFAULT_GST_RATE", "Settings", "load_settings", "settings_from_mapping"]
