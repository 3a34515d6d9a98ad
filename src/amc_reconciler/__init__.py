"""AMC payment reconciliation toolkit.

Exposes ``reconcile`` and ``project_records`` for programmatic use and
``run_amc_export`` for the full read, reconcile and export pipeline.
"""

from .reconcile import project_records, reconcile  # Core entry points
from .runner import run_amc_export  # Public API for exporting

__all__ = ["project_records", "reconcile", "run_amc_export"]  # Re-exported symbols
