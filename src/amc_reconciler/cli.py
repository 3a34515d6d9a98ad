"""Command-line interface for the AMC payment exporter."""

from __future__ import annotations

import argparse
import logging
import sys

from .runner import ALL_FORMATS, run_amc_export


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Reconcile AMC quarter payments and export the schedule"
    )
    parser.add_argument(
        "--workbook",
        required=True,
        help="Excel workbook (schedule worksheet) or JSON file with the AMC products",
    )
    parser.add_argument(
        "--ledger", help="Payment ledger: JSON file or workbook with a payments worksheet"
    )
    parser.add_argument("--settings", help="Optional JSON settings file (gstRate, ...)")
    parser.add_argument("--output-dir", default=".", help="Directory for exported files")
    parser.add_argument(
        "--format",
        dest="formats",
        action="append",
        choices=ALL_FORMATS,
        help="Export format; repeat for several (default: all)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    path = run_amc_export(
        args.workbook,
        ledger_path=args.ledger,
        settings_path=args.settings,
        output_dir=args.output_dir,
        formats=args.formats or ALL_FORMATS,
    )
    print(f"Report written to {path}")
    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation
    sys.exit(main())
