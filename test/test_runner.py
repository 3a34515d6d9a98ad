import json
from datetime import datetime
from unittest.mock import patch

import pytest

from amc_reconciler.cli import main
from amc_reconciler.runner import run_amc_export

NOW = datetime(2024, 11, 15, 10, 0)


# --------------------------------------------------------------------
# RUNNER TESTS
# --------------------------------------------------------------------
def test_run_amc_export_success(tmp_path, schedule_workbook):
    out_dir = tmp_path / "exports"
    report_path = run_amc_export(
        str(schedule_workbook),
        ledger_path=str(schedule_workbook),
        output_dir=str(out_dir),
        now=NOW,
    )

    payload = json.loads(report_path.read_text(encoding="utf-8"))
    assert payload["status"] == "success"
    assert payload["error"] is None
    assert payload["summary"] == {
        "total": 2250,
        "paid": 1500,
        "balance": 750,
        "paid_count": 1,
        "total_count": 2,
    }
    assert payload["overdue_quarters"] == ["AMJ-2024"]
    assert sorted(p.rsplit(".", 1)[1] for p in payload["files"]) == [
        "csv",
        "json",
        "pdf",
        "xlsx",
    ]
    assert (out_dir / "AMC_Schedule_2024-11-15.xlsx").exists()
    assert (out_dir / "AMC_Report_2024-11-15.pdf").exists()


def test_run_amc_export_json_ledger_and_settings(tmp_path, schedule_workbook):
    ledger = tmp_path / "paid.json"
    ledger.write_text(json.dumps({"AMJ-2024": {"paid": True}}), encoding="utf-8")
    settings = tmp_path / "settings.json"
    settings.write_text(json.dumps({"gstRate": 0.05}), encoding="utf-8")

    report_path = run_amc_export(
        str(schedule_workbook),
        ledger_path=str(ledger),
        settings_path=str(settings),
        output_dir=str(tmp_path),
        formats=["json"],
        now=NOW,
    )

    payload = json.loads(report_path.read_text(encoding="utf-8"))
    assert payload["summary"]["paid"] == 750
    assert payload["overdue_quarters"] == ["JFM-2024"]

    snapshot = json.loads((tmp_path / "AMC_Data_2024-11-15.json").read_text(encoding="utf-8"))
    assert snapshot["quarterSummary"][0]["Amount (Without GST)"] == 1429
    assert snapshot["quarterSummary"][1]["Payment Date"] == ""


def test_run_amc_export_without_ledger_marks_everything_pending(tmp_path, schedule_workbook):
    report_path = run_amc_export(
        str(schedule_workbook), output_dir=str(tmp_path), formats=["csv"], now=NOW
    )
    payload = json.loads(report_path.read_text(encoding="utf-8"))
    assert payload["summary"]["paid_count"] == 0
    assert payload["overdue_quarters"] == ["JFM-2024", "AMJ-2024"]


def test_run_amc_export_missing_workbook_writes_error_report(tmp_path):
    report_path = run_amc_export(
        str(tmp_path / "missing.xlsx"), output_dir=str(tmp_path), now=NOW
    )

    payload = json.loads(report_path.read_text(encoding="utf-8"))
    assert payload["status"] == "error"
    assert "Workbook not found" in payload["error"]
    assert payload["files"] == []


@patch("amc_reconciler.runner.write_pdf_report")
def test_run_amc_export_renderer_failure(mock_pdf, tmp_path, schedule_workbook):
    mock_pdf.side_effect = RuntimeError("disk full")

    report_path = run_amc_export(
        str(schedule_workbook), output_dir=str(tmp_path), formats=["pdf"], now=NOW
    )

    payload = json.loads(report_path.read_text(encoding="utf-8"))
    assert payload["status"] == "error"
    assert payload["error"] == "disk full"
    mock_pdf.assert_called_once()


def test_run_amc_export_rejects_unknown_format(tmp_path, schedule_workbook):
    with pytest.raises(ValueError, match="docx"):
        run_amc_export(str(schedule_workbook), output_dir=str(tmp_path), formats=["docx"])


# --------------------------------------------------------------------
# CLI TESTS
# --------------------------------------------------------------------
def test_cli_main(tmp_path, schedule_workbook, capsys):
    exit_code = main(
        [
            "--workbook",
            str(schedule_workbook),
            "--output-dir",
            str(tmp_path),
            "--format",
            "csv",
            "--format",
            "json",
        ]
    )

    assert exit_code == 0
    assert "Report written to" in capsys.readouterr().out
    payload = json.loads((tmp_path / "amc_export_report.json").read_text(encoding="utf-8"))
    assert payload["status"] == "success"
    assert len(payload["files"]) == 2
