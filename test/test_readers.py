import json
from datetime import date
from pathlib import Path

import pytest
from openpyxl import Workbook

from amc_reconciler.config import Settings, load_settings
from amc_reconciler.excel_reader import extract_ledger, extract_records
from amc_reconciler.json_reader import load_ledger, load_records
from amc_reconciler.model import InvalidConfiguration, LedgerEntry
from amc_reconciler.reconcile import reconcile


# --------------------------------------------------------------------
# EXCEL READER TESTS
# --------------------------------------------------------------------
def test_extract_records_valid(schedule_workbook):
    records = extract_records(schedule_workbook)

    assert len(records) == 2  # Row without a product name is skipped
    ups, battery = records
    assert ups.product_name == "UPS 10kVA"
    assert ups.location == "Pune"
    assert ups.invoice_value == 100000
    assert ups.quantity == 2
    assert ups.amc_start_date == "2023-04-01"
    assert ups.uat_date == "2023-03-15"
    assert ups.quarters == {"JFM-2024": 1000, "AMJ-2024": None}

    assert battery.uat_date == ""
    assert battery.quarters == {"JFM-2024": 500, "AMJ-2024": 750}


def test_extract_records_missing_file():
    with pytest.raises(FileNotFoundError):
        extract_records(Path("nonexistent.xlsx"))


def test_extract_records_missing_sheet(tmp_path):
    workbook_path = tmp_path / "bad.xlsx"
    wb = Workbook()
    wb.create_sheet("wrong_sheet")
    wb.save(workbook_path)

    with pytest.raises(ValueError):
        extract_records(workbook_path)


def test_extract_records_empty_sheet(tmp_path):
    workbook_path = tmp_path / "empty.xlsx"
    wb = Workbook()
    wb.active.title = "schedule"
    wb.save(workbook_path)

    assert extract_records(workbook_path) == []


def test_extract_ledger(schedule_workbook):
    ledger = extract_ledger(schedule_workbook)

    assert ledger == {
        "JFM-2024": LedgerEntry(paid=True, date="2024-04-10"),
        "AMJ-2024": LedgerEntry(paid=False, date=None),
    }


# --------------------------------------------------------------------
# JSON READER TESTS
# --------------------------------------------------------------------
def test_load_records_from_json(tmp_path):
    path = tmp_path / "products.json"
    path.write_text(
        json.dumps(
            [
                {
                    "productName": "UPS",
                    "location": "Pune",
                    "invoiceValue": 1000,
                    "quantity": 1,
                    "amcStartDate": "2023-04-01",
                    "uatDate": "2023-03-01",
                    "JFM-2024": 1000,
                    "Jfm-2024": 1,
                    "id": 7,
                }
            ]
        ),
        encoding="utf-8",
    )

    [record] = load_records(path)
    assert record.product_name == "UPS"
    assert record.invoice_value == 1000
    assert record.quarters == {"JFM-2024": 1000}


def test_load_records_coerces_text_and_nan_amounts(tmp_path):
    path = tmp_path / "products.json"
    path.write_text(
        '[{"productName": "A", "JFM-2024": "1000", "AMJ-2024": NaN},'
        ' {"productName": "B", "JFM-2024": 500, "invoiceValue": "2,500"}]',
        encoding="utf-8",
    )

    first, second = load_records(path)
    assert first.quarters == {"JFM-2024": 1000, "AMJ-2024": None}
    assert second.invoice_value == 2500

    quarters, summary = reconcile([first, second], {}, 0.18, date(2024, 11, 15))
    assert [(q.quarter, q.amount_with_tax) for q in quarters] == [
        ("JFM-2024", 1500),
        ("AMJ-2024", 0),
    ]
    assert summary.total == 1500


def test_load_records_rejects_non_list(tmp_path):
    path = tmp_path / "products.json"
    path.write_text('{"productName": "UPS"}', encoding="utf-8")
    with pytest.raises(ValueError):
        load_records(path)


def test_load_ledger_from_json(tmp_path):
    path = tmp_path / "paid.json"
    path.write_text(
        json.dumps({"JFM-2024": {"paid": True, "date": "2024-07-10"}, "AMJ-2024": {"paid": True}}),
        encoding="utf-8",
    )

    ledger = load_ledger(path)
    assert ledger["JFM-2024"] == LedgerEntry(paid=True, date="2024-07-10")
    assert ledger["AMJ-2024"] == LedgerEntry(paid=True, date=None)


def test_load_ledger_keeps_dates_as_text(tmp_path):
    path = tmp_path / "paid.json"
    path.write_text(
        json.dumps({"JFM-2024": {"paid": True, "date": 20240710}, "AMJ-2024": {"paid": True, "date": ""}}),
        encoding="utf-8",
    )

    ledger = load_ledger(path)
    assert ledger["JFM-2024"].date == "20240710"
    assert ledger["AMJ-2024"].date is None


def test_load_ledger_rejects_bad_shapes(tmp_path):
    path = tmp_path / "paid.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_ledger(path)

    path.write_text('{"JFM-2024": true}', encoding="utf-8")
    with pytest.raises(ValueError):
        load_ledger(path)


def test_load_ledger_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_ledger(tmp_path / "missing.json")


# --------------------------------------------------------------------
# SETTINGS TESTS
# --------------------------------------------------------------------
def test_load_settings_defaults():
    settings = load_settings()
    assert settings.gst_rate == 0.18
    assert settings.currency_symbol == "₹"


def test_load_settings_from_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"gstRate": 0.05, "reportTitle": "Site AMC"}), encoding="utf-8")

    settings = load_settings(path)
    assert settings.gst_rate == 0.05
    assert settings.report_title == "Site AMC"
    assert settings.to_dict()["gstRate"] == 0.05


def test_load_settings_rejects_divergent_rate(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"gstRate": -1}), encoding="utf-8")
    with pytest.raises(InvalidConfiguration):
        load_settings(path)


def test_settings_rejects_divergent_rate():
    with pytest.raises(InvalidConfiguration):
        Settings(gst_rate=-2)


def test_load_settings_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "nope.json")
