"""Shared fixtures: a small AMC schedule workbook with a payments worksheet."""

from datetime import datetime

import pytest
from openpyxl import Workbook

SCHEDULE_HEADER = [
    "Product Name",
    "Location",
    "Invoice Value",
    "Quantity",
    "AMC Start Date",
    "UAT Date",
    "JFM-2024",
    "AMJ-2024",
    "jfm-2024",
    "Notes",
]


def create_schedule_workbook(file_path) -> None:
    """Create a test workbook with ``schedule`` and ``payments`` worksheets."""
    workbook = Workbook()
    workbook.remove(workbook.active)

    schedule = workbook.create_sheet("schedule")
    schedule.append(SCHEDULE_HEADER)
    schedule.append(
        ["UPS 10kVA", "Pune", 100000, 2, datetime(2023, 4, 1), "2023-03-15", 1000, None, 5, "x"]
    )
    schedule.append([None, "Nagpur", 1, 1, None, None, 999, 999, None, None])
    schedule.append(
        ["Battery Bank", "Mumbai", 50000, 1, "2023-05-01", None, "500", 750, None, None]
    )

    payments = workbook.create_sheet("payments")
    payments.append(["Quarter", "Paid", "Date"])
    payments.append(["JFM-2024", True, datetime(2024, 4, 10)])
    payments.append(["AMJ-2024", "no", None])
    payments.append(["Total", "yes", None])

    workbook.save(file_path)


@pytest.fixture
def schedule_workbook(tmp_path):
    path = tmp_path / "amc_schedule.xlsx"
    create_schedule_workbook(path)
    return path
