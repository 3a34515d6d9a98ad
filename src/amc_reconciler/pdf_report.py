"""PDF payment report using reportlab."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from amc_reconciler.config import Settings
from amc_reconciler.model import PaymentSummary, ReconciledQuarter
from amc_reconciler.reconcile import Instant
from amc_reconciler.report import SUMMARY_COLUMNS, dated_filename, format_amount, summary_rows

HEADER_BLUE = colors.Color(59 / 255, 130 / 255, 246 / 255)
DETAIL_COLUMNS = ("Quarter", "Amount", "Status", "Paid Date")


def _grid_table(head: Sequence[str], body: Sequence[Sequence[str]]) -> Table:
    table = Table([list(head)] + [list(row) for row in body], hAlign="LEFT")
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), HEADER_BLUE),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
            ]
        )
    )
    return table


def quarter_detail_rows(
    quarters: Sequence[ReconciledQuarter], currency_symbol: str = ""
) -> list[list[str]]:
    return [
        [
            q.quarter,
            format_amount(q.amount_with_tax, currency_symbol),
            q.status,
            q.payment_date or "-",
        ]
        for q in quarters
    ]


def build_pdf_elements(
    quarters: Sequence[ReconciledQuarter],
    summary: PaymentSummary,
    settings: Settings,
    now: Instant,
) -> list:
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "ReportTitle", parent=styles["Heading1"], fontSize=18,
        textColor=HEADER_BLUE, alignment=TA_CENTER,
    )
    generated_style = ParagraphStyle(
        "Generated", parent=styles["Normal"], fontSize=10,
        textColor=colors.HexColor("#646464"), alignment=TA_CENTER,
    )
    section_style = ParagraphStyle("Section", parent=styles["Heading2"], fontSize=14)

    # Helvetica has no rupee glyph, so amounts in the PDF use a plain prefix
    symbol = settings.currency_symbol if settings.currency_symbol.isascii() else "Rs. "

    elements = [
        Paragraph(settings.report_title, title_style),
        Paragraph(f"Generated on: {now.strftime('%d/%m/%Y')}", generated_style),
        Spacer(1, 20),
        Paragraph("Payment Summary", section_style),
        _grid_table(SUMMARY_COLUMNS, summary_rows(summary, symbol)),
        Spacer(1, 20),
        Paragraph("Quarter-wise Details", section_style),
        _grid_table(DETAIL_COLUMNS, quarter_detail_rows(quarters, symbol)),
    ]
    return elements


def write_pdf_report(
    quarters: Sequence[ReconciledQuarter],
    summary: PaymentSummary,
    settings: Settings,
    output_dir: Path,
    now: Instant,
    stem: str = "AMC_Report",
) -> Path:
    output_path = Path(output_dir) / dated_filename(stem, "pdf", now)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    doc = SimpleDocTemplate(
        str(output_path),
        pagesize=A4,
        leftMargin=0.75 * inch,
        rightMargin=0.75 * inch,
        title=settings.report_title,
    )
    doc.build(build_pdf_elements(quarters, summary, settings, now))
    return output_path


__all__ = ["build_pdf_elements", "quarter_detail_rows", "write_pdf_report"]
