import csv
import io
from typing import Any, Dict, List

from fpdf import FPDF
from fpdf.enums import XPos, YPos

CSV_FIELDS = ["id", "title", "amount", "date", "category", "description"]


def _line(pdf: FPDF, text: str) -> None:
    pdf.cell(0, 10, text, new_x=XPos.LMARGIN, new_y=YPos.NEXT)


def generate_pdf(month: str, summary: Dict[str, Any], expenses: List[Dict[str, Any]]) -> bytes:
    """Render a month's summary and its expense list as a PDF document."""
    pdf = FPDF()
    pdf.add_page()
    pdf.set_font("Helvetica", "B", 16)
    _line(pdf, f"Monthly Report - {month}")

    pdf.set_font("Helvetica", "", 12)
    _line(pdf, f"Total Spent: ${summary['total_this_month']:.2f}")
    _line(pdf, f"Expenses Recorded: {len(expenses)}")
    if summary.get("budget") is None:
        _line(pdf, "Budget: not set")
    else:
        _line(pdf, f"Budget: ${summary['budget']:.2f}")
        _line(pdf, f"Remaining: ${summary['remaining_budget_signed']:.2f} ({summary['budget_status']})")
    _line(pdf, f"Top Category: {summary['top_category_this_month']}")
    pdf.ln(5)

    pdf.set_font("Helvetica", "B", 12)
    _line(pdf, "Spending by Category:")
    pdf.set_font("Helvetica", "", 12)
    if summary["category_chart"]:
        for cat, amt in summary["category_chart"].items():
            _line(pdf, f"- {cat}: ${amt:.2f}")
    else:
        _line(pdf, "None")

    pdf.ln(5)
    pdf.set_font("Helvetica", "B", 12)
    _line(pdf, "Expenses:")
    pdf.set_font("Helvetica", "", 10)
    for e in expenses:
        title = str(e.get("title", "")).encode("latin-1", "replace").decode("latin-1")
        _line(pdf, f"{e.get('date', '')}  {e.get('category', '')}  {title}  ${float(e.get('amount', 0)):.2f}")

    return bytes(pdf.output())


def generate_csv(expenses: List[Dict[str, Any]]) -> str:
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=CSV_FIELDS, extrasaction="ignore")
    writer.writeheader()
    for e in expenses:
        writer.writerow({
            "id": e.get("id", ""),
            "title": e.get("title", ""),
            "amount": e.get("amount", 0),
            "date": e.get("date", ""),
            "category": e.get("category", ""),
            "description": e.get("description", ""),
        })
    return output.getvalue()
