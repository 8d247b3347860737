import calendar
import logging
from datetime import date

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from expense_tracker.db import dynamo
from expense_tracker.models.expense import utc_today
from expense_tracker.routers.budgets import validate_month
from expense_tracker.utils import pdf_report
from expense_tracker.utils.analyzer import ExpenseAnalyzer
from expense_tracker.utils.filters import sort_newest_first

router = APIRouter()
logger = logging.getLogger(__name__)
expense_analyzer = ExpenseAnalyzer()


def month_as_of(month: str) -> date:
    """Reference day for a month report: today for the running month, else its last day."""
    year, month_number = (int(part) for part in validate_month(month).split("-"))
    today = utc_today()
    if (today.year, today.month) == (year, month_number):
        return today
    return date(year, month_number, calendar.monthrange(year, month_number)[1])


@router.get("/{month}/pdf")
def export_monthly_pdf(month: str) -> Response:
    """
    PDF report for the given month (e.g., '2026-01'): summary metrics and the month's expenses.
    """
    as_of = month_as_of(month)
    try:
        logger.info(f"Generating PDF report for month: {month}")
        expenses = dynamo.list_expenses()
        month_expenses = sort_newest_first(expense_analyzer.month_expenses(expenses, as_of))
        if not month_expenses:
            raise HTTPException(status_code=404, detail="No expenses found for this month.")

        summary = expense_analyzer.summarize(expenses, dynamo.get_budget(month), as_of)
        content = pdf_report.generate_pdf(month, summary.to_dict(), month_expenses)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error generating report: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")

    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="expenses-{month}.pdf"'},
    )


@router.get("/{month}/csv")
def export_monthly_csv(month: str) -> Response:
    as_of = month_as_of(month)
    expenses = sort_newest_first(expense_analyzer.month_expenses(dynamo.list_expenses(), as_of))
    if not expenses:
        raise HTTPException(status_code=404, detail="No expenses found for this month.")

    logger.info(f"Exporting {len(expenses)} expenses for {month} as CSV")
    return Response(
        content=pdf_report.generate_csv(expenses),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="expenses-{month}.csv"'},
    )
