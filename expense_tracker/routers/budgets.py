import logging
import re

from fastapi import APIRouter, HTTPException

from expense_tracker.db import dynamo
from expense_tracker.models.budget import MONTH_PATTERN, BudgetInDB, BudgetPublic, BudgetUpsert

router = APIRouter()
logger = logging.getLogger(__name__)


def validate_month(month: str) -> str:
    if not re.match(MONTH_PATTERN, month):
        raise HTTPException(status_code=400, detail="Month must follow YYYY-MM format")
    return month


@router.get("/{month}", response_model=BudgetPublic)
def get_budget(month: str):
    """
    month must follow YYYY-MM format. Example: 2026-01
    """
    budget = dynamo.get_budget(validate_month(month))
    if not budget:
        raise HTTPException(status_code=404, detail="No budget set for this month")
    return BudgetPublic(**budget)


@router.put("/{month}", response_model=BudgetPublic)
def set_budget(month: str, budget: BudgetUpsert):
    """Create the month's budget or update the existing one."""
    budget_db = BudgetInDB(month=validate_month(month), amount=budget.amount)
    success = dynamo.upsert_budget(budget_db.model_dump())
    if not success:
        raise HTTPException(status_code=500, detail="Failed to save budget")
    logger.info(f"Budget for {month} set to {budget.amount}")
    return BudgetPublic(**budget_db.model_dump())
