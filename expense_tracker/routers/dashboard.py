"""
Dashboard Router
Summary metrics, week-over-week trend and month-end forecast
"""
from datetime import datetime
from typing import Dict, Optional

from fastapi import APIRouter, Query

from expense_tracker.db import dynamo
from expense_tracker.utils.analyzer import ExpenseAnalyzer

router = APIRouter()
expense_analyzer = ExpenseAnalyzer()


def resolve_as_of(as_of: Optional[datetime]) -> datetime:
    return as_of or datetime.utcnow()


@router.get("/summary")
def get_summary(as_of: Optional[datetime] = Query(default=None)) -> Dict:
    now = resolve_as_of(as_of)
    expenses = dynamo.list_expenses()
    budget = dynamo.get_budget(now.strftime("%Y-%m"))
    return expense_analyzer.summarize(expenses, budget, now).to_dict()


@router.get("/trend")
def get_weekly_trend(as_of: Optional[datetime] = Query(default=None)) -> Dict:
    now = resolve_as_of(as_of)
    return expense_analyzer.weekly_trend(dynamo.list_expenses(), now).to_dict()


@router.get("/forecast")
def get_forecast(as_of: Optional[datetime] = Query(default=None)) -> Dict:
    now = resolve_as_of(as_of)
    expenses = dynamo.list_expenses()
    budget = dynamo.get_budget(now.strftime("%Y-%m"))
    return expense_analyzer.forecast(expenses, budget, now).to_dict()
