from __future__ import annotations

import calendar
from dataclasses import dataclass, asdict
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

from expense_tracker.models.expense import Category

NO_TOP_CATEGORY = "None"

WARNING_USAGE_PERCENT = 80.0
EXCEEDED_USAGE_PERCENT = 100.0

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def parse_amount(expense: Dict[str, Any]) -> Optional[float]:
    """Positive amount of a record, or None when it is missing or malformed."""
    try:
        amount = float(expense.get("amount"))
    except (TypeError, ValueError):
        return None
    if amount != amount or amount <= 0:
        return None
    return amount


def to_money(value: Any) -> Decimal:
    """Round to whole cents, half up."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def exact_sum(expenses: List[Dict[str, Any]]) -> Decimal:
    """Unrounded Decimal sum of the valid amounts."""
    total = Decimal(0)
    for amount in map(parse_amount, expenses):
        if amount is not None:
            total += Decimal(str(amount))
    return total


def parse_date(expense: Dict[str, Any]) -> Optional[date]:
    value = expense.get("date")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def _as_date(as_of: date | datetime) -> date:
    return as_of.date() if isinstance(as_of, datetime) else as_of


def _category_of(expense: Dict[str, Any]) -> Category:
    try:
        return Category(expense.get("category"))
    except ValueError:
        return Category.OTHER


def _plain(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value


@dataclass
class Summary:
    """
    Dashboard metrics for one snapshot of the expense collection.

    Money fields are Decimal cents. ``total_this_month`` is the sum of the
    rounded category totals, so the breakdown always adds up to it exactly.
    """

    total_all: Decimal
    total_this_month: Decimal
    per_category_this_month: Dict[str, Decimal]
    category_chart: Dict[str, Decimal]
    top_category_this_month: str
    expense_count: int
    budget: Optional[Decimal] = None
    remaining_budget: Optional[Decimal] = None
    remaining_budget_signed: Optional[Decimal] = None
    budget_usage_percent: Optional[float] = None
    budget_status: str = "no_budget"

    def to_dict(self) -> Dict[str, Any]:
        return {k: _plain(v) for k, v in asdict(self).items()}


@dataclass
class WeeklyTrend:
    this_week_total: float
    last_week_total: float
    percent_change: float
    direction: str
    week_start: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Forecast:
    month: str
    spent_so_far: float
    daily_burn_rate: float
    projected_total: float
    budget: Optional[float] = None
    suggestion: str = ""
    top_category: str = NO_TOP_CATEGORY

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ExpenseAnalyzer:
    """
    Analytics over an in-memory snapshot of expense records.

    Every date-scoped computation takes an explicit ``as_of`` so results do
    not depend on the wall clock. Records with a non-positive or malformed
    amount never contribute to a sum. Records whose date cannot be parsed are
    left out of month, week and forecast figures but still count toward the
    all-time total and the record count.
    """

    def __init__(
        self,
        warning_usage_percent: float = WARNING_USAGE_PERCENT,
        exceeded_usage_percent: float = EXCEEDED_USAGE_PERCENT,
    ) -> None:
        self._warning_usage_percent = warning_usage_percent
        self._exceeded_usage_percent = exceeded_usage_percent

    def total(self, expenses: List[Dict[str, Any]]) -> Decimal:
        return to_money(exact_sum(expenses))

    def month_expenses(self, expenses: List[Dict[str, Any]], as_of: date | datetime) -> List[Dict[str, Any]]:
        day = _as_date(as_of)
        scoped = []
        for exp in expenses:
            exp_date = parse_date(exp)
            if exp_date and exp_date.year == day.year and exp_date.month == day.month:
                scoped.append(exp)
        return scoped

    def monthly_total(self, expenses: List[Dict[str, Any]], as_of: date | datetime) -> Decimal:
        return self.total(self.month_expenses(expenses, as_of))

    def category_totals(self, expenses: List[Dict[str, Any]]) -> Dict[str, Decimal]:
        """Sum per category for all six categories, zeros included."""
        grouped: Dict[str, List[Dict[str, Any]]] = {category.value: [] for category in Category}
        for exp in expenses:
            grouped[_category_of(exp).value].append(exp)
        return {cat: self.total(items) for cat, items in grouped.items()}

    @staticmethod
    def top_category(category_totals: Dict[str, Decimal]) -> str:
        top, top_total = NO_TOP_CATEGORY, ZERO
        for category, total in category_totals.items():
            if total > top_total:
                top, top_total = category, total
        return top

    @staticmethod
    def budget_for_month(budget: Optional[Dict[str, Any]], as_of: date | datetime) -> Optional[float]:
        """Budget amount when ``budget`` belongs to the month of ``as_of``."""
        if not budget:
            return None
        if budget.get("month") != _as_date(as_of).strftime("%Y-%m"):
            return None
        return parse_amount(budget)

    def budget_status(self, usage_percent: Optional[float]) -> str:
        if usage_percent is None:
            return "no_budget"
        if usage_percent >= self._exceeded_usage_percent:
            return "exceeded"
        if usage_percent >= self._warning_usage_percent:
            return "warning"
        return "on_track"

    def summarize(
        self,
        expenses: List[Dict[str, Any]],
        budget: Optional[Dict[str, Any]],
        as_of: date | datetime,
    ) -> Summary:
        this_month = self.month_expenses(expenses, as_of)
        per_category = self.category_totals(this_month)
        total_this_month = sum(per_category.values(), ZERO)

        summary = Summary(
            total_all=self.total(expenses),
            total_this_month=total_this_month,
            per_category_this_month=per_category,
            category_chart={cat: total for cat, total in per_category.items() if total > 0},
            top_category_this_month=self.top_category(per_category),
            expense_count=len(expenses),
        )

        # Budget remaining is always measured against the month total.
        budget_amount = self.budget_for_month(budget, as_of)
        if budget_amount is not None:
            budget_money = to_money(budget_amount)
            signed = budget_money - total_this_month
            summary.budget = budget_money
            summary.remaining_budget_signed = signed
            summary.remaining_budget = max(signed, ZERO)
            summary.budget_usage_percent = round(float(total_this_month / budget_money * 100), 2)
            summary.budget_status = self.budget_status(summary.budget_usage_percent)
        return summary

    @staticmethod
    def week_start(as_of: date | datetime) -> date:
        """Most recent Sunday on or before ``as_of``."""
        day = _as_date(as_of)
        days_since_sunday = (day.weekday() + 1) % 7
        return day - timedelta(days=days_since_sunday)

    def weekly_trend(self, expenses: List[Dict[str, Any]], as_of: date | datetime) -> WeeklyTrend:
        today = _as_date(as_of)
        start = self.week_start(today)
        last_start = start - timedelta(days=7)

        this_week = []
        last_week = []
        for exp in expenses:
            exp_date = parse_date(exp)
            if exp_date is None:
                continue
            if start <= exp_date <= today:
                this_week.append(exp)
            elif last_start <= exp_date < start:
                last_week.append(exp)

        this_total = self.total(this_week)
        last_total = self.total(last_week)

        # No baseline last week reports 0 rather than an infinite change.
        if last_total > 0:
            percent_change = round(float((this_total - last_total) / last_total * 100), 2)
        else:
            percent_change = 0.0

        return WeeklyTrend(
            this_week_total=float(this_total),
            last_week_total=float(last_total),
            percent_change=percent_change,
            direction="up" if this_total > last_total else "down",
            week_start=start.isoformat(),
        )

    def forecast_month_end(self, expenses: List[Dict[str, Any]], as_of: date | datetime) -> float:
        """Linear projection of the month-end total from the daily burn rate."""
        day = _as_date(as_of)
        this_month = self.month_expenses(expenses, day)
        if not any(parse_amount(exp) is not None for exp in this_month):
            return 0.0
        days_in_month = calendar.monthrange(day.year, day.month)[1]
        return round(float(exact_sum(this_month)) / day.day * days_in_month, 2)

    @staticmethod
    def spending_suggestion(projected_total: float, budget: Optional[float], top_category: str) -> str:
        if budget is None:
            return f"You are on track to spend ${projected_total:.2f} this month."
        if projected_total <= budget:
            return (
                f"Great job! You are projected to spend ${projected_total:.2f}, "
                f"within your ${budget:.2f} budget."
            )
        overage = projected_total - budget
        return (
            f"Warning: you are projected to exceed your budget by ${overage:.2f}. "
            f"Consider cutting back on {top_category}."
        )

    def forecast(
        self,
        expenses: List[Dict[str, Any]],
        budget: Optional[Dict[str, Any]],
        as_of: date | datetime,
    ) -> Forecast:
        day = _as_date(as_of)
        spent = float(self.monthly_total(expenses, day))
        projected = self.forecast_month_end(expenses, day)
        budget_amount = self.budget_for_month(budget, day)
        top = self.top_category(self.category_totals(self.month_expenses(expenses, day)))

        return Forecast(
            month=day.strftime("%Y-%m"),
            spent_so_far=spent,
            daily_burn_rate=round(spent / day.day, 2),
            projected_total=projected,
            budget=budget_amount,
            suggestion=self.spending_suggestion(projected, budget_amount, top),
            top_category=top,
        )
