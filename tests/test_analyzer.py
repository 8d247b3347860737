from datetime import date, datetime
from decimal import Decimal

from expense_tracker.utils.analyzer import NO_TOP_CATEGORY, ExpenseAnalyzer

# Wednesday; the week started on Sunday 2026-01-11
AS_OF = datetime(2026, 1, 14, 18, 30)

sample_expenses = [
    {"id": "1", "title": "Lunch", "category": "Food", "amount": 100.0, "date": "2026-01-12"},
    {"id": "2", "title": "Uber ride", "category": "Transport", "amount": 50.0, "date": "2026-01-03"},
    {"id": "3", "title": "Netflix", "category": "Entertainment", "amount": 15.5, "date": "2025-12-28"},
    {"id": "4", "title": "Internet", "category": "Bills", "amount": 60.0, "date": "2025-11-02"},
]


def test_summary_scenario_over_budget():
    analyzer = ExpenseAnalyzer()
    expenses = sample_expenses[:2]
    summary = analyzer.summarize(expenses, {"month": "2026-01", "amount": 120}, AS_OF)

    assert summary.total_this_month == 150.0
    assert summary.remaining_budget_signed == -30.0
    assert summary.remaining_budget == 0.0
    assert summary.top_category_this_month == "Food"
    assert summary.budget_status == "exceeded"


def test_summary_totals_and_partition():
    analyzer = ExpenseAnalyzer()
    summary = analyzer.summarize(sample_expenses, None, AS_OF)

    assert summary.total_all == 225.5
    assert summary.total_this_month == 150.0
    assert summary.expense_count == 4
    assert sum(summary.per_category_this_month.values()) == summary.total_this_month
    assert set(summary.per_category_this_month) == {
        "Food", "Transport", "Bills", "Entertainment", "Shopping", "Other"
    }
    assert summary.per_category_this_month["Shopping"] == 0.0
    assert summary.category_chart == {"Food": 100.0, "Transport": 50.0}


def test_missing_budget_is_not_zero_budget():
    analyzer = ExpenseAnalyzer()
    summary = analyzer.summarize(sample_expenses, None, AS_OF)

    assert summary.budget is None
    assert summary.remaining_budget is None
    assert summary.remaining_budget_signed is None
    assert summary.budget_status == "no_budget"


def test_budget_for_another_month_is_ignored():
    analyzer = ExpenseAnalyzer()
    summary = analyzer.summarize(sample_expenses, {"month": "2025-12", "amount": 500}, AS_OF)
    assert summary.budget_status == "no_budget"


def test_budget_usage_bands():
    analyzer = ExpenseAnalyzer()
    expenses = [{"category": "Food", "amount": 85, "date": "2026-01-05"}]

    on_track = analyzer.summarize(expenses, {"month": "2026-01", "amount": 200}, AS_OF)
    warning = analyzer.summarize(expenses, {"month": "2026-01", "amount": 100}, AS_OF)

    assert on_track.budget_status == "on_track"
    assert on_track.remaining_budget == 115.0
    assert warning.budget_status == "warning"
    assert warning.budget_usage_percent == 85.0


def test_empty_collection_yields_zeros():
    analyzer = ExpenseAnalyzer()
    summary = analyzer.summarize([], None, AS_OF)

    assert summary.total_all == 0.0
    assert summary.total_this_month == 0.0
    assert summary.expense_count == 0
    assert summary.category_chart == {}
    assert summary.top_category_this_month == NO_TOP_CATEGORY


def test_top_category_none_sentinel_differs_from_other():
    analyzer = ExpenseAnalyzer()
    old_only = [{"category": "Other", "amount": 10, "date": "2025-06-01"}]
    assert analyzer.summarize(old_only, None, AS_OF).top_category_this_month == "None"

    this_month = [{"category": "Other", "amount": 10, "date": "2026-01-02"}]
    assert analyzer.summarize(this_month, None, AS_OF).top_category_this_month == "Other"


def test_malformed_records_are_excluded():
    analyzer = ExpenseAnalyzer()
    expenses = [
        {"category": "Food", "amount": 20, "date": "2026-01-02"},
        {"category": "Food", "amount": -5, "date": "2026-01-02"},
        {"category": "Food", "amount": "abc", "date": "2026-01-02"},
        {"category": "Shopping", "amount": 40, "date": "not-a-date"},
    ]
    summary = analyzer.summarize(expenses, None, AS_OF)

    assert summary.total_this_month == 20.0
    # Unparseable dates still count toward the all-time figures.
    assert summary.total_all == 60.0
    assert summary.expense_count == 4
    assert analyzer.weekly_trend(expenses, AS_OF).this_week_total == 0.0
    assert analyzer.forecast_month_end(expenses, AS_OF) == round(20 / 14 * 31, 2)


def test_weekly_trend():
    analyzer = ExpenseAnalyzer()
    expenses = [
        {"category": "Food", "amount": 60, "date": "2026-01-11"},  # Sunday, this week
        {"category": "Food", "amount": 40, "date": "2026-01-14"},
        {"category": "Food", "amount": 999, "date": "2026-01-15"},  # after as_of
        {"category": "Food", "amount": 80, "date": "2026-01-04"},  # last week start
        {"category": "Food", "amount": 20, "date": "2026-01-10"},  # last week end
        {"category": "Food", "amount": 500, "date": "2026-01-03"},  # two weeks ago
    ]
    trend = analyzer.weekly_trend(expenses, AS_OF)

    assert trend.week_start == "2026-01-11"
    assert trend.this_week_total == 100.0
    assert trend.last_week_total == 100.0
    assert trend.percent_change == 0.0
    assert trend.direction == "down"


def test_weekly_trend_percent_change():
    analyzer = ExpenseAnalyzer()
    expenses = [
        {"category": "Food", "amount": 150, "date": "2026-01-12"},
        {"category": "Food", "amount": 100, "date": "2026-01-06"},
    ]
    trend = analyzer.weekly_trend(expenses, AS_OF)
    assert trend.percent_change == 50.0
    assert trend.direction == "up"


def test_weekly_trend_without_baseline():
    analyzer = ExpenseAnalyzer()
    expenses = [{"category": "Food", "amount": 50, "date": "2026-01-12"}]
    trend = analyzer.weekly_trend(expenses, AS_OF)

    assert trend.last_week_total == 0.0
    assert trend.percent_change == 0.0
    assert trend.direction == "up"


def test_week_start_on_sunday_is_same_day():
    assert ExpenseAnalyzer.week_start(date(2026, 1, 11)) == date(2026, 1, 11)
    assert ExpenseAnalyzer.week_start(date(2026, 1, 17)) == date(2026, 1, 11)


def test_forecast_month_end():
    analyzer = ExpenseAnalyzer()
    # 150 spent over 14 days of a 31-day month
    assert analyzer.forecast_month_end(sample_expenses, AS_OF) == round(150 / 14 * 31, 2)


def test_forecast_first_day_of_month():
    analyzer = ExpenseAnalyzer()
    expenses = [{"category": "Food", "amount": 10, "date": "2026-02-01"}]
    assert analyzer.forecast_month_end(expenses, date(2026, 2, 1)) == 280.0


def test_forecast_zero_without_month_expenses():
    analyzer = ExpenseAnalyzer()
    for day in (1, 15, 31):
        assert analyzer.forecast_month_end(sample_expenses, date(2026, 3, day)) == 0.0


def test_spending_suggestion_texts():
    no_budget = ExpenseAnalyzer.spending_suggestion(300.0, None, "Food")
    within = ExpenseAnalyzer.spending_suggestion(300.0, 400.0, "Food")
    over = ExpenseAnalyzer.spending_suggestion(450.0, 400.0, "Food")

    assert "$300.00" in no_budget and "budget" not in no_budget
    assert within.startswith("Great job")
    assert "$50.00" in over and "Food" in over


def test_forecast_combines_projection_and_suggestion():
    analyzer = ExpenseAnalyzer()
    forecast = analyzer.forecast(sample_expenses, {"month": "2026-01", "amount": 200}, AS_OF)

    assert forecast.month == "2026-01"
    assert forecast.spent_so_far == 150.0
    assert forecast.projected_total == round(150 / 14 * 31, 2)
    assert forecast.top_category == "Food"
    assert forecast.suggestion.startswith("Warning")


def test_category_breakdown_adds_up_with_cent_amounts():
    analyzer = ExpenseAnalyzer()
    expenses = [
        {"category": "Food", "amount": 0.1, "date": "2026-01-02"},
        {"category": "Transport", "amount": 0.2, "date": "2026-01-03"},
        {"category": "Shopping", "amount": 19.99, "date": "2026-01-04"},
        {"category": "Food", "amount": 4.35, "date": "2026-01-05"},
        {"category": "Bills", "amount": 33.33, "date": "2026-01-06"},
    ]
    summary = analyzer.summarize(expenses, {"month": "2026-01", "amount": 100}, AS_OF)

    assert sum(summary.per_category_this_month.values()) == summary.total_this_month
    assert summary.total_this_month == Decimal("57.97")
    assert summary.per_category_this_month["Food"] == Decimal("4.45")
    assert summary.category_chart == {
        "Food": Decimal("4.45"),
        "Transport": Decimal("0.20"),
        "Shopping": Decimal("19.99"),
        "Bills": Decimal("33.33"),
    }
    assert summary.remaining_budget_signed == Decimal("42.03")
    assert summary.to_dict()["total_this_month"] == 57.97


def test_sub_cent_amounts_stay_consistent():
    analyzer = ExpenseAnalyzer()
    expenses = [
        {"category": "Food", "amount": 0.004, "date": "2026-01-02"},
        {"category": "Transport", "amount": 0.004, "date": "2026-01-03"},
    ]
    summary = analyzer.summarize(expenses, None, AS_OF)

    assert sum(summary.per_category_this_month.values()) == summary.total_this_month
    assert summary.total_this_month == Decimal("0.00")
    assert summary.category_chart == {}


def test_forecast_counts_sub_cent_spending():
    analyzer = ExpenseAnalyzer()
    expenses = [{"category": "Food", "amount": 0.004, "date": "2026-01-02"}]
    assert analyzer.forecast_month_end(expenses, date(2026, 1, 2)) == round(0.004 / 2 * 31, 2)
    assert analyzer.forecast_month_end(expenses, date(2026, 1, 1)) > 0
