# app/services/aggregation.py
#
# Dashboard aggregation engine.
# Turns the full list of transactions and budgets into the numbers shown on the
# dashboard: totals, spending by category, spending by month, budget vs actual
# for one reference month, and a short list of spending insights.
#
# Every function here is pure: inputs are only read, never modified, and the
# same inputs always give the same output. Records are duck-typed, so ORM rows
# (models.Transaction / models.Budget) and plain objects with the same
# attributes both work.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from app.services.categories import EXPENSE_CATEGORIES, FALLBACK_CATEGORY

logger = logging.getLogger(__name__)

EXPENSE = "expense"
INCOME = "income"

CURRENCY_PREFIX = "$"


# ---- Result types ----

@dataclass(frozen=True)
class TotalsSummary:
    total_income: float = 0.0
    total_expenses: float = 0.0
    net_balance: float = 0.0


@dataclass(frozen=True)
class CategoryTotal:
    name: str
    value: float


@dataclass(frozen=True)
class MonthlyExpense:
    bucket: str  # "YYYY-MM", drives ordering
    label: str   # "Jan 2024", display only
    expenses: float


@dataclass(frozen=True)
class BudgetComparison:
    category: str
    budgeted: float
    actual: float


@dataclass(frozen=True)
class DashboardSummary:
    ref_month: int
    ref_year: int
    month_label: str
    totals: TotalsSummary
    category_breakdown: List[CategoryTotal] = field(default_factory=list)
    monthly_series: List[MonthlyExpense] = field(default_factory=list)
    budget_reconciliation: List[BudgetComparison] = field(default_factory=list)
    insights: List[str] = field(default_factory=list)
    recent_transactions: List[Any] = field(default_factory=list)


# ---- Small helpers ----

def format_currency(value: float) -> str:
    """Money as shown to the user: fixed prefix, two decimals."""
    return f"{CURRENCY_PREFIX}{value:.2f}"


def resolve_reference(ref_month: Optional[int] = None, ref_year: Optional[int] = None) -> Tuple[int, int]:
    """Fill a missing reference month/year from today's date."""
    today = date.today()
    month = ref_month if ref_month is not None else today.month
    year = ref_year if ref_year is not None else today.year
    return month, year


def month_label(month: int, year: int) -> str:
    """'January 2024'"""
    return date(year, month, 1).strftime("%B %Y")


def _category_of(tx) -> str:
    return getattr(tx, "category", None) or FALLBACK_CATEGORY


def _is_expense(tx) -> bool:
    return getattr(tx, "type", None) == EXPENSE


def _in_month(tx, month: int, year: int) -> bool:
    d = tx.date
    return d.month == month and d.year == year


def _expenses_in_month(transactions: Iterable, month: int, year: int) -> List:
    return [t for t in transactions if _is_expense(t) and _in_month(t, month, year)]


# ---- 1) Totals ----

def compute_totals(transactions: Iterable) -> TotalsSummary:
    """
    Sum income and expenses over all transactions.

    Transactions with any other `type` are ignored by both sums.
    """
    income = 0.0
    expenses = 0.0

    for t in transactions:
        if _is_expense(t):
            expenses += t.amount
        elif getattr(t, "type", None) == INCOME:
            income += t.amount

    return TotalsSummary(
        total_income=income,
        total_expenses=expenses,
        net_balance=income - expenses,
    )


# ---- 2) Spending by category ----

def compute_category_breakdown(transactions: Iterable) -> List[CategoryTotal]:
    """
    Expense totals per category, biggest first.

    Expenses without a category count as "Other". Ties keep the order in
    which the categories were first seen (sorted() is stable).
    """
    per_category: Dict[str, float] = {}

    for t in transactions:
        if not _is_expense(t):
            continue
        category = _category_of(t)
        per_category[category] = per_category.get(category, 0.0) + t.amount

    items = [CategoryTotal(name=name, value=value) for name, value in per_category.items()]
    return sorted(items, key=lambda item: item.value, reverse=True)


# ---- 3) Spending by month ----

def compute_monthly_series(transactions: Iterable) -> List[MonthlyExpense]:
    """
    Expense totals per calendar month of the transaction date, oldest first.
    """
    per_month: Dict[str, float] = {}

    for t in transactions:
        if not _is_expense(t):
            continue
        bucket = f"{t.date.year:04d}-{t.date.month:02d}"
        per_month[bucket] = per_month.get(bucket, 0.0) + t.amount

    series: List[MonthlyExpense] = []
    # Zero-padded "YYYY-MM" sorts chronologically
    for bucket in sorted(per_month):
        year_str, month_str = bucket.split("-")
        label = date(int(year_str), int(month_str), 1).strftime("%b %Y")
        series.append(MonthlyExpense(bucket=bucket, label=label, expenses=per_month[bucket]))

    return series


# ---- 4) Budget vs actual ----

def compute_budget_reconciliation(
    transactions: Iterable,
    budgets: Iterable,
    ref_month: Optional[int] = None,
    ref_year: Optional[int] = None,
) -> List[BudgetComparison]:
    """
    Budget vs actual spending per category for the reference month.

    Categories considered: the fixed expense vocabulary plus any category
    that has spending in the reference month. A category is listed only if
    it has a budget or spending (or both).
    """
    month, year = resolve_reference(ref_month, ref_year)

    actual_by_category: Dict[str, float] = {}
    for t in _expenses_in_month(transactions, month, year):
        category = _category_of(t)
        actual_by_category[category] = actual_by_category.get(category, 0.0) + t.amount

    # First budget wins if storage ever hands us duplicates for a key
    budget_by_category: Dict[str, float] = {}
    for b in budgets:
        if b.month == month and b.year == year and b.category not in budget_by_category:
            budget_by_category[b.category] = b.amount

    # Ordered union: vocabulary first, then ad-hoc categories as first seen
    universe = list(dict.fromkeys([*EXPENSE_CATEGORIES, *actual_by_category]))

    rows: List[BudgetComparison] = []
    for category in universe:
        budgeted = budget_by_category.get(category, 0.0)
        actual = actual_by_category.get(category, 0.0)
        if budgeted > 0 or actual > 0:
            rows.append(BudgetComparison(category=category, budgeted=budgeted, actual=actual))

    return rows


# ---- 5) Insights ----

def generate_insights(
    transactions: Sequence,
    budgets: Sequence,
    breakdown: Sequence[CategoryTotal],
    series: Sequence[MonthlyExpense],
    ref_month: Optional[int] = None,
    ref_year: Optional[int] = None,
) -> List[str]:
    """
    Build the spending insight messages, always in this order:

    1. budget status for the reference month (always present)
    2. top expense category (only if `breakdown` is not empty)
    3. trend between the last two months of `series` (only with 2+ months)

    Rule 1 compares the whole month: every budget of the month against every
    expense of the month, including categories that have no budget. It is
    computed independently of compute_budget_reconciliation().
    """
    month, year = resolve_reference(ref_month, ref_year)
    period = month_label(month, year)
    insights: List[str] = []

    # 1) Budget status
    total_budget = sum(b.amount for b in budgets if b.month == month and b.year == year)
    total_actual = sum(t.amount for t in _expenses_in_month(transactions, month, year))

    if total_budget == 0:
        insights.append(
            f"There are no budgets set for {period}. Set some budgets to get spending insights!"
        )
    else:
        difference = total_budget - total_actual
        if difference > 0:
            insights.append(
                f"You are under budget by {format_currency(difference)} this month ({period})!"
            )
        elif difference < 0:
            insights.append(
                f"You are over budget by {format_currency(-difference)} this month ({period}). "
                "Consider reviewing your spending."
            )
        else:
            insights.append(f"You are exactly on budget this month ({period}). Great job!")

    # 2) Top category
    if breakdown:
        top = breakdown[0]
        insights.append(
            f'Your top expense category is "{top.name}" ({format_currency(top.value)}).'
        )

    # 3) Trend between the last two months
    if len(series) >= 2:
        previous, current = series[-2], series[-1]
        delta = current.expenses - previous.expenses
        if delta > 0:
            insights.append(
                f"Your spending increased by {format_currency(delta)} "
                f"from {previous.label} to {current.label}."
            )
        elif delta < 0:
            insights.append(
                f"Your spending decreased by {format_currency(-delta)} "
                f"from {previous.label} to {current.label}."
            )
        else:
            insights.append(
                f"Your spending remained consistent between {previous.label} and {current.label}."
            )

    return insights


# ---- Dashboard bundle ----

def recent_transactions(transactions: Iterable, limit: int = 5) -> List:
    """Most recent transactions by date, newest first."""
    if limit <= 0:
        return []
    return sorted(transactions, key=lambda t: t.date, reverse=True)[:limit]


def build_dashboard(
    transactions: Sequence,
    budgets: Sequence,
    ref_month: Optional[int] = None,
    ref_year: Optional[int] = None,
    recent_limit: int = 5,
) -> DashboardSummary:
    """
    Run every aggregation once for a dashboard render.
    """
    month, year = resolve_reference(ref_month, ref_year)

    totals = compute_totals(transactions)
    breakdown = compute_category_breakdown(transactions)
    series = compute_monthly_series(transactions)
    reconciliation = compute_budget_reconciliation(transactions, budgets, month, year)
    insights = generate_insights(transactions, budgets, breakdown, series, month, year)

    logger.debug(
        "[dashboard] %d transactions, %d budgets -> %d categories, %d months, %d insights",
        len(transactions),
        len(budgets),
        len(breakdown),
        len(series),
        len(insights),
    )

    return DashboardSummary(
        ref_month=month,
        ref_year=year,
        month_label=month_label(month, year),
        totals=totals,
        category_breakdown=breakdown,
        monthly_series=series,
        budget_reconciliation=reconciliation,
        insights=insights,
        recent_transactions=recent_transactions(transactions, recent_limit),
    )
