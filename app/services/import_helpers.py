# app/services/import_helpers.py
#
# Import Helper Functions
# Converts validated transaction dicts into ORM models and parses the
# "YYYY-MM" month selector used by the dashboard.

from datetime import date, datetime
from typing import Optional, Tuple

from models import Transaction


# ---- Transaction Conversion ----

def build_transaction_from_dict(tx: dict) -> Transaction:
    """
    Convert one validated tx dict (API payload or CSV row) into a
    Transaction ORM object. A missing date means "now".
    """
    date_raw = tx.get("date")
    if isinstance(date_raw, str):
        date_parsed = datetime.strptime(date_raw, "%Y-%m-%d")
    elif isinstance(date_raw, date) and not isinstance(date_raw, datetime):
        date_parsed = datetime(date_raw.year, date_raw.month, date_raw.day)
    else:
        date_parsed = date_raw or datetime.now()

    return Transaction(
        amount=float(tx["amount"]),
        date=date_parsed,
        description=tx.get("description", ""),
        type=tx.get("type") or "expense",
        category=tx.get("category") or "Other",
    )


# ---- Month Selector ----

# Four-digit years only; the labels rendered from them go through datetime.date
MIN_YEAR = 2000
MAX_YEAR = 9999


def parse_month_param(month_str: Optional[str]) -> Tuple[int, int, str]:
    """
    month_str: 'YYYY-MM' or None.
    Returns (month, year, normalized_month_str).
    If month_str is None, malformed or outside MIN_YEAR..MAX_YEAR, uses the CURRENT month.
    """
    today = date.today()

    if month_str:
        try:
            year_str, month_only_str = month_str.strip().split("-")
            year = int(year_str)
            month = int(month_only_str)
            if not (1 <= month <= 12) or not (MIN_YEAR <= year <= MAX_YEAR):
                raise ValueError
        except ValueError:
            year, month = today.year, today.month
    else:
        year, month = today.year, today.month

    normalized = f"{year:04d}-{month:02d}"
    return month, year, normalized
