# models.py
# Role: SQLAlchemy ORM models for the finance tracker domain.
#       Defines Transaction (a single dated income/expense) and
#       Budget (a monthly spending limit for one category).

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, Integer, String, UniqueConstraint

from db import Base


def _utcnow():
    # Naive UTC, matching the naive DateTime columns
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Transaction(Base):
    """
    ORM model representing a single financial transaction.

    Amounts are always positive; the direction comes from `type`
    ("expense" or "income").
    """

    __tablename__ = "transactions"

    # Primary key
    id = Column(Integer, primary_key=True, index=True)

    # Positive amount, currency-agnostic
    amount = Column(Float, nullable=False)

    # When the money moved (drives monthly bucketing on the dashboard)
    date = Column(DateTime, nullable=False, index=True)

    description = Column(String(200), nullable=False)

    # "expense" or "income"
    type = Column(String(16), nullable=False, default="expense")

    category = Column(String, nullable=False, default="Other")

    created_at = Column(DateTime, nullable=False, default=_utcnow)
    updated_at = Column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    def __repr__(self) -> str:
        return f"<Transaction id={self.id} {self.type} {self.amount} {self.category!r} {self.date}>"


class Budget(Base):
    """
    ORM model for a per-category monthly budget.

    At most one row exists per (category, month, year); setting a budget
    for an existing key overwrites its amount (see storage.set_budget).
    """

    __tablename__ = "budgets"
    __table_args__ = (
        UniqueConstraint("category", "month", "year", name="uq_budget_category_month_year"),
    )

    id = Column(Integer, primary_key=True, index=True)

    category = Column(String, nullable=False)

    # Allocated limit, >= 0
    amount = Column(Float, nullable=False)

    # 1-12
    month = Column(Integer, nullable=False)

    # >= 2000
    year = Column(Integer, nullable=False)

    created_at = Column(DateTime, nullable=False, default=_utcnow)
    updated_at = Column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    def __repr__(self) -> str:
        return f"<Budget {self.category!r} {self.month}/{self.year} {self.amount}>"
