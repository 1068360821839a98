# app/services/storage.py
#
# Storage adapter
# Thin CRUD functions over a SQLAlchemy Session for transactions and budgets.
# Callers pass already-validated data (see app/schemas.py).

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from models import Budget, Transaction
from app.services.import_helpers import build_transaction_from_dict

logger = logging.getLogger(__name__)


# ---- Transactions ----

def list_transactions(db: Session) -> List[Transaction]:
    """All transactions, newest first."""
    return (
        db.query(Transaction)
        .order_by(Transaction.date.desc(), Transaction.id.desc())
        .all()
    )


def get_transaction(db: Session, transaction_id: int) -> Optional[Transaction]:
    return db.get(Transaction, transaction_id)


def create_transaction(db: Session, data: Dict[str, Any]) -> Transaction:
    """
    Insert one transaction.

    `data` holds validated fields; a missing date means "now".
    """
    t = build_transaction_from_dict(data)

    db.add(t)
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("[transactions] insert failed: %r", data)
        raise
    db.refresh(t)

    logger.info("[transactions] created #%s %s %.2f %s", t.id, t.type, t.amount, t.category)
    return t


def update_transaction(
    db: Session,
    transaction_id: int,
    changes: Dict[str, Any],
) -> Optional[Transaction]:
    """
    Apply a partial update. Returns None when the id does not exist.
    """
    t = get_transaction(db, transaction_id)
    if t is None:
        return None

    for name, value in changes.items():
        setattr(t, name, value)

    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("[transactions] update of #%s failed", transaction_id)
        raise
    db.refresh(t)

    logger.info("[transactions] updated #%s fields=%s", t.id, sorted(changes))
    return t


def delete_transaction(db: Session, transaction_id: int) -> bool:
    t = get_transaction(db, transaction_id)
    if t is None:
        return False

    db.delete(t)
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("[transactions] delete of #%s failed", transaction_id)
        raise

    logger.info("[transactions] deleted #%s", transaction_id)
    return True


# ---- Budgets ----

def list_budgets(db: Session) -> List[Budget]:
    """All budgets, latest month first, then by category."""
    return (
        db.query(Budget)
        .order_by(Budget.year.desc(), Budget.month.desc(), Budget.category.asc())
        .all()
    )


def set_budget(db: Session, category: str, month: int, year: int, amount: float) -> Budget:
    """
    Create or replace the budget for (category, month, year).

    Afterwards exactly one row exists for the key and it holds `amount`.
    """
    budget = (
        db.query(Budget)
        .filter(Budget.category == category, Budget.month == month, Budget.year == year)
        .one_or_none()
    )

    if budget is None:
        budget = Budget(category=category, month=month, year=year, amount=float(amount))
        db.add(budget)
    else:
        budget.amount = float(amount)

    try:
        db.commit()
    except Exception:
        # IntegrityError here means a concurrent insert won the unique key
        db.rollback()
        logger.exception("[budgets] upsert failed for %s %s/%s", category, month, year)
        raise
    db.refresh(budget)

    logger.info("[budgets] upserted %s %s/%s -> %.2f", category, month, year, budget.amount)
    return budget
