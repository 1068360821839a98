# routes_budgets.py
"""
JSON API for budgets: list all, and create-or-replace one
(category, month, year) budget.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.deps import error_response, get_db
from app.schemas import BudgetIn, budget_to_dict, validate_payload
from app.services import storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/budgets")


@router.get("")
def list_budgets(db: Session = Depends(get_db)):
    return [budget_to_dict(b) for b in storage.list_budgets(db)]


@router.post("", status_code=201)
def set_budget(
    payload: Any = Body(None),
    db: Session = Depends(get_db),
):
    """
    Upsert: posting a budget for an existing (category, month, year)
    replaces its amount.
    """
    result = validate_payload(BudgetIn, payload)
    if not result.ok:
        logger.info("[budgets] rejected: %s", result.errors_as_dicts())
        return error_response("Invalid budget", 400, result.errors_as_dicts())

    data = result.value
    try:
        budget = storage.set_budget(db, data.category, data.month, data.year, data.amount)
    except IntegrityError:
        return error_response("Budget for this category, month, and year already exists.", 409)

    return budget_to_dict(budget)
