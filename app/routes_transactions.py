# routes_transactions.py
"""
JSON API for transactions: list, create, read, update, delete.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from app.deps import error_response, get_db
from app.schemas import TransactionIn, TransactionUpdate, transaction_to_dict, validate_payload
from app.services import storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transactions")

NOT_FOUND = "Transaction not found"


@router.get("")
def list_transactions(db: Session = Depends(get_db)):
    """
    All transactions, newest first.
    """
    return [transaction_to_dict(t) for t in storage.list_transactions(db)]


@router.post("", status_code=201)
def create_transaction(
    payload: Any = Body(None),
    db: Session = Depends(get_db),
):
    result = validate_payload(TransactionIn, payload)
    if not result.ok:
        logger.info("[transactions] rejected create: %s", result.errors_as_dicts())
        return error_response("Invalid transaction", 400, result.errors_as_dicts())

    t = storage.create_transaction(db, result.value.model_dump())
    return transaction_to_dict(t)


@router.get("/{transaction_id}")
def get_transaction(transaction_id: int, db: Session = Depends(get_db)):
    t = storage.get_transaction(db, transaction_id)
    if t is None:
        return error_response(NOT_FOUND, 404)
    return transaction_to_dict(t)


@router.put("/{transaction_id}")
def update_transaction(
    transaction_id: int,
    payload: Any = Body(None),
    db: Session = Depends(get_db),
):
    """
    Partial update: only the fields present in the body are changed.
    """
    result = validate_payload(TransactionUpdate, payload)
    if not result.ok:
        logger.info("[transactions] rejected update of #%s: %s", transaction_id, result.errors_as_dicts())
        return error_response("Invalid transaction", 400, result.errors_as_dicts())

    t = storage.update_transaction(db, transaction_id, result.value.changes())
    if t is None:
        return error_response(NOT_FOUND, 404)
    return transaction_to_dict(t)


@router.delete("/{transaction_id}")
def delete_transaction(transaction_id: int, db: Session = Depends(get_db)):
    if not storage.delete_transaction(db, transaction_id):
        return error_response(NOT_FOUND, 404)
    return {"message": "Transaction deleted successfully"}
