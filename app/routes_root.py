# routes_root.py
"""
Root / basic endpoints (health, landing, category vocabulary).
"""

from fastapi import APIRouter
from fastapi.responses import RedirectResponse

from app.services.categories import ALL_CATEGORIES, EXPENSE_CATEGORIES, INCOME_CATEGORIES

router = APIRouter()


@router.get("/")
def read_root():
    """
    Landing endpoint: the dashboard is the home page.
    """
    return RedirectResponse(url="/dashboard", status_code=302)


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/api/categories")
def list_categories():
    """
    Category vocabulary used by the transaction and budget forms.
    """
    return {
        "expense": EXPENSE_CATEGORIES,
        "income": INCOME_CATEGORIES,
        "all": ALL_CATEGORIES,
    }
