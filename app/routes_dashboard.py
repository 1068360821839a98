# app/routes_dashboard.py

from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from .deps import get_db, templates
from app.schemas import transaction_to_dict
from app.services import storage
from app.services.aggregation import DashboardSummary, build_dashboard, format_currency
from app.services.import_helpers import parse_month_param

router = APIRouter()


def _load_dashboard(request: Request, db: Session, month: str | None):
    ref_month, ref_year, normalized = parse_month_param(month)

    # Full snapshot of both collections; every render recomputes from scratch
    transactions = storage.list_transactions(db)
    budgets = storage.list_budgets(db)

    settings = request.app.state.settings
    summary = build_dashboard(
        transactions,
        budgets,
        ref_month,
        ref_year,
        recent_limit=settings.recent_limit,
    )
    return summary, normalized


def dashboard_to_dict(summary: DashboardSummary, normalized_month: str) -> dict:
    return {
        "month": normalized_month,
        "month_label": summary.month_label,
        "totals": asdict(summary.totals),
        "category_breakdown": [asdict(item) for item in summary.category_breakdown],
        "monthly_series": [asdict(item) for item in summary.monthly_series],
        "budget_reconciliation": [asdict(item) for item in summary.budget_reconciliation],
        "insights": list(summary.insights),
        "recent_transactions": [transaction_to_dict(t) for t in summary.recent_transactions],
    }


@router.get("/api/dashboard")
def dashboard_data(
    request: Request,
    month: str | None = Query(None),
    db: Session = Depends(get_db),
):
    summary, normalized = _load_dashboard(request, db, month)
    return dashboard_to_dict(summary, normalized)


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard_page(
    request: Request,
    month: str | None = Query(None),
    db: Session = Depends(get_db),
):
    summary, normalized = _load_dashboard(request, db, month)

    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "today": date.today(),
            "current_month": normalized,
            "summary": summary,
            "money": format_currency,
        },
    )
