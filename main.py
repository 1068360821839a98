# main.py
# Role: Application entry point for the finance tracker.
#       Builds the FastAPI app, wires the Database object into it,
#       creates database tables on startup, and registers all route modules.

"""
Main FastAPI app for the personal finance tracker.

Here we only:
- configure logging
- create the Database object (engine is built on startup)
- create DB tables
- include route modules

Run with:
    uvicorn main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from config import Settings, get_settings
from db import Database
import models  # noqa: F401  (registers ORM tables on Base.metadata)
from app.routes_root import router as root_router
from app.routes_transactions import router as transactions_router
from app.routes_budgets import router as budgets_router
from app.routes_dashboard import router as dashboard_router

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    settings = settings or get_settings()
    database = database or Database(settings.database_url, echo=settings.sql_echo)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Single initialization point; init() is a no-op if already done
        database.init()
        database.create_tables()
        logger.info("[startup] finance tracker ready")
        try:
            yield
        finally:
            database.dispose()

    # -------------------------------------------------------------------
    # App setup
    # -------------------------------------------------------------------

    app = FastAPI(title="Finance Tracker", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database

    # -------------------------------------------------------------------
    # Include routers
    # -------------------------------------------------------------------

    # Root / landing routes, health, category vocabulary
    app.include_router(root_router)

    # Transactions CRUD API
    app.include_router(transactions_router)

    # Budgets list + upsert API
    app.include_router(budgets_router)

    # Dashboard (totals, charts data, budget vs actual, insights)
    app.include_router(dashboard_router)

    return app


app = create_app()
