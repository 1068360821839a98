# app/deps.py
# Role: Shared application-level dependencies.
#       Provides the Jinja2 templates loader, the per-request SQLAlchemy
#       session dependency, and the JSON error response helper.

"""
Shared dependencies for the finance tracker app.
"""

import os
from typing import Any, Dict, Generator, List, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from db import Database

# -------------------------------------------------------------------
# Templates
# -------------------------------------------------------------------

# <project_root>/templates, independent of the working directory
TEMPLATES_DIR = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
    "templates",
)

# Jinja2 templates loader (used by all HTML-rendering routes)
templates = Jinja2Templates(directory=TEMPLATES_DIR)

# -------------------------------------------------------------------
# Database dependency
# -------------------------------------------------------------------

def get_database(request: Request) -> Database:
    """The Database attached to the app at startup (see main.create_app)."""
    return request.app.state.database


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session and ensures it is closed.

    Typical usage in routes:
        db: Session = Depends(get_db)
    """
    db = get_database(request).session()
    try:
        yield db
    finally:
        db.close()

# -------------------------------------------------------------------
# Error responses
# -------------------------------------------------------------------

def error_response(
    message: str,
    status_code: int,
    errors: Optional[List[Dict[str, Any]]] = None,
) -> JSONResponse:
    body: Dict[str, Any] = {"message": message}
    if errors:
        body["errors"] = errors
    return JSONResponse(body, status_code=status_code)
