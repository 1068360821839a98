# config.py
# Role: Runtime configuration for the finance tracker.
#       Reads environment variables (optionally from a .env file) and exposes
#       them as a single immutable Settings object.

"""
Configuration for the finance tracker.

Environment variables:
- FINANCE_DATABASE_URL   SQLAlchemy URL (default: SQLite under <project_root>/database)
- FINANCE_LOG_LEVEL      root log level (default: INFO)
- FINANCE_SQL_ECHO       "1"/"true" to echo SQL statements
- FINANCE_RECENT_LIMIT   recent transactions shown on the dashboard (default: 5)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

# Base directory of the project (where this module lives)
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Default SQLite location: <project_root>/database/finance.db
DEFAULT_DB_PATH = os.path.join(BASE_DIR, "database", "finance.db")
DEFAULT_DATABASE_URL = f"sqlite:///{DEFAULT_DB_PATH}"


def _env_truthy(name: str, default: str = "0") -> bool:
    v = os.getenv(name, default)
    return str(v).strip().lower() in ("1", "true", "yes", "y", "on")


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    log_level: str = "INFO"
    sql_echo: bool = False
    recent_limit: int = 5


def get_settings() -> Settings:
    """
    Build Settings from the current environment.

    Called once at startup by main.py; tests build Settings directly.
    """
    return Settings(
        database_url=(os.getenv("FINANCE_DATABASE_URL") or "").strip() or DEFAULT_DATABASE_URL,
        log_level=(os.getenv("FINANCE_LOG_LEVEL") or "INFO").strip().upper(),
        sql_echo=_env_truthy("FINANCE_SQL_ECHO", "0"),
        recent_limit=max(_env_int("FINANCE_RECENT_LIMIT", 5), 0),
    )
