# db.py
# Role: Database bootstrap for the FastAPI finance tracker.
#       Defines the declarative Base and the Database object that owns the
#       SQLAlchemy engine and session factory for the lifetime of the app.

"""
Database setup for the finance tracker.

One Database instance is created at startup (see main.py) and attached to
the FastAPI app. Its engine and session factory are built lazily on the
first init() call; later calls reuse them.
"""

import logging
import os
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Declarative base class for ORM models
Base = declarative_base()


class Database:
    """
    Process-wide connection pool holder.

    Contract:
    - init() creates the engine and session factory exactly once;
      calling it again is a no-op.
    - session() returns a new Session bound to that engine.
    - dispose() releases pooled connections; init() may be called again after it.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def initialized(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database.init() must be called before use")
        return self._engine

    def init(self) -> "Database":
        if self._engine is not None:
            return self

        url = make_url(self.url)
        kwargs = {"echo": self.echo}

        if url.get_backend_name() == "sqlite":
            # For SQLite, we need check_same_thread=False for FastAPI (threaded request handling)
            kwargs["connect_args"] = {"check_same_thread": False}
            if url.database in (None, "", ":memory:"):
                # In-memory DB: every session must share the one connection
                kwargs["poolclass"] = StaticPool
            else:
                db_dir = os.path.dirname(os.path.abspath(url.database))
                os.makedirs(db_dir, exist_ok=True)

        self._engine = create_engine(self.url, **kwargs)
        self._session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self._engine,
        )
        logger.info("[db] engine created for %s", url.render_as_string(hide_password=True))
        return self

    def create_tables(self) -> None:
        # Only creates tables that don't exist yet
        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database.init() must be called before use")
        return self._session_factory()

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            logger.info("[db] engine disposed")
        self._engine = None
        self._session_factory = None
